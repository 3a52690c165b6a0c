"""
Completion service adapter - one chat completion per call, fence stripping on the reply.
Failures propagate as CompletionServiceError; no retries here.
"""
import re

from openai import APITimeoutError, OpenAI, OpenAIError

from resume_analyzer.app.core.config import settings
from resume_analyzer.app.core.exceptions import CompletionServiceError, CompletionTimeoutError
from resume_analyzer.app.core.logging_config import get_logger

logger = get_logger("services.completion")

_LEADING_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json (or bare ```) marker, a trailing ``` marker and surrounding whitespace."""
    cleaned = (text or "").strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


class CompletionClient:
    """Thin wrapper over an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        client: OpenAI,
        model: str,
        temperature: float = 0.7,
        json_mode: bool = True,
    ):
        self._client = client
        self.model = model
        self.temperature = temperature
        self.json_mode = json_mode

    @classmethod
    def from_settings(cls) -> "CompletionClient":
        if not settings.openai_api_key:
            raise CompletionServiceError(detail="OPENAI_API_KEY is not configured")
        client = OpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url or None,
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )
        return cls(
            client,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            json_mode=settings.openai_json_mode,
        )

    def complete(
        self,
        system_instruction: str,
        prompt: str,
        model: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Send one chat request and return the first message's text with code fences stripped."""
        model = model or self.model
        kwargs = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature if temperature is None else temperature,
        }
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info("Completion request model=%s prompt_chars=%d", model, len(prompt))
        try:
            resp = self._client.chat.completions.create(**kwargs)
        except APITimeoutError as e:
            logger.error("Completion timed out model=%s", model)
            raise CompletionTimeoutError(detail=str(e)) from e
        except OpenAIError as e:
            logger.error("Completion failed model=%s error=%s", model, e)
            raise CompletionServiceError(detail=str(e)) from e

        if not resp.choices:
            raise CompletionServiceError(detail="Completion returned no choices")
        content = resp.choices[0].message.content
        if not content:
            raise CompletionServiceError(detail="Completion returned an empty message")

        logger.info("Completion received model=%s response_chars=%d", model, len(content))
        return strip_code_fences(content)
