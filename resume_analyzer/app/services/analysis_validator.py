"""
Validation boundary for completion-service output.

Parses the normalized reply as JSON and checks it against StructuredAnalysis.
Near-miss values are rejected, never coerced.
"""
import json

from pydantic import ValidationError

from resume_analyzer.app.core.exceptions import MalformedOutputError, SchemaViolationError
from resume_analyzer.app.core.logging_config import get_logger
from resume_analyzer.app.schemas.analysis import StructuredAnalysis

logger = get_logger("services.analysis_validator")


def _field_path(loc: tuple) -> str:
    return ".".join(f"[{part}]" if isinstance(part, int) else str(part) for part in loc).replace(".[", "[")


def validate_analysis(raw_text: str) -> StructuredAnalysis:
    """
    Parse and validate completion output.

    Raises:
        MalformedOutputError: text is not JSON.
        SchemaViolationError: JSON does not match the analysis contract; names the first bad field.
    """
    try:
        data = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning("Completion output is not JSON chars=%d error=%s", len(raw_text or ""), e)
        raise MalformedOutputError(detail=str(e)) from e

    if not isinstance(data, dict):
        raise SchemaViolationError("$", f"expected a JSON object, got {type(data).__name__}")

    try:
        return StructuredAnalysis.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = _field_path(first["loc"]) or "$"
        logger.warning("Completion output violates schema field=%s type=%s", field, first["type"])
        raise SchemaViolationError(field, first["msg"]) from e
