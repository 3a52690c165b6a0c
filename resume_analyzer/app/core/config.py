"""
Application configuration settings.
Loads from .env file first (overrides shell env for local dev), then pydantic reads from environment.
Production: set env vars in the platform (Docker, K8s, etc.); .env is optional.

All service configs and constants are centralized here.
"""
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env path: resume_analyzer/.env (absolute path, works regardless of cwd)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = (_BASE_DIR / ".env").resolve()

# override=True: .env values win over any stale shell env. No-op when the file is absent.
if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=True)


class Settings(BaseSettings):
    """Application settings. Source: env vars (after dotenv load)."""

    # App
    app_name: str = "ResumeAnalyzer"
    app_version: str = "1.0.0"
    port: int = 8001

    # Database
    database_url: str = "sqlite:///./resume_analyzer.db"

    # Auth
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Upload limits
    max_upload_bytes: int = 5 * 1024 * 1024

    # AWS S3
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "ap-southeast-1"
    aws_bucket_name: str = "resume-analyzer-files"
    s3_key_prefix: str = "resumes"

    # Completion service (OpenAI-compatible; set base URL for OpenRouter etc.)
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    openai_timeout_seconds: float = 60.0
    openai_json_mode: bool = True

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


# --- Constants (non-env, business config) ---

# Media types the text extractors understand
MIME_PDF: str = "application/pdf"
MIME_DOCX: str = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MIME_TEXT: str = "text/plain"

# Suffix fallback when the client declares no useful content type
SUFFIX_MIME_TYPES: dict[str, str] = {
    ".pdf": MIME_PDF,
    ".docx": MIME_DOCX,
    ".txt": MIME_TEXT,
}

# Analysis contract
SECTION_NAMES: tuple[str, ...] = ("contact", "summary", "experience", "education", "skills", "projects")
SECTION_STATUSES: tuple[str, ...] = ("good", "missing", "needs-work")

# Report
REPORT_FILENAME_TEMPLATE: str = "resume-analysis-{id}.{ext}"
PDF_LINE_HEIGHT: int = 14
PDF_FONT_SIZE_TITLE: int = 16
PDF_FONT_SIZE_HEADING: int = 12
PDF_FONT_SIZE_BODY: int = 10
PDF_MAX_LINE_CHARS: int = 100
