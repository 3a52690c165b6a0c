"""
Logging configuration for the resume analyzer.

Application loggers live under the ``resume_analyzer.`` namespace. Libraries the
pipeline drives (pdfminer under pdfplumber, boto3/botocore, the OpenAI client and
its httpx transport) are capped at WARNING so a DEBUG run shows our own stages
rather than per-glyph PDF parsing or raw HTTP traffic.
"""
import logging
import sys

from resume_analyzer.app.core.config import settings

ROOT_LOGGER = "resume_analyzer"

THIRD_PARTY_LOGGERS = (
    "pdfminer",
    "botocore",
    "boto3",
    "s3transfer",
    "urllib3",
    "openai",
    "httpx",
    "httpcore",
    "sqlalchemy.engine",
)


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure application logging. Returns the resume_analyzer logger."""
    level_val = level or settings.log_level
    logging.basicConfig(
        level=getattr(logging, level_val.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logging.getLogger(ROOT_LOGGER)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, e.g. get_logger("services.analysis_pipeline")."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
