"""
Text extraction from uploaded resume bytes - PDF (pdfplumber), DOCX (python-docx), plain text.
Only the linear text stream is produced; layout is not preserved.
"""
from io import BytesIO
from pathlib import Path

import docx
import pdfplumber

from resume_analyzer.app.core.config import MIME_DOCX, MIME_PDF, MIME_TEXT, SUFFIX_MIME_TYPES
from resume_analyzer.app.core.exceptions import ExtractionFailedError, UnsupportedFormatError
from resume_analyzer.app.core.logging_config import get_logger

logger = get_logger("services.text_extractor")

_GENERIC_MIME_TYPES = {"", "application/octet-stream"}


def extract_text_from_pdf(data: bytes) -> str:
    """Extract raw text from PDF using pdfplumber."""
    text_parts = []
    with pdfplumber.open(BytesIO(data)) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
    return "\n".join(text_parts)


def extract_text_from_docx(data: bytes) -> str:
    """Extract paragraph and table text from a DOCX package."""
    document = docx.Document(BytesIO(data))
    parts = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [c.text.strip() for c in row.cells if c.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n".join(parts)


def extract_text_from_plain(data: bytes) -> str:
    """Decode plain text as UTF-8 (BOM tolerated)."""
    return data.decode("utf-8-sig")


_EXTRACTORS = {
    MIME_PDF: extract_text_from_pdf,
    MIME_DOCX: extract_text_from_docx,
    MIME_TEXT: extract_text_from_plain,
}


def resolve_mime_type(declared: str | None, file_name: str | None) -> str:
    """
    Normalize the declared media type. Falls back to the filename suffix when the
    client sent nothing useful (empty or application/octet-stream).
    """
    mime = (declared or "").split(";", 1)[0].strip().lower()
    if mime in _GENERIC_MIME_TYPES:
        suffix = Path(file_name or "").suffix.lower()
        return SUFFIX_MIME_TYPES.get(suffix, mime or "application/octet-stream")
    return mime


def is_supported(mime_type: str) -> bool:
    return mime_type in _EXTRACTORS


def extract_text(data: bytes, mime_type: str) -> str:
    """
    Convert raw document bytes to plain text.

    Raises:
        UnsupportedFormatError: mime_type is not PDF, DOCX or text/plain.
        ExtractionFailedError: recognized type but the content could not be parsed.
    """
    extractor = _EXTRACTORS.get(mime_type)
    if extractor is None:
        raise UnsupportedFormatError(
            f"Unsupported file format: {mime_type or 'unknown'}. Allowed: PDF, DOCX, TXT",
        )
    try:
        text = extractor(data)
    except Exception as e:
        logger.warning("Text extraction failed mime_type=%s size_bytes=%d error=%s", mime_type, len(data), e)
        raise ExtractionFailedError(detail=str(e)) from e
    logger.info("Text extracted mime_type=%s size_bytes=%d chars=%d", mime_type, len(data), len(text))
    return text
