"""
Error taxonomy for the analysis pipeline and record lifecycle.

Every error carries the HTTP status it maps to and a human-readable message.
The API layer renders them as {"success": false, "message": ..., "error": ...}.
"""
from typing import Any


class AnalysisError(Exception):
    """Base class for all pipeline and record errors."""

    status_code: int = 500
    default_message: str = "Resume analysis failed"

    def __init__(self, message: str | None = None, detail: Any = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationInputError(AnalysisError):
    status_code = 400
    default_message = "Invalid request"


class UnsupportedFormatError(AnalysisError):
    status_code = 415
    default_message = "Unsupported file format"


class ExtractionFailedError(AnalysisError):
    status_code = 422
    default_message = "Failed to extract text from file"


class StorageUploadError(AnalysisError):
    status_code = 502
    default_message = "Failed to store uploaded file"


class CompletionServiceError(AnalysisError):
    status_code = 502
    default_message = "Failed to analyze resume"


class CompletionTimeoutError(CompletionServiceError):
    status_code = 504
    default_message = "Resume analysis timed out"


class MalformedOutputError(AnalysisError):
    status_code = 502
    default_message = "Analysis service returned invalid JSON"


class SchemaViolationError(AnalysisError):
    """Completion output parsed but broke the analysis contract. `field` names the first offender."""

    status_code = 502
    default_message = "Analysis service returned data in an unexpected shape"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(
            f"Invalid analysis field '{field}': {reason}",
            detail={"field": field, "reason": reason},
        )


class NotFoundError(AnalysisError):
    status_code = 404
    default_message = "Resume not found"


class StorageDeletionError(AnalysisError):
    status_code = 502
    default_message = "Failed to delete stored file"
