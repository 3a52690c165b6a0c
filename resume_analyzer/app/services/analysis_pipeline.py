"""
Resume analysis pipeline.

One request runs strictly in order:
    received -> extracted -> stored -> analyzed -> persisted -> completed
Each step raises a typed AnalysisError on failure, which ends the run.
Text is extracted before upload so unreadable files never reach storage; once
the file is stored, any later failure deletes it again before the error surfaces.
"""
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.orm import Session

from resume_analyzer.app.core.config import SUFFIX_MIME_TYPES, settings
from resume_analyzer.app.core.exceptions import StorageDeletionError, ValidationInputError
from resume_analyzer.app.core.logging_config import get_logger
from resume_analyzer.app.models.resume_analysis import ResumeAnalysis
from resume_analyzer.app.schemas.analysis import StructuredAnalysis
from resume_analyzer.app.services import analysis_store
from resume_analyzer.app.services.analysis_validator import validate_analysis
from resume_analyzer.app.services.completion_service import CompletionClient
from resume_analyzer.app.services.prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt
from resume_analyzer.app.services.s3_service import S3StorageService
from resume_analyzer.app.services.text_extractor import extract_text

logger = get_logger("services.analysis_pipeline")

_MIME_SUFFIXES = {mime: suffix for suffix, mime in SUFFIX_MIME_TYPES.items()}


@dataclass
class AnalysisRequest:
    """One uploaded document plus caller context. Never persisted."""
    data: bytes
    mime_type: str
    file_name: str
    user_id: int
    job_description: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


class AnalysisPipeline:
    def __init__(
        self,
        db: Session,
        storage: S3StorageService,
        completion: CompletionClient,
        key_prefix: str | None = None,
        max_upload_bytes: int | None = None,
    ):
        self.db = db
        self.storage = storage
        self.completion = completion
        self.key_prefix = key_prefix or settings.s3_key_prefix
        self.max_upload_bytes = max_upload_bytes or settings.max_upload_bytes

    def run(self, request: AnalysisRequest) -> ResumeAnalysis:
        logger.info(
            "Analysis started user_id=%s file_name=%s mime_type=%s size_bytes=%d",
            request.user_id,
            request.file_name,
            request.mime_type,
            request.size,
        )
        self._check_input(request)
        text = self._extract(request)
        stored = self._store(request)
        try:
            analysis = self._analyze(text, request.job_description)
            record = self._persist(request, stored, analysis)
        except Exception:
            self.db.rollback()
            self._discard_upload(stored["key"])
            raise
        logger.info("Analysis completed user_id=%s record_id=%s score=%s", request.user_id, record.id, analysis.score)
        return record

    def _check_input(self, request: AnalysisRequest) -> None:
        if not request.data:
            raise ValidationInputError("Uploaded file is empty")
        if request.size > self.max_upload_bytes:
            raise ValidationInputError(
                f"File too large. Maximum size is {self.max_upload_bytes // (1024 * 1024)} MB",
            )

    def _extract(self, request: AnalysisRequest) -> str:
        text = extract_text(request.data, request.mime_type).strip()
        if not text:
            # An empty document is the caller's problem, not an extraction failure
            raise ValidationInputError("No readable text found in the uploaded file")
        return text

    def _store(self, request: AnalysisRequest) -> dict:
        suffix = Path(request.file_name or "").suffix.lower() or _MIME_SUFFIXES.get(request.mime_type, "")
        file_name = f"resume_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}{suffix}"
        return self.storage.upload(
            request.data,
            folder=f"{self.key_prefix}/{request.user_id}",
            file_name=file_name,
            tags={"user": str(request.user_id)},
            mime_type=request.mime_type,
        )

    def _analyze(self, text: str, job_description: str | None) -> StructuredAnalysis:
        prompt = build_analysis_prompt(text, job_description)
        raw = self.completion.complete(ANALYSIS_SYSTEM_PROMPT, prompt)
        return validate_analysis(raw)

    def _persist(self, request: AnalysisRequest, stored: dict, analysis: StructuredAnalysis) -> ResumeAnalysis:
        return analysis_store.create_analysis(
            self.db,
            user_id=request.user_id,
            file_name=request.file_name,
            file_url=stored["url"],
            storage_key=stored["key"],
            file_size=request.size,
            mime_type=request.mime_type,
            analysis=analysis,
            job_description=request.job_description,
        )

    def _discard_upload(self, key: str) -> None:
        """Best-effort removal of an object whose record was never written."""
        try:
            self.storage.delete(key)
        except StorageDeletionError as e:
            logger.error("Orphaned upload left in storage key=%s error=%s", key, e.detail)
