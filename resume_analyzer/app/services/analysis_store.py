"""
Analysis record store - create, list, fetch and delete ResumeAnalysis rows.
Every read and delete is scoped by (record id, owning user); a record owned by
someone else is reported exactly like a missing one.
"""
from datetime import datetime

from sqlalchemy.orm import Session

from resume_analyzer.app.core.exceptions import NotFoundError
from resume_analyzer.app.core.logging_config import get_logger
from resume_analyzer.app.models.resume_analysis import ResumeAnalysis
from resume_analyzer.app.schemas.analysis import StructuredAnalysis
from resume_analyzer.app.services.s3_service import S3StorageService

logger = get_logger("services.analysis_store")


def create_analysis(
    db: Session,
    user_id: int,
    file_name: str,
    file_url: str,
    storage_key: str,
    file_size: int,
    mime_type: str,
    analysis: StructuredAnalysis,
    job_description: str | None = None,
    created_at: datetime | None = None,
) -> ResumeAnalysis:
    """Insert a record. Returns it with id and created_at populated."""
    record = ResumeAnalysis(
        user_id=user_id,
        file_name=file_name,
        file_url=file_url,
        storage_key=storage_key,
        file_size=file_size,
        mime_type=mime_type,
        analysis=analysis.model_dump(),
        job_description=job_description or None,
        created_at=created_at or datetime.utcnow(),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Analysis record created user_id=%s record_id=%s", user_id, record.id)
    return record


def list_analyses(db: Session, user_id: int) -> list[ResumeAnalysis]:
    """All records for the user, newest first."""
    return (
        db.query(ResumeAnalysis)
        .filter(ResumeAnalysis.user_id == user_id)
        .order_by(ResumeAnalysis.created_at.desc(), ResumeAnalysis.id.desc())
        .all()
    )


def get_analysis(db: Session, record_id: int, user_id: int) -> ResumeAnalysis:
    """Fetch one record. Raises NotFoundError if absent or owned by another user."""
    record = (
        db.query(ResumeAnalysis)
        .filter(ResumeAnalysis.id == record_id, ResumeAnalysis.user_id == user_id)
        .first()
    )
    if not record:
        raise NotFoundError()
    return record


def delete_analysis(db: Session, storage: S3StorageService, record_id: int, user_id: int) -> None:
    """
    Delete the stored file, then the record.

    The storage object goes first. If that fails StorageDeletionError propagates
    and the row is kept, so the object never loses its only pointer.
    """
    record = get_analysis(db, record_id, user_id)
    key = record.storage_key
    if key:
        storage.delete(key)
    db.delete(record)
    db.commit()
    logger.info("Analysis record deleted user_id=%s record_id=%s key=%s", user_id, record_id, key)
