"""
Resume analysis endpoints - upload + AI analysis, history, detail, delete, report download
"""
from typing import Literal

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from resume_analyzer.app.core.config import settings
from resume_analyzer.app.core.dependencies import get_completion_client, get_current_user, get_db, get_storage
from resume_analyzer.app.core.exceptions import ValidationInputError
from resume_analyzer.app.core.logging_config import get_logger
from resume_analyzer.app.models.user import User
from resume_analyzer.app.schemas.analysis import record_to_out, record_to_result
from resume_analyzer.app.services import analysis_store
from resume_analyzer.app.services.analysis_pipeline import AnalysisPipeline, AnalysisRequest
from resume_analyzer.app.services.completion_service import CompletionClient
from resume_analyzer.app.services.report_renderer import render_report_html, render_report_pdf, report_filename
from resume_analyzer.app.services.s3_service import S3StorageService
from resume_analyzer.app.services.text_extractor import resolve_mime_type

logger = get_logger("api.resume")
router = APIRouter()


@router.post("/analyze")
def analyze_resume(
    resume: UploadFile | None = File(None),
    jobDescription: str | None = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: S3StorageService = Depends(get_storage),
    completion: CompletionClient = Depends(get_completion_client),
):
    """
    Upload a resume (PDF, DOCX, TXT) and analyze it.

    Multipart fields:
        - **resume**: the file
        - **jobDescription**: optional target job description

    Returns the stored analysis: id, fileName, fileUrl, analysis, createdAt.
    """
    if resume is None or not resume.filename:
        raise ValidationInputError("No file uploaded")

    request = AnalysisRequest(
        # One byte past the limit is enough for the size check to reject it
        data=resume.file.read(settings.max_upload_bytes + 1),
        mime_type=resolve_mime_type(resume.content_type, resume.filename),
        file_name=resume.filename,
        user_id=current_user.id,
        job_description=(jobDescription or "").strip() or None,
    )
    record = AnalysisPipeline(db, storage, completion).run(request)
    return {"success": True, "data": record_to_result(record).model_dump(mode="json")}


@router.get("/history")
def get_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """All analyses for the current user, newest first."""
    records = analysis_store.list_analyses(db, current_user.id)
    return {"success": True, "data": [record_to_out(r).model_dump(mode="json") for r in records]}


@router.get("/{analysis_id}")
def get_analysis(
    analysis_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    record = analysis_store.get_analysis(db, analysis_id, current_user.id)
    return {"success": True, "data": record_to_out(record).model_dump(mode="json")}


@router.delete("/{analysis_id}")
def delete_analysis(
    analysis_id: int,
    db: Session = Depends(get_db),
    storage: S3StorageService = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Delete the stored file and then the record. The record stays if the file delete fails."""
    analysis_store.delete_analysis(db, storage, analysis_id, current_user.id)
    return {"success": True, "message": "Resume deleted successfully"}


@router.get("/{analysis_id}/report")
def download_report(
    analysis_id: int,
    format: Literal["html", "pdf"] = "html",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Download the analysis as an HTML (default) or PDF attachment."""
    record = analysis_store.get_analysis(db, analysis_id, current_user.id)
    if format == "pdf":
        content, media_type = render_report_pdf(record), "application/pdf"
    else:
        content, media_type = render_report_html(record), "text/html; charset=utf-8"
    filename = report_filename(record, format)
    logger.info("Report rendered user_id=%s record_id=%s format=%s", current_user.id, record.id, format)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
