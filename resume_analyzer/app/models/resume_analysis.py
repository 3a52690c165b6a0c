"""
ResumeAnalysis - one uploaded resume, its storage pointer and the validated AI analysis
"""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text

from resume_analyzer.app.db.base import Base


class ResumeAnalysis(Base):
    __tablename__ = "resume_analyses"
    __table_args__ = (
        Index("ix_resume_analyses_user_id_created_at", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    file_name = Column(String(255), nullable=False)
    file_url = Column(String(1024), nullable=False)
    storage_key = Column(String(512), nullable=False)  # object key used for deletion
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(255), nullable=False)

    analysis = Column(JSON, nullable=False)  # StructuredAnalysis.model_dump()
    job_description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
