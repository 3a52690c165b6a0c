"""
Analysis Pydantic schemas - the strict contract for completion-service output
and the public shapes returned by the resume endpoints.
"""
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator

SectionStatus = Literal["good", "missing", "needs-work"]

Percentage = Annotated[StrictInt, Field(ge=0, le=100)]


# --- Nested schemas ---
class KeywordMatch(BaseModel):
    technical: Percentage
    soft: Percentage
    industry: Percentage


class SectionFeedback(BaseModel):
    status: SectionStatus
    message: StrictStr


class Sections(BaseModel):
    contact: SectionFeedback
    summary: SectionFeedback
    experience: SectionFeedback
    education: SectionFeedback
    skills: SectionFeedback
    projects: SectionFeedback


class Suggestion(BaseModel):
    title: StrictStr
    description: StrictStr
    example: StrictStr


class StructuredAnalysis(BaseModel):
    """Validated resume evaluation. Field order is the order errors are reported in."""
    score: Percentage
    summary: StrictStr = Field(min_length=1)
    strengths: List[StrictStr]
    improvements: List[StrictStr]
    keywordMatch: KeywordMatch
    sections: Sections
    suggestions: List[Suggestion]

    @field_validator("summary")
    @classmethod
    def summary_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("summary must not be blank")
        return v


# --- Response schemas ---
class AnalysisResult(BaseModel):
    """Public projection returned by POST /analyze."""
    id: int
    fileName: str
    fileUrl: str
    analysis: StructuredAnalysis
    createdAt: datetime


class AnalysisRecordOut(BaseModel):
    """Full record as returned by history and detail endpoints."""
    id: int
    fileName: str
    fileUrl: str
    fileSize: int
    mimeType: str
    analysis: StructuredAnalysis
    jobDescription: Optional[str] = None
    createdAt: datetime


def record_to_result(record) -> AnalysisResult:
    return AnalysisResult(
        id=record.id,
        fileName=record.file_name,
        fileUrl=record.file_url,
        analysis=StructuredAnalysis.model_validate(record.analysis),
        createdAt=record.created_at,
    )


def record_to_out(record) -> AnalysisRecordOut:
    return AnalysisRecordOut(
        id=record.id,
        fileName=record.file_name,
        fileUrl=record.file_url,
        fileSize=record.file_size,
        mimeType=record.mime_type,
        analysis=StructuredAnalysis.model_validate(record.analysis),
        jobDescription=record.job_description,
        createdAt=record.created_at,
    )
