"""Tests for the analysis pipeline stages and failure handling"""
import json

import pytest

from resume_analyzer.app.core.config import MIME_PDF, MIME_TEXT
from resume_analyzer.app.core.exceptions import (
    CompletionServiceError,
    ExtractionFailedError,
    MalformedOutputError,
    SchemaViolationError,
    StorageUploadError,
    UnsupportedFormatError,
    ValidationInputError,
)
from resume_analyzer.app.models.resume_analysis import ResumeAnalysis
from resume_analyzer.app.services import analysis_store
from resume_analyzer.app.services.analysis_pipeline import AnalysisPipeline, AnalysisRequest

RESUME = b"Name: Jane Doe\nSkills: Python, SQL"


def _request(user_id, data=RESUME, mime_type=MIME_TEXT, file_name="jane.txt", job_description=None):
    return AnalysisRequest(
        data=data,
        mime_type=mime_type,
        file_name=file_name,
        user_id=user_id,
        job_description=job_description,
    )


@pytest.fixture
def pipeline(db_session, storage, completion):
    return AnalysisPipeline(db_session, storage, completion, key_prefix="resumes", max_upload_bytes=1024)


def test_run_persists_record(pipeline, db_session, test_user, storage, openai_client):
    record = pipeline.run(_request(test_user.id, job_description="Data engineer"))

    assert record.analysis["score"] == 72
    assert record.file_name == "jane.txt"
    assert record.file_size == len(RESUME)
    assert record.mime_type == MIME_TEXT
    assert record.job_description == "Data engineer"
    assert record.storage_key.startswith(f"resumes/{test_user.id}/resume_")
    assert record.storage_key.endswith(".txt")
    assert record.file_url == f"https://files.test/{record.storage_key}"
    assert storage.uploads[0]["tags"] == {"user": str(test_user.id)}

    prompt = openai_client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
    assert "Name: Jane Doe\nSkills: Python, SQL" in prompt
    assert "Data engineer" in prompt


def test_empty_file_rejected_before_any_stage(pipeline, test_user, storage, openai_client):
    with pytest.raises(ValidationInputError):
        pipeline.run(_request(test_user.id, data=b""))
    assert storage.uploads == []
    openai_client.chat.completions.create.assert_not_called()


def test_oversized_file_rejected(pipeline, test_user, storage):
    with pytest.raises(ValidationInputError):
        pipeline.run(_request(test_user.id, data=b"x" * 2048))
    assert storage.uploads == []


def test_whitespace_only_document_rejected(pipeline, test_user, storage):
    with pytest.raises(ValidationInputError):
        pipeline.run(_request(test_user.id, data=b"   \n\n  "))
    assert storage.uploads == []


def test_unsupported_format_never_uploads(pipeline, test_user, storage, openai_client):
    with pytest.raises(UnsupportedFormatError):
        pipeline.run(_request(test_user.id, mime_type="image/png", file_name="cv.png"))
    assert storage.uploads == []
    openai_client.chat.completions.create.assert_not_called()


def test_corrupt_document_never_uploads(pipeline, test_user, storage):
    with pytest.raises(ExtractionFailedError):
        pipeline.run(_request(test_user.id, data=b"garbage", mime_type=MIME_PDF, file_name="cv.pdf"))
    assert storage.uploads == []


def test_upload_failure_skips_completion(pipeline, test_user, storage, openai_client):
    storage.fail_upload = True
    with pytest.raises(StorageUploadError):
        pipeline.run(_request(test_user.id))
    openai_client.chat.completions.create.assert_not_called()


@pytest.mark.parametrize(
    "reply, error",
    [
        ("not json at all", MalformedOutputError),
        (json.dumps({"score": 150}), SchemaViolationError),
    ],
)
def test_bad_completion_output_cleans_up_upload(
    pipeline, db_session, test_user, storage, set_completion_reply, reply, error
):
    set_completion_reply(reply)
    with pytest.raises(error):
        pipeline.run(_request(test_user.id))

    assert len(storage.uploads) == 1
    assert storage.deleted == [storage.uploads[0]["key"]]
    assert storage.objects == {}
    assert db_session.query(ResumeAnalysis).count() == 0


def test_completion_failure_surfaces_even_if_cleanup_fails(
    pipeline, db_session, test_user, storage, openai_client
):
    openai_client.chat.completions.create.side_effect = CompletionServiceError(detail="down")
    storage.fail_delete = True
    with pytest.raises(CompletionServiceError):
        pipeline.run(_request(test_user.id))
    assert db_session.query(ResumeAnalysis).count() == 0


def test_near_synonym_status_is_not_persisted(pipeline, db_session, test_user, set_completion_reply, valid_analysis):
    valid_analysis["sections"]["skills"]["status"] = "needs improvement"
    set_completion_reply(json.dumps(valid_analysis))
    with pytest.raises(SchemaViolationError) as exc:
        pipeline.run(_request(test_user.id))
    assert exc.value.field == "sections.skills.status"
    assert db_session.query(ResumeAnalysis).count() == 0


def test_same_millisecond_uploads_get_distinct_keys(pipeline, db_session, test_user, storage, monkeypatch):
    monkeypatch.setattr("resume_analyzer.app.services.analysis_pipeline.time.time", lambda: 1700000000.0)
    first = pipeline.run(_request(test_user.id))
    second = pipeline.run(_request(test_user.id))

    assert first.storage_key != second.storage_key
    assert first.storage_key.startswith(f"resumes/{test_user.id}/resume_1700000000000_")

    analysis_store.delete_analysis(db_session, storage, first.id, test_user.id)
    assert second.storage_key in storage.objects
