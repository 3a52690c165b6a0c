"""
Pytest fixtures for Resume Analyzer API tests.
Uses in-memory SQLite, a fake object store and a mocked OpenAI client.
"""
import copy
import json
import os
from io import BytesIO
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Use in-memory SQLite for tests - set before config/session load
# Must override any .env DATABASE_URL
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"

from resume_analyzer.app.db.base import Base
from resume_analyzer.main import app
from resume_analyzer.app.core.dependencies import get_completion_client, get_db, get_storage
from resume_analyzer.app.core.exceptions import StorageDeletionError, StorageUploadError
from resume_analyzer.app.core.security import create_access_token
from resume_analyzer.app.models.user import User
from resume_analyzer.app.services.completion_service import CompletionClient

# In-memory SQLite for tests - StaticPool ensures all sessions share same DB
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Patch the session module so app uses our test engine
import resume_analyzer.app.db.session as session_module
session_module.engine = engine
session_module.SessionLocal = TestingSessionLocal


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


VALID_ANALYSIS = {
    "score": 72,
    "summary": "Solid technical foundation with room to grow.",
    "strengths": ["Clear skills list", "Relevant languages"],
    "improvements": ["Add measurable results", "Add a summary"],
    "keywordMatch": {"technical": 80, "soft": 40, "industry": 55},
    "sections": {
        "contact": {"status": "good", "message": "Name present"},
        "summary": {"status": "missing", "message": "No summary"},
        "experience": {"status": "needs-work", "message": "No roles listed"},
        "education": {"status": "missing", "message": "No education"},
        "skills": {"status": "good", "message": "Python and SQL listed"},
        "projects": {"status": "missing", "message": "No projects"},
    },
    "suggestions": [
        {
            "title": "Add experience",
            "description": "List recent roles with outcomes.",
            "example": "Built ETL jobs in Python reducing load time by 30%",
        }
    ],
}


class FakeStorage:
    """In-memory stand-in for S3StorageService."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.uploads: list[dict] = []
        self.deleted: list[str] = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, file_buffer, folder, file_name, tags=None, mime_type="application/octet-stream"):
        if self.fail_upload:
            raise StorageUploadError(detail="simulated upload failure")
        key = f"{folder}/{file_name}"
        self.objects[key] = file_buffer
        self.uploads.append({"key": key, "tags": tags, "mime_type": mime_type})
        return {"key": key, "url": f"https://files.test/{key}"}

    def delete(self, key):
        if self.fail_delete:
            raise StorageDeletionError(detail="simulated delete failure")
        self.objects.pop(key, None)
        self.deleted.append(key)


def completion_response(content: str):
    """Shape of an OpenAI chat completion with one message."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def valid_analysis():
    return copy.deepcopy(VALID_ANALYSIS)


@pytest.fixture(scope="function")
def db_session():
    """Create tables and a fresh DB session per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_user(db_session):
    """Create a test user in the DB."""
    user = User(id=1, name="Test User", email="test@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session):
    user = User(id=2, name="Other User", email="other@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    """Bearer token for test user."""
    token = create_access_token(data={"sub": str(test_user.id), "email": test_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_user):
    token = create_access_token(data={"sub": str(other_user.id), "email": other_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def openai_client(valid_analysis):
    """Mocked OpenAI SDK client; returns the valid analysis by default."""
    client = MagicMock()
    client.chat.completions.create.return_value = completion_response(json.dumps(valid_analysis))
    return client


@pytest.fixture
def completion(openai_client):
    return CompletionClient(openai_client, model="test-model", temperature=0.7)


@pytest.fixture
def client(db_session, test_user, storage, completion):
    """TestClient with DB, test user, fake storage and stub completion wired in."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_completion_client] = lambda: completion
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_storage, None)
        app.dependency_overrides.pop(get_completion_client, None)


@pytest.fixture
def pdf_bytes():
    """One-page PDF with resume text, drawn with reportlab."""
    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)
    c.drawString(72, 720, "Name: Jane Doe")
    c.drawString(72, 700, "Skills: Python, SQL")
    c.save()
    return buffer.getvalue()


@pytest.fixture
def docx_bytes():
    """DOCX with two paragraphs and a small table, built with python-docx."""
    import docx

    document = docx.Document()
    document.add_paragraph("Name: Jane Doe")
    document.add_paragraph("Skills: Python, SQL")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Acme Corp"
    table.rows[0].cells[1].text = "Data Engineer"
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def set_completion_reply(openai_client):
    """Make the mocked completion service answer with the given raw text."""
    def _set(content: str):
        openai_client.chat.completions.create.return_value = completion_response(content)
    return _set
