"""
User - owner of analysis records. Credentials are handled by the auth service.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from resume_analyzer.app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, default="")
    email = Column(String(255), unique=True, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
