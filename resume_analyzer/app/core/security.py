"""
JWT helpers. Token issuance lives with the auth service; this module only
mints and decodes the bearer tokens the analysis routes accept.
"""
from datetime import datetime, timedelta

from jose import jwt

from resume_analyzer.app.core.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT carrying `data` (expects "sub" = user id)."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT. Raises jose.JWTError on bad signature or expiry."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
