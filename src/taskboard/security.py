"""
Credential hashing and identity-token primitives.

Passwords are stored as bcrypt(base64(sha256(password))); the pre-hash lifts
bcrypt's 72-byte input limit. Identity tokens are HS256 JWTs carrying only
the user id and their validity window.
"""
from __future__ import annotations

import base64
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from .settings import Settings

JWT_ALGORITHM = "HS256"


def _prehash(password: str) -> bytes:
    # base64 keeps the digest free of NUL bytes and under 72 bytes
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


# PUBLIC_INTERFACE
def hash_password(password: str, rounds: int = 12) -> str:
    """Return the one-way stored form of ``password``."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


# PUBLIC_INTERFACE
def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        return False


# PUBLIC_INTERFACE
def create_token(user_id: str, settings: Settings, now: Optional[datetime] = None) -> str:
    """Issue a signed identity token for ``user_id``."""
    issued = now or datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(seconds=settings.token_ttl_seconds)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=JWT_ALGORITHM)


# PUBLIC_INTERFACE
def decode_token(token: Optional[str], settings: Settings) -> Optional[str]:
    """
    Return the user id carried by ``token``.

    Returns None when the token is absent, malformed, expired, or signed with
    another key.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
