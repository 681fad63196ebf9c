from __future__ import annotations

import logging
from typing import Optional, Tuple

from fastapi import Depends, Request, Response

from .errors import AlreadyExists, InvalidCredentials, InvalidInput, Unauthenticated
from .models import UserEntity
from .repositories import Repository
from .security import create_token, decode_token, hash_password, verify_password
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


# PUBLIC_INTERFACE
def register(repo: Repository, settings: Settings, email: str, password: str) -> Tuple[UserEntity, str]:
    """
    Create an account and issue its identity token.

    Raises:
        InvalidInput: email or password missing, or password shorter than 6.
        AlreadyExists: an account with this email exists.
    """
    email = (email or "").strip()
    if not email or not password:
        raise InvalidInput("Email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if repo.get_user_by_email(email) is not None:
        raise AlreadyExists("User already exists")

    # The store re-checks uniqueness, so a concurrent duplicate still fails here
    user = repo.create_user(email, hash_password(password, settings.bcrypt_rounds))
    logger.info("Registered user %s", user["id"])
    return user, create_token(user["id"], settings)


# PUBLIC_INTERFACE
def authenticate(repo: Repository, settings: Settings, email: str, password: str) -> Tuple[UserEntity, str]:
    """
    Check credentials and issue an identity token.

    Unknown email and wrong password fail identically with InvalidCredentials.
    """
    email = (email or "").strip()
    if not email or not password:
        raise InvalidInput("Email and password are required")

    user = repo.get_user_by_email(email)
    if user is None or not verify_password(password, user["password_hash"]):
        logger.info("Failed login for %s", email)
        raise InvalidCredentials()

    logger.info("User %s logged in", user["id"])
    return user, create_token(user["id"], settings)


# PUBLIC_INTERFACE
def verify_identity(token: Optional[str], settings: Settings) -> Optional[str]:
    """Return the user id behind ``token``, or None if it is not a valid identity."""
    return decode_token(token, settings)


# PUBLIC_INTERFACE
def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the identity token as an HTTP-only, same-site=lax cookie."""
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.token_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.auth_cookie_secure,
        path="/",
    )


# PUBLIC_INTERFACE
def clear_auth_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.auth_cookie_secure,
    )


# PUBLIC_INTERFACE
def get_current_user_id(request: Request, settings: Settings = Depends(get_settings)) -> str:
    """
    FastAPI dependency resolving the caller's user id from the identity cookie.

    The cookie is the only credential accepted; there is no bearer-header path.

    Raises:
        Unauthenticated: cookie missing, malformed, expired, or badly signed.
    """
    user_id = verify_identity(request.cookies.get(settings.auth_cookie_name), settings)
    if user_id is None:
        raise Unauthenticated()
    return user_id
