"""
Error taxonomy shared by the service layer and the HTTP boundary.

Domain code raises these; ``main`` maps each one to its status code and a
``{"error": ..., "detail": ...}`` body.
"""
from __future__ import annotations


class AppError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidInput(AppError):
    status_code = 400
    default_detail = "Invalid input"


class Unauthenticated(AppError):
    status_code = 401
    default_detail = "Unauthorized"


class InvalidCredentials(AppError):
    status_code = 401
    default_detail = "Invalid credentials"


class Forbidden(AppError):
    status_code = 403
    default_detail = "Forbidden - task belongs to another user"


class NotFound(AppError):
    status_code = 404
    default_detail = "Not found"


class AlreadyExists(AppError):
    status_code = 409
    default_detail = "Already exists"


class InternalFailure(AppError):
    status_code = 500
    default_detail = "Internal server error"
