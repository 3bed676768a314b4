# backend/notevault/core/errors.py
"""
Typed failures raised by the auth / tenant / quota / notes layers.

Each class carries the HTTP status and a stable machine-readable code; the
handlers in notevault.main turn them into:

    {"detail": {"code": "...", "message": "..."}}
"""
from __future__ import annotations

from typing import Any

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, context: dict[str, Any] | None = None) -> None:
        self.message = message or self.message
        self.context: dict[str, Any] = context or {}
        super().__init__(self.message)

    def to_detail(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


# ---------------------------------------------------------
# 400
# ---------------------------------------------------------
class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    message = "Invalid request"


# ---------------------------------------------------------
# 401
# ---------------------------------------------------------
class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "authentication_failed"
    message = "Authentication failed"


class MissingAuthorization(AuthenticationError):
    code = "missing_authorization"
    message = "Missing authorization"


class MalformedAuthorizationHeader(AuthenticationError):
    code = "invalid_authorization_header"
    message = "Invalid authorization header"


class InvalidToken(AuthenticationError):
    code = "invalid_token"
    message = "Invalid token"


class InvalidCredentials(AuthenticationError):
    code = "invalid_credentials"
    message = "Invalid credentials"


# ---------------------------------------------------------
# 403
# ---------------------------------------------------------
class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    message = "Forbidden"


class Forbidden(AuthorizationError):
    pass


class QuotaExceeded(AuthorizationError):
    code = "quota_exceeded"
    message = "Note limit reached. Upgrade to Pro."


# ---------------------------------------------------------
# 404
# ---------------------------------------------------------
class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Not found"


class TenantNotFound(NotFoundError):
    code = "tenant_not_found"
    message = "Tenant not found"


class NoteNotFound(NotFoundError):
    code = "note_not_found"
    message = "Note not found"


# ---------------------------------------------------------
# 409 / 500
# ---------------------------------------------------------
class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    message = "Conflict"


class InternalError(AppError):
    pass
