"""Domain exceptions raised by the GyanSetu service layer.

Every exception carries the HTTP status it maps to; the API layer turns
them into ``{"error": ..., "status": ...}`` responses without further
translation, so messages must be safe to show to end users.
"""

from __future__ import annotations


class GyanSetuError(Exception):
    """Base class for all user-facing failures."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(GyanSetuError):
    """Raised when the caller is not signed in or the token is invalid."""

    status_code = 401


class PermissionDeniedError(GyanSetuError):
    """Raised when the caller's role does not permit the action."""

    status_code = 403


class NotFoundError(GyanSetuError):
    """Raised when a referenced row does not exist."""

    status_code = 404


class ValidationError(GyanSetuError):
    """Raised for missing fields and forbidden self-actions."""

    status_code = 400


class ConflictError(GyanSetuError):
    """Raised when the action duplicates existing state."""

    status_code = 409
