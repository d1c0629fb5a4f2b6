"""
core/errors.py -- Domain error taxonomy for Shelf.

Every error the service raises on purpose is an AppError subclass carrying
its own HTTP status and machine-readable code. Stores and the authenticator
raise these; api/main.py has a single exception handler that renders them
into the standard {"error": {...}} envelope. Nothing in auth/ or bookmarks/
imports FastAPI to report a failure.

InvalidToken / ExpiredToken stay distinct so callers and tests can tell them
apart, but the request authorizer collapses both into Unauthenticated before
anything reaches the client.

Layer rule: core/ is the kernel. No imports from api/, auth/, or bookmarks/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(AppError):
    """Input was well-formed JSON but semantically unusable (e.g. empty PATCH)."""

    status_code = 400
    code = "validation_error"
    default_message = "Request validation failed."


class DuplicateEmail(AppError):
    status_code = 409
    code = "duplicate_email"
    default_message = "An account with that email already exists."


class InvalidCredentials(AppError):
    """Unknown email or wrong password. Deliberately one error for both."""

    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid email or password."


class Unauthenticated(AppError):
    """Request rejected at the admission gate (no, bad, or stale token)."""

    status_code = 401
    code = "unauthenticated"
    default_message = "Authentication required."


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found."


class InvalidToken(AppError):
    """Token is malformed, has a bad signature, or carries unusable claims."""

    status_code = 401
    code = "invalid_token"
    default_message = "Invalid token."


class ExpiredToken(InvalidToken):
    """Signature checks out but the exp claim has passed."""

    code = "expired_token"
    default_message = "Token has expired."
