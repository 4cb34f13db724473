from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``message`` is a short machine-readable code (e.g. ``ALREADY_TAKEN``) that
    the API returns as ``error``; ``extra`` is merged into the JSON body.
    """

    status_code = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra: dict[str, Any] = extra


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when the bearer token is missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when a conditional write lost a race or a row already exists."""

    status_code = 409


class UpstreamError(DomainError):
    """Raised when the hosted auth service, push service or configuration fails."""

    status_code = 500

    def __init__(self, message: str, *, cause: Optional[BaseException] = None, **extra: Any):
        super().__init__(message, **extra)
        self.cause = cause
