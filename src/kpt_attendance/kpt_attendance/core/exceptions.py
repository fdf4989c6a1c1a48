from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action.

    `fallback_branch` is the actor's own department when the denial came
    from selecting a foreign one, so callers can offer a reset.
    """

    def __init__(self, message: str, *, fallback_branch: Optional[str] = None):
        super().__init__(message)
        self.fallback_branch = fallback_branch


class BulkImportError(ValidationError):
    """Raised when any line of a bulk import is invalid. Nothing is inserted."""

    def __init__(self, errors: Sequence[str]):
        super().__init__(f"Import aborted: {len(errors)} invalid line(s)")
        self.errors = list(errors)


class StorageUnavailableError(DomainError):
    """Raised when the durable store cannot be reached."""
