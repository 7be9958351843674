from __future__ import annotations

from typing import Any, Optional

from .enums import ValidationErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a draft violates an attendance rule.

    ``kind`` names the single rule that failed so the form can be corrected.
    """

    def __init__(self, kind: ValidationErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class PersistenceError(DomainError):
    """Raised when the persistence API cannot be reached or refuses a request.

    The unsaved draft travels with the error so the caller can offer a retry.
    """

    def __init__(self, message: str, *, draft: Optional[Any] = None, status: Optional[int] = None):
        super().__init__(message)
        self.draft = draft
        self.status = status


class NotFoundError(DomainError):
    """Raised when a record vanished, e.g. deleted by another operator."""
