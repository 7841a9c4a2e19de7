from __future__ import annotations

from typing import Optional

from .enums import DenyReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""

    def __init__(self, message: str, reason: Optional[DenyReason] = None):
        super().__init__(message)
        self.reason = reason


class NotFoundError(DomainError):
    """Raised when a referenced record is absent or outside the caller's organization."""
