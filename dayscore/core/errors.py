"""
DayScore exception hierarchy.

Idempotent no-ops are NOT exceptions: use cases return them as a result
status so callers can tell "already done" apart from "failed".
"""

from typing import Any


class DayScoreError(Exception):
    """Base exception for all DayScore errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to structured dictionary for logging/API responses."""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DayScoreError):
    """Malformed event (unknown habit, bad bucket, empty submission). Storage untouched."""


class ConflictError(DayScoreError):
    """A conditional write lost a race with another writer for the same record."""


class PersistenceError(DayScoreError):
    """Storage unavailable or failed. Nothing was committed."""
