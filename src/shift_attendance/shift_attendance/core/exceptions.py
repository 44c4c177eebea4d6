from __future__ import annotations

from typing import Any, Optional

from .enums import ErrorCode


class DomainError(Exception):
    """Base exception for business rule violations.

    Every error carries a machine-readable ``code`` and a ``details`` dict with
    the numbers that explain the decision (e.g. ``minutes_early``).
    """

    default_code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, *, code: Optional[ErrorCode] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code.value, "message": self.message, "details": self.details}


class ValidationError(DomainError):
    """Raised when input data is malformed or missing."""


class StateConflict(DomainError):
    """Raised when the current record state does not allow the operation."""


class TimingViolation(DomainError):
    """Raised when the operation happens outside its allowed time window."""


class NotFound(DomainError):
    """Raised when no matching schedule, attendance record or staff exists."""


class DependencyFailure(DomainError):
    """Raised by collaborators (payroll) that failed; never crosses an attendance mutation."""

    default_code = ErrorCode.PAYROLL_FAILED
