from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .enums import GuardViolationKind

if TYPE_CHECKING:
    from ..reports.guard import GuardViolation


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the session principal is missing or unusable."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PreconditionError(ValidationError):
    """Raised when the target of an operation is not in a usable state."""


class ReportLockedError(PreconditionError):
    """Raised when a notified daily report would be mutated."""


class NotifyGuardError(ValidationError):
    """Aggregate notify-guard failure.

    Carries every violation found so the caller can fix all of them before
    retrying.
    """

    def __init__(self, violations: Sequence["GuardViolation"]):
        self.violations = tuple(violations)
        super().__init__(self._build_message(self.violations))

    @staticmethod
    def _build_message(violations: Sequence["GuardViolation"]) -> str:
        missing = [v.employee_name for v in violations if v.kind == GuardViolationKind.MISSING_NOVELTY]
        no_phase = [v.employee_name for v in violations if v.kind == GuardViolationKind.NO_ACTIVE_PHASE]

        parts = []
        if missing:
            parts.append("Employees without hours or absence: " + "; ".join(missing))
        if no_phase:
            parts.append("Employees with productive hours but no active phase: " + "; ".join(no_phase))
        return ". ".join(parts) or "Notify guard failed"


class TransactionError(DomainError):
    """Raised when the store rejects a commit. Nothing was written; retry is safe."""
