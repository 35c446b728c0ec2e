from __future__ import annotations

from typing import TYPE_CHECKING

from .enums import PeriodStatus

if TYPE_CHECKING:
    from ..submissions.model import ValidationDenied


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class EmptyReason(ValidationError):
    """Raised when a period is rejected without a reason."""


class InvalidTransition(DomainError):
    """Raised when a period cannot move to the requested status from its current one."""

    def __init__(self, current_status: PeriodStatus, action: str):
        self.current_status = current_status
        self.action = action
        super().__init__(f"Cannot {action} a period in status {current_status.value}")


class PeriodNotFound(DomainError):
    def __init__(self, period_id: int):
        self.period_id = period_id
        super().__init__(f"Period {period_id} does not exist")


class SubmissionDenied(DomainError):
    """Raised by submit when the submission rules do not allow the period yet."""

    def __init__(self, denial: "ValidationDenied"):
        self.denial = denial
        super().__init__(denial.reason)


class StoreUnavailable(DomainError):
    """Raised when the persistence store cannot be reached or fails a query."""
