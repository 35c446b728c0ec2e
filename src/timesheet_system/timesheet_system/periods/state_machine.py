from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PeriodStatus
from ..core.exceptions import EmptyReason, InvalidTransition
from ..users.model import ManagerChain
from .model import PeriodState

SUBMIT = "submit"
APPROVE = "approve"
REJECT = "reject"

# action -> statuses it may start from
ALLOWED_FROM: dict[str, frozenset[PeriodStatus]] = {
    SUBMIT: frozenset({PeriodStatus.OPEN, PeriodStatus.REJECTED}),
    APPROVE: frozenset({PeriodStatus.SUBMITTED}),
    REJECT: frozenset({PeriodStatus.SUBMITTED}),
}

LOCKED_STATUSES = frozenset({PeriodStatus.SUBMITTED, PeriodStatus.APPROVED})


@dataclass(frozen=True)
class PeriodChange:
    """New values for the period keyed by (user_id, year, month), ready for upsert."""

    user_id: int
    year: int
    month: int
    status: PeriodStatus
    approver_id: Optional[int]
    rejection_reason: Optional[str]
    updated_at: datetime

    def as_upsert_kwargs(self) -> dict:
        return asdict(self)


class PeriodStateMachine:
    """Legal status transitions for a period (real or virtual).

    OPEN/REJECTED -> SUBMITTED (or APPROVED when nobody has to approve),
    SUBMITTED -> APPROVED | REJECTED. APPROVED is terminal here.
    """

    @staticmethod
    def resolve_approver(chain: ManagerChain) -> Optional[int]:
        return chain.effective_approver_id

    @staticmethod
    def is_locked(state: PeriodState) -> bool:
        return state.status in LOCKED_STATUSES

    @staticmethod
    def can(action: str, state: PeriodState) -> bool:
        return state.status in ALLOWED_FROM[action]

    def _check(self, action: str, state: PeriodState) -> None:
        if not self.can(action, state):
            raise InvalidTransition(state.status, action)

    def submit(self, state: PeriodState, *, approver_id: Optional[int], now: datetime) -> PeriodChange:
        self._check(SUBMIT, state)
        return PeriodChange(
            user_id=state.user_id,
            year=state.year,
            month=state.month,
            status=PeriodStatus.SUBMITTED if approver_id is not None else PeriodStatus.APPROVED,
            approver_id=approver_id,
            rejection_reason=None,
            updated_at=now,
        )

    def approve(self, state: PeriodState, *, now: datetime) -> PeriodChange:
        self._check(APPROVE, state)
        return PeriodChange(
            user_id=state.user_id,
            year=state.year,
            month=state.month,
            status=PeriodStatus.APPROVED,
            approver_id=state.approver_id,
            rejection_reason=None,
            updated_at=now,
        )

    def reject(self, state: PeriodState, reason: Optional[str], *, now: datetime) -> PeriodChange:
        self._check(REJECT, state)
        reason = (reason or "").strip()
        if not reason:
            raise EmptyReason("A rejection reason is required")
        return PeriodChange(
            user_id=state.user_id,
            year=state.year,
            month=state.month,
            status=PeriodStatus.REJECTED,
            approver_id=state.approver_id,
            rejection_reason=reason,
            updated_at=now,
        )
