from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from ..core.enums import PeriodStatus


@dataclass(frozen=True)
class Period:
    """A stored period record: one user's claim over one calendar month (0-based month)."""

    period_id: int
    user_id: int
    year: int
    month: int
    status: PeriodStatus
    updated_at: datetime
    approver_id: Optional[int] = None
    rejection_reason: Optional[str] = None

    @property
    def key(self) -> tuple[int, int, int]:
        return self.user_id, self.year, self.month

    def to_dict(self) -> dict:
        return {
            "period_id": self.period_id,
            "user_id": self.user_id,
            "year": self.year,
            "month": self.month,
            "status": self.status.value,
            "approver_id": self.approver_id,
            "rejection_reason": self.rejection_reason,
            "updated_at": self.updated_at.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class VirtualPeriod:
    """A month with no stored record; always OPEN."""

    user_id: int
    year: int
    month: int

    status = PeriodStatus.OPEN
    period_id = None
    approver_id = None
    rejection_reason = None

    @property
    def key(self) -> tuple[int, int, int]:
        return self.user_id, self.year, self.month

    def to_dict(self) -> dict:
        return {
            "period_id": None,
            "user_id": self.user_id,
            "year": self.year,
            "month": self.month,
            "status": self.status.value,
            "approver_id": None,
            "rejection_reason": None,
            "updated_at": None,
        }


PeriodState = Union[Period, VirtualPeriod]


@dataclass(frozen=True)
class PendingApproval:
    """Row for a manager's approval queue."""

    period: Period
    user_name: str

    def to_dict(self) -> dict:
        data = self.period.to_dict()
        data["user_name"] = self.user_name
        return data
