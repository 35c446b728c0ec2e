from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PeriodStatus
from .model import PendingApproval, Period


class PeriodRepository(Protocol):
    def get(self, *, user_id: int, year: int, month: int) -> Optional[Period]:
        raise NotImplementedError

    def get_by_id(self, *, period_id: int) -> Optional[Period]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        user_id: int,
        year: int,
        month: int,
        status: PeriodStatus,
        approver_id: Optional[int],
        rejection_reason: Optional[str],
        updated_at: datetime,
    ) -> Period:
        """Create or update the period keyed by (user_id, year, month).

        Must be atomic on that key; concurrent writers resolve as last write wins.
        """

        raise NotImplementedError

    def list_for_user(self, *, user_id: int) -> Sequence[Period]:
        raise NotImplementedError

    def list_pending_for_approver(self, *, approver_id: int, limit: int = 200) -> Sequence[PendingApproval]:
        """SUBMITTED periods frozen to this approver (joined with user name)."""

        raise NotImplementedError
