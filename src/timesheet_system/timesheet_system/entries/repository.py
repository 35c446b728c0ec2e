from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import TimeEntry


class TimeEntryRepository(Protocol):
    def list_for_user(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TimeEntry]:
        """Entries of a user, optionally limited to start..end inclusive."""

        raise NotImplementedError

    def list_months_for_user(self, user_id: int) -> Sequence[tuple[int, int]]:
        """Distinct (year, 0-based month) pairs the user has entries in."""

        raise NotImplementedError
