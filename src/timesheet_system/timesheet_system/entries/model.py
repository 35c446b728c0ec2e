from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class TimeEntry:
    entry_id: int
    user_id: int
    project_id: int
    work_date: date
    hours: float
    description: Optional[str] = None

    @property
    def period_key(self) -> tuple[int, int, int]:
        """(user_id, year, 0-based month) of the period owning this entry."""
        return self.user_id, self.work_date.year, self.work_date.month - 1
