from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ExceptionType
from .model import CalendarException, Holiday


class CalendarRepository(Protocol):
    def list_holidays(self) -> Sequence[Holiday]:
        raise NotImplementedError

    def list_exceptions(self) -> Sequence[CalendarException]:
        raise NotImplementedError

    def upsert_exception(self, *, exception_date: date, type: ExceptionType, name: Optional[str] = None) -> int:
        """Create or replace the exception for a date.

        Returns exception_id.
        """

        raise NotImplementedError

    def delete_exception(self, *, exception_id: int) -> bool:
        raise NotImplementedError
