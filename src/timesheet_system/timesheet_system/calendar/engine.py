from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..common.datetime_utils import is_weekend, iter_days, month_bounds
from ..core.constants import HOURS_PER_DAY
from ..core.enums import ExceptionType
from .model import CalendarException, Holiday


@dataclass(frozen=True)
class CalendarSnapshot:
    """Holidays and exceptions indexed by date for one computation."""

    holiday_dates: frozenset
    exception_types: dict

    @classmethod
    def build(cls, holidays: Iterable[Holiday] = (), exceptions: Iterable[CalendarException] = ()) -> "CalendarSnapshot":
        return cls(
            holiday_dates=frozenset(h.holiday_date for h in holidays or ()),
            exception_types={e.exception_date: e.type for e in exceptions or ()},
        )


class CalendarEngine:
    """Expected working hours from weekends, holidays and calendar exceptions.

    Every date is handled as a plain calendar date; nothing here goes through a
    timezone conversion.
    """

    def __init__(self, *, hours_per_day: float = HOURS_PER_DAY):
        self._hours_per_day = Decimal(str(hours_per_day))

    def is_working_day(
        self,
        day: date,
        holidays: Iterable[Holiday] = (),
        exceptions: Iterable[CalendarException] = (),
    ) -> bool:
        return self._is_working_day(day, CalendarSnapshot.build(holidays, exceptions))

    def working_days(
        self,
        year: int,
        month: int,
        holidays: Iterable[Holiday] = (),
        exceptions: Iterable[CalendarException] = (),
        *,
        until: date | None = None,
    ) -> list[date]:
        first, last = month_bounds(year, month)
        if until is not None:
            last = min(last, until)
        snapshot = CalendarSnapshot.build(holidays, exceptions)
        return [d for d in iter_days(first, last) if self._is_working_day(d, snapshot)]

    def expected_hours(
        self,
        year: int,
        month: int,
        holidays: Iterable[Holiday] = (),
        exceptions: Iterable[CalendarException] = (),
    ) -> float:
        return self.hours_for_days(len(self.working_days(year, month, holidays, exceptions)))

    def expected_hours_to_date(
        self,
        year: int,
        month: int,
        holidays: Iterable[Holiday] = (),
        exceptions: Iterable[CalendarException] = (),
        *,
        today: date,
    ) -> float:
        first, last = month_bounds(year, month)
        if last < today:
            return self.expected_hours(year, month, holidays, exceptions)
        if first > today:
            return 0.0
        return self.hours_for_days(len(self.working_days(year, month, holidays, exceptions, until=today)))

    def hours_for_days(self, working_days: int) -> float:
        hours = (Decimal(int(working_days)) * self._hours_per_day).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return float(hours)

    @staticmethod
    def _is_working_day(day: date, snapshot: CalendarSnapshot) -> bool:
        exception_type = snapshot.exception_types.get(day)
        if exception_type is not None:
            return exception_type == ExceptionType.WORKDAY
        return not is_weekend(day) and day not in snapshot.holiday_dates
