from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import today_local
from ..core.enums import ExceptionType, Role
from ..core.exceptions import AuthorizationError, StoreUnavailable, ValidationError
from .engine import CalendarEngine
from .model import CalendarException, Holiday
from .repository import CalendarRepository

logger = logging.getLogger(__name__)


class CalendarService:
    def __init__(self, calendar: CalendarRepository, *, engine: Optional[CalendarEngine] = None):
        self._calendar = calendar
        self._engine = engine or CalendarEngine()

    @property
    def engine(self) -> CalendarEngine:
        return self._engine

    def _load(self) -> tuple[Sequence[Holiday], Sequence[CalendarException]]:
        # Calendar data is the only store read allowed to degrade: fall back to weekends-only.
        try:
            holidays = self._calendar.list_holidays() or []
        except StoreUnavailable as e:
            logger.warning("Holidays unavailable, computing without them: %s", e)
            holidays = []
        try:
            exceptions = self._calendar.list_exceptions() or []
        except StoreUnavailable as e:
            logger.warning("Calendar exceptions unavailable, computing without them: %s", e)
            exceptions = []
        return holidays, exceptions

    def get_expected_hours(self, year: int, month: int) -> float:
        holidays, exceptions = self._load()
        return self._engine.expected_hours(year, month, holidays, exceptions)

    def get_expected_hours_to_date(self, year: int, month: int, *, today: Optional[date] = None) -> float:
        holidays, exceptions = self._load()
        return self._engine.expected_hours_to_date(year, month, holidays, exceptions, today=today or today_local())

    def is_working_day(self, day: date) -> bool:
        holidays, exceptions = self._load()
        return self._engine.is_working_day(day, holidays, exceptions)

    def get_month_overview(self, year: int, month: int, *, today: Optional[date] = None) -> dict:
        holidays, exceptions = self._load()
        working_days = self._engine.working_days(year, month, holidays, exceptions)
        return {
            "year": int(year),
            "month": int(month),
            "working_days": [d.strftime("%Y-%m-%d") for d in working_days],
            "expected_hours": self._engine.hours_for_days(len(working_days)),
            "expected_hours_to_date": self._engine.expected_hours_to_date(
                year, month, holidays, exceptions, today=today or today_local()
            ),
        }

    def list_holidays(self) -> Sequence[Holiday]:
        return self._calendar.list_holidays()

    def list_exceptions(self) -> Sequence[CalendarException]:
        return self._calendar.list_exceptions()

    def add_exception(
        self,
        *,
        current_role: Role,
        exception_date: date,
        type: ExceptionType | str,
        name: Optional[str] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change the calendar")

        try:
            exception_type = ExceptionType(type)
        except ValueError:
            raise ValidationError("Exception type must be OFFDAY or WORKDAY")

        name = name.strip() if name else None
        exception_id = self._calendar.upsert_exception(exception_date=exception_date, type=exception_type, name=name)
        logger.info("Calendar exception %s set for %s (id=%s)", exception_type.value, exception_date, exception_id)
        return exception_id

    def delete_exception(self, *, current_role: Role, exception_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change the calendar")

        if not self._calendar.delete_exception(exception_id=int(exception_id)):
            raise ValidationError("Calendar exception does not exist")
        logger.info("Calendar exception %s deleted", exception_id)
