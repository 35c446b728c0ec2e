from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..calendar.service import CalendarService
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_month
from ..core.constants import DEFAULT_PENDING_LIMIT
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, InvalidTransition, PeriodNotFound, SubmissionDenied
from ..entries.model import TimeEntry
from ..entries.repository import TimeEntryRepository
from ..submissions.model import SubmissionCheck
from ..submissions.validator import SubmissionValidator
from ..users.repository import UserRepository
from .model import PendingApproval, Period, PeriodState, VirtualPeriod
from .repository import PeriodRepository
from .state_machine import APPROVE, REJECT, SUBMIT, PeriodStateMachine

logger = logging.getLogger(__name__)


class PeriodService:
    """Monthly approval workflow: submission, approval, rejection and locking."""

    def __init__(
        self,
        periods: PeriodRepository,
        entries: TimeEntryRepository,
        users: UserRepository,
        calendar: CalendarService,
        *,
        validator: Optional[SubmissionValidator] = None,
        state_machine: Optional[PeriodStateMachine] = None,
    ):
        self._periods = periods
        self._entries = entries
        self._users = users
        self._calendar = calendar
        self._validator = validator or SubmissionValidator()
        self._machine = state_machine or PeriodStateMachine()

    def get_period(self, user_id: int, year: int, month: int) -> PeriodState:
        year, month = require_month(year, month)
        period = self._periods.get(user_id=int(user_id), year=year, month=month)
        if period is None:
            return VirtualPeriod(user_id=int(user_id), year=year, month=month)
        return period

    def list_periods(self, user_id: int) -> list[PeriodState]:
        """Every month with a stored record or logged entries, newest first."""

        stored = {(p.year, p.month): p for p in self._periods.list_for_user(user_id=int(user_id))}
        months = set(stored) | set(self._entries.list_months_for_user(int(user_id)))

        out: list[PeriodState] = []
        for year, month in sorted(months, reverse=True):
            out.append(stored.get((year, month)) or VirtualPeriod(user_id=int(user_id), year=year, month=month))
        return out

    def list_pending_approvals(self, approver_id: int, *, limit: int = DEFAULT_PENDING_LIMIT) -> Sequence[PendingApproval]:
        return self._periods.list_pending_for_approver(approver_id=int(approver_id), limit=int(limit))

    def logged_hours(self, user_id: int, year: int, month: int) -> float:
        first, last = month_bounds(year, month)
        entries = self._entries.list_for_user(int(user_id), start=first, end=last)
        # The range filter belongs to the store; re-check so a loose store cannot leak other months in.
        return round(sum(float(e.hours) for e in entries if first <= e.work_date <= last), 2)

    def can_submit(self, user_id: int, year: int, month: int, *, today: Optional[date] = None) -> SubmissionCheck:
        year, month = require_month(year, month)
        today = today or now_local().date()
        return self._validator.evaluate(
            year=year,
            month=month,
            expected_hours=self._calendar.get_expected_hours(year, month),
            logged_hours=self.logged_hours(user_id, year, month),
            today=today,
        )

    def submit_period(
        self,
        user_id: int,
        year: int,
        month: int,
        *,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> Period:
        now = now or now_local()
        state = self.get_period(user_id, year, month)
        if not self._machine.can(SUBMIT, state):
            raise InvalidTransition(state.status, SUBMIT)

        check = self.can_submit(user_id, state.year, state.month, today=today or now.date())
        if not check.allowed:
            logger.info("Submission of %s/%s for user %s denied by rules", state.year, state.month, user_id)
            raise SubmissionDenied(check.denial)

        # Read the manager chain fresh; the approver is frozen on the record from here on.
        approver_id = self._machine.resolve_approver(self._users.get_manager_chain(int(user_id)))
        change = self._machine.submit(state, approver_id=approver_id, now=now)
        period = self._periods.upsert(**change.as_upsert_kwargs())

        logger.info(
            "Period %s (user=%s %s/%s) -> %s, approver=%s",
            period.period_id,
            period.user_id,
            period.year,
            period.month,
            period.status.value,
            period.approver_id,
        )
        return period

    def _get_existing(self, period_id: int) -> Period:
        period = self._periods.get_by_id(period_id=int(period_id))
        if period is None:
            raise PeriodNotFound(int(period_id))
        return period

    @staticmethod
    def _check_actor(period: Period, acting_user_id: Optional[int], current_role: Optional[Role]) -> None:
        if acting_user_id is None:
            return
        if current_role == Role.ADMIN:
            return
        if period.approver_id is None or int(acting_user_id) != int(period.approver_id):
            raise AuthorizationError("Only the assigned approver can decide on this period")

    def approve_period(
        self,
        period_id: int,
        *,
        acting_user_id: Optional[int] = None,
        current_role: Optional[Role] = None,
        now: Optional[datetime] = None,
    ) -> Period:
        period = self._get_existing(period_id)
        if not self._machine.can(APPROVE, period):
            raise InvalidTransition(period.status, APPROVE)
        self._check_actor(period, acting_user_id, current_role)
        change = self._machine.approve(period, now=now or now_local())

        updated = self._periods.upsert(**change.as_upsert_kwargs())
        logger.info("Period %s approved by %s", updated.period_id, acting_user_id)
        return updated

    def reject_period(
        self,
        period_id: int,
        reason: str,
        *,
        acting_user_id: Optional[int] = None,
        current_role: Optional[Role] = None,
        now: Optional[datetime] = None,
    ) -> Period:
        period = self._get_existing(period_id)
        if not self._machine.can(REJECT, period):
            raise InvalidTransition(period.status, REJECT)
        self._check_actor(period, acting_user_id, current_role)
        change = self._machine.reject(period, reason, now=now or now_local())

        updated = self._periods.upsert(**change.as_upsert_kwargs())
        logger.info("Period %s rejected by %s", updated.period_id, acting_user_id)
        return updated

    def is_locked(self, state: PeriodState) -> bool:
        return self._machine.is_locked(state)

    def is_entry_locked(self, entry: TimeEntry) -> bool:
        user_id, year, month = entry.period_key
        return self.is_locked(self.get_period(user_id, year, month))
