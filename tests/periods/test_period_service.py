from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from src.timesheet_system.timesheet_system.calendar.service import CalendarService
from src.timesheet_system.timesheet_system.core.enums import PeriodStatus, Role
from src.timesheet_system.timesheet_system.core.exceptions import (
    AuthorizationError,
    EmptyReason,
    InvalidTransition,
    PeriodNotFound,
    StoreUnavailable,
    SubmissionDenied,
)
from src.timesheet_system.timesheet_system.entries.model import TimeEntry
from src.timesheet_system.timesheet_system.periods.model import PendingApproval, Period, VirtualPeriod
from src.timesheet_system.timesheet_system.periods.service import PeriodService
from src.timesheet_system.timesheet_system.users.model import ManagerChain, User

NOW = datetime(2025, 3, 3, 9, 0, 0)


class InMemoryPeriods:
    def __init__(self):
        self._by_key: dict[tuple[int, int, int], Period] = {}
        self._next_id = 0
        self.upserts = 0
        self.failing = False

    def get(self, *, user_id, year, month):
        if self.failing:
            raise StoreUnavailable("down")
        return self._by_key.get((user_id, year, month))

    def get_by_id(self, *, period_id):
        for p in self._by_key.values():
            if p.period_id == int(period_id):
                return p
        return None

    def upsert(self, *, user_id, year, month, status, approver_id, rejection_reason, updated_at):
        self.upserts += 1
        existing = self._by_key.get((user_id, year, month))
        if existing:
            period_id = existing.period_id
        else:
            self._next_id += 1
            period_id = self._next_id
        period = Period(
            period_id=period_id,
            user_id=user_id,
            year=year,
            month=month,
            status=status,
            updated_at=updated_at,
            approver_id=approver_id,
            rejection_reason=rejection_reason,
        )
        self._by_key[(user_id, year, month)] = period
        return period

    def list_for_user(self, *, user_id):
        return [p for p in self._by_key.values() if p.user_id == user_id]

    def list_pending_for_approver(self, *, approver_id, limit=200):
        rows = [
            PendingApproval(period=p, user_name=f"User {p.user_id}")
            for p in self._by_key.values()
            if p.approver_id == approver_id and p.status == PeriodStatus.SUBMITTED
        ]
        return rows[:limit]


class InMemoryEntries:
    def __init__(self, entries=None):
        self.entries: list[TimeEntry] = list(entries or [])

    def list_for_user(self, user_id, *, start=None, end=None):
        return [
            e
            for e in self.entries
            if e.user_id == user_id and (start is None or e.work_date >= start) and (end is None or e.work_date <= end)
        ]

    def list_months_for_user(self, user_id):
        return sorted({(e.work_date.year, e.work_date.month - 1) for e in self.entries if e.user_id == user_id})


class InMemoryUsers:
    def __init__(self, users: dict[int, User]):
        self.users = users

    def get_by_id(self, user_id) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_manager_chain(self, user_id):
        user = self.users.get(int(user_id))
        if not user or user.manager_id is None:
            return ManagerChain()
        manager = self.users.get(user.manager_id)
        return ManagerChain(
            manager_id=user.manager_id,
            delegated_manager_id=manager.delegated_manager_id if manager else None,
        )

    def set_delegate(self, *, manager_id, delegate_id):
        return True


class EmptyCalendar:
    def list_holidays(self):
        return []

    def list_exceptions(self):
        return []


def _user(user_id: int, *, role=Role.USER, manager_id=None, delegated_manager_id=None) -> User:
    return User(
        user_id=user_id,
        full_name=f"User {user_id}",
        email=f"u{user_id}@example.com",
        role=role,
        manager_id=manager_id,
        delegated_manager_id=delegated_manager_id,
    )


def _entry(entry_id: int, work_date: date, hours: float, user_id: int = 3) -> TimeEntry:
    return TimeEntry(entry_id=entry_id, user_id=user_id, project_id=1, work_date=work_date, hours=hours)


def _service(*, users=None, entries=None, periods=None):
    users = users or {
        1: _user(1, role=Role.ADMIN),
        2: _user(2, role=Role.MANAGER),
        3: _user(3, manager_id=2),
    }
    periods = periods or InMemoryPeriods()
    svc = PeriodService(periods, InMemoryEntries(entries), InMemoryUsers(users), CalendarService(EmptyCalendar()))
    return svc, periods


def test_missing_record_is_virtual_open_period():
    svc, _ = _service()
    period = svc.get_period(3, 2025, 1)

    assert isinstance(period, VirtualPeriod)
    assert period.status == PeriodStatus.OPEN
    assert svc.is_locked(period) is False


def test_can_submit_closed_month_with_no_hours():
    svc, _ = _service()
    check = svc.can_submit(3, 2025, 1, today=date(2025, 4, 15))

    assert check.allowed is True
    assert check.summary.expected_hours == 176.0
    assert check.summary.logged_hours == 0


def test_can_submit_denied_early_in_current_month():
    svc, _ = _service()
    check = svc.can_submit(3, 2025, 1, today=date(2025, 2, 10))

    assert check.allowed is False
    assert check.denial.shortfall == 176.0


def test_logged_hours_only_count_the_target_month():
    entries = [
        _entry(1, date(2025, 1, 31), 100),
        _entry(2, date(2025, 2, 3), 80),
        _entry(3, date(2025, 2, 4), 60),
        _entry(4, date(2025, 3, 1), 100),
        _entry(5, date(2025, 2, 5), 100, user_id=9),
    ]
    svc, _ = _service(entries=entries)

    assert svc.logged_hours(3, 2025, 1) == 140.0
    assert svc.can_submit(3, 2025, 1, today=date(2025, 2, 10)).allowed is True


def test_submit_routes_to_direct_manager():
    svc, periods = _service()
    period = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)

    assert period.status == PeriodStatus.SUBMITTED
    assert period.approver_id == 2
    assert period.updated_at == NOW
    assert periods.get(user_id=3, year=2025, month=1) == period


def test_submit_routes_to_delegate_of_manager():
    users = {
        2: _user(2, role=Role.MANAGER, delegated_manager_id=5),
        3: _user(3, manager_id=2),
        5: _user(5, role=Role.MANAGER, delegated_manager_id=6),
        6: _user(6, role=Role.MANAGER),
    }
    svc, _ = _service(users=users)

    period = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)
    assert period.approver_id == 5


def test_submit_without_manager_auto_approves():
    users = {3: _user(3)}
    svc, _ = _service(users=users)

    period = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)
    assert period.status == PeriodStatus.APPROVED
    assert period.approver_id is None


def test_submit_denied_by_rules_raises_and_does_not_write():
    svc, periods = _service()

    with pytest.raises(SubmissionDenied) as exc:
        svc.submit_period(3, 2025, 1, today=date(2025, 2, 10), now=NOW)

    assert exc.value.denial.expected_hours == 176.0
    assert periods.upserts == 0


@pytest.mark.parametrize("status", [PeriodStatus.SUBMITTED, PeriodStatus.APPROVED])
def test_submit_locked_period_is_invalid_transition(status):
    svc, periods = _service()
    periods.upsert(
        user_id=3, year=2025, month=1, status=status, approver_id=2, rejection_reason=None, updated_at=NOW
    )

    with pytest.raises(InvalidTransition):
        svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)


def test_resubmit_after_rejection_clears_reason():
    svc, periods = _service()
    first = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)
    svc.reject_period(first.period_id, "Missing Friday", acting_user_id=2, current_role=Role.MANAGER, now=NOW)

    again = svc.submit_period(3, 2025, 1, today=date(2025, 3, 4), now=datetime(2025, 3, 4, 9, 0))

    assert again.period_id == first.period_id
    assert again.status == PeriodStatus.SUBMITTED
    assert again.rejection_reason is None
    assert len(periods.list_for_user(user_id=3)) == 1


def test_approver_is_frozen_at_submission():
    users = {
        2: _user(2, role=Role.MANAGER),
        3: _user(3, manager_id=2),
        5: _user(5, role=Role.MANAGER),
    }
    svc, _ = _service(users=users)
    period = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)

    users[2] = _user(2, role=Role.MANAGER, delegated_manager_id=5)

    assert svc.get_period(3, 2025, 1).approver_id == 2
    with pytest.raises(AuthorizationError):
        svc.approve_period(period.period_id, acting_user_id=5, current_role=Role.MANAGER)


def test_approve_and_reject_flow():
    svc, _ = _service()
    period = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)

    approved = svc.approve_period(period.period_id, acting_user_id=2, current_role=Role.MANAGER, now=NOW)
    assert approved.status == PeriodStatus.APPROVED
    assert svc.is_locked(approved) is True

    with pytest.raises(InvalidTransition):
        svc.approve_period(period.period_id, now=NOW)
    with pytest.raises(InvalidTransition):
        svc.reject_period(period.period_id, "too late", now=NOW)


def test_approve_open_period_is_invalid_transition():
    svc, periods = _service()
    stored = periods.upsert(
        user_id=3, year=2025, month=1, status=PeriodStatus.OPEN, approver_id=None, rejection_reason=None, updated_at=NOW
    )

    with pytest.raises(InvalidTransition):
        svc.approve_period(stored.period_id)


def test_reject_requires_reason():
    svc, _ = _service()
    period = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)

    with pytest.raises(EmptyReason):
        svc.reject_period(period.period_id, "", acting_user_id=2, current_role=Role.MANAGER)

    rejected = svc.reject_period(period.period_id, "Missing Friday", acting_user_id=1, current_role=Role.ADMIN)
    assert rejected.status == PeriodStatus.REJECTED
    assert rejected.rejection_reason == "Missing Friday"
    assert svc.is_locked(rejected) is False


def test_unknown_period_id():
    svc, _ = _service()
    with pytest.raises(PeriodNotFound):
        svc.approve_period(404)


def test_other_manager_cannot_decide():
    svc, _ = _service()
    period = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)

    with pytest.raises(AuthorizationError):
        svc.reject_period(period.period_id, "no", acting_user_id=9, current_role=Role.MANAGER)


def test_decided_period_reports_transition_before_actor():
    svc, periods = _service()
    period = svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)
    svc.approve_period(period.period_id, acting_user_id=2, current_role=Role.MANAGER, now=NOW)
    writes = periods.upserts

    with pytest.raises(InvalidTransition):
        svc.approve_period(period.period_id, acting_user_id=9, current_role=Role.MANAGER)
    with pytest.raises(InvalidTransition):
        svc.reject_period(period.period_id, "late", acting_user_id=9, current_role=Role.MANAGER)
    assert periods.upserts == writes


def test_upsert_twice_keeps_one_period():
    periods = InMemoryPeriods()
    for status in (PeriodStatus.SUBMITTED, PeriodStatus.APPROVED):
        periods.upsert(
            user_id=3, year=2025, month=1, status=status, approver_id=2, rejection_reason=None, updated_at=NOW
        )

    stored = periods.list_for_user(user_id=3)
    assert len(stored) == 1
    assert periods.get(user_id=3, year=2025, month=1).status == PeriodStatus.APPROVED


def test_entry_lock_follows_period_status():
    entry = _entry(1, date(2025, 2, 3), 8)
    svc, _ = _service(entries=[entry])
    assert svc.is_entry_locked(entry) is False

    svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)
    assert svc.is_entry_locked(entry) is True
    assert svc.is_entry_locked(_entry(2, date(2025, 3, 3), 8)) is False


def test_list_periods_merges_records_and_entry_months():
    entries = [_entry(1, date(2025, 1, 10), 8), _entry(2, date(2025, 3, 3), 8)]
    svc, _ = _service(entries=entries)
    svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)

    periods = svc.list_periods(3)

    assert [(p.year, p.month) for p in periods] == [(2025, 2), (2025, 1), (2025, 0)]
    assert periods[1].status == PeriodStatus.SUBMITTED
    assert isinstance(periods[0], VirtualPeriod)


def test_pending_approvals_for_approver():
    svc, _ = _service()
    svc.submit_period(3, 2025, 0, today=date(2025, 3, 3), now=NOW)
    svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)

    pending = svc.list_pending_approvals(2)
    assert len(pending) == 2
    assert svc.list_pending_approvals(1) == []


def test_store_failure_propagates():
    periods = InMemoryPeriods()
    periods.failing = True
    svc, _ = _service(periods=periods)

    with pytest.raises(StoreUnavailable):
        svc.submit_period(3, 2025, 1, today=date(2025, 3, 3), now=NOW)
