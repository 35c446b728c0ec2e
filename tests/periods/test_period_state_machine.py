from __future__ import annotations

from datetime import datetime

import pytest

from src.timesheet_system.timesheet_system.core.enums import PeriodStatus
from src.timesheet_system.timesheet_system.core.exceptions import EmptyReason, InvalidTransition
from src.timesheet_system.timesheet_system.periods.model import Period, VirtualPeriod
from src.timesheet_system.timesheet_system.periods.state_machine import PeriodStateMachine
from src.timesheet_system.timesheet_system.users.model import ManagerChain

NOW = datetime(2025, 3, 3, 9, 0, 0)


def _period(status: PeriodStatus, *, approver_id=7, reason=None) -> Period:
    return Period(
        period_id=1,
        user_id=3,
        year=2025,
        month=1,
        status=status,
        updated_at=datetime(2025, 3, 1, 8, 0, 0),
        approver_id=approver_id,
        rejection_reason=reason,
    )


def test_virtual_period_submits_to_approver():
    change = PeriodStateMachine().submit(VirtualPeriod(user_id=3, year=2025, month=1), approver_id=7, now=NOW)

    assert change.status == PeriodStatus.SUBMITTED
    assert change.approver_id == 7
    assert change.rejection_reason is None
    assert change.updated_at == NOW
    assert (change.user_id, change.year, change.month) == (3, 2025, 1)


def test_submit_without_approver_auto_approves():
    change = PeriodStateMachine().submit(VirtualPeriod(user_id=3, year=2025, month=1), approver_id=None, now=NOW)
    assert change.status == PeriodStatus.APPROVED
    assert change.approver_id is None


def test_resubmitting_rejected_period_clears_reason():
    change = PeriodStateMachine().submit(_period(PeriodStatus.REJECTED, reason="Missing Friday"), approver_id=7, now=NOW)
    assert change.status == PeriodStatus.SUBMITTED
    assert change.rejection_reason is None


@pytest.mark.parametrize("status", [PeriodStatus.SUBMITTED, PeriodStatus.APPROVED])
def test_submit_from_locked_status_is_invalid(status):
    with pytest.raises(InvalidTransition) as exc:
        PeriodStateMachine().submit(_period(status), approver_id=7, now=NOW)
    assert exc.value.current_status == status
    assert exc.value.action == "submit"


def test_approve_only_from_submitted():
    machine = PeriodStateMachine()
    change = machine.approve(_period(PeriodStatus.SUBMITTED), now=NOW)
    assert change.status == PeriodStatus.APPROVED
    assert change.approver_id == 7

    for status in (PeriodStatus.OPEN, PeriodStatus.APPROVED, PeriodStatus.REJECTED):
        with pytest.raises(InvalidTransition):
            machine.approve(_period(status), now=NOW)
    with pytest.raises(InvalidTransition):
        machine.approve(VirtualPeriod(user_id=3, year=2025, month=1), now=NOW)


def test_reject_requires_reason_and_submitted_status():
    machine = PeriodStateMachine()

    change = machine.reject(_period(PeriodStatus.SUBMITTED), "  Missing Friday  ", now=NOW)
    assert change.status == PeriodStatus.REJECTED
    assert change.rejection_reason == "Missing Friday"

    with pytest.raises(EmptyReason):
        machine.reject(_period(PeriodStatus.SUBMITTED), "   ", now=NOW)
    with pytest.raises(InvalidTransition):
        machine.reject(_period(PeriodStatus.APPROVED), "late", now=NOW)


def test_locked_statuses():
    machine = PeriodStateMachine()
    assert machine.is_locked(_period(PeriodStatus.SUBMITTED)) is True
    assert machine.is_locked(_period(PeriodStatus.APPROVED)) is True
    assert machine.is_locked(_period(PeriodStatus.REJECTED)) is False
    assert machine.is_locked(VirtualPeriod(user_id=3, year=2025, month=1)) is False


def test_delegate_resolution_is_single_hop():
    assert PeriodStateMachine.resolve_approver(ManagerChain(manager_id=2, delegated_manager_id=5)) == 5
    assert PeriodStateMachine.resolve_approver(ManagerChain(manager_id=2)) == 2
    assert PeriodStateMachine.resolve_approver(ManagerChain()) is None
