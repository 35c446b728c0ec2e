from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .calendar.engine import CalendarEngine
from .calendar.mysql_calendar_repository import MySQLCalendarRepository
from .calendar.repository import CalendarRepository
from .calendar.service import CalendarService
from .core.constants import HOURS_PER_DAY, SUBMISSION_TOLERANCE_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .entries.mysql_entry_repository import MySQLTimeEntryRepository
from .entries.repository import TimeEntryRepository
from .periods.mysql_period_repository import MySQLPeriodRepository
from .periods.repository import PeriodRepository
from .periods.service import PeriodService
from .submissions.validator import SubmissionValidator
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    entries_repo: TimeEntryRepository
    calendar_repo: CalendarRepository
    periods_repo: PeriodRepository

    user_service: UserService
    calendar_service: CalendarService
    period_service: PeriodService


def wire_services(
    *,
    users_repo: UserRepository,
    entries_repo: TimeEntryRepository,
    calendar_repo: CalendarRepository,
    periods_repo: PeriodRepository,
    conn: Optional[DatabaseConnection] = None,
    hours_per_day: float = HOURS_PER_DAY,
    tolerance_hours: float = SUBMISSION_TOLERANCE_HOURS,
) -> Container:
    calendar_service = CalendarService(calendar_repo, engine=CalendarEngine(hours_per_day=hours_per_day))
    period_service = PeriodService(
        periods_repo,
        entries_repo,
        users_repo,
        calendar_service,
        validator=SubmissionValidator(tolerance_hours=tolerance_hours),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        entries_repo=entries_repo,
        calendar_repo=calendar_repo,
        periods_repo=periods_repo,
        user_service=UserService(users_repo),
        calendar_service=calendar_service,
        period_service=period_service,
    )


def build_container(
    *,
    db_config: dict,
    hours_per_day: float = HOURS_PER_DAY,
    tolerance_hours: float = SUBMISSION_TOLERANCE_HOURS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connection_timeout=int(db_config.get("connection_timeout", 10)),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        entries_repo=MySQLTimeEntryRepository(conn),
        calendar_repo=MySQLCalendarRepository(conn),
        periods_repo=MySQLPeriodRepository(conn),
        conn=conn,
        hours_per_day=hours_per_day,
        tolerance_hours=tolerance_hours,
    )
