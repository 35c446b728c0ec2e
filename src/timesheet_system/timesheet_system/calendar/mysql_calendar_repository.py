from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ExceptionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import CalendarException, Holiday
from .repository import CalendarRepository


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_holidays(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id, holiday_date, name FROM holidays ORDER BY holiday_date ASC")
            return [
                Holiday(
                    holiday_id=int(r["holiday_id"]),
                    holiday_date=normalize_mysql_date(r["holiday_date"]),
                    name=r.get("name"),
                )
                for r in fetchall(cur)
            ]

    def list_exceptions(self) -> Sequence[CalendarException]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT exception_id, exception_date, exception_type, name
                FROM calendar_exceptions
                ORDER BY exception_date ASC
                """
            )
            return [
                CalendarException(
                    exception_id=int(r["exception_id"]),
                    exception_date=normalize_mysql_date(r["exception_date"]),
                    type=ExceptionType(r["exception_type"]),
                    name=r.get("name"),
                )
                for r in fetchall(cur)
            ]

    def upsert_exception(self, *, exception_date: date, type: ExceptionType, name: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO calendar_exceptions(exception_date, exception_type, name)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE exception_type=VALUES(exception_type), name=VALUES(name)
                """,
                (exception_date, type.value, name),
            )

            # If it was an update, lastrowid can be 0; fetch exception_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute("SELECT exception_id FROM calendar_exceptions WHERE exception_date=%s", (exception_date,))
            r = fetchone(cur)
            return int(r["exception_id"]) if r else 0

    def delete_exception(self, *, exception_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendar_exceptions WHERE exception_id=%s", (int(exception_id),))
            return cur.rowcount > 0
