from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date
from .model import TimeEntry
from .repository import TimeEntryRepository


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TimeEntry]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT entry_id, user_id, project_id, work_date, hours, description
                FROM time_entries
                WHERE {where}
                ORDER BY work_date ASC, entry_id ASC
                """,
                tuple(params),
            )
            return [
                TimeEntry(
                    entry_id=int(r["entry_id"]),
                    user_id=int(r["user_id"]),
                    project_id=int(r["project_id"]),
                    work_date=normalize_mysql_date(r["work_date"]),
                    hours=float(r["hours"] or 0),
                    description=r.get("description"),
                )
                for r in fetchall(cur)
            ]

    def list_months_for_user(self, user_id: int) -> Sequence[tuple[int, int]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT YEAR(work_date) AS y, MONTH(work_date) AS m
                FROM time_entries
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            return [(int(r["y"]), int(r["m"]) - 1) for r in fetchall(cur)]
