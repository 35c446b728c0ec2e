from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PeriodStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PendingApproval, Period
from .repository import PeriodRepository

_COLUMNS = "p.period_id, p.user_id, p.year, p.month, p.status, p.approver_id, p.rejection_reason, p.updated_at"


def _row_to_period(r: dict) -> Period:
    return Period(
        period_id=int(r["period_id"]),
        user_id=int(r["user_id"]),
        year=int(r["year"]),
        month=int(r["month"]),
        status=PeriodStatus(r["status"]),
        approver_id=int(r["approver_id"]) if r.get("approver_id") is not None else None,
        rejection_reason=r.get("rejection_reason") or None,
        updated_at=r["updated_at"],
    )


class MySQLPeriodRepository(PeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, user_id: int, year: int, month: int) -> Optional[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM timesheet_periods p WHERE p.user_id=%s AND p.year=%s AND p.month=%s",
                (int(user_id), int(year), int(month)),
            )
            r = fetchone(cur)
            return _row_to_period(r) if r else None

    def get_by_id(self, *, period_id: int) -> Optional[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM timesheet_periods p WHERE p.period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _row_to_period(r) if r else None

    def upsert(
        self,
        *,
        user_id: int,
        year: int,
        month: int,
        status: PeriodStatus,
        approver_id: Optional[int],
        rejection_reason: Optional[str],
        updated_at: datetime,
    ) -> Period:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timesheet_periods(user_id, year, month, status, approver_id, rejection_reason, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    approver_id=VALUES(approver_id),
                    rejection_reason=VALUES(rejection_reason),
                    updated_at=VALUES(updated_at)
                """,
                (int(user_id), int(year), int(month), status.value, approver_id, rejection_reason, updated_at),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM timesheet_periods p WHERE p.user_id=%s AND p.year=%s AND p.month=%s",
                (int(user_id), int(year), int(month)),
            )
            return _row_to_period(fetchone(cur))

    def list_for_user(self, *, user_id: int) -> Sequence[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timesheet_periods p
                WHERE p.user_id=%s
                ORDER BY p.year DESC, p.month DESC
                """,
                (int(user_id),),
            )
            return [_row_to_period(r) for r in fetchall(cur)]

    def list_pending_for_approver(self, *, approver_id: int, limit: int = 200) -> Sequence[PendingApproval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.full_name
                FROM timesheet_periods p
                LEFT JOIN users u ON u.user_id = p.user_id
                WHERE p.approver_id=%s AND p.status=%s
                ORDER BY p.updated_at ASC
                LIMIT %s
                """,
                (int(approver_id), PeriodStatus.SUBMITTED.value, int(limit)),
            )
            return [
                PendingApproval(period=_row_to_period(r), user_name=r.get("full_name") or "Unknown user")
                for r in fetchall(cur)
            ]
