from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import ManagerChain, User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, role, manager_id, delegated_manager_id, is_active
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return User(
                user_id=int(r["user_id"]),
                full_name=r["full_name"],
                email=r["email"],
                role=Role(r["role"]),
                manager_id=int(r["manager_id"]) if r.get("manager_id") is not None else None,
                delegated_manager_id=(
                    int(r["delegated_manager_id"]) if r.get("delegated_manager_id") is not None else None
                ),
                is_active=bool(r.get("is_active", 1)),
            )

    def get_manager_chain(self, user_id: int) -> ManagerChain:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.manager_id, m.delegated_manager_id
                FROM users u
                LEFT JOIN users m ON m.user_id = u.manager_id
                WHERE u.user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                return ManagerChain()
            return ManagerChain(
                manager_id=int(r["manager_id"]) if r.get("manager_id") is not None else None,
                delegated_manager_id=(
                    int(r["delegated_manager_id"]) if r.get("delegated_manager_id") is not None else None
                ),
            )

    def set_delegate(self, *, manager_id: int, delegate_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET delegated_manager_id=%s WHERE user_id=%s",
                (int(delegate_id) if delegate_id is not None else None, int(manager_id)),
            )
            return cur.rowcount > 0
