from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        role=Role(row["role"]),
        emp_id=row.get("emp_id"),
        designation=row.get("designation"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, role, emp_id, designation, is_active
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_many(self, user_ids: Iterable[int]) -> Mapping[int, Employee]:
        ids = sorted({int(u) for u in user_ids})
        if not ids:
            return {}
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, full_name, email, role, emp_id, designation, is_active
                FROM users
                WHERE user_id IN ({placeholders})
                """,
                tuple(ids),
            )
            return {int(r["user_id"]): _row_to_employee(r) for r in fetchall(cur)}
