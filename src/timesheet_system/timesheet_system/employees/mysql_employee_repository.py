from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import parse_role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, organization_id, display_name, first_name, last_name, role, allow_time_edit"


def _to_employee(r: dict) -> Employee:
    allow = r.get("allow_time_edit")
    return Employee(
        employee_id=int(r["employee_id"]),
        organization_id=int(r["organization_id"]),
        display_name=r.get("display_name"),
        first_name=r.get("first_name"),
        last_name=r.get("last_name"),
        role=parse_role(r.get("role")),
        allow_time_edit=None if allow is None else bool(allow),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, *, organization_id: int, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE organization_id=%s AND employee_id=%s",
                (int(organization_id), int(employee_id)),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_by_ids(self, *, organization_id: int, employee_ids: Sequence[int]) -> Sequence[Employee]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE organization_id=%s AND employee_id IN ({in_clause(ids)})",
                (int(organization_id), *ids),
            )
            return [_to_employee(r) for r in fetchall(cur)]
