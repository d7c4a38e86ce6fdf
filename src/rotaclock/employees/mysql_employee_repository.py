from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone, in_clause
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

_COLUMNS = """
    id, tenant_id, employee_code, first_name, last_name, email, department, position,
    hourly_rate, role, location_id, team_id, manager_id, is_active, created_at
"""


def row_to_employee(r: dict[str, Any]) -> Employee:
    return Employee(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        employee_code=r["employee_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        role=Role(r["role"]),
        hourly_rate=as_float(r.get("hourly_rate")),
        email=r.get("email"),
        department=r.get("department"),
        position=r.get("position"),
        location_id=r.get("location_id"),
        team_id=r.get("team_id"),
        manager_id=r.get("manager_id"),
        is_active=as_bool(r.get("is_active")),
        created_at=r.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, tenant_id: int, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE id=%s AND tenant_id=%s",
                (int(employee_id), int(tenant_id)),
            )
            r = fetchone(cur)
            return row_to_employee(r) if r else None

    def find_active_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE id=%s AND is_active=1",
                (int(employee_id),),
            )
            r = fetchone(cur)
            return row_to_employee(r) if r else None

    def find_active_by_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE employee_code=%s AND is_active=1 LIMIT 1",
                (employee_code,),
            )
            r = fetchone(cur)
            return row_to_employee(r) if r else None

    def list_employees(
        self,
        *,
        tenant_id: int,
        roles: Optional[Sequence[Role]] = None,
        department: Optional[str] = None,
        location_ids: Optional[Sequence[int]] = None,
        active: Optional[bool] = True,
    ) -> list[Employee]:
        clauses = ["tenant_id=%s"]
        params: list[object] = [int(tenant_id)]

        if roles:
            clauses.append(f"role IN ({in_clause(roles)})")
            params.extend(r.value for r in roles)
        if department:
            clauses.append("department=%s")
            params.append(department)
        if location_ids is not None:
            if not location_ids:
                return []
            clauses.append(f"location_id IN ({in_clause(location_ids)})")
            params.extend(int(x) for x in location_ids)
        if active is not None:
            clauses.append("is_active=%s")
            params.append(1 if active else 0)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE {where} ORDER BY first_name, last_name",
                tuple(params),
            )
            return [row_to_employee(r) for r in fetchall(cur)]

    def code_exists(self, *, tenant_id: int, employee_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM employees WHERE tenant_id=%s AND employee_code=%s",
                (int(tenant_id), employee_code),
            )
            return fetchone(cur) is not None

    def create(self, *, tenant_id: int, data: NewEmployee) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    tenant_id, employee_code, first_name, last_name, email, department, position,
                    hourly_rate, role, location_id, team_id, manager_id, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    int(tenant_id),
                    data.employee_code,
                    data.first_name,
                    data.last_name,
                    data.email,
                    data.department,
                    data.position,
                    data.hourly_rate,
                    data.role.value,
                    data.location_id,
                    data.team_id,
                    data.manager_id,
                ),
            )
            return int(cur.lastrowid)

    def set_active(self, *, tenant_id: int, employee_id: int, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=%s WHERE id=%s AND tenant_id=%s",
                (1 if active else 0, int(employee_id), int(tenant_id)),
            )
            return cur.rowcount > 0

    def first_admin(self, *, tenant_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM employees
                WHERE tenant_id=%s AND role=%s AND is_active=1
                ORDER BY id LIMIT 1
                """,
                (int(tenant_id), Role.ADMIN.value),
            )
            r = fetchone(cur)
            return row_to_employee(r) if r else None
