from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import AssignmentStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import NewAssignment, PublishSelection, ShiftAssignment
from .repository import AssignmentRepository

_SELECT = """
    SELECT sa.id, sa.tenant_id, sa.employee_id, sa.template_id, sa.rota_id, sa.date, sa.status,
           sa.is_published, sa.notes, sa.override_name, sa.override_start_time, sa.override_end_time,
           sa.override_color, sa.cancellation_reason, sa.assigned_by, sa.created_at,
           st.name AS template_name, st.start_time AS template_start_time,
           st.end_time AS template_end_time, st.color AS template_color,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name, e.location_id AS employee_location_id,
           r.status AS rota_status
    FROM shift_assignments sa
    JOIN employees e ON e.id = sa.employee_id
    LEFT JOIN shift_templates st ON st.id = sa.template_id
    LEFT JOIN rotas r ON r.id = sa.rota_id
"""

_UPDATABLE = {
    "template_id",
    "date",
    "status",
    "notes",
    "override_name",
    "override_start_time",
    "override_end_time",
    "override_color",
    "cancellation_reason",
    "employee_id",
    "rota_id",
}


def _row_to_assignment(r: dict[str, Any]) -> ShiftAssignment:
    return ShiftAssignment(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        employee_id=int(r["employee_id"]),
        template_id=int(r["template_id"]),
        rota_id=r.get("rota_id"),
        date=r["date"],
        status=AssignmentStatus(r["status"]),
        is_published=as_bool(r.get("is_published")),
        notes=r.get("notes"),
        override_name=r.get("override_name"),
        override_start_time=normalize_mysql_time(r.get("override_start_time")),
        override_end_time=normalize_mysql_time(r.get("override_end_time")),
        override_color=r.get("override_color"),
        cancellation_reason=r.get("cancellation_reason"),
        assigned_by=r.get("assigned_by"),
        created_at=r.get("created_at"),
        template_name=r.get("template_name"),
        template_start_time=normalize_mysql_time(r.get("template_start_time")),
        template_end_time=normalize_mysql_time(r.get("template_end_time")),
        template_color=r.get("template_color"),
        employee_name=r.get("employee_name"),
        employee_location_id=r.get("employee_location_id"),
        rota_status=r.get("rota_status"),
    )


def _selection_where(tenant_id: int, selection: PublishSelection) -> tuple[str, list[object]]:
    clauses = ["sa.tenant_id=%s", "sa.is_published=0"]
    params: list[object] = [int(tenant_id)]
    if selection.is_by_ids:
        clauses.append(f"sa.id IN ({in_clause(selection.shift_ids)})")
        params.extend(selection.shift_ids)
    elif selection.is_by_range:
        clauses.append("sa.date BETWEEN %s AND %s")
        params.extend([selection.start_date, selection.end_date])
    elif selection.rota_id is None:
        raise ValueError("PublishSelection needs shift_ids, a date range or a rota")
    if selection.rota_id is not None and not selection.is_by_ids:
        clauses.append("sa.rota_id=%s")
        params.append(int(selection.rota_id))
    if selection.location_ids:
        clauses.append(f"e.location_id IN ({in_clause(selection.location_ids)})")
        params.extend(int(x) for x in selection.location_ids)
    return " AND ".join(clauses), params


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, tenant_id: int, assignment_id: int) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE sa.id=%s AND sa.tenant_id=%s", (int(assignment_id), int(tenant_id)))
            r = fetchone(cur)
            return _row_to_assignment(r) if r else None

    def create(self, *, tenant_id: int, data: NewAssignment) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_assignments(
                    tenant_id, employee_id, template_id, rota_id, date, status, is_published, notes,
                    override_name, override_start_time, override_end_time, override_color, assigned_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,0,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(data.employee_id),
                    int(data.template_id),
                    data.rota_id,
                    data.date,
                    AssignmentStatus.ASSIGNED.value,
                    data.notes,
                    data.override_name,
                    data.override_start_time,
                    data.override_end_time,
                    data.override_color,
                    data.assigned_by,
                ),
            )
            return int(cur.lastrowid)

    def update_fields(self, *, tenant_id: int, assignment_id: int, changes: dict[str, Any]) -> None:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update assignment columns: {sorted(unknown)}")
        if not changes:
            return
        sets = ", ".join(f"{col}=%s" for col in changes)
        values = [v.value if isinstance(v, AssignmentStatus) else v for v in changes.values()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE shift_assignments SET {sets} WHERE id=%s AND tenant_id=%s",
                tuple(values + [int(assignment_id), int(tenant_id)]),
            )

    def delete(self, *, tenant_id: int, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM shift_assignments WHERE id=%s AND tenant_id=%s",
                (int(assignment_id), int(tenant_id)),
            )
            return cur.rowcount > 0

    def list_between(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        employee_ids: Optional[Sequence[int]] = None,
        rota_id: Optional[int] = None,
        published: Optional[bool] = None,
        include_cancelled: bool = True,
    ) -> list[ShiftAssignment]:
        clauses = ["sa.tenant_id=%s", "sa.date BETWEEN %s AND %s"]
        params: list[object] = [int(tenant_id), start, end]

        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"sa.employee_id IN ({in_clause(employee_ids)})")
            params.extend(int(x) for x in employee_ids)
        if rota_id is not None:
            clauses.append("sa.rota_id=%s")
            params.append(int(rota_id))
        if published is not None:
            clauses.append("sa.is_published=%s")
            params.append(1 if published else 0)
        if not include_cancelled:
            clauses.append("sa.status<>%s")
            params.append(AssignmentStatus.CANCELLED.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY sa.date, st.start_time, sa.id",
                tuple(params),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def list_drafts(
        self,
        *,
        tenant_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        rota_id: Optional[int] = None,
    ) -> list[ShiftAssignment]:
        clauses = ["sa.tenant_id=%s", "sa.is_published=0"]
        params: list[object] = [int(tenant_id)]
        if start is not None:
            clauses.append("sa.date>=%s")
            params.append(start)
        if end is not None:
            clauses.append("sa.date<=%s")
            params.append(end)
        if rota_id is not None:
            clauses.append("sa.rota_id=%s")
            params.append(int(rota_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY sa.date, sa.id", tuple(params))
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def publish(self, *, tenant_id: int, selection: PublishSelection) -> list[ShiftAssignment]:
        if selection.location_ids is not None and not selection.location_ids:
            return []
        where, params = _selection_where(tenant_id, selection)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY sa.date, sa.id FOR UPDATE", tuple(params))
            rows = [_row_to_assignment(r) for r in fetchall(cur)]
            if not rows:
                return []
            ids = [r.id for r in rows]
            cur.execute(
                f"""
                UPDATE shift_assignments
                SET is_published=1
                WHERE tenant_id=%s AND is_published=0 AND id IN ({in_clause(ids)})
                """,
                tuple([int(tenant_id)] + ids),
            )
            return [replace(r, is_published=True) for r in rows]

    def cancel_for_employee(self, *, tenant_id: int, employee_id: int, start: date, end: date, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shift_assignments
                SET status=%s, cancellation_reason=%s
                WHERE tenant_id=%s AND employee_id=%s AND date BETWEEN %s AND %s AND status<>%s
                """,
                (
                    AssignmentStatus.CANCELLED.value,
                    reason,
                    int(tenant_id),
                    int(employee_id),
                    start,
                    end,
                    AssignmentStatus.CANCELLED.value,
                ),
            )
            return int(cur.rowcount)

    def exchange_employees(self, *, tenant_id: int, first_id: int, second_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, employee_id FROM shift_assignments WHERE tenant_id=%s AND id IN (%s,%s) FOR UPDATE",
                (int(tenant_id), int(first_id), int(second_id)),
            )
            owners = {int(r["id"]): int(r["employee_id"]) for r in fetchall(cur)}
            if len(owners) != 2:
                raise NotFoundError("Shift assignment not found")
            for assignment_id, other_id in ((int(first_id), int(second_id)), (int(second_id), int(first_id))):
                cur.execute(
                    "UPDATE shift_assignments SET employee_id=%s, status=%s WHERE id=%s AND tenant_id=%s",
                    (owners[other_id], AssignmentStatus.SWAPPED.value, assignment_id, int(tenant_id)),
                )
