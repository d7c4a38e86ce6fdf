from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import ApprovalAction, ApprovalStatus, TimeEntryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_float,
    as_optional_float,
    db_cursor,
    fetchall,
    fetchone,
    in_clause,
    normalize_mysql_time,
)
from .model import TimeEntry
from .repository import TimeEntryRepository

_SELECT = """
    SELECT te.id, te.tenant_id, te.employee_id, te.assignment_id, te.clock_in, te.clock_out,
           te.break_hours, te.break_start, te.total_hours, te.status, te.approval_status,
           te.approved_by, te.approved_at, te.approved_hours, te.approved_rate, te.total_pay,
           te.admin_notes, te.rejection_reason, te.notes, te.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name, e.employee_code,
           e.location_id AS employee_location_id, e.hourly_rate,
           sa.date AS shift_date,
           COALESCE(sa.override_name, st.name) AS shift_name,
           COALESCE(sa.override_start_time, st.start_time) AS scheduled_start,
           COALESCE(sa.override_end_time, st.end_time) AS scheduled_end
    FROM time_entries te
    JOIN employees e ON e.id = te.employee_id
    LEFT JOIN shift_assignments sa ON sa.id = te.assignment_id
    LEFT JOIN shift_templates st ON st.id = sa.template_id
"""

_UPDATABLE = {
    "clock_in",
    "clock_out",
    "break_hours",
    "break_start",
    "total_hours",
    "status",
    "approval_status",
    "approved_by",
    "approved_at",
    "approved_hours",
    "approved_rate",
    "total_pay",
    "admin_notes",
    "rejection_reason",
    "notes",
}


def _row_to_entry(r: dict[str, Any]) -> TimeEntry:
    return TimeEntry(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        employee_id=int(r["employee_id"]),
        assignment_id=r.get("assignment_id"),
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        break_hours=as_float(r.get("break_hours")),
        break_start=r.get("break_start"),
        total_hours=as_optional_float(r.get("total_hours")),
        status=TimeEntryStatus(r["status"]),
        approval_status=ApprovalStatus(r["approval_status"]),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        approved_hours=as_optional_float(r.get("approved_hours")),
        approved_rate=as_optional_float(r.get("approved_rate")),
        total_pay=as_optional_float(r.get("total_pay")),
        admin_notes=r.get("admin_notes"),
        rejection_reason=r.get("rejection_reason"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        employee_name=r.get("employee_name"),
        employee_code=r.get("employee_code"),
        employee_location_id=r.get("employee_location_id"),
        hourly_rate=as_optional_float(r.get("hourly_rate")),
        shift_date=r.get("shift_date"),
        shift_name=r.get("shift_name"),
        scheduled_start=normalize_mysql_time(r.get("scheduled_start")),
        scheduled_end=normalize_mysql_time(r.get("scheduled_end")),
    )


def _filters(
    tenant_id: int,
    *,
    approval_status: Optional[ApprovalStatus] = None,
    location_ids: Optional[Sequence[int]] = None,
    employee_id: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    completed_only: bool = False,
) -> Optional[tuple[str, list[object]]]:
    clauses = ["te.tenant_id=%s"]
    params: list[object] = [int(tenant_id)]
    if approval_status is not None:
        clauses.append("te.approval_status=%s")
        params.append(approval_status.value)
    if location_ids is not None:
        if not location_ids:
            return None
        clauses.append(f"e.location_id IN ({in_clause(location_ids)})")
        params.extend(int(x) for x in location_ids)
    if employee_id is not None:
        clauses.append("te.employee_id=%s")
        params.append(int(employee_id))
    if start is not None:
        clauses.append("DATE(COALESCE(te.clock_in, te.created_at))>=%s")
        params.append(start)
    if end is not None:
        clauses.append("DATE(COALESCE(te.clock_in, te.created_at))<=%s")
        params.append(end)
    if completed_only:
        clauses.append("te.status=%s")
        params.append(TimeEntryStatus.COMPLETED.value)
    return " AND ".join(clauses), params


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, tenant_id: int, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE te.id=%s AND te.tenant_id=%s", (int(entry_id), int(tenant_id)))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def get_open(self, *, tenant_id: int, employee_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE te.tenant_id=%s AND te.employee_id=%s AND te.status IN (%s,%s)
                ORDER BY te.clock_in DESC LIMIT 1
                """,
                (
                    int(tenant_id),
                    int(employee_id),
                    TimeEntryStatus.IN_PROGRESS.value,
                    TimeEntryStatus.BREAK.value,
                ),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def create_clock_in(self, *, tenant_id: int, employee_id: int, assignment_id: Optional[int], clock_in: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(tenant_id, employee_id, assignment_id, clock_in, status, approval_status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(employee_id),
                    assignment_id,
                    clock_in,
                    TimeEntryStatus.IN_PROGRESS.value,
                    ApprovalStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def update_fields(self, *, tenant_id: int, entry_id: int, changes: dict[str, Any]) -> None:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update time entry columns: {sorted(unknown)}")
        if not changes:
            return
        sets = ", ".join(f"{col}=%s" for col in changes)
        values = [v.value if isinstance(v, (ApprovalStatus, TimeEntryStatus)) else v for v in changes.values()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE time_entries SET {sets} WHERE id=%s AND tenant_id=%s",
                tuple(values + [int(entry_id), int(tenant_id)]),
            )

    def list_entries(
        self,
        *,
        tenant_id: int,
        approval_status: Optional[ApprovalStatus] = None,
        location_ids: Optional[Sequence[int]] = None,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        completed_only: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[TimeEntry]:
        built = _filters(
            tenant_id,
            approval_status=approval_status,
            location_ids=location_ids,
            employee_id=employee_id,
            start=start,
            end=end,
            completed_only=completed_only,
        )
        if built is None:
            return []
        where, params = built
        paging = ""
        if limit is not None:
            paging = " LIMIT %s OFFSET %s"
            params = params + [int(limit), int(offset)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY te.clock_in DESC, te.id DESC{paging}",
                tuple(params),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def count_entries(
        self,
        *,
        tenant_id: int,
        approval_status: Optional[ApprovalStatus] = None,
        location_ids: Optional[Sequence[int]] = None,
        completed_only: bool = False,
    ) -> int:
        built = _filters(
            tenant_id, approval_status=approval_status, location_ids=location_ids, completed_only=completed_only
        )
        if built is None:
            return 0
        where, params = built
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM time_entries te
                JOIN employees e ON e.id = te.employee_id
                WHERE {where}
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def approval_stats(self, *, tenant_id: int, location_ids: Optional[Sequence[int]] = None) -> dict[str, float]:
        built = _filters(tenant_id, location_ids=location_ids, completed_only=True)
        empty = {"pending": 0, "approved": 0, "rejected": 0, "pending_hours": 0.0, "approved_hours": 0.0}
        if built is None:
            return empty
        where, params = built
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    SUM(te.approval_status='pending') AS pending,
                    SUM(te.approval_status IN ('approved','edited')) AS approved,
                    SUM(te.approval_status='rejected') AS rejected,
                    SUM(CASE WHEN te.approval_status='pending' THEN COALESCE(te.total_hours,0) ELSE 0 END) AS pending_hours,
                    SUM(CASE WHEN te.approval_status IN ('approved','edited')
                             THEN COALESCE(te.approved_hours, te.total_hours, 0) ELSE 0 END) AS approved_hours
                FROM time_entries te
                JOIN employees e ON e.id = te.employee_id
                WHERE {where}
                """,
                tuple(params),
            )
            r = fetchone(cur)
            if not r:
                return empty
            return {
                "pending": int(r.get("pending") or 0),
                "approved": int(r.get("approved") or 0),
                "rejected": int(r.get("rejected") or 0),
                "pending_hours": round(as_float(r.get("pending_hours")), 2),
                "approved_hours": round(as_float(r.get("approved_hours")), 2),
            }

    def record_approval(
        self,
        *,
        tenant_id: int,
        entry_id: int,
        action: ApprovalAction,
        decided_by: int,
        approved_hours: Optional[float],
        approved_rate: Optional[float],
        total_pay: Optional[float],
        notes: Optional[str],
        rejection_reason: Optional[str],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entry_approvals(
                    tenant_id, time_entry_id, action, decided_by, approved_hours, approved_rate,
                    total_pay, notes, rejection_reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(entry_id),
                    action.value,
                    int(decided_by),
                    approved_hours,
                    approved_rate,
                    total_pay,
                    notes,
                    rejection_reason,
                ),
            )

    def write_audit(self, *, tenant_id: int, entry_id: int, changed_by: int, changes: dict[str, Any]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timesheet_audit_logs(tenant_id, time_entry_id, changed_by, changes)
                VALUES(%s,%s,%s,%s)
                """,
                (int(tenant_id), int(entry_id), int(changed_by), json.dumps(changes, default=str)),
            )

    def bulk_approve(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        approved_by: int,
        approved_at: datetime,
        location_ids: Optional[Sequence[int]] = None,
    ) -> int:
        clauses = [
            "te.tenant_id=%s",
            "te.approval_status=%s",
            "te.status=%s",
            "te.clock_in IS NOT NULL",
            "te.clock_out IS NOT NULL",
            "DATE(te.created_at) BETWEEN %s AND %s",
        ]
        params: list[object] = [
            int(tenant_id),
            ApprovalStatus.PENDING.value,
            TimeEntryStatus.COMPLETED.value,
            start,
            end,
        ]
        if location_ids is not None:
            if not location_ids:
                return 0
            clauses.append(f"e.location_id IN ({in_clause(location_ids)})")
            params.extend(int(x) for x in location_ids)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE time_entries te
                JOIN employees e ON e.id = te.employee_id
                SET te.approval_status=%s, te.approved_by=%s, te.approved_at=%s,
                    te.approved_hours=te.total_hours, te.approved_rate=e.hourly_rate,
                    te.total_pay=ROUND(COALESCE(te.total_hours,0) * e.hourly_rate, 2)
                WHERE {where}
                """,
                tuple([ApprovalStatus.APPROVED.value, int(approved_by), approved_at] + params),
            )
            return int(cur.rowcount)

    def live_counts(self, *, tenant_id: int, day: date, location_ids: Optional[Sequence[int]] = None) -> dict[str, int]:
        built = _filters(tenant_id, location_ids=location_ids)
        empty = {"clocked_in": 0, "on_break": 0, "completed_today": 0, "pending_approvals": 0}
        if built is None:
            return empty
        where, params = built
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    SUM(te.status='in-progress') AS clocked_in,
                    SUM(te.status='break') AS on_break,
                    SUM(te.status='completed' AND DATE(te.clock_out)=%s) AS completed_today,
                    SUM(te.status='completed' AND te.approval_status='pending') AS pending_approvals
                FROM time_entries te
                JOIN employees e ON e.id = te.employee_id
                WHERE {where}
                """,
                tuple([day] + params),
            )
            r = fetchone(cur) or {}
            return {key: int(r.get(key) or 0) for key in empty}
