from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT lr.id, lr.tenant_id, lr.employee_id, lr.type, lr.start_date, lr.end_date, lr.days_requested,
           lr.reason, lr.status, lr.approved_by, lr.approved_at, lr.admin_notes, lr.rejection_reason,
           lr.created_at, CONCAT(e.first_name, ' ', e.last_name) AS employee_name,
           e.location_id AS employee_location_id
    FROM leave_requests lr
    JOIN employees e ON e.id = lr.employee_id
"""


def _row_to_leave(r: dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        employee_id=int(r["employee_id"]),
        type=LeaveType(r["type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days_requested=as_float(r.get("days_requested")),
        status=RequestStatus(r["status"]),
        reason=r.get("reason"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        admin_notes=r.get("admin_notes"),
        rejection_reason=r.get("rejection_reason"),
        created_at=r.get("created_at"),
        employee_name=r.get("employee_name"),
        employee_location_id=r.get("employee_location_id"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, tenant_id: int, data: NewLeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(tenant_id, employee_id, type, start_date, end_date, days_requested, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(data.employee_id),
                    data.type.value,
                    data.start_date,
                    data.end_date,
                    float(data.days_requested),
                    data.reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, tenant_id: int, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE lr.id=%s AND lr.tenant_id=%s", (int(request_id), int(tenant_id)))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list_requests(
        self,
        *,
        tenant_id: int,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        type: Optional[LeaveType] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        location_ids: Optional[Sequence[int]] = None,
    ) -> list[LeaveRequest]:
        clauses = ["lr.tenant_id=%s"]
        params: list[object] = [int(tenant_id)]

        if employee_id is not None:
            clauses.append("lr.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("lr.status=%s")
            params.append(status.value)
        if type is not None:
            clauses.append("lr.type=%s")
            params.append(type.value)
        if start is not None:
            clauses.append("lr.end_date>=%s")
            params.append(start)
        if end is not None:
            clauses.append("lr.start_date<=%s")
            params.append(end)
        if location_ids is not None:
            if not location_ids:
                return []
            clauses.append(f"e.location_id IN ({in_clause(location_ids)})")
            params.extend(int(x) for x in location_ids)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY lr.created_at DESC, lr.id DESC", tuple(params))
            return [_row_to_leave(r) for r in fetchall(cur)]

    def has_overlap(self, *, tenant_id: int, employee_id: int, start: date, end: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found FROM leave_requests
                WHERE tenant_id=%s AND employee_id=%s AND status IN (%s,%s)
                  AND start_date<=%s AND end_date>=%s
                LIMIT 1
                """,
                (
                    int(tenant_id),
                    int(employee_id),
                    RequestStatus.PENDING.value,
                    RequestStatus.APPROVED.value,
                    end,
                    start,
                ),
            )
            return fetchone(cur) is not None

    def decide(
        self,
        *,
        tenant_id: int,
        request_id: int,
        status: RequestStatus,
        decided_by: Optional[int],
        decided_at: datetime,
        admin_notes: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s, admin_notes=%s, rejection_reason=%s
                WHERE id=%s AND tenant_id=%s AND status=%s
                """,
                (
                    status.value,
                    decided_by,
                    decided_at,
                    admin_notes,
                    rejection_reason,
                    int(request_id),
                    int(tenant_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
