from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import NewSwapRequest, SwapRequest
from .repository import SwapRepository

_SELECT = """
    SELECT s.id, s.tenant_id, s.requester_id, s.target_id, s.original_assignment_id,
           s.requested_assignment_id, s.reason, s.status, s.manager_notes, s.approved_by,
           s.approved_at, s.created_at,
           CONCAT(req.first_name, ' ', req.last_name) AS requester_name,
           CONCAT(tgt.first_name, ' ', tgt.last_name) AS target_name,
           req.location_id AS requester_location_id, tgt.location_id AS target_location_id
    FROM shift_swap_requests s
    JOIN employees req ON req.id = s.requester_id
    JOIN employees tgt ON tgt.id = s.target_id
"""


def _row_to_swap(r: dict[str, Any]) -> SwapRequest:
    return SwapRequest(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        requester_id=int(r["requester_id"]),
        target_id=int(r["target_id"]),
        original_assignment_id=int(r["original_assignment_id"]),
        requested_assignment_id=int(r["requested_assignment_id"]),
        status=RequestStatus(r["status"]),
        reason=r.get("reason"),
        manager_notes=r.get("manager_notes"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        created_at=r.get("created_at"),
        requester_name=r.get("requester_name"),
        target_name=r.get("target_name"),
        requester_location_id=r.get("requester_location_id"),
        target_location_id=r.get("target_location_id"),
    )


class MySQLSwapRepository(SwapRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, tenant_id: int, data: NewSwapRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_swap_requests(
                    tenant_id, requester_id, target_id, original_assignment_id, requested_assignment_id, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(data.requester_id),
                    int(data.target_id),
                    int(data.original_assignment_id),
                    int(data.requested_assignment_id),
                    data.reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, tenant_id: int, request_id: int) -> Optional[SwapRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.id=%s AND s.tenant_id=%s", (int(request_id), int(tenant_id)))
            r = fetchone(cur)
            return _row_to_swap(r) if r else None

    def list_requests(
        self,
        *,
        tenant_id: int,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        location_ids: Optional[Sequence[int]] = None,
    ) -> list[SwapRequest]:
        clauses = ["s.tenant_id=%s"]
        params: list[object] = [int(tenant_id)]
        if employee_id is not None:
            clauses.append("(s.requester_id=%s OR s.target_id=%s)")
            params.extend([int(employee_id), int(employee_id)])
        if status is not None:
            clauses.append("s.status=%s")
            params.append(status.value)
        if location_ids is not None:
            if not location_ids:
                return []
            clauses.append(f"req.location_id IN ({in_clause(location_ids)})")
            params.extend(int(x) for x in location_ids)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY s.created_at DESC, s.id DESC", tuple(params))
            return [_row_to_swap(r) for r in fetchall(cur)]

    def pending_exists(self, *, tenant_id: int, data: NewSwapRequest) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found FROM shift_swap_requests
                WHERE tenant_id=%s AND requester_id=%s AND target_id=%s
                  AND original_assignment_id=%s AND requested_assignment_id=%s AND status=%s
                LIMIT 1
                """,
                (
                    int(tenant_id),
                    int(data.requester_id),
                    int(data.target_id),
                    int(data.original_assignment_id),
                    int(data.requested_assignment_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return fetchone(cur) is not None

    def decide(
        self,
        *,
        tenant_id: int,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        manager_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shift_swap_requests
                SET status=%s, approved_by=%s, approved_at=%s, manager_notes=%s
                WHERE id=%s AND tenant_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    manager_notes,
                    int(request_id),
                    int(tenant_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
