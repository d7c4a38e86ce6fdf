from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import AdjustmentKind, PayPeriodStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import PayPeriod, PayrollAdjustment
from .repository import PayPeriodRepository


def _row_to_period(r: dict[str, Any]) -> PayPeriod:
    return PayPeriod(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=PayPeriodStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLPayPeriodRepository(PayPeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, tenant_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pay_periods(tenant_id, start_date, end_date, status)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE id=LAST_INSERT_ID(id)
                """,
                (int(tenant_id), start_date, end_date, PayPeriodStatus.OPEN.value),
            )
            return int(cur.lastrowid)

    def get(self, *, tenant_id: int, period_id: int) -> Optional[PayPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, tenant_id, start_date, end_date, status, created_at FROM pay_periods WHERE id=%s AND tenant_id=%s",
                (int(period_id), int(tenant_id)),
            )
            r = fetchone(cur)
            return _row_to_period(r) if r else None

    def list_periods(self, *, tenant_id: int, status: Optional[PayPeriodStatus] = None) -> Sequence[PayPeriod]:
        clauses = ["tenant_id=%s"]
        params: list[object] = [int(tenant_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, tenant_id, start_date, end_date, status, created_at
                FROM pay_periods
                WHERE {where}
                ORDER BY start_date DESC
                """,
                tuple(params),
            )
            return [_row_to_period(r) for r in fetchall(cur)]

    def set_status(self, *, tenant_id: int, period_id: int, status: PayPeriodStatus) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE pay_periods SET status=%s WHERE id=%s AND tenant_id=%s",
                (status.value, int(period_id), int(tenant_id)),
            )

    def find_locked_covering(self, *, tenant_id: int, day: date) -> Optional[PayPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, tenant_id, start_date, end_date, status, created_at
                FROM pay_periods
                WHERE tenant_id=%s AND status=%s AND %s BETWEEN start_date AND end_date
                LIMIT 1
                """,
                (int(tenant_id), PayPeriodStatus.LOCKED.value, day),
            )
            r = fetchone(cur)
            return _row_to_period(r) if r else None

    def add_adjustment(
        self,
        *,
        tenant_id: int,
        pay_period_id: int,
        employee_id: int,
        kind: AdjustmentKind,
        amount: float,
        reason: str,
        category: Optional[str],
        applied_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_adjustments(
                    tenant_id, pay_period_id, employee_id, kind, category, amount, reason, applied_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(pay_period_id),
                    int(employee_id),
                    kind.value,
                    category,
                    float(amount),
                    reason,
                    int(applied_by),
                ),
            )
            return int(cur.lastrowid)

    def list_adjustments(
        self,
        *,
        tenant_id: int,
        pay_period_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[PayrollAdjustment]:
        clauses = ["pa.tenant_id=%s"]
        params: list[object] = [int(tenant_id)]
        if pay_period_id is not None:
            clauses.append("pa.pay_period_id=%s")
            params.append(int(pay_period_id))
        if start is not None and end is not None:
            clauses.append("pp.start_date<=%s AND pp.end_date>=%s")
            params.extend([end, start])
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT pa.id, pa.tenant_id, pa.pay_period_id, pa.employee_id, pa.kind, pa.category,
                       pa.amount, pa.reason, pa.applied_by, pa.created_at
                FROM payroll_adjustments pa
                JOIN pay_periods pp ON pp.id = pa.pay_period_id
                WHERE {where}
                ORDER BY pa.created_at, pa.id
                """,
                tuple(params),
            )
            return [
                PayrollAdjustment(
                    id=int(r["id"]),
                    tenant_id=int(r["tenant_id"]),
                    pay_period_id=int(r["pay_period_id"]),
                    employee_id=int(r["employee_id"]),
                    kind=AdjustmentKind(r["kind"]),
                    amount=as_float(r.get("amount")),
                    reason=r["reason"],
                    applied_by=int(r["applied_by"]),
                    category=r.get("category"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
