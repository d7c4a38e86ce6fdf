from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import RotaStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Rota
from .repository import RotaRepository

_SELECT = """
    SELECT r.id, r.tenant_id, r.name, r.week_start_date, r.status, r.created_by,
           r.published_at, r.created_at, COUNT(sa.id) AS total_shifts
    FROM rotas r
    LEFT JOIN shift_assignments sa ON sa.rota_id = r.id AND sa.tenant_id = r.tenant_id
"""


def _row_to_rota(r: dict[str, Any]) -> Rota:
    return Rota(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        name=r["name"],
        week_start_date=r["week_start_date"],
        status=RotaStatus(r["status"]),
        created_by=r.get("created_by"),
        published_at=r.get("published_at"),
        created_at=r.get("created_at"),
        total_shifts=int(r.get("total_shifts") or 0),
    )


class MySQLRotaRepository(RotaRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, tenant_id: int, name: str, week_start_date: date, created_by: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO rotas(tenant_id, name, week_start_date, status, created_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(tenant_id), name, week_start_date, RotaStatus.DRAFT.value, created_by),
            )
            return int(cur.lastrowid)

    def get(self, *, tenant_id: int, rota_id: int) -> Optional[Rota]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE r.id=%s AND r.tenant_id=%s GROUP BY r.id",
                (int(rota_id), int(tenant_id)),
            )
            r = fetchone(cur)
            return _row_to_rota(r) if r else None

    def list_between(self, *, tenant_id: int, start: date, end: date) -> Sequence[Rota]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE r.tenant_id=%s AND r.week_start_date BETWEEN %s AND %s
                GROUP BY r.id
                ORDER BY r.created_at DESC, r.id DESC
                """,
                (int(tenant_id), start, end),
            )
            return [_row_to_rota(r) for r in fetchall(cur)]

    def set_status(self, *, tenant_id: int, rota_id: int, status: RotaStatus, published_at: Optional[datetime]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE rotas SET status=%s, published_at=%s WHERE id=%s AND tenant_id=%s",
                (status.value, published_at, int(rota_id), int(tenant_id)),
            )
