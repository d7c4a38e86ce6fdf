from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_optional_float, db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ShiftTemplate, TemplateFields
from .repository import ShiftTemplateRepository

_COLUMNS = "id, tenant_id, name, start_time, end_time, color, department, required_staff, hourly_rate, is_active"


def _row_to_template(r: dict[str, Any]) -> ShiftTemplate:
    return ShiftTemplate(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        name=r["name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        color=r.get("color") or "#3B82F6",
        department=r.get("department"),
        required_staff=int(r.get("required_staff") or 1),
        hourly_rate=as_optional_float(r.get("hourly_rate")),
        is_active=as_bool(r.get("is_active")),
    )


class MySQLShiftTemplateRepository(ShiftTemplateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, *, tenant_id: int) -> Sequence[ShiftTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shift_templates
                WHERE tenant_id=%s AND is_active=1
                ORDER BY start_time, name
                """,
                (int(tenant_id),),
            )
            return [_row_to_template(r) for r in fetchall(cur)]

    def get_by_id(self, *, tenant_id: int, template_id: int) -> Optional[ShiftTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shift_templates WHERE id=%s AND tenant_id=%s",
                (int(template_id), int(tenant_id)),
            )
            r = fetchone(cur)
            return _row_to_template(r) if r else None

    def find_by_name(self, *, tenant_id: int, name: str) -> Optional[ShiftTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shift_templates WHERE tenant_id=%s AND name=%s ORDER BY id LIMIT 1",
                (int(tenant_id), name),
            )
            r = fetchone(cur)
            return _row_to_template(r) if r else None

    def create(self, *, tenant_id: int, fields: TemplateFields, created_by: Optional[int] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_templates(
                    tenant_id, name, start_time, end_time, color, department, required_staff, hourly_rate, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    fields.name,
                    fields.start_time,
                    fields.end_time,
                    fields.color,
                    fields.department,
                    int(fields.required_staff),
                    fields.hourly_rate,
                    created_by,
                ),
            )
            return int(cur.lastrowid)

    def update(self, *, tenant_id: int, template_id: int, fields: TemplateFields) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shift_templates
                SET name=%s, start_time=%s, end_time=%s, color=%s, department=%s,
                    required_staff=%s, hourly_rate=%s
                WHERE id=%s AND tenant_id=%s
                """,
                (
                    fields.name,
                    fields.start_time,
                    fields.end_time,
                    fields.color,
                    fields.department,
                    int(fields.required_staff),
                    fields.hourly_rate,
                    int(template_id),
                    int(tenant_id),
                ),
            )
            return cur.rowcount > 0

    def set_active(self, *, tenant_id: int, template_id: int, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE shift_templates SET is_active=%s WHERE id=%s AND tenant_id=%s",
                (1 if active else 0, int(template_id), int(tenant_id)),
            )
            return cur.rowcount > 0
