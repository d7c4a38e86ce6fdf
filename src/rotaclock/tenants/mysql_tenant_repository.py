from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone
from .model import TenantSettings
from .repository import TenantRepository


class MySQLTenantRepository(TenantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_settings(self, *, tenant_id: int) -> TenantSettings:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tenant_id, allow_manager_approvals, emergency_mode, max_break_hours
                FROM tenant_settings
                WHERE tenant_id=%s
                """,
                (int(tenant_id),),
            )
            r = fetchone(cur)
            if not r:
                return TenantSettings(tenant_id=int(tenant_id))
            return TenantSettings(
                tenant_id=int(r["tenant_id"]),
                allow_manager_approvals=as_bool(r.get("allow_manager_approvals")),
                emergency_mode=as_bool(r.get("emergency_mode")),
                max_break_hours=as_float(r.get("max_break_hours"), 1.0),
            )

    def save_settings(self, settings: TenantSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tenant_settings(tenant_id, allow_manager_approvals, emergency_mode, max_break_hours)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    allow_manager_approvals=VALUES(allow_manager_approvals),
                    emergency_mode=VALUES(emergency_mode),
                    max_break_hours=VALUES(max_break_hours)
                """,
                (
                    int(settings.tenant_id),
                    1 if settings.allow_manager_approvals else 0,
                    1 if settings.emergency_mode else 0,
                    float(settings.max_break_hours),
                ),
            )

    def manager_location_ids(self, *, tenant_id: int, manager_id: int) -> list[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT location_id FROM manager_locations WHERE tenant_id=%s AND manager_id=%s",
                (int(tenant_id), int(manager_id)),
            )
            return [int(r["location_id"]) for r in fetchall(cur)]

    def tenant_exists(self, *, tenant_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM tenants WHERE id=%s", (int(tenant_id),))
            return fetchone(cur) is not None
