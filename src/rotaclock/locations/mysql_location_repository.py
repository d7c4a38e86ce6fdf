from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Location, LocationUsage, ManagerLocation
from .repository import LocationRepository

_COLUMNS = "id, tenant_id, name, description, is_active, created_at"

_LINK_SELECT = """
    SELECT ml.id, ml.tenant_id, ml.manager_id, ml.location_id,
           CONCAT(e.first_name, ' ', e.last_name) AS manager_name,
           l.name AS location_name
    FROM manager_locations ml
    JOIN employees e ON e.id = ml.manager_id AND e.tenant_id = ml.tenant_id
    JOIN locations l ON l.id = ml.location_id AND l.tenant_id = ml.tenant_id
"""


def _row_to_location(r: dict[str, Any]) -> Location:
    return Location(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        name=r["name"],
        description=r.get("description"),
        is_active=as_bool(r.get("is_active")),
        created_at=r.get("created_at"),
    )


def _row_to_link(r: dict[str, Any]) -> ManagerLocation:
    return ManagerLocation(
        id=int(r["id"]),
        tenant_id=int(r["tenant_id"]),
        manager_id=int(r["manager_id"]),
        location_id=int(r["location_id"]),
        manager_name=r.get("manager_name"),
        location_name=r.get("location_name"),
    )


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_locations(self, *, tenant_id: int, active: Optional[bool] = True) -> Sequence[Location]:
        sql = f"SELECT {_COLUMNS} FROM locations WHERE tenant_id=%s"
        params: list[Any] = [int(tenant_id)]
        if active is not None:
            sql += " AND is_active=%s"
            params.append(1 if active else 0)
        sql += " ORDER BY name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_location(r) for r in fetchall(cur)]

    def get(self, *, tenant_id: int, location_id: int) -> Optional[Location]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM locations WHERE id=%s AND tenant_id=%s",
                (int(location_id), int(tenant_id)),
            )
            r = fetchone(cur)
            return _row_to_location(r) if r else None

    def create(self, *, tenant_id: int, name: str, description: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO locations(tenant_id, name, description) VALUES(%s,%s,%s)",
                (int(tenant_id), name, description),
            )
            return int(cur.lastrowid)

    def update(
        self, *, tenant_id: int, location_id: int, name: str, description: Optional[str], is_active: bool
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE locations SET name=%s, description=%s, is_active=%s WHERE id=%s AND tenant_id=%s",
                (name, description, 1 if is_active else 0, int(location_id), int(tenant_id)),
            )
            return cur.rowcount > 0

    def usage(self, *, tenant_id: int, location_id: int) -> LocationUsage:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    (SELECT COUNT(*) FROM employees WHERE tenant_id=%s AND location_id=%s) AS employee_count,
                    (SELECT COUNT(*) FROM manager_locations WHERE tenant_id=%s AND location_id=%s) AS manager_count
                """,
                (int(tenant_id), int(location_id), int(tenant_id), int(location_id)),
            )
            r = fetchone(cur) or {}
            return LocationUsage(
                employees=int(r.get("employee_count") or 0),
                managers=int(r.get("manager_count") or 0),
            )

    def delete(self, *, tenant_id: int, location_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM locations WHERE id=%s AND tenant_id=%s",
                (int(location_id), int(tenant_id)),
            )
            return cur.rowcount > 0

    def list_manager_locations(
        self, *, tenant_id: int, manager_id: Optional[int] = None
    ) -> Sequence[ManagerLocation]:
        sql = _LINK_SELECT + " WHERE ml.tenant_id=%s"
        params: list[Any] = [int(tenant_id)]
        if manager_id is not None:
            sql += " AND ml.manager_id=%s"
            params.append(int(manager_id))
        sql += " ORDER BY manager_name, location_name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_link(r) for r in fetchall(cur)]

    def get_manager_location(self, *, tenant_id: int, link_id: int) -> Optional[ManagerLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_LINK_SELECT + " WHERE ml.id=%s AND ml.tenant_id=%s", (int(link_id), int(tenant_id)))
            r = fetchone(cur)
            return _row_to_link(r) if r else None

    def assign_manager(self, *, tenant_id: int, manager_id: int, location_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO manager_locations(tenant_id, manager_id, location_id) VALUES(%s,%s,%s)",
                (int(tenant_id), int(manager_id), int(location_id)),
            )

    def unassign_manager(self, *, tenant_id: int, link_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM manager_locations WHERE id=%s AND tenant_id=%s",
                (int(link_id), int(tenant_id)),
            )
            return cur.rowcount > 0
