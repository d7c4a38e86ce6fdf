from __future__ import annotations

from typing import Optional

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        tenant_id: int,
        employee_id: int,
        title: str,
        message: str,
        type: NotificationType,
        action_url: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(tenant_id, employee_id, title, message, type, action_url)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(tenant_id), int(employee_id), title, message, type.value, action_url),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, *, tenant_id: int, employee_id: int, unread_only: bool = False, limit: int = 50) -> list[Notification]:
        unread = " AND is_read=0" if unread_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, tenant_id, employee_id, title, message, type, action_url, is_read, created_at
                FROM notifications
                WHERE tenant_id=%s AND employee_id=%s{unread}
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (int(tenant_id), int(employee_id), int(limit)),
            )
            return [
                Notification(
                    id=int(r["id"]),
                    tenant_id=int(r["tenant_id"]),
                    employee_id=int(r["employee_id"]),
                    title=r["title"],
                    message=r["message"],
                    type=NotificationType(r["type"]),
                    action_url=r.get("action_url"),
                    is_read=as_bool(r.get("is_read")),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def mark_read(self, *, tenant_id: int, employee_id: int, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE id=%s AND tenant_id=%s AND employee_id=%s",
                (int(notification_id), int(tenant_id), int(employee_id)),
            )
            return cur.rowcount > 0
