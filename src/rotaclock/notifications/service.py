from __future__ import annotations

from typing import Iterable, Optional

import structlog

from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError
from ..tenants.model import ApiUser
from .model import Notification
from .repository import NotificationRepository

logger = structlog.get_logger("rotaclock.notifications")


class NotificationService:
    """Fire-and-forget notification dispatch.

    A failed insert never fails the action that triggered it: the error is
    logged and ``notify`` returns False.
    """

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        *,
        tenant_id: int,
        employee_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        action_url: Optional[str] = None,
    ) -> bool:
        try:
            self._notifications.create(
                tenant_id=tenant_id,
                employee_id=employee_id,
                title=title,
                message=message,
                type=type,
                action_url=action_url,
            )
        except Exception as exc:
            logger.warning("notification_failed", employee_id=employee_id, title=title, error=str(exc))
            return False
        return True

    def notify_many(
        self,
        *,
        tenant_id: int,
        employee_ids: Iterable[int],
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        action_url: Optional[str] = None,
    ) -> int:
        sent = 0
        for employee_id in employee_ids:
            if self.notify(
                tenant_id=tenant_id,
                employee_id=employee_id,
                title=title,
                message=message,
                type=type,
                action_url=action_url,
            ):
                sent += 1
        return sent

    def list_mine(self, *, actor: ApiUser, unread_only: bool = False) -> list[Notification]:
        return self._notifications.list_for_employee(
            tenant_id=actor.tenant_id, employee_id=actor.employee_id, unread_only=unread_only
        )

    def mark_read(self, *, actor: ApiUser, notification_id: int) -> None:
        if not self._notifications.mark_read(
            tenant_id=actor.tenant_id, employee_id=actor.employee_id, notification_id=int(notification_id)
        ):
            raise NotFoundError("Notification not found")
