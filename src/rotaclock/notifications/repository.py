from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
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
        raise NotImplementedError

    def list_for_employee(self, *, tenant_id: int, employee_id: int, unread_only: bool = False, limit: int = 50) -> list[Notification]:
        raise NotImplementedError

    def mark_read(self, *, tenant_id: int, employee_id: int, notification_id: int) -> bool:
        raise NotImplementedError
