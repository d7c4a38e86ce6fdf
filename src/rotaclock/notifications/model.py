from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    id: int
    tenant_id: int
    employee_id: int
    title: str
    message: str
    type: NotificationType
    action_url: Optional[str] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
