from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RotaStatus


@dataclass(frozen=True)
class Rota:
    """Named container of shift assignments for one week."""

    id: int
    tenant_id: int
    name: str
    week_start_date: date
    status: RotaStatus = RotaStatus.DRAFT
    created_by: Optional[int] = None
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    total_shifts: int = 0

    @property
    def is_published(self) -> bool:
        return self.status == RotaStatus.PUBLISHED
