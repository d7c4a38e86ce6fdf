from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import window_hours


@dataclass(frozen=True)
class ShiftTemplate:
    """Reusable shift definition (name, time window, colour)."""

    id: int
    tenant_id: int
    name: str
    start_time: time
    end_time: time
    color: str = "#3B82F6"
    department: Optional[str] = None
    required_staff: int = 1
    hourly_rate: Optional[float] = None
    is_active: bool = True

    @property
    def duration_hours(self) -> float:
        return window_hours(self.start_time, self.end_time)


@dataclass(frozen=True)
class TemplateFields:
    name: str
    start_time: time
    end_time: time
    color: str = "#3B82F6"
    department: Optional[str] = None
    required_staff: int = 1
    hourly_rate: Optional[float] = None
