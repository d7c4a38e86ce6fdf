from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Location:
    id: int
    tenant_id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LocationUsage:
    """How many employees and manager links still point at a location."""

    employees: int = 0
    managers: int = 0

    @property
    def in_use(self) -> bool:
        return self.employees > 0 or self.managers > 0


@dataclass(frozen=True)
class ManagerLocation:
    id: int
    tenant_id: int
    manager_id: int
    location_id: int
    manager_name: Optional[str] = None
    location_name: Optional[str] = None
