from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    id: int
    tenant_id: int
    employee_code: str
    first_name: str
    last_name: str
    role: Role
    hourly_rate: float = 0.0
    email: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    location_id: Optional[int] = None
    team_id: Optional[int] = None
    manager_id: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class NewEmployee:
    employee_code: str
    first_name: str
    last_name: str
    role: Role
    hourly_rate: float = 0.0
    email: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    location_id: Optional[int] = None
    team_id: Optional[int] = None
    manager_id: Optional[int] = None
