from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class ApiUser:
    """The authenticated caller of an API request.

    ``location_scope`` is None for unrestricted callers (admins); managers get
    the tuple of location ids they manage.
    """

    employee_id: int
    tenant_id: int
    role: Role
    employee_code: str
    location_id: Optional[int] = None
    location_scope: Optional[tuple[int, ...]] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    def can_see_location(self, location_id: Optional[int]) -> bool:
        if self.location_scope is None:
            return True
        return location_id is not None and location_id in self.location_scope


@dataclass(frozen=True)
class TenantSettings:
    tenant_id: int
    allow_manager_approvals: bool = False
    emergency_mode: bool = False
    max_break_hours: float = 1.0
