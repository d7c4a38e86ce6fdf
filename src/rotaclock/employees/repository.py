from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee, NewEmployee


class EmployeeRepository(Protocol):
    def get(self, *, tenant_id: int, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_active_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_active_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_employees(
        self,
        *,
        tenant_id: int,
        roles: Optional[Sequence[Role]] = None,
        department: Optional[str] = None,
        location_ids: Optional[Sequence[int]] = None,
        active: Optional[bool] = True,
    ) -> list[Employee]:
        raise NotImplementedError

    def code_exists(self, *, tenant_id: int, employee_code: str) -> bool:
        raise NotImplementedError

    def create(self, *, tenant_id: int, data: NewEmployee) -> int:
        raise NotImplementedError

    def set_active(self, *, tenant_id: int, employee_id: int, active: bool) -> bool:
        raise NotImplementedError

    def first_admin(self, *, tenant_id: int) -> Optional[Employee]:
        raise NotImplementedError
