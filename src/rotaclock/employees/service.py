from __future__ import annotations

from typing import Optional

import structlog

from ..common.validators import optional_text, require_non_empty, require_non_negative
from ..core.enums import Role, SCHEDULABLE_ROLES
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError
from ..tenants.model import ApiUser
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

logger = structlog.get_logger("rotaclock.employees")


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(
        self,
        *,
        actor: ApiUser,
        department: Optional[str] = None,
        role: Optional[Role] = None,
        include_inactive: bool = False,
    ) -> list[Employee]:
        return self._employees.list_employees(
            tenant_id=actor.tenant_id,
            roles=[role] if role else None,
            department=department,
            location_ids=None if actor.is_admin else list(actor.location_scope or ()),
            active=None if include_inactive else True,
        )

    def list_schedulable(self, *, actor: ApiUser, employee_id: Optional[int] = None) -> list[Employee]:
        """Agents and employees visible on the scheduling grid."""
        employees = self._employees.list_employees(
            tenant_id=actor.tenant_id,
            roles=list(SCHEDULABLE_ROLES),
            location_ids=list(actor.location_scope) if actor.is_manager else None,
            active=True,
        )
        if employee_id is not None:
            employees = [e for e in employees if e.id == int(employee_id)]
        return employees

    def get_employee(self, *, actor: ApiUser, employee_id: int) -> Employee:
        emp = self._employees.get(tenant_id=actor.tenant_id, employee_id=int(employee_id))
        if not emp:
            raise NotFoundError("Employee not found")
        if not actor.is_admin and emp.id != actor.employee_id and not actor.can_see_location(emp.location_id):
            raise NotFoundError("Employee not found")
        return emp

    def require_active(self, *, tenant_id: int, employee_id: int, label: str = "Employee") -> Employee:
        emp = self._employees.get(tenant_id=tenant_id, employee_id=int(employee_id))
        if not emp or not emp.is_active:
            raise NotFoundError(f"{label} not found or inactive")
        return emp

    def create_employee(
        self,
        *,
        actor: ApiUser,
        employee_code: str,
        first_name: str,
        last_name: str,
        role: Role = Role.EMPLOYEE,
        hourly_rate: float = 0.0,
        email: Optional[str] = None,
        department: Optional[str] = None,
        position: Optional[str] = None,
        location_id: Optional[int] = None,
        team_id: Optional[int] = None,
        manager_id: Optional[int] = None,
    ) -> Employee:
        if not actor.is_admin:
            raise AuthorizationError("Only admins can create employees")

        code = require_non_empty(employee_code, "employee_code")
        if self._employees.code_exists(tenant_id=actor.tenant_id, employee_code=code):
            raise ConflictError(f"Employee code {code} is already in use")

        data = NewEmployee(
            employee_code=code,
            first_name=require_non_empty(first_name, "first_name"),
            last_name=require_non_empty(last_name, "last_name"),
            role=role,
            hourly_rate=require_non_negative(hourly_rate, "hourly_rate"),
            email=optional_text(email),
            department=optional_text(department),
            position=optional_text(position),
            location_id=location_id,
            team_id=team_id,
            manager_id=manager_id,
        )
        new_id = self._employees.create(tenant_id=actor.tenant_id, data=data)
        logger.info("employee_created", employee_id=new_id, role=role.value)
        created = self._employees.get(tenant_id=actor.tenant_id, employee_id=new_id)
        if not created:
            raise NotFoundError("Employee not found")
        return created

    def deactivate_employee(self, *, actor: ApiUser, employee_id: int) -> None:
        if not actor.is_admin:
            raise AuthorizationError("Only admins can deactivate employees")
        if int(employee_id) == actor.employee_id:
            raise AuthorizationError("You cannot deactivate yourself")
        if not self._employees.set_active(tenant_id=actor.tenant_id, employee_id=int(employee_id), active=False):
            raise NotFoundError("Employee not found")
        logger.info("employee_deactivated", employee_id=int(employee_id))

    def admin_ids(self, *, tenant_id: int) -> list[int]:
        admins = self._employees.list_employees(tenant_id=tenant_id, roles=[Role.ADMIN], active=True)
        return [a.id for a in admins]
