from __future__ import annotations

from dataclasses import replace
from typing import Optional

import structlog

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import ApiUser, TenantSettings
from .repository import TenantRepository

logger = structlog.get_logger("rotaclock.auth")


class AuthService:
    """Resolves the caller from request headers.

    Identity arrives as ``Authorization: Bearer <id>`` or ``X-Employee-ID``;
    the value is an employee id (all digits) or an employee code. An optional
    ``X-Tenant-ID`` must match the employee's tenant.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        tenants: TenantRepository,
        *,
        demo_auth: bool = False,
        demo_tenant_id: int = 1,
    ):
        self._employees = employees
        self._tenants = tenants
        self._demo_auth = demo_auth
        self._demo_tenant_id = demo_tenant_id

    @staticmethod
    def _token_from_headers(authorization: Optional[str], employee_header: Optional[str]) -> Optional[str]:
        auth = (authorization or "").strip()
        if auth.lower().startswith("bearer "):
            token = auth[7:].strip()
            if token:
                return token
        token = (employee_header or "").strip()
        return token or None

    def _lookup(self, token: str) -> Optional[Employee]:
        if token.isdigit():
            found = self._employees.find_active_by_id(int(token))
            if found:
                return found
        return self._employees.find_active_by_code(token)

    def authenticate(
        self,
        *,
        authorization: Optional[str],
        employee_header: Optional[str],
        tenant_header: Optional[str],
    ) -> ApiUser:
        token = self._token_from_headers(authorization, employee_header)
        employee = self._lookup(token) if token else None

        if employee is None and self._demo_auth and token is None:
            employee = self._employees.first_admin(tenant_id=self._demo_tenant_id)
            if employee:
                logger.debug("demo_auth_fallback", employee_id=employee.id)

        if employee is None:
            raise AuthenticationError("Unauthorized")

        if tenant_header:
            if not tenant_header.strip().isdigit() or int(tenant_header) != employee.tenant_id:
                raise AuthorizationError("No tenant context")

        scope: Optional[tuple[int, ...]] = None
        if employee.role != Role.ADMIN:
            scope = tuple(self._tenants.manager_location_ids(tenant_id=employee.tenant_id, manager_id=employee.id))
            if employee.role != Role.MANAGER and employee.location_id is not None:
                scope = tuple(sorted(set(scope) | {employee.location_id}))

        return ApiUser(
            employee_id=employee.id,
            tenant_id=employee.tenant_id,
            role=employee.role,
            employee_code=employee.employee_code,
            location_id=employee.location_id,
            location_scope=scope,
        )


class TenantSettingsService:
    def __init__(self, tenants: TenantRepository):
        self._tenants = tenants

    def get(self, *, actor: ApiUser) -> TenantSettings:
        return self._tenants.get_settings(tenant_id=actor.tenant_id)

    def update(
        self,
        *,
        actor: ApiUser,
        allow_manager_approvals: Optional[bool] = None,
        emergency_mode: Optional[bool] = None,
        max_break_hours: Optional[float] = None,
    ) -> TenantSettings:
        if not actor.is_admin:
            raise AuthorizationError("Only admins can change tenant settings")
        current = self._tenants.get_settings(tenant_id=actor.tenant_id)
        changes: dict[str, object] = {}
        if allow_manager_approvals is not None:
            changes["allow_manager_approvals"] = bool(allow_manager_approvals)
        if emergency_mode is not None:
            changes["emergency_mode"] = bool(emergency_mode)
        if max_break_hours is not None:
            if max_break_hours < 0:
                raise ValidationError("max_break_hours must be a non-negative number")
            changes["max_break_hours"] = float(max_break_hours)
        updated = replace(current, **changes)
        self._tenants.save_settings(updated)
        logger.info("tenant_settings_updated", tenant_id=actor.tenant_id, **changes)
        return updated

    def require_approver(self, actor: ApiUser) -> None:
        """Admins always approve; managers only when the tenant allows it."""
        if actor.is_admin:
            return
        if actor.is_manager:
            settings = self._tenants.get_settings(tenant_id=actor.tenant_id)
            if settings.allow_manager_approvals:
                return
            raise AuthorizationError("Manager approvals are disabled for this organization")
        raise AuthorizationError("Only admins or managers can approve")
