from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

import structlog

from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..tenants.model import ApiUser
from .model import Location, ManagerLocation
from .repository import LocationRepository

logger = structlog.get_logger("rotaclock.locations")


class LocationService:
    """Tenant locations and the manager-to-location links that drive manager scope."""

    def __init__(self, locations: LocationRepository, employees: EmployeeService):
        self._locations = locations
        self._employees = employees

    @staticmethod
    def _require_admin(actor: ApiUser) -> None:
        if not actor.is_admin:
            raise AuthorizationError("Access denied. Admin role required.")

    def _require_location(self, *, tenant_id: int, location_id: int) -> Location:
        loc = self._locations.get(tenant_id=tenant_id, location_id=int(location_id))
        if not loc:
            raise NotFoundError("Location not found")
        return loc

    def list_locations(self, *, actor: ApiUser, include_inactive: bool = False) -> Sequence[Location]:
        active = None if include_inactive and actor.is_admin else True
        return self._locations.list_locations(tenant_id=actor.tenant_id, active=active)

    def create_location(self, *, actor: ApiUser, name: str, description: Optional[str] = None) -> Location:
        self._require_admin(actor)
        clean_name = require_non_empty(name, "name")
        new_id = self._locations.create(
            tenant_id=actor.tenant_id, name=clean_name, description=optional_text(description)
        )
        logger.info("location_created", location_id=new_id, name=clean_name)
        return self._require_location(tenant_id=actor.tenant_id, location_id=new_id)

    def update_location(
        self,
        *,
        actor: ApiUser,
        location_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Location:
        self._require_admin(actor)
        current = self._require_location(tenant_id=actor.tenant_id, location_id=location_id)
        updated = replace(
            current,
            name=require_non_empty(name, "name") if name is not None else current.name,
            description=optional_text(description) if description is not None else current.description,
            is_active=bool(is_active) if is_active is not None else current.is_active,
        )
        self._locations.update(
            tenant_id=actor.tenant_id,
            location_id=current.id,
            name=updated.name,
            description=updated.description,
            is_active=updated.is_active,
        )
        logger.info("location_updated", location_id=current.id, is_active=updated.is_active)
        return updated

    def delete_location(self, *, actor: ApiUser, location_id: int) -> None:
        self._require_admin(actor)
        current = self._require_location(tenant_id=actor.tenant_id, location_id=location_id)
        usage = self._locations.usage(tenant_id=actor.tenant_id, location_id=current.id)
        if usage.in_use:
            raise ConflictError(
                f"Cannot delete location. It has {usage.employees} employees and {usage.managers} "
                "managers assigned. Please reassign them first."
            )
        self._locations.delete(tenant_id=actor.tenant_id, location_id=current.id)
        logger.info("location_deleted", location_id=current.id)

    def list_manager_locations(self, *, actor: ApiUser) -> Sequence[ManagerLocation]:
        if actor.is_admin:
            return self._locations.list_manager_locations(tenant_id=actor.tenant_id)
        if actor.is_manager:
            return self._locations.list_manager_locations(tenant_id=actor.tenant_id, manager_id=actor.employee_id)
        raise AuthorizationError("Only admins or managers can view manager locations")

    def assign_manager(self, *, actor: ApiUser, manager_id: int, location_id: int) -> ManagerLocation:
        """Link a manager to a location. Repeating an existing link returns it unchanged.

        The manager's new scope applies from their next authenticated request.
        """
        self._require_admin(actor)
        manager = self._employees.require_active(tenant_id=actor.tenant_id, employee_id=manager_id, label="Manager")
        if manager.role != Role.MANAGER:
            raise ValidationError("Employee is not a manager")
        loc = self._require_location(tenant_id=actor.tenant_id, location_id=location_id)
        if not loc.is_active:
            raise ValidationError("Location is inactive")

        self._locations.assign_manager(tenant_id=actor.tenant_id, manager_id=manager.id, location_id=loc.id)
        logger.info("manager_location_assigned", manager_id=manager.id, location_id=loc.id)
        for link in self._locations.list_manager_locations(tenant_id=actor.tenant_id, manager_id=manager.id):
            if link.location_id == loc.id:
                return link
        raise NotFoundError("Manager location not found")

    def unassign_manager(self, *, actor: ApiUser, link_id: int) -> None:
        self._require_admin(actor)
        link = self._locations.get_manager_location(tenant_id=actor.tenant_id, link_id=int(link_id))
        if not link:
            raise NotFoundError("Manager location not found")
        self._locations.unassign_manager(tenant_id=actor.tenant_id, link_id=link.id)
        logger.info("manager_location_removed", manager_id=link.manager_id, location_id=link.location_id)
