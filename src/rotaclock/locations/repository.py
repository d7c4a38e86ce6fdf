from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Location, LocationUsage, ManagerLocation


class LocationRepository(Protocol):
    def list_locations(self, *, tenant_id: int, active: Optional[bool] = True) -> Sequence[Location]:
        raise NotImplementedError

    def get(self, *, tenant_id: int, location_id: int) -> Optional[Location]:
        raise NotImplementedError

    def create(self, *, tenant_id: int, name: str, description: Optional[str] = None) -> int:
        raise NotImplementedError

    def update(
        self, *, tenant_id: int, location_id: int, name: str, description: Optional[str], is_active: bool
    ) -> bool:
        raise NotImplementedError

    def usage(self, *, tenant_id: int, location_id: int) -> LocationUsage:
        raise NotImplementedError

    def delete(self, *, tenant_id: int, location_id: int) -> bool:
        raise NotImplementedError

    def list_manager_locations(
        self, *, tenant_id: int, manager_id: Optional[int] = None
    ) -> Sequence[ManagerLocation]:
        raise NotImplementedError

    def get_manager_location(self, *, tenant_id: int, link_id: int) -> Optional[ManagerLocation]:
        raise NotImplementedError

    def assign_manager(self, *, tenant_id: int, manager_id: int, location_id: int) -> None:
        """Link a manager to a location; an existing link is left as is."""
        raise NotImplementedError

    def unassign_manager(self, *, tenant_id: int, link_id: int) -> bool:
        raise NotImplementedError
