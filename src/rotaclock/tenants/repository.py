from __future__ import annotations

from typing import Optional, Protocol

from .model import TenantSettings


class TenantRepository(Protocol):
    def get_settings(self, *, tenant_id: int) -> TenantSettings:
        raise NotImplementedError

    def save_settings(self, settings: TenantSettings) -> None:
        raise NotImplementedError

    def manager_location_ids(self, *, tenant_id: int, manager_id: int) -> list[int]:
        raise NotImplementedError

    def tenant_exists(self, *, tenant_id: int) -> bool:
        raise NotImplementedError
