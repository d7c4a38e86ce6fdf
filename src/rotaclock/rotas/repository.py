from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RotaStatus
from .model import Rota


class RotaRepository(Protocol):
    def create(self, *, tenant_id: int, name: str, week_start_date: date, created_by: Optional[int]) -> int:
        raise NotImplementedError

    def get(self, *, tenant_id: int, rota_id: int) -> Optional[Rota]:
        raise NotImplementedError

    def list_between(self, *, tenant_id: int, start: date, end: date) -> Sequence[Rota]:
        """Rotas whose week_start_date falls in [start, end], with their shift counts."""
        raise NotImplementedError

    def set_status(self, *, tenant_id: int, rota_id: int, status: RotaStatus, published_at: Optional[datetime]) -> None:
        raise NotImplementedError
