from __future__ import annotations

from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import now_local, parse_iso_date_field, week_bounds
from ..common.validators import require_non_empty
from ..core.enums import RotaStatus
from ..core.exceptions import AuthorizationError, NotFoundError
from ..scheduling.model import PublishResult, PublishSelection
from ..scheduling.service import ScheduleService
from ..tenants.model import ApiUser
from .model import Rota
from .repository import RotaRepository

logger = structlog.get_logger("rotaclock.rotas")


class RotaService:
    def __init__(self, rotas: RotaRepository, schedule: ScheduleService):
        self._rotas = rotas
        self._schedule = schedule

    @staticmethod
    def _require_scheduler(actor: ApiUser) -> None:
        if not actor.role.can_manage:
            raise AuthorizationError("Only admins or managers can manage rotas")

    def create_rota(self, *, actor: ApiUser, name: str, week_start_date: str) -> Rota:
        """Insert a draft rota. Names are not unique per week."""
        self._require_scheduler(actor)
        clean_name = require_non_empty(name, "name")
        week_start = parse_iso_date_field(week_start_date, "week_start_date")
        new_id = self._rotas.create(
            tenant_id=actor.tenant_id, name=clean_name, week_start_date=week_start, created_by=actor.employee_id
        )
        logger.info("rota_created", rota_id=new_id, week_start_date=week_start.isoformat())
        return self.get_rota(actor=actor, rota_id=new_id)

    def get_rota(self, *, actor: ApiUser, rota_id: int) -> Rota:
        rota = self._rotas.get(tenant_id=actor.tenant_id, rota_id=int(rota_id))
        if not rota:
            raise NotFoundError("Rota not found")
        return rota

    def list_for_week(self, *, actor: ApiUser, day: str) -> Sequence[Rota]:
        week_start, week_end = week_bounds(parse_iso_date_field(day, "date"))
        return self._rotas.list_between(tenant_id=actor.tenant_id, start=week_start, end=week_end)

    def publish_rota(self, *, actor: ApiUser, rota_id: int) -> tuple[Rota, Optional[PublishResult]]:
        """Mark the rota published and publish its remaining drafts.

        A rota with no drafts left still becomes published; the result is then None.
        """
        self._require_scheduler(actor)
        rota = self.get_rota(actor=actor, rota_id=rota_id)
        self._rotas.set_status(
            tenant_id=actor.tenant_id, rota_id=rota.id, status=RotaStatus.PUBLISHED, published_at=now_local()
        )
        result: Optional[PublishResult] = None
        if self._schedule.list_drafts(actor=actor, rota_id=rota.id):
            result = self._schedule.publish(actor=actor, selection=PublishSelection.by_rota(rota.id))
        logger.info("rota_published", rota_id=rota.id, published_shifts=result.published_shifts if result else 0)
        return self.get_rota(actor=actor, rota_id=rota.id), result
