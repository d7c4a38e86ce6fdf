from __future__ import annotations

from dataclasses import replace
from datetime import time
from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import parse_clock_time
from ..common.validators import optional_text, require_hex_color, require_non_empty, optional_non_negative
from ..core.constants import CUSTOM_TEMPLATE_COLOR, CUSTOM_TEMPLATE_DEPARTMENT, CUSTOM_TEMPLATE_NAME
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..tenants.model import ApiUser
from .model import ShiftTemplate, TemplateFields
from .repository import ShiftTemplateRepository

logger = structlog.get_logger("rotaclock.templates")


class ShiftTemplateService:
    def __init__(self, templates: ShiftTemplateRepository):
        self._templates = templates

    @staticmethod
    def _require_editor(actor: ApiUser) -> None:
        if not actor.role.can_manage:
            raise AuthorizationError("Only admins or managers can manage shift templates")

    @staticmethod
    def _build_fields(
        *,
        name: str,
        start_time: str,
        end_time: str,
        color: Optional[str],
        department: Optional[str],
        required_staff: Optional[int],
        hourly_rate: Optional[float],
    ) -> TemplateFields:
        staff = int(required_staff) if required_staff is not None else 1
        if staff < 1:
            raise ValidationError("required_staff must be at least 1")
        return TemplateFields(
            name=require_non_empty(name, "name"),
            start_time=parse_clock_time(start_time),
            end_time=parse_clock_time(end_time),
            color=require_hex_color(color) if color else "#3B82F6",
            department=optional_text(department),
            required_staff=staff,
            hourly_rate=optional_non_negative(hourly_rate, "hourly_rate"),
        )

    def list_active(self, *, tenant_id: int) -> Sequence[ShiftTemplate]:
        return self._templates.list_active(tenant_id=tenant_id)

    def require_active(self, *, tenant_id: int, template_id: int) -> ShiftTemplate:
        tpl = self._templates.get_by_id(tenant_id=tenant_id, template_id=int(template_id))
        if not tpl or not tpl.is_active:
            raise NotFoundError("Shift template not found or inactive")
        return tpl

    def get(self, *, tenant_id: int, template_id: int) -> Optional[ShiftTemplate]:
        return self._templates.get_by_id(tenant_id=tenant_id, template_id=int(template_id))

    def create_template(
        self,
        *,
        actor: ApiUser,
        name: str,
        start_time: str,
        end_time: str,
        color: Optional[str] = None,
        department: Optional[str] = None,
        required_staff: Optional[int] = None,
        hourly_rate: Optional[float] = None,
    ) -> ShiftTemplate:
        self._require_editor(actor)
        fields = self._build_fields(
            name=name,
            start_time=start_time,
            end_time=end_time,
            color=color,
            department=department,
            required_staff=required_staff,
            hourly_rate=hourly_rate,
        )
        new_id = self._templates.create(tenant_id=actor.tenant_id, fields=fields, created_by=actor.employee_id)
        logger.info("template_created", template_id=new_id, name=fields.name)
        return self.require_active(tenant_id=actor.tenant_id, template_id=new_id)

    def update_template(
        self,
        *,
        actor: ApiUser,
        template_id: int,
        name: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        color: Optional[str] = None,
        department: Optional[str] = None,
        required_staff: Optional[int] = None,
        hourly_rate: Optional[float] = None,
    ) -> ShiftTemplate:
        self._require_editor(actor)
        current = self._templates.get_by_id(tenant_id=actor.tenant_id, template_id=int(template_id))
        if not current:
            raise NotFoundError("Shift template not found")

        fields = self._build_fields(
            name=name if name is not None else current.name,
            start_time=start_time if start_time is not None else current.start_time.strftime("%H:%M:%S"),
            end_time=end_time if end_time is not None else current.end_time.strftime("%H:%M:%S"),
            color=color if color is not None else current.color,
            department=department if department is not None else current.department,
            required_staff=required_staff if required_staff is not None else current.required_staff,
            hourly_rate=hourly_rate if hourly_rate is not None else current.hourly_rate,
        )
        self._templates.update(tenant_id=actor.tenant_id, template_id=current.id, fields=fields)
        logger.info("template_updated", template_id=current.id)
        return replace(
            current,
            name=fields.name,
            start_time=fields.start_time,
            end_time=fields.end_time,
            color=fields.color,
            department=fields.department,
            required_staff=fields.required_staff,
            hourly_rate=fields.hourly_rate,
        )

    def deactivate_template(self, *, actor: ApiUser, template_id: int) -> None:
        self._require_editor(actor)
        current = self._templates.get_by_id(tenant_id=actor.tenant_id, template_id=int(template_id))
        if not current:
            raise NotFoundError("Shift template not found")
        self._templates.set_active(tenant_id=actor.tenant_id, template_id=current.id, active=False)
        logger.info("template_deactivated", template_id=current.id)

    def ensure_custom_template(self, *, tenant_id: int, created_by: Optional[int] = None) -> ShiftTemplate:
        """Placeholder template backing override-only assignments; created on first use."""
        existing = self._templates.find_by_name(tenant_id=tenant_id, name=CUSTOM_TEMPLATE_NAME)
        if existing:
            return existing
        fields = TemplateFields(
            name=CUSTOM_TEMPLATE_NAME,
            start_time=time(0, 0),
            end_time=time(0, 0),
            color=CUSTOM_TEMPLATE_COLOR,
            department=CUSTOM_TEMPLATE_DEPARTMENT,
            required_staff=1,
        )
        new_id = self._templates.create(tenant_id=tenant_id, fields=fields, created_by=created_by)
        logger.info("custom_template_created", template_id=new_id)
        created = self._templates.get_by_id(tenant_id=tenant_id, template_id=new_id)
        if not created:
            raise NotFoundError("Shift template not found")
        return created
