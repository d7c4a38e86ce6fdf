from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import fmt_date, iter_days, parse_clock_time, parse_iso_date_field, week_bounds
from ..common.validators import optional_text, require_hex_color
from ..core.constants import NO_DRAFTS_MESSAGE
from ..core.enums import AssignmentStatus, NotificationType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..notifications.service import NotificationService
from ..rotas.repository import RotaRepository
from ..shift_templates.service import ShiftTemplateService
from ..tenants.model import ApiUser
from ..tenants.repository import TenantRepository
from .model import EmployeeWeek, NewAssignment, PublishResult, PublishSelection, ShiftAssignment, WeekView
from .repository import AssignmentRepository

logger = structlog.get_logger("rotaclock.scheduling")


class ScheduleService:
    """Rota grid use cases: assign, edit, remove, view a week and publish drafts."""

    def __init__(
        self,
        assignments: AssignmentRepository,
        rotas: RotaRepository,
        employees: EmployeeService,
        templates: ShiftTemplateService,
        tenants: TenantRepository,
        notifications: NotificationService,
    ):
        self._assignments = assignments
        self._rotas = rotas
        self._employees = employees
        self._templates = templates
        self._tenants = tenants
        self._notifications = notifications

    @staticmethod
    def _require_scheduler(actor: ApiUser) -> None:
        if not actor.role.can_manage:
            raise AuthorizationError("Only admins or managers can edit the schedule")

    def _require_assignment(self, actor: ApiUser, assignment_id: int) -> ShiftAssignment:
        found = self._assignments.get(tenant_id=actor.tenant_id, assignment_id=int(assignment_id))
        if not found or not actor.can_see_location(found.employee_location_id):
            raise NotFoundError("Shift assignment not found")
        return found

    def assign(
        self,
        *,
        actor: ApiUser,
        employee_id: int,
        date: str,
        template_id: Optional[int] = None,
        rota_id: Optional[int] = None,
        notes: Optional[str] = None,
        override_name: Optional[str] = None,
        override_start_time: Optional[str] = None,
        override_end_time: Optional[str] = None,
        override_color: Optional[str] = None,
    ) -> ShiftAssignment:
        """Create a draft assignment.

        Either ``template_id`` or all of the name/start/end overrides are
        required. Override-only assignments hang off the tenant's ad-hoc
        placeholder template. Overlapping assignments are not rejected.
        """
        self._require_scheduler(actor)
        shift_date = parse_iso_date_field(date, "date")

        name = optional_text(override_name)
        has_override = bool(name and override_start_time and override_end_time)
        if template_id is None and not has_override:
            raise ValidationError(
                "employee_id, date and either template_id or override_name, "
                "override_start_time and override_end_time are required"
            )

        employee = self._employees.require_active(tenant_id=actor.tenant_id, employee_id=int(employee_id))
        if not actor.can_see_location(employee.location_id):
            raise NotFoundError("Employee not found or inactive")

        if template_id is not None:
            template = self._templates.require_active(tenant_id=actor.tenant_id, template_id=int(template_id))
        else:
            template = self._templates.ensure_custom_template(tenant_id=actor.tenant_id, created_by=actor.employee_id)

        if rota_id is not None and not self._rotas.get(tenant_id=actor.tenant_id, rota_id=int(rota_id)):
            raise NotFoundError("Rota not found")

        data = NewAssignment(
            employee_id=employee.id,
            template_id=template.id,
            date=shift_date,
            rota_id=int(rota_id) if rota_id is not None else None,
            notes=optional_text(notes),
            override_name=name if has_override else None,
            override_start_time=parse_clock_time(override_start_time) if has_override else None,
            override_end_time=parse_clock_time(override_end_time) if has_override else None,
            override_color=require_hex_color(override_color, "override_color") if has_override and override_color else None,
            assigned_by=actor.employee_id,
        )
        new_id = self._assignments.create(tenant_id=actor.tenant_id, data=data)
        logger.info(
            "shift_assigned",
            assignment_id=new_id,
            employee_id=employee.id,
            date=fmt_date(shift_date),
            template_id=template.id,
            rota_id=data.rota_id,
        )
        created = self._assignments.get(tenant_id=actor.tenant_id, assignment_id=new_id)
        if not created:
            raise NotFoundError("Shift assignment not found")
        return created

    def update_assignment(
        self,
        *,
        actor: ApiUser,
        assignment_id: int,
        template_id: Optional[int] = None,
        date: Optional[str] = None,
        status: Optional[AssignmentStatus] = None,
        notes: Optional[str] = None,
        override_name: Optional[str] = None,
        override_start_time: Optional[str] = None,
        override_end_time: Optional[str] = None,
        override_color: Optional[str] = None,
    ) -> ShiftAssignment:
        self._require_scheduler(actor)
        current = self._require_assignment(actor, assignment_id)

        changes: dict[str, object] = {}
        if template_id is not None:
            changes["template_id"] = self._templates.require_active(
                tenant_id=actor.tenant_id, template_id=int(template_id)
            ).id
        if date is not None:
            changes["date"] = parse_iso_date_field(date, "date")
        if status is not None:
            changes["status"] = AssignmentStatus(status)
        if notes is not None:
            changes["notes"] = optional_text(notes)
        if override_name is not None:
            changes["override_name"] = optional_text(override_name)
        if override_start_time is not None:
            changes["override_start_time"] = parse_clock_time(override_start_time) if override_start_time else None
        if override_end_time is not None:
            changes["override_end_time"] = parse_clock_time(override_end_time) if override_end_time else None
        if override_color is not None:
            changes["override_color"] = require_hex_color(override_color, "override_color") if override_color else None

        if not changes:
            raise ValidationError("No fields to update")

        self._assignments.update_fields(tenant_id=actor.tenant_id, assignment_id=current.id, changes=changes)
        updated = self._require_assignment(actor, current.id)
        logger.info("shift_updated", assignment_id=current.id, fields=sorted(changes))

        if current.visible_to_employee:
            settings = self._tenants.get_settings(tenant_id=actor.tenant_id)
            title = "URGENT: Shift Updated" if settings.emergency_mode else "Shift Updated"
            self._notifications.notify(
                tenant_id=actor.tenant_id,
                employee_id=updated.employee_id,
                title=title,
                message=(
                    f"Your shift on {fmt_date(updated.date)} has been updated: "
                    f"{updated.effective_name or 'Shift'}"
                ),
                type=NotificationType.SCHEDULE,
                action_url="/employee/scheduling",
            )
        return updated

    def remove_assignment(self, *, actor: ApiUser, assignment_id: int) -> None:
        self._require_scheduler(actor)
        current = self._require_assignment(actor, assignment_id)
        if not self._assignments.delete(tenant_id=actor.tenant_id, assignment_id=current.id):
            raise NotFoundError("Shift assignment not found")
        logger.info("shift_removed", assignment_id=current.id, employee_id=current.employee_id)

    def get_week(
        self,
        *,
        actor: ApiUser,
        day: date,
        employee_id: Optional[int] = None,
        rota_id: Optional[int] = None,
        published_only: bool = False,
        drafts_only: bool = False,
    ) -> WeekView:
        """Monday..Sunday grid containing ``day``.

        Employees and agents only ever see published shifts of their own.
        """
        week_start, week_end = week_bounds(day)

        if not actor.role.can_manage:
            published_only = True
            drafts_only = False
            if actor.role in (Role.AGENT, Role.EMPLOYEE):
                employee_id = actor.employee_id
        if published_only and drafts_only:
            raise ValidationError("published_only and show_drafts_only cannot be combined")

        employees = self._employees.list_schedulable(actor=actor, employee_id=employee_id)
        published: Optional[bool] = True if published_only else (False if drafts_only else None)

        assignments = self._assignments.list_between(
            tenant_id=actor.tenant_id,
            start=week_start,
            end=week_end,
            employee_ids=[e.id for e in employees] if (actor.is_manager or employee_id is not None) else None,
            rota_id=rota_id,
            published=published,
        )

        days = [fmt_date(d) for d in iter_days(week_start, week_end)]
        by_employee: dict[int, dict[str, list[ShiftAssignment]]] = {e.id: {d: [] for d in days} for e in employees}
        for a in assignments:
            slots = by_employee.get(a.employee_id)
            if slots is not None:
                slots.setdefault(fmt_date(a.date), []).append(a)

        current_rota = None
        if rota_id is not None:
            current_rota = self._rotas.get(tenant_id=actor.tenant_id, rota_id=int(rota_id))
            if not current_rota:
                raise NotFoundError("Rota not found")
            rotas = [current_rota]
        else:
            rotas = list(self._rotas.list_between(tenant_id=actor.tenant_id, start=week_start, end=week_end))

        return WeekView(
            week_start=week_start,
            week_end=week_end,
            employees=[EmployeeWeek(employee=e, assignments=by_employee[e.id]) for e in employees],
            assignments=assignments,
            templates=list(self._templates.list_active(tenant_id=actor.tenant_id)),
            rotas=rotas,
            current_rota=current_rota,
        )

    def list_drafts(
        self,
        *,
        actor: ApiUser,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        rota_id: Optional[int] = None,
    ) -> list[ShiftAssignment]:
        self._require_scheduler(actor)
        drafts = self._assignments.list_drafts(
            tenant_id=actor.tenant_id, start=start_date, end=end_date, rota_id=rota_id
        )
        return [d for d in drafts if actor.can_see_location(d.employee_location_id)]

    def publish(self, *, actor: ApiUser, selection: PublishSelection) -> PublishResult:
        """Flip the selected drafts to published and notify each affected employee once.

        Rows already published are never touched, and managers only reach employees
        at their own locations. Selecting nothing is an error.
        """
        self._require_scheduler(actor)
        selection = selection.within(actor.location_scope)
        published = self._assignments.publish(tenant_id=actor.tenant_id, selection=selection)
        if not published:
            raise ValidationError(NO_DRAFTS_MESSAGE)

        affected = sorted({a.employee_id for a in published})
        settings = self._tenants.get_settings(tenant_id=actor.tenant_id)
        title = "URGENT: Schedule Published" if settings.emergency_mode else "Schedule Published"
        for employee_id in affected:
            own = [a for a in published if a.employee_id == employee_id]
            self._notifications.notify(
                tenant_id=actor.tenant_id,
                employee_id=employee_id,
                title=title,
                message=f"{len(own)} new shift(s) have been published to your schedule.",
                type=NotificationType.SCHEDULE,
                action_url="/employee/scheduling",
            )

        result = PublishResult(published_shifts=len(published), affected_employees=len(affected), shifts=published)
        logger.info(
            "shifts_published",
            published_shifts=result.published_shifts,
            affected_employees=result.affected_employees,
            by_ids=selection.is_by_ids,
            start_date=fmt_date(selection.start_date),
            end_date=fmt_date(selection.end_date),
            rota_id=selection.rota_id,
        )
        return result

    def publish_all(self, *, actor: ApiUser, day: date, rota_id: Optional[int] = None) -> PublishResult:
        """Publish every draft of the week containing ``day``.

        The range is the min/max date among the current drafts.
        """
        self._require_scheduler(actor)
        week_start, week_end = week_bounds(day)
        drafts = self.list_drafts(actor=actor, start_date=week_start, end_date=week_end, rota_id=rota_id)
        if not drafts:
            raise ValidationError(NO_DRAFTS_MESSAGE)
        dates: Sequence[date] = [d.date for d in drafts]
        return self.publish(actor=actor, selection=PublishSelection.by_range(min(dates), max(dates), rota_id=rota_id))
