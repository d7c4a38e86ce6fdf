from __future__ import annotations

from datetime import datetime
from typing import Optional

import structlog

from ..common.datetime_utils import fmt_timestamp, hours_between, now_local
from ..common.validators import optional_text
from ..core.constants import DASHBOARD_POLL_SECONDS
from ..core.enums import ApprovalStatus, NotificationType, TimeEntryStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..notifications.service import NotificationService
from ..scheduling.repository import AssignmentRepository
from ..tenants.model import ApiUser
from ..tenants.repository import TenantRepository
from .model import LiveStatus, TimeEntry, worked_hours
from .repository import TimeEntryRepository

logger = structlog.get_logger("rotaclock.timekeeping")


class TimekeepingService:
    def __init__(
        self,
        entries: TimeEntryRepository,
        assignments: AssignmentRepository,
        employees: EmployeeService,
        tenants: TenantRepository,
        notifications: NotificationService,
        *,
        poll_interval_seconds: int = DASHBOARD_POLL_SECONDS,
    ):
        self._entries = entries
        self._assignments = assignments
        self._employees = employees
        self._tenants = tenants
        self._notifications = notifications
        self._poll_interval = poll_interval_seconds

    def _require_open(self, actor: ApiUser) -> TimeEntry:
        entry = self._entries.get_open(tenant_id=actor.tenant_id, employee_id=actor.employee_id)
        if not entry:
            raise NotFoundError("No active shift found")
        return entry

    def clock_in(self, *, actor: ApiUser, assignment_id: Optional[int] = None, now: Optional[datetime] = None) -> TimeEntry:
        now = now or now_local()
        self._employees.require_active(tenant_id=actor.tenant_id, employee_id=actor.employee_id)
        if self._entries.get_open(tenant_id=actor.tenant_id, employee_id=actor.employee_id):
            raise ValidationError("You are already clocked in")

        if assignment_id is not None:
            assignment = self._assignments.get(tenant_id=actor.tenant_id, assignment_id=int(assignment_id))
            if not assignment or assignment.employee_id != actor.employee_id:
                raise NotFoundError("Shift assignment not found")
            linked: Optional[int] = assignment.id
        else:
            today = self._assignments.list_between(
                tenant_id=actor.tenant_id,
                start=now.date(),
                end=now.date(),
                employee_ids=[actor.employee_id],
                published=True,
                include_cancelled=False,
            )
            linked = today[0].id if today else None

        entry_id = self._entries.create_clock_in(
            tenant_id=actor.tenant_id, employee_id=actor.employee_id, assignment_id=linked, clock_in=now
        )
        logger.info("clocked_in", entry_id=entry_id, employee_id=actor.employee_id, assignment_id=linked)
        return self._get(actor, entry_id)

    def start_break(self, *, actor: ApiUser, now: Optional[datetime] = None) -> TimeEntry:
        now = now or now_local()
        entry = self._require_open(actor)
        if entry.status == TimeEntryStatus.BREAK or entry.break_start is not None:
            raise ValidationError("You are already on a break")

        max_break = self._tenants.get_settings(tenant_id=actor.tenant_id).max_break_hours
        if entry.break_hours >= max_break:
            raise ValidationError(f"Break allowance of {max_break:g} hour(s) already used")

        self._entries.update_fields(
            tenant_id=actor.tenant_id,
            entry_id=entry.id,
            changes={"status": TimeEntryStatus.BREAK, "break_start": now},
        )
        logger.info("break_started", entry_id=entry.id, at=fmt_timestamp(now))
        return self._get(actor, entry.id)

    def end_break(self, *, actor: ApiUser, now: Optional[datetime] = None) -> TimeEntry:
        now = now or now_local()
        entry = self._entries.get_open(tenant_id=actor.tenant_id, employee_id=actor.employee_id)
        if not entry or entry.break_start is None:
            raise NotFoundError("No active break found")

        break_hours = self._closed_break_hours(entry, now)
        self._entries.update_fields(
            tenant_id=actor.tenant_id,
            entry_id=entry.id,
            changes={"status": TimeEntryStatus.IN_PROGRESS, "break_start": None, "break_hours": break_hours},
        )
        logger.info("break_ended", entry_id=entry.id, break_hours=break_hours)
        return self._get(actor, entry.id)

    @staticmethod
    def _closed_break_hours(entry: TimeEntry, now: datetime) -> float:
        if entry.break_start is None:
            return round(entry.break_hours, 2)
        return round(entry.break_hours + max(0.0, hours_between(entry.break_start, now)), 2)

    def clock_out(self, *, actor: ApiUser, notes: Optional[str] = None, now: Optional[datetime] = None) -> TimeEntry:
        """Close the open entry; an unfinished break is closed first."""
        now = now or now_local()
        entry = self._require_open(actor)
        if entry.clock_in is None or now <= entry.clock_in:
            raise ValidationError("Clock-out must be after clock-in")

        break_hours = self._closed_break_hours(entry, now)
        total = worked_hours(entry.clock_in, now, break_hours)
        self._entries.update_fields(
            tenant_id=actor.tenant_id,
            entry_id=entry.id,
            changes={
                "clock_out": now,
                "break_start": None,
                "break_hours": break_hours,
                "total_hours": total,
                "status": TimeEntryStatus.COMPLETED,
                "approval_status": ApprovalStatus.PENDING,
                "notes": optional_text(notes) if notes is not None else entry.notes,
            },
        )
        logger.info("clocked_out", entry_id=entry.id, employee_id=actor.employee_id, total_hours=total)

        closed = self._get(actor, entry.id)
        self._notifications.notify_many(
            tenant_id=actor.tenant_id,
            employee_ids=self._employees.admin_ids(tenant_id=actor.tenant_id),
            title="Shift Approval Required",
            message=f"{closed.employee_name or 'An employee'} completed a shift of {total:g} hour(s).",
            type=NotificationType.APPROVAL,
            action_url="/admin/shift-approvals",
        )
        return closed

    def current_entry(self, *, actor: ApiUser) -> Optional[TimeEntry]:
        return self._entries.get_open(tenant_id=actor.tenant_id, employee_id=actor.employee_id)

    def live_status(self, *, actor: ApiUser, now: Optional[datetime] = None) -> LiveStatus:
        """Counters behind the dashboard; clients poll them on ``poll_interval_seconds``."""
        now = now or now_local()
        counts = self._entries.live_counts(
            tenant_id=actor.tenant_id,
            day=now.date(),
            location_ids=None if actor.is_admin else list(actor.location_scope or ()),
        )
        return LiveStatus(
            clocked_in=counts["clocked_in"],
            on_break=counts["on_break"],
            completed_today=counts["completed_today"],
            pending_approvals=counts["pending_approvals"],
            poll_interval_seconds=self._poll_interval,
        )

    def _get(self, actor: ApiUser, entry_id: int) -> TimeEntry:
        entry = self._entries.get(tenant_id=actor.tenant_id, entry_id=entry_id)
        if not entry:
            raise NotFoundError("Time entry not found")
        return entry
