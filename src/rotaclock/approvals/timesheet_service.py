from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

import structlog

from ..common.datetime_utils import fmt_date, fmt_timestamp, now_local, parse_timestamp
from ..common.validators import optional_non_negative, optional_text, require_non_negative
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import ApprovalAction, ApprovalStatus, NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..payroll.service import PayrollService
from ..tenants.model import ApiUser
from ..tenants.service import TenantSettingsService
from ..timekeeping.model import TimeEntry, worked_hours
from ..timekeeping.repository import TimeEntryRepository
from ..timekeeping.rules.detector import DiscrepancyDetector
from .model import ApprovalPage, ApprovalRow

logger = structlog.get_logger("rotaclock.approvals")

_STATUS_FILTERS = {
    "pending": ApprovalStatus.PENDING,
    "approved": ApprovalStatus.APPROVED,
    "rejected": ApprovalStatus.REJECTED,
    "edited": ApprovalStatus.EDITED,
    "all": None,
}


def validate_punches(clock_in: Optional[datetime], clock_out: Optional[datetime], break_hours: float) -> None:
    """Shared rules for any admin correction of a time entry."""
    if break_hours < 0:
        raise ValidationError("break_hours must be a non-negative number")
    if clock_in is None or clock_out is None:
        return
    if clock_out <= clock_in:
        raise ValidationError("clock_out must be after clock_in")
    elapsed = (clock_out - clock_in).total_seconds() / 3600.0
    if break_hours > elapsed:
        raise ValidationError("break_hours cannot exceed the time between clock_in and clock_out")


class TimesheetApprovalService:
    """Admin review of worked time entries: list, decide, bulk approve and correct."""

    def __init__(
        self,
        entries: TimeEntryRepository,
        settings: TenantSettingsService,
        payroll: PayrollService,
        notifications: NotificationService,
        *,
        detector: Optional[DiscrepancyDetector] = None,
    ):
        self._entries = entries
        self._settings = settings
        self._payroll = payroll
        self._notifications = notifications
        self._detector = detector or DiscrepancyDetector()

    @staticmethod
    def _scope(actor: ApiUser):
        return None if actor.is_admin else list(actor.location_scope or ())

    def _require_entry(self, actor: ApiUser, entry_id: int) -> TimeEntry:
        entry = self._entries.get(tenant_id=actor.tenant_id, entry_id=int(entry_id))
        if not entry or not actor.can_see_location(entry.employee_location_id):
            raise NotFoundError("Time entry not found")
        return entry

    def list_approvals(
        self,
        *,
        actor: ApiUser,
        status: str = "pending",
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> ApprovalPage:
        self._settings.require_approver(actor)
        key = (status or "pending").lower()
        if key not in _STATUS_FILTERS:
            raise ValidationError("status must be one of pending, approved, rejected, edited, all")
        page = max(1, int(page))
        limit = min(max(1, int(limit)), MAX_PAGE_SIZE)
        approval_status = _STATUS_FILTERS[key]
        scope = self._scope(actor)

        entries = self._entries.list_entries(
            tenant_id=actor.tenant_id,
            approval_status=approval_status,
            location_ids=scope,
            completed_only=True,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = self._entries.count_entries(
            tenant_id=actor.tenant_id, approval_status=approval_status, location_ids=scope, completed_only=True
        )
        stats = self._entries.approval_stats(tenant_id=actor.tenant_id, location_ids=scope)
        rows = [ApprovalRow(entry=e, flags=self._detector.detect(e)) for e in entries]
        return ApprovalPage(rows=rows, page=page, limit=limit, total=total, stats=stats)

    def decide(
        self,
        *,
        actor: ApiUser,
        entry_id: int,
        action: ApprovalAction,
        approved_hours: Any = None,
        approved_rate: Any = None,
        admin_notes: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        clock_in: Optional[str] = None,
        clock_out: Optional[str] = None,
        break_hours: Any = None,
    ) -> TimeEntry:
        """Approve, reject or edit-and-approve a pending entry.

        approve: hours default to the recorded total and rate to the employee
        rate; pay is hours x rate. reject: needs a reason. edit: applies the
        corrected punches first, then approves with status ``edited``.
        """
        self._settings.require_approver(actor)
        entry = self._require_entry(actor, entry_id)
        if entry.approval_status != ApprovalStatus.PENDING:
            raise ValidationError(f"Time entry is already {entry.approval_status.value}")
        self._payroll.ensure_unlocked(tenant_id=actor.tenant_id, day=entry.clock_in.date() if entry.clock_in else None)

        hours_override = optional_non_negative(approved_hours, "approved_hours")
        rate_override = optional_non_negative(approved_rate, "approved_rate")
        notes = optional_text(admin_notes)
        now = now_local()
        changes: dict[str, Any] = {"approved_by": actor.employee_id, "approved_at": now, "admin_notes": notes}

        if action == ApprovalAction.REJECT:
            reason = optional_text(rejection_reason)
            if not reason:
                raise ValidationError("rejection_reason is required when rejecting")
            changes.update(approval_status=ApprovalStatus.REJECTED, rejection_reason=reason)
            hours = rate = pay = None
        else:
            total_hours = entry.total_hours
            if action == ApprovalAction.EDIT:
                new_in = parse_timestamp(clock_in) if clock_in else entry.clock_in
                new_out = parse_timestamp(clock_out) if clock_out else entry.clock_out
                new_break = entry.break_hours
                if break_hours is not None and break_hours != "":
                    new_break = require_non_negative(break_hours, "break_hours")
                validate_punches(new_in, new_out, new_break)
                changes.update(clock_in=new_in, clock_out=new_out, break_hours=new_break)
                if new_in and new_out:
                    total_hours = worked_hours(new_in, new_out, new_break)
                    changes["total_hours"] = total_hours

            hours = hours_override if hours_override is not None else float(total_hours or 0)
            rate = rate_override if rate_override is not None else float(entry.hourly_rate or 0)
            pay = round(hours * rate, 2)
            changes.update(
                approval_status=ApprovalStatus.EDITED if action == ApprovalAction.EDIT else ApprovalStatus.APPROVED,
                approved_hours=hours,
                approved_rate=rate,
                total_pay=pay,
                rejection_reason=None,
            )

        self._entries.update_fields(tenant_id=actor.tenant_id, entry_id=entry.id, changes=changes)
        self._entries.record_approval(
            tenant_id=actor.tenant_id,
            entry_id=entry.id,
            action=action,
            decided_by=actor.employee_id,
            approved_hours=hours,
            approved_rate=rate,
            total_pay=pay,
            notes=notes,
            rejection_reason=changes.get("rejection_reason"),
        )
        logger.info("time_entry_decided", entry_id=entry.id, action=action.value, hours=hours, total_pay=pay)

        verb = {ApprovalAction.APPROVE: "approved", ApprovalAction.EDIT: "edited and approved"}.get(action, "rejected")
        worked_on = fmt_date(entry.clock_in.date()) if entry.clock_in else "an unknown date"
        message = f"Your shift on {worked_on} was {verb}."
        if action == ApprovalAction.REJECT:
            message += f" Reason: {changes['rejection_reason']}"
        self._notifications.notify(
            tenant_id=actor.tenant_id,
            employee_id=entry.employee_id,
            title=f"Shift {verb.split()[0].capitalize()}",
            message=message,
            type=NotificationType.APPROVAL,
            action_url="/employee/timesheet",
        )
        return self._require_entry(actor, entry.id)

    def bulk_approve(self, *, actor: ApiUser, start_date: date, end_date: date) -> int:
        """Approve every pending, completed entry with both punches created in the range."""
        self._settings.require_approver(actor)
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")
        count = self._entries.bulk_approve(
            tenant_id=actor.tenant_id,
            start=start_date,
            end=end_date,
            approved_by=actor.employee_id,
            approved_at=now_local(),
            location_ids=self._scope(actor),
        )
        logger.info("time_entries_bulk_approved", count=count, start_date=fmt_date(start_date), end_date=fmt_date(end_date))
        return count

    def edit_entry(
        self,
        *,
        actor: ApiUser,
        entry_id: int,
        clock_in: Optional[str] = None,
        clock_out: Optional[str] = None,
        break_hours: Any = None,
        notes: Optional[str] = None,
    ) -> TimeEntry:
        """Correct punches or notes. Changing times or breaks sends the entry back to pending."""
        self._settings.require_approver(actor)
        entry = self._require_entry(actor, entry_id)
        self._payroll.ensure_unlocked(tenant_id=actor.tenant_id, day=entry.clock_in.date() if entry.clock_in else None)

        new_in = parse_timestamp(clock_in) if clock_in else entry.clock_in
        new_out = parse_timestamp(clock_out) if clock_out else entry.clock_out
        new_break = entry.break_hours
        if break_hours is not None and break_hours != "":
            new_break = require_non_negative(break_hours, "break_hours")
        validate_punches(new_in, new_out, new_break)

        changes: dict[str, Any] = {}
        if new_in != entry.clock_in:
            changes["clock_in"] = new_in
        if new_out != entry.clock_out:
            changes["clock_out"] = new_out
        if new_break != entry.break_hours:
            changes["break_hours"] = new_break
        time_changed = bool(changes)
        if notes is not None:
            changes["notes"] = optional_text(notes)
        if not changes:
            raise ValidationError("No changes to apply")

        if time_changed:
            if new_in and new_out:
                changes["total_hours"] = worked_hours(new_in, new_out, new_break)
            changes.update(
                approval_status=ApprovalStatus.PENDING,
                approved_by=None,
                approved_at=None,
                approved_hours=None,
                approved_rate=None,
                total_pay=None,
            )

        self._entries.update_fields(tenant_id=actor.tenant_id, entry_id=entry.id, changes=changes)
        self._entries.write_audit(
            tenant_id=actor.tenant_id,
            entry_id=entry.id,
            changed_by=actor.employee_id,
            changes={
                "before": {
                    "clock_in": fmt_timestamp(entry.clock_in),
                    "clock_out": fmt_timestamp(entry.clock_out),
                    "break_hours": entry.break_hours,
                    "notes": entry.notes,
                },
                "after": {k: (fmt_timestamp(v) if isinstance(v, datetime) else v) for k, v in changes.items()},
            },
        )
        logger.info("time_entry_edited", entry_id=entry.id, fields=sorted(changes), reset_approval=time_changed)
        return self._require_entry(actor, entry.id)

    def correct_break_hours(self, *, actor: ApiUser, entry_id: int, break_hours: Any) -> TimeEntry:
        return self.edit_entry(actor=actor, entry_id=entry_id, break_hours=require_non_negative(break_hours, "break_hours"))
