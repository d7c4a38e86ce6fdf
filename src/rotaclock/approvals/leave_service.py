from __future__ import annotations

from datetime import date
from typing import Any, Optional

import structlog

from ..common.datetime_utils import fmt_date, now_local, today_local
from ..common.validators import optional_text, require_positive
from ..core.constants import LEAVE_CANCELLATION_REASON
from ..core.enums import LeaveType, NotificationType, RequestStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..notifications.service import NotificationService
from ..scheduling.repository import AssignmentRepository
from ..tenants.model import ApiUser
from ..tenants.service import TenantSettingsService
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

logger = structlog.get_logger("rotaclock.leave")


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        assignments: AssignmentRepository,
        employees: EmployeeService,
        settings: TenantSettingsService,
        notifications: NotificationService,
    ):
        self._leaves = leaves
        self._assignments = assignments
        self._employees = employees
        self._settings = settings
        self._notifications = notifications

    def _require_request(self, actor: ApiUser, request_id: int) -> LeaveRequest:
        req = self._leaves.get(tenant_id=actor.tenant_id, request_id=int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        if req.employee_id != actor.employee_id and not actor.can_see_location(req.employee_location_id):
            raise NotFoundError("Leave request not found")
        return req

    def create_request(
        self,
        *,
        actor: ApiUser,
        type: str,
        start_date: date,
        end_date: date,
        days_requested: Any,
        reason: Optional[str] = None,
        employee_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> LeaveRequest:
        target_id = int(employee_id) if employee_id else actor.employee_id
        if target_id != actor.employee_id and not actor.role.can_manage:
            raise AuthorizationError("You can only request leave for yourself")
        try:
            leave_type = LeaveType(type)
        except ValueError:
            allowed = ", ".join(t.value for t in LeaveType)
            raise ValidationError(f"type must be one of {allowed}")
        days = require_positive(days_requested, "days_requested")
        if start_date < (today or today_local()):
            raise ValidationError("start_date cannot be in the past")
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")

        employee = self._employees.require_active(tenant_id=actor.tenant_id, employee_id=target_id)
        if self._leaves.has_overlap(tenant_id=actor.tenant_id, employee_id=employee.id, start=start_date, end=end_date):
            raise ConflictError("Leave request overlaps an existing pending or approved request")

        request_id = self._leaves.create(
            tenant_id=actor.tenant_id,
            data=NewLeaveRequest(
                employee_id=employee.id,
                type=leave_type,
                start_date=start_date,
                end_date=end_date,
                days_requested=days,
                reason=optional_text(reason),
            ),
        )
        logger.info("leave_requested", request_id=request_id, employee_id=employee.id, type=leave_type.value)
        self._notifications.notify_many(
            tenant_id=actor.tenant_id,
            employee_ids=self._employees.admin_ids(tenant_id=actor.tenant_id),
            title="Leave Request",
            message=f"{employee.full_name} requested {leave_type.value} leave from {fmt_date(start_date)} to {fmt_date(end_date)}.",
            type=NotificationType.LEAVE,
            action_url="/admin/leave-requests",
        )
        return self._require_request(actor, request_id)

    def list_requests(
        self,
        *,
        actor: ApiUser,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        type: Optional[LeaveType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LeaveRequest]:
        if not actor.role.can_manage:
            employee_id = actor.employee_id
        return self._leaves.list_requests(
            tenant_id=actor.tenant_id,
            employee_id=employee_id,
            status=status,
            type=type,
            start=start_date,
            end=end_date,
            location_ids=None if actor.location_scope is None or not actor.role.can_manage else list(actor.location_scope),
        )

    def decide(
        self,
        *,
        actor: ApiUser,
        request_id: int,
        approve: bool,
        admin_notes: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> LeaveRequest:
        """Approve or reject a pending request.

        Approval cancels the employee's shifts inside the leave window.
        """
        self._settings.require_approver(actor)
        req = self._require_request(actor, request_id)
        if req.status != RequestStatus.PENDING:
            raise ValidationError(f"Leave request is already {req.status.value}")
        reason = optional_text(rejection_reason)
        if not approve and not reason:
            raise ValidationError("rejection_reason is required when rejecting")

        status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
        changed = self._leaves.decide(
            tenant_id=actor.tenant_id,
            request_id=req.id,
            status=status,
            decided_by=actor.employee_id,
            decided_at=now_local(),
            admin_notes=optional_text(admin_notes),
            rejection_reason=None if approve else reason,
        )
        if not changed:
            raise ValidationError("Leave request is no longer pending")

        cancelled = 0
        if approve:
            cancelled = self._assignments.cancel_for_employee(
                tenant_id=actor.tenant_id,
                employee_id=req.employee_id,
                start=req.start_date,
                end=req.end_date,
                reason=LEAVE_CANCELLATION_REASON,
            )
        logger.info("leave_decided", request_id=req.id, status=status.value, cancelled_shifts=cancelled)

        message = f"Your {req.type.value} leave from {fmt_date(req.start_date)} to {fmt_date(req.end_date)} was {status.value}."
        if not approve:
            message += f" Reason: {reason}"
        self._notifications.notify(
            tenant_id=actor.tenant_id,
            employee_id=req.employee_id,
            title=f"Leave {status.value.capitalize()}",
            message=message,
            type=NotificationType.LEAVE,
            action_url="/employee/leave",
        )
        return self._require_request(actor, req.id)

    def cancel_request(self, *, actor: ApiUser, request_id: int) -> LeaveRequest:
        req = self._require_request(actor, request_id)
        if req.employee_id != actor.employee_id:
            raise AuthorizationError("You can only cancel your own leave requests")
        if req.status != RequestStatus.PENDING:
            raise ValidationError(f"Leave request is already {req.status.value}")
        if not self._leaves.decide(
            tenant_id=actor.tenant_id,
            request_id=req.id,
            status=RequestStatus.CANCELLED,
            decided_by=None,
            decided_at=now_local(),
        ):
            raise ValidationError("Leave request is no longer pending")
        logger.info("leave_cancelled", request_id=req.id)
        return self._require_request(actor, req.id)
