from __future__ import annotations

from datetime import date
from typing import Optional

import structlog

from ..common.datetime_utils import fmt_date, now_local
from ..common.validators import optional_text
from ..core.enums import AssignmentStatus, NotificationType, RequestStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeService
from ..notifications.service import NotificationService
from ..scheduling.model import ShiftAssignment
from ..scheduling.repository import AssignmentRepository
from ..tenants.model import ApiUser
from .model import NewSwapRequest, SwapRequest
from .repository import SwapRepository

logger = structlog.get_logger("rotaclock.swaps")


def same_location(first: Employee, second: Employee) -> bool:
    """Employees without a location can swap with anyone."""
    if first.location_id is None or second.location_id is None:
        return True
    return first.location_id == second.location_id


class SwapService:
    def __init__(
        self,
        swaps: SwapRepository,
        assignments: AssignmentRepository,
        employees: EmployeeService,
        notifications: NotificationService,
    ):
        self._swaps = swaps
        self._assignments = assignments
        self._employees = employees
        self._notifications = notifications

    def _require_owned(self, tenant_id: int, assignment_id: int, employee: Employee, label: str) -> ShiftAssignment:
        a = self._assignments.get(tenant_id=tenant_id, assignment_id=int(assignment_id))
        if not a or a.employee_id != employee.id or a.status == AssignmentStatus.CANCELLED:
            raise NotFoundError(f"{label} assignment not found for {employee.full_name}")
        return a

    def _require_request(self, actor: ApiUser, request_id: int) -> SwapRequest:
        req = self._swaps.get(tenant_id=actor.tenant_id, request_id=int(request_id))
        if not req:
            raise NotFoundError("Swap request not found")
        return req

    def create_request(
        self,
        *,
        actor: ApiUser,
        requester_id: int,
        target_id: int,
        original_assignment_id: int,
        requested_assignment_id: int,
        reason: Optional[str] = None,
    ) -> SwapRequest:
        if int(requester_id) != actor.employee_id and not actor.role.can_manage:
            raise AuthorizationError("You can only request swaps for your own shifts")
        if int(requester_id) == int(target_id):
            raise ValidationError("Cannot swap a shift with yourself")

        requester = self._employees.require_active(tenant_id=actor.tenant_id, employee_id=requester_id, label="Requester")
        target = self._employees.require_active(tenant_id=actor.tenant_id, employee_id=target_id, label="Target employee")
        original = self._require_owned(actor.tenant_id, original_assignment_id, requester, "Original")
        requested = self._require_owned(actor.tenant_id, requested_assignment_id, target, "Requested")

        if not same_location(requester, target):
            raise ValidationError("Employees are not in the same location and cannot swap")

        data = NewSwapRequest(
            requester_id=requester.id,
            target_id=target.id,
            original_assignment_id=original.id,
            requested_assignment_id=requested.id,
            reason=optional_text(reason),
        )
        if self._swaps.pending_exists(tenant_id=actor.tenant_id, data=data):
            raise ConflictError("An identical swap request is already pending")

        request_id = self._swaps.create(tenant_id=actor.tenant_id, data=data)
        logger.info("swap_requested", request_id=request_id, requester_id=requester.id, target_id=target.id)

        self._notifications.notify(
            tenant_id=actor.tenant_id,
            employee_id=target.id,
            title="Shift Swap Request",
            message=(
                f"{requester.full_name} wants to swap their shift on {fmt_date(original.date)} "
                f"for yours on {fmt_date(requested.date)}."
            ),
            type=NotificationType.SWAP,
            action_url="/employee/swaps",
        )
        self._notifications.notify(
            tenant_id=actor.tenant_id,
            employee_id=requester.id,
            title="Swap Request Submitted",
            message=f"Your swap request with {target.full_name} is awaiting manager approval.",
            type=NotificationType.SWAP,
            action_url="/employee/swaps",
        )
        return self._require_request(actor, request_id)

    def create_by_date(
        self,
        *,
        actor: ApiUser,
        requester_id: int,
        target_id: int,
        original_date: date,
        requested_date: date,
        reason: Optional[str] = None,
    ) -> SwapRequest:
        """Resolve each party's shift on the given date, then create the request."""
        original = self._first_on(actor.tenant_id, int(requester_id), original_date)
        requested = self._first_on(actor.tenant_id, int(target_id), requested_date)
        return self.create_request(
            actor=actor,
            requester_id=requester_id,
            target_id=target_id,
            original_assignment_id=original.id,
            requested_assignment_id=requested.id,
            reason=reason,
        )

    def _first_on(self, tenant_id: int, employee_id: int, day: date) -> ShiftAssignment:
        rows = self._assignments.list_between(
            tenant_id=tenant_id, start=day, end=day, employee_ids=[employee_id], include_cancelled=False
        )
        if not rows:
            raise NotFoundError(f"No shift found on {fmt_date(day)} for employee {employee_id}")
        return rows[0]

    def list_requests(
        self,
        *,
        actor: ApiUser,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
    ) -> list[SwapRequest]:
        if not actor.role.can_manage:
            employee_id = actor.employee_id
        return self._swaps.list_requests(
            tenant_id=actor.tenant_id,
            employee_id=employee_id,
            status=status,
            location_ids=None if actor.location_scope is None or not actor.role.can_manage else list(actor.location_scope),
        )

    def decide(
        self,
        *,
        actor: ApiUser,
        request_id: int,
        approve: bool,
        manager_notes: Optional[str] = None,
    ) -> SwapRequest:
        if not actor.role.can_manage:
            raise AuthorizationError("Only admins or managers can decide swap requests")
        req = self._require_request(actor, request_id)
        if not (actor.can_see_location(req.requester_location_id) or actor.can_see_location(req.target_location_id)):
            raise AuthorizationError("You can only decide swaps for your locations")
        if req.status != RequestStatus.PENDING:
            raise ValidationError(f"Swap request is already {req.status.value}")
        notes = optional_text(manager_notes)
        if not approve and not notes:
            raise ValidationError("manager_notes are required when rejecting")

        status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
        if not self._swaps.decide(
            tenant_id=actor.tenant_id,
            request_id=req.id,
            status=status,
            decided_by=actor.employee_id,
            decided_at=now_local(),
            manager_notes=notes,
        ):
            raise ValidationError("Swap request is no longer pending")
        if approve:
            self._assignments.exchange_employees(
                tenant_id=actor.tenant_id,
                first_id=req.original_assignment_id,
                second_id=req.requested_assignment_id,
            )
        logger.info("swap_decided", request_id=req.id, status=status.value)

        self._notifications.notify_many(
            tenant_id=actor.tenant_id,
            employee_ids=[req.requester_id, req.target_id],
            title=f"Swap {status.value.capitalize()}",
            message=f"The shift swap between {req.requester_name} and {req.target_name} was {status.value}."
            + (f" Notes: {notes}" if notes else ""),
            type=NotificationType.SWAP,
            action_url="/employee/swaps",
        )
        return self._require_request(actor, req.id)
