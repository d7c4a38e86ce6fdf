from __future__ import annotations

from flask import Flask

from ..common.api import ok, parse_body, parse_query
from ..container import Container
from ..core.enums import ApprovalAction, Role
from ..tenants.guards import current_user, make_guards
from .schemas import (
    ApprovalDecision,
    ApprovalQuery,
    BreakHoursUpdate,
    BulkApprove,
    LeaveCreate,
    LeaveDecision,
    LeaveQuery,
    SwapCreate,
    SwapDecision,
    SwapQuery,
    TimesheetEdit,
)


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.auth_service)

    # Timesheets

    @app.route("/api/admin/shift-approvals", methods=["GET"], endpoint="api_list_shift_approvals")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def list_shift_approvals():
        q = parse_query(ApprovalQuery)
        page = container.approval_service.list_approvals(
            actor=current_user(), status=q.status, page=q.page, limit=q.limit
        )
        return ok(page.to_dict())

    @app.route("/api/admin/shift-approvals/<int:entry_id>", methods=["PATCH"], endpoint="api_decide_shift")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def decide_shift(entry_id: int):
        body = parse_body(ApprovalDecision)
        entry = container.approval_service.decide(actor=current_user(), entry_id=entry_id, **body.model_dump())
        verb = {ApprovalAction.APPROVE: "approved", ApprovalAction.REJECT: "rejected"}.get(body.action, "edited")
        return ok(entry, message=f"Shift {verb} successfully")

    @app.route("/api/admin/shift-approvals/bulk", methods=["POST"], endpoint="api_bulk_approve")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def bulk_approve():
        body = parse_body(BulkApprove)
        count = container.approval_service.bulk_approve(
            actor=current_user(), start_date=body.start_date, end_date=body.end_date
        )
        return ok({"approved": count}, message=f"Approved {count} time entr{'y' if count == 1 else 'ies'}")

    @app.route("/api/admin/timesheet/<int:entry_id>", methods=["PATCH"], endpoint="api_edit_timesheet")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def edit_timesheet(entry_id: int):
        body = parse_body(TimesheetEdit)
        entry = container.approval_service.edit_entry(actor=current_user(), entry_id=entry_id, **body.model_dump())
        return ok(entry, message="Time entry updated")

    @app.route("/api/admin/time-entries/<int:entry_id>/break-hours", methods=["PUT"], endpoint="api_break_hours")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def correct_break_hours(entry_id: int):
        body = parse_body(BreakHoursUpdate)
        entry = container.approval_service.correct_break_hours(
            actor=current_user(), entry_id=entry_id, break_hours=body.break_hours
        )
        return ok(entry, message="Break hours updated")

    # Leave

    @app.route("/api/leave-requests", methods=["GET"], endpoint="api_list_leave")
    @login_required
    def list_leave():
        q = parse_query(LeaveQuery)
        rows = container.leave_service.list_requests(
            actor=current_user(),
            employee_id=q.employee_id,
            status=q.status,
            type=q.type,
            start_date=q.start_date,
            end_date=q.end_date,
        )
        return ok(rows)

    @app.route("/api/leave-requests", methods=["POST"], endpoint="api_create_leave")
    @login_required
    def create_leave():
        body = parse_body(LeaveCreate)
        req = container.leave_service.create_request(actor=current_user(), **body.model_dump())
        return ok(req, message="Leave request submitted", status=201)

    @app.route("/api/admin/leave-requests/<int:request_id>", methods=["PATCH"], endpoint="api_decide_leave")
    @login_required
    def decide_leave(request_id: int):
        body = parse_body(LeaveDecision)
        actor = current_user()
        if body.action == "cancel":
            req = container.leave_service.cancel_request(actor=actor, request_id=request_id)
        else:
            req = container.leave_service.decide(
                actor=actor,
                request_id=request_id,
                approve=body.action == "approve",
                admin_notes=body.admin_notes,
                rejection_reason=body.rejection_reason,
            )
        return ok(req, message=f"Leave request {req.status.value}")

    # Swaps

    @app.route("/api/shifts/swap-requests", methods=["GET"], endpoint="api_list_swaps")
    @login_required
    def list_swaps():
        q = parse_query(SwapQuery)
        return ok(container.swap_service.list_requests(actor=current_user(), employee_id=q.employee_id, status=q.status))

    @app.route("/api/shifts/swap-requests", methods=["POST"], endpoint="api_create_swap")
    @login_required
    def create_swap():
        body = parse_body(SwapCreate)
        actor = current_user()
        requester_id = body.requester_id or actor.employee_id
        if body.original_assignment_id is not None and body.requested_assignment_id is not None:
            req = container.swap_service.create_request(
                actor=actor,
                requester_id=requester_id,
                target_id=body.target_id,
                original_assignment_id=body.original_assignment_id,
                requested_assignment_id=body.requested_assignment_id,
                reason=body.reason,
            )
        else:
            req = container.swap_service.create_by_date(
                actor=actor,
                requester_id=requester_id,
                target_id=body.target_id,
                original_date=body.original_date,
                requested_date=body.requested_date,
                reason=body.reason,
            )
        return ok(req, message="Swap request submitted", status=201)

    @app.route("/api/shifts/swap-requests/<int:request_id>", methods=["PATCH"], endpoint="api_decide_swap")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def decide_swap(request_id: int):
        body = parse_body(SwapDecision)
        req = container.swap_service.decide(
            actor=current_user(),
            request_id=request_id,
            approve=body.action == "approve",
            manager_notes=body.manager_notes,
        )
        return ok(req, message=f"Swap request {req.status.value}")
