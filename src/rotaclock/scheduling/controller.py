from __future__ import annotations

from flask import Flask, request

from ..common.api import ok, parse_body, parse_query
from ..common.datetime_utils import parse_iso_date_field
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..tenants.guards import current_user, make_guards
from .model import PublishSelection
from .schemas import AssignShift, DraftQuery, PublishRequest, UpdateAssignment, WeekQuery


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.auth_service)

    @app.route("/api/scheduling/week/<day>", methods=["GET"], endpoint="api_schedule_week")
    @login_required
    def week(day: str):
        q = parse_query(WeekQuery)
        view = container.schedule_service.get_week(
            actor=current_user(),
            day=parse_iso_date_field(day, "date"),
            employee_id=q.employee_id,
            rota_id=q.rota_id,
            published_only=q.published_only,
            drafts_only=q.show_drafts_only,
        )
        return ok(view.to_dict())

    @app.route("/api/scheduling/assign", methods=["POST"], endpoint="api_assign_shift")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def assign():
        body = parse_body(AssignShift)
        created = container.schedule_service.assign(actor=current_user(), **body.model_dump())
        return ok(created.to_dict(), message="Shift assigned successfully", status=201)

    @app.route("/api/scheduling/assign", methods=["PUT"], endpoint="api_update_assignment")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def update_assignment():
        body = parse_body(UpdateAssignment)
        fields = body.model_dump(exclude={"id"})
        updated = container.schedule_service.update_assignment(
            actor=current_user(), assignment_id=body.id, **fields
        )
        return ok(updated.to_dict(), message="Shift assignment updated")

    @app.route("/api/scheduling/assign", methods=["DELETE"], endpoint="api_remove_assignment")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def remove_assignment():
        assignment_id = request.args.get("id", type=int)
        if assignment_id is None:
            payload = request.get_json(silent=True) or {}
            assignment_id = payload.get("id")
        if assignment_id is None:
            raise ValidationError("Assignment id is required")
        container.schedule_service.remove_assignment(actor=current_user(), assignment_id=int(assignment_id))
        return ok(None, message="Shift assignment removed")

    @app.route("/api/scheduling/publish", methods=["GET"], endpoint="api_list_drafts")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def list_drafts():
        q = parse_query(DraftQuery)
        drafts = container.schedule_service.list_drafts(
            actor=current_user(), start_date=q.start_date, end_date=q.end_date, rota_id=q.rota_id
        )
        return ok([d.to_dict() for d in drafts])

    @app.route("/api/scheduling/publish", methods=["POST"], endpoint="api_publish")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def publish():
        body = parse_body(PublishRequest)
        actor = current_user()
        if body.publish_all:
            result = container.schedule_service.publish_all(actor=actor, day=body.week_of, rota_id=body.rota_id)
        else:
            if body.shift_ids is not None:
                selection = PublishSelection.by_ids(body.shift_ids)
            else:
                selection = PublishSelection.by_range(body.start_date, body.end_date, rota_id=body.rota_id)
            result = container.schedule_service.publish(actor=actor, selection=selection)
        return ok(result.to_dict(), message=result.message)
