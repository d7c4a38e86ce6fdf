from __future__ import annotations

from flask import Flask

from ..common.api import ok, parse_body
from ..container import Container
from ..core.enums import Role
from ..tenants.guards import current_user, make_guards
from .schemas import ClockIn, ClockOut


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.auth_service)

    @app.route("/api/time/clock-in", methods=["POST"], endpoint="api_clock_in")
    @login_required
    def clock_in():
        body = parse_body(ClockIn)
        entry = container.timekeeping_service.clock_in(actor=current_user(), assignment_id=body.assignment_id)
        return ok(entry, message="Clocked in", status=201)

    @app.route("/api/time/clock-out", methods=["POST"], endpoint="api_clock_out")
    @login_required
    def clock_out():
        body = parse_body(ClockOut)
        entry = container.timekeeping_service.clock_out(actor=current_user(), notes=body.notes)
        return ok(entry, message="Clocked out; shift submitted for approval")

    @app.route("/api/time/break-start", methods=["POST"], endpoint="api_break_start")
    @login_required
    def break_start():
        return ok(container.timekeeping_service.start_break(actor=current_user()), message="Break started")

    @app.route("/api/time/break-end", methods=["POST"], endpoint="api_break_end")
    @login_required
    def break_end():
        return ok(container.timekeeping_service.end_break(actor=current_user()), message="Break ended")

    @app.route("/api/time/status", methods=["GET"], endpoint="api_time_status")
    @login_required
    def status():
        return ok(container.timekeeping_service.current_entry(actor=current_user()))

    @app.route("/api/dashboard/live", methods=["GET"], endpoint="api_dashboard_live")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def live():
        return ok(container.timekeeping_service.live_status(actor=current_user()))
