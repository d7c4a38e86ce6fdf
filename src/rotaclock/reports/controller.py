from __future__ import annotations

from flask import Flask

from ..common.api import ok, parse_query
from ..container import Container
from ..tenants.guards import current_user, make_guards
from .schemas import AttendanceQuery


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_guards(container.auth_service)

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_attendance_report")
    @login_required
    def attendance_report():
        q = parse_query(AttendanceQuery)
        report = container.report_service.build_attendance_report(
            actor=current_user(), start=q.start_date, end=q.end_date, employee_id=q.employee_id
        )
        return ok(report.to_dict())
