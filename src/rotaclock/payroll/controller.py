from __future__ import annotations

from flask import Flask

from ..common.api import ok, parse_body, parse_query
from ..container import Container
from ..core.enums import AdjustmentKind, Role
from ..tenants.guards import current_user, make_guards
from .schemas import AdjustmentCreate, PayPeriodCreate, PayPeriodQuery, PayPeriodStatusUpdate, SummaryQuery


def register(app: Flask, container: Container) -> None:
    _, roles_required = make_guards(container.auth_service)

    @app.route("/api/admin/pay-periods", methods=["GET"], endpoint="api_list_pay_periods")
    @roles_required(Role.ADMIN)
    def list_pay_periods():
        q = parse_query(PayPeriodQuery)
        return ok(container.payroll_service.list_periods(actor=current_user(), status=q.status))

    @app.route("/api/admin/pay-periods", methods=["POST"], endpoint="api_create_pay_period")
    @roles_required(Role.ADMIN)
    def create_pay_period():
        body = parse_body(PayPeriodCreate)
        period = container.payroll_service.create_period(
            actor=current_user(), start_date=body.start_date, end_date=body.end_date
        )
        return ok(period, message="Pay period saved", status=201)

    @app.route("/api/admin/pay-periods", methods=["PUT"], endpoint="api_update_pay_period")
    @roles_required(Role.ADMIN)
    def update_pay_period():
        body = parse_body(PayPeriodStatusUpdate)
        period = container.payroll_service.set_period_status(
            actor=current_user(), period_id=body.id, status=body.status
        )
        return ok(period, message=f"Pay period {body.status.value}")

    @app.route("/api/admin/payroll/summary", methods=["GET"], endpoint="api_payroll_summary")
    @roles_required(Role.ADMIN)
    def payroll_summary():
        q = parse_query(SummaryQuery)
        summary = container.payroll_service.summary(
            actor=current_user(), start_date=q.start_date, end_date=q.end_date, pay_period_id=q.pay_period_id
        )
        return ok(summary.to_dict())

    def _add_adjustment(kind: AdjustmentKind):
        body = parse_body(AdjustmentCreate)
        adj = container.payroll_service.add_adjustment(actor=current_user(), kind=kind, **body.model_dump())
        return ok(adj, message=f"{kind.value.capitalize()} added", status=201)

    @app.route("/api/admin/payroll/bonuses", methods=["POST"], endpoint="api_add_bonus")
    @roles_required(Role.ADMIN)
    def add_bonus():
        return _add_adjustment(AdjustmentKind.BONUS)

    @app.route("/api/admin/payroll/deductions", methods=["POST"], endpoint="api_add_deduction")
    @roles_required(Role.ADMIN)
    def add_deduction():
        return _add_adjustment(AdjustmentKind.DEDUCTION)

    @app.route("/api/admin/pay-periods/<int:period_id>/adjustments", methods=["GET"], endpoint="api_list_adjustments")
    @roles_required(Role.ADMIN)
    def list_adjustments(period_id: int):
        return ok(container.payroll_service.list_adjustments(actor=current_user(), pay_period_id=period_id))
