from __future__ import annotations

from flask import Flask, request

from ..common.api import ok, parse_body
from ..common.datetime_utils import fmt_date, today_local
from ..container import Container
from ..core.enums import Role
from ..tenants.guards import current_user, make_guards
from .schemas import RotaCreate


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.auth_service)

    @app.route("/api/rotas", methods=["GET"], endpoint="api_list_rotas")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def list_rotas():
        day = request.args.get("date") or fmt_date(today_local())
        return ok(container.rota_service.list_for_week(actor=current_user(), day=day))

    @app.route("/api/rotas", methods=["POST"], endpoint="api_create_rota")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def create_rota():
        body = parse_body(RotaCreate)
        rota = container.rota_service.create_rota(
            actor=current_user(), name=body.name, week_start_date=body.week_start_date
        )
        return ok(rota, message="Rota created", status=201)

    @app.route("/api/rotas/<int:rota_id>/publish", methods=["POST"], endpoint="api_publish_rota")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def publish_rota(rota_id: int):
        rota, result = container.rota_service.publish_rota(actor=current_user(), rota_id=rota_id)
        data = {"rota": rota, "publish": result.to_dict() if result else None}
        return ok(data, message=result.message if result else "Rota published")
