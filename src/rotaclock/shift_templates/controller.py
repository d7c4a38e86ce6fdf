from __future__ import annotations

from flask import Flask

from ..common.api import ok, parse_body
from ..container import Container
from ..core.enums import Role
from ..tenants.guards import current_user, make_guards
from .schemas import TemplateCreate, TemplateUpdate


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.auth_service)

    @app.route("/api/shift-templates", methods=["GET"], endpoint="api_list_templates")
    @login_required
    def list_templates():
        return ok(container.template_service.list_active(tenant_id=current_user().tenant_id))

    @app.route("/api/shift-templates", methods=["POST"], endpoint="api_create_template")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def create_template():
        body = parse_body(TemplateCreate)
        tpl = container.template_service.create_template(actor=current_user(), **body.model_dump())
        return ok(tpl, message="Shift template created", status=201)

    @app.route("/api/shift-templates/<int:template_id>", methods=["PUT"], endpoint="api_update_template")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def update_template(template_id: int):
        body = parse_body(TemplateUpdate)
        tpl = container.template_service.update_template(
            actor=current_user(), template_id=template_id, **body.model_dump()
        )
        return ok(tpl, message="Shift template updated")

    @app.route("/api/shift-templates/<int:template_id>", methods=["DELETE"], endpoint="api_deactivate_template")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def deactivate_template(template_id: int):
        container.template_service.deactivate_template(actor=current_user(), template_id=template_id)
        return ok(None, message="Shift template deactivated")
