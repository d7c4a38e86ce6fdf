from __future__ import annotations

from flask import Flask

from ..common.api import ok, parse_body
from ..container import Container
from ..core.enums import Role
from .guards import current_user, make_guards
from .schemas import TenantSettingsUpdate


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.auth_service)

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        return ok(current_user())

    @app.route("/api/admin/settings/approvals", methods=["GET"], endpoint="api_get_settings")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def get_settings():
        return ok(container.tenant_settings_service.get(actor=current_user()))

    @app.route("/api/admin/settings/approvals", methods=["PUT"], endpoint="api_update_settings")
    @roles_required(Role.ADMIN)
    def update_settings():
        body = parse_body(TenantSettingsUpdate)
        settings = container.tenant_settings_service.update(
            actor=current_user(),
            allow_manager_approvals=body.allow_manager_approvals,
            emergency_mode=body.emergency_mode,
            max_break_hours=body.max_break_hours,
        )
        return ok(settings, message="Settings updated")
