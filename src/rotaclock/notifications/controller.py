from __future__ import annotations

from flask import Flask, request

from ..common.api import ok
from ..container import Container
from ..tenants.guards import current_user, make_guards


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_guards(container.auth_service)

    @app.route("/api/notifications", methods=["GET"], endpoint="api_notifications")
    @login_required
    def list_notifications():
        unread_only = request.args.get("unread") in {"1", "true", "yes"}
        return ok(container.notification_service.list_mine(actor=current_user(), unread_only=unread_only))

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="api_notification_read")
    @login_required
    def mark_read(notification_id: int):
        container.notification_service.mark_read(actor=current_user(), notification_id=notification_id)
        return ok(None, message="Notification marked as read")
