from __future__ import annotations

from flask import Flask

from ..common.api import ok, parse_body, parse_query
from ..container import Container
from ..core.enums import Role
from ..tenants.guards import current_user, make_guards
from .schemas import LocationCreate, LocationQuery, LocationUpdate, ManagerLocationCreate, ManagerLocationDelete


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.auth_service)

    @app.route("/api/locations", methods=["GET"], endpoint="api_list_locations")
    @login_required
    def list_locations():
        q = parse_query(LocationQuery)
        return ok(container.location_service.list_locations(actor=current_user(), include_inactive=q.include_inactive))

    @app.route("/api/locations", methods=["POST"], endpoint="api_create_location")
    @roles_required(Role.ADMIN)
    def create_location():
        body = parse_body(LocationCreate)
        loc = container.location_service.create_location(actor=current_user(), **body.model_dump())
        return ok(loc, message="Location created successfully", status=201)

    @app.route("/api/locations/<int:location_id>", methods=["PUT"], endpoint="api_update_location")
    @roles_required(Role.ADMIN)
    def update_location(location_id: int):
        body = parse_body(LocationUpdate)
        loc = container.location_service.update_location(
            actor=current_user(), location_id=location_id, **body.model_dump()
        )
        return ok(loc, message="Location updated successfully")

    @app.route("/api/locations/<int:location_id>", methods=["DELETE"], endpoint="api_delete_location")
    @roles_required(Role.ADMIN)
    def delete_location(location_id: int):
        container.location_service.delete_location(actor=current_user(), location_id=location_id)
        return ok(None, message="Location deleted successfully")

    @app.route("/api/manager-locations", methods=["GET"], endpoint="api_list_manager_locations")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def list_manager_locations():
        return ok(container.location_service.list_manager_locations(actor=current_user()))

    @app.route("/api/manager-locations", methods=["POST"], endpoint="api_assign_manager_location")
    @roles_required(Role.ADMIN)
    def assign_manager_location():
        body = parse_body(ManagerLocationCreate)
        link = container.location_service.assign_manager(actor=current_user(), **body.model_dump())
        return ok(link, message="Manager assigned to location", status=201)

    @app.route("/api/manager-locations", methods=["DELETE"], endpoint="api_unassign_manager_location")
    @roles_required(Role.ADMIN)
    def unassign_manager_location():
        q = parse_query(ManagerLocationDelete)
        container.location_service.unassign_manager(actor=current_user(), link_id=q.id)
        return ok(None, message="Manager removed from location")
