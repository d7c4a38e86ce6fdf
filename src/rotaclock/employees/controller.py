from __future__ import annotations

from flask import Flask

from ..common.api import ok, parse_body, parse_query
from ..container import Container
from ..core.enums import Role
from ..tenants.guards import current_user, make_guards
from .schemas import EmployeeCreate, EmployeeQuery


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.auth_service)

    @app.route("/api/employees", methods=["GET"], endpoint="api_list_employees")
    @roles_required(Role.ADMIN, Role.MANAGER, Role.TEAM_LEAD, Role.PROJECT_MANAGER)
    def list_employees():
        q = parse_query(EmployeeQuery)
        employees = container.employee_service.list_employees(
            actor=current_user(),
            department=q.department,
            role=q.role,
            include_inactive=q.include_inactive,
        )
        return ok(employees)

    @app.route("/api/employees", methods=["POST"], endpoint="api_create_employee")
    @roles_required(Role.ADMIN)
    def create_employee():
        body = parse_body(EmployeeCreate)
        emp = container.employee_service.create_employee(actor=current_user(), **body.model_dump())
        return ok(emp, message="Employee created", status=201)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="api_get_employee")
    @login_required
    def get_employee(employee_id: int):
        return ok(container.employee_service.get_employee(actor=current_user(), employee_id=employee_id))

    @app.route("/api/employees/<int:employee_id>/deactivate", methods=["POST"], endpoint="api_deactivate_employee")
    @roles_required(Role.ADMIN)
    def deactivate_employee(employee_id: int):
        container.employee_service.deactivate_employee(actor=current_user(), employee_id=employee_id)
        return ok(None, message="Employee deactivated")
