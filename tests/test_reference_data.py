from __future__ import annotations

from datetime import time

import pytest

from rotaclock.core.constants import CUSTOM_TEMPLATE_NAME
from rotaclock.core.enums import Role
from rotaclock.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


def test_create_employee_rules(employee_service, admin, manager):
    emp = employee_service.create_employee(
        actor=admin, employee_code=" AGT010 ", first_name="Dee", last_name="Ten", role=Role.AGENT, hourly_rate="17.5"
    )

    assert emp.employee_code == "AGT010"
    assert emp.hourly_rate == 17.5
    with pytest.raises(ConflictError):
        employee_service.create_employee(actor=admin, employee_code="AGT010", first_name="X", last_name="Y")
    with pytest.raises(ValidationError):
        employee_service.create_employee(actor=admin, employee_code="AGT011", first_name=" ", last_name="Y")
    with pytest.raises(ValidationError):
        employee_service.create_employee(
            actor=admin, employee_code="AGT012", first_name="X", last_name="Y", hourly_rate=-1
        )
    with pytest.raises(AuthorizationError):
        employee_service.create_employee(actor=manager, employee_code="AGT013", first_name="X", last_name="Y")


def test_manager_lists_only_their_locations(employee_service, manager):
    ids = [e.id for e in employee_service.list_employees(actor=manager)]

    assert 5 not in ids
    assert {3, 4} <= set(ids)


def test_deactivated_employee_drops_out_of_active_list(employee_service, admin):
    employee_service.deactivate_employee(actor=admin, employee_id=4)

    assert 4 not in [e.id for e in employee_service.list_employees(actor=admin)]
    assert 4 in [e.id for e in employee_service.list_employees(actor=admin, include_inactive=True)]
    with pytest.raises(NotFoundError):
        employee_service.require_active(tenant_id=1, employee_id=4)
    with pytest.raises(AuthorizationError):
        employee_service.deactivate_employee(actor=admin, employee_id=1)


def test_template_create_and_update(template_service, manager):
    tpl = template_service.create_template(
        actor=manager, name="Late", start_time="14:00", end_time="22:00", color="#ff0000", required_staff=2
    )

    assert tpl.start_time == time(14, 0)
    assert tpl.color == "#FF0000"
    assert tpl.duration_hours == 8.0

    updated = template_service.update_template(actor=manager, template_id=tpl.id, end_time="23:30")
    assert updated.end_time == time(23, 30)
    assert updated.name == "Late"


def test_template_validation(template_service, manager, agent):
    with pytest.raises(ValidationError):
        template_service.create_template(actor=manager, name="Bad", start_time="9am", end_time="17:00")
    with pytest.raises(ValidationError):
        template_service.create_template(actor=manager, name="Bad", start_time="09:00", end_time="17:00", color="red")
    with pytest.raises(ValidationError):
        template_service.create_template(
            actor=manager, name="Bad", start_time="09:00", end_time="17:00", required_staff=0
        )
    with pytest.raises(AuthorizationError):
        template_service.create_template(actor=agent, name="Nope", start_time="09:00", end_time="17:00")


def test_overnight_template_wraps(template_service):
    night = template_service.require_active(tenant_id=1, template_id=2)

    assert night.duration_hours == 8.0


def test_deactivated_template_is_not_assignable(template_service, manager):
    template_service.deactivate_template(actor=manager, template_id=1)

    with pytest.raises(NotFoundError):
        template_service.require_active(tenant_id=1, template_id=1)


def test_custom_template_is_created_once(template_service, templates_repo):
    first = template_service.ensure_custom_template(tenant_id=1)
    second = template_service.ensure_custom_template(tenant_id=1)

    assert first.id == second.id
    assert first.name == CUSTOM_TEMPLATE_NAME
    assert len(templates_repo.rows) == 3


def test_notification_failures_are_swallowed(notifications_repo, notification_service):
    notifications_repo.fail = True

    assert notification_service.notify(tenant_id=1, employee_id=3, title="Hi", message="there") is False
    assert notification_service.notify_many(tenant_id=1, employee_ids=[3, 4], title="Hi", message="x") == 0


def test_inbox_and_mark_read(notification_service, agent):
    notification_service.notify(tenant_id=1, employee_id=3, title="Hi", message="there")
    notification_service.notify(tenant_id=1, employee_id=4, title="Other", message="person")

    inbox = notification_service.list_mine(actor=agent)
    assert [n.title for n in inbox] == ["Hi"]

    notification_service.mark_read(actor=agent, notification_id=inbox[0].id)
    assert notification_service.list_mine(actor=agent, unread_only=True) == []
    with pytest.raises(NotFoundError):
        notification_service.mark_read(actor=agent, notification_id=2)
