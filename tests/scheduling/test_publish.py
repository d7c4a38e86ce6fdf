from __future__ import annotations

from datetime import date

import pytest

from rotaclock.core.constants import NO_DRAFTS_MESSAGE
from rotaclock.core.exceptions import AuthorizationError, ValidationError
from rotaclock.scheduling.model import PublishSelection
from rotaclock.scheduling.service import ScheduleService
from rotaclock.tenants.model import TenantSettings


@pytest.fixture
def service(assignments_repo, rotas_repo, employee_service, template_service, tenants_repo, notification_service):
    return ScheduleService(
        assignments_repo, rotas_repo, employee_service, template_service, tenants_repo, notification_service
    )


def test_publish_by_range_only_flips_unpublished_rows_inside_range(service, assignments_repo, manager):
    draft = assignments_repo.add(employee_id=3, day=date(2024, 6, 3))
    already = assignments_repo.add(employee_id=3, day=date(2024, 6, 5), is_published=True)
    outside = assignments_repo.add(employee_id=4, day=date(2024, 6, 6))

    result = service.publish(
        actor=manager, selection=PublishSelection.by_range(date(2024, 6, 1), date(2024, 6, 4))
    )

    assert result.published_shifts == 1
    assert [s.id for s in result.shifts] == [draft]
    assert assignments_repo.rows[draft].is_published is True
    assert assignments_repo.rows[already].is_published is True
    assert assignments_repo.rows[outside].is_published is False


def test_publish_notifies_each_employee_once(service, assignments_repo, notifications_repo, admin):
    a1 = assignments_repo.add(employee_id=3, day=date(2024, 6, 3))
    a2 = assignments_repo.add(employee_id=3, day=date(2024, 6, 4))
    a3 = assignments_repo.add(employee_id=4, day=date(2024, 6, 4))

    result = service.publish(actor=admin, selection=PublishSelection.by_ids([a1, a2, a3]))

    assert result.published_shifts == 3
    assert result.affected_employees == 2
    assert result.message == "Successfully published 3 shift(s). 2 employees have been notified."
    assert notifications_repo.titles_for(3) == ["Schedule Published"]
    assert notifications_repo.titles_for(4) == ["Schedule Published"]


def test_publish_uses_urgent_title_in_emergency_mode(service, assignments_repo, notifications_repo, tenants_repo, admin):
    tenants_repo.settings = TenantSettings(tenant_id=1, emergency_mode=True)
    a1 = assignments_repo.add(employee_id=3, day=date(2024, 6, 3))

    service.publish(actor=admin, selection=PublishSelection.by_ids([a1]))

    assert notifications_repo.titles_for(3) == ["URGENT: Schedule Published"]


def test_publish_with_nothing_to_flip_is_rejected(service, assignments_repo, admin):
    published = assignments_repo.add(employee_id=3, day=date(2024, 6, 3), is_published=True)

    with pytest.raises(ValidationError, match=NO_DRAFTS_MESSAGE):
        service.publish(actor=admin, selection=PublishSelection.by_ids([published]))


def test_publish_all_uses_min_and_max_draft_dates_of_the_week(service, assignments_repo, admin):
    assignments_repo.add(employee_id=3, day=date(2024, 6, 4))
    assignments_repo.add(employee_id=4, day=date(2024, 6, 7))
    next_week = assignments_repo.add(employee_id=4, day=date(2024, 6, 11))

    result = service.publish_all(actor=admin, day=date(2024, 6, 5))

    assert result.published_shifts == 2
    assert {s.date for s in result.shifts} == {date(2024, 6, 4), date(2024, 6, 7)}
    assert assignments_repo.rows[next_week].is_published is False


def test_publish_all_without_drafts_is_rejected(service, assignments_repo, admin):
    assignments_repo.add(employee_id=3, day=date(2024, 6, 4), is_published=True)

    with pytest.raises(ValidationError, match=NO_DRAFTS_MESSAGE):
        service.publish_all(actor=admin, day=date(2024, 6, 5))


def test_agents_cannot_publish(service, assignments_repo, agent):
    a1 = assignments_repo.add(employee_id=3, day=date(2024, 6, 3))

    with pytest.raises(AuthorizationError):
        service.publish(actor=agent, selection=PublishSelection.by_ids([a1]))


def test_selection_constructors_validate_input():
    with pytest.raises(ValidationError):
        PublishSelection.by_ids([])
    with pytest.raises(ValidationError):
        PublishSelection.by_range(date(2024, 6, 5), date(2024, 6, 1))


def test_range_includes_both_boundary_dates(service, assignments_repo, admin):
    first = assignments_repo.add(employee_id=3, day=date(2024, 6, 3))
    last = assignments_repo.add(employee_id=4, day=date(2024, 6, 5))
    before = assignments_repo.add(employee_id=3, day=date(2024, 6, 2))
    after = assignments_repo.add(employee_id=4, day=date(2024, 6, 6))

    result = service.publish(actor=admin, selection=PublishSelection.by_range(date(2024, 6, 3), date(2024, 6, 5)))

    assert sorted(s.id for s in result.shifts) == [first, last]
    assert assignments_repo.rows[before].is_published is False
    assert assignments_repo.rows[after].is_published is False


def test_manager_publish_all_leaves_other_locations_as_drafts(service, assignments_repo, manager):
    own = assignments_repo.add(employee_id=3, day=date(2024, 6, 4))
    other = assignments_repo.add(employee_id=5, day=date(2024, 6, 4))

    result = service.publish_all(actor=manager, day=date(2024, 6, 5))

    assert [s.id for s in result.shifts] == [own]
    assert assignments_repo.rows[other].is_published is False


def test_manager_cannot_publish_other_location_by_id(service, assignments_repo, manager):
    other = assignments_repo.add(employee_id=5, day=date(2024, 6, 4))

    with pytest.raises(ValidationError, match=NO_DRAFTS_MESSAGE):
        service.publish(actor=manager, selection=PublishSelection.by_ids([other]))
    assert assignments_repo.rows[other].is_published is False


def test_manager_range_publish_skips_other_locations(service, assignments_repo, manager):
    own = assignments_repo.add(employee_id=4, day=date(2024, 6, 3))
    other = assignments_repo.add(employee_id=5, day=date(2024, 6, 3))

    result = service.publish(actor=manager, selection=PublishSelection.by_range(date(2024, 6, 3), date(2024, 6, 3)))

    assert [s.id for s in result.shifts] == [own]
    assert assignments_repo.rows[other].is_published is False
