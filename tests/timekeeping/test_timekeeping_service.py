from __future__ import annotations

from datetime import date, datetime

import pytest

from rotaclock.core.enums import ApprovalStatus, TimeEntryStatus
from rotaclock.core.exceptions import NotFoundError, ValidationError
from rotaclock.tenants.model import TenantSettings
from rotaclock.timekeeping.service import TimekeepingService


@pytest.fixture
def service(entries_repo, assignments_repo, employee_service, tenants_repo, notification_service):
    return TimekeepingService(
        entries_repo, assignments_repo, employee_service, tenants_repo, notification_service, poll_interval_seconds=10
    )


def test_clock_in_links_todays_published_shift(service, assignments_repo, agent):
    assignments_repo.add(employee_id=3, day=date(2024, 6, 3))
    published = assignments_repo.add(employee_id=3, day=date(2024, 6, 3), is_published=True)

    entry = service.clock_in(actor=agent, now=datetime(2024, 6, 3, 8, 58))

    assert entry.status == TimeEntryStatus.IN_PROGRESS
    assert entry.assignment_id == published


def test_double_clock_in_is_rejected(service, agent):
    service.clock_in(actor=agent, now=datetime(2024, 6, 3, 9, 0))

    with pytest.raises(ValidationError, match="already clocked in"):
        service.clock_in(actor=agent, now=datetime(2024, 6, 3, 9, 5))


def test_full_day_with_break(service, notifications_repo, agent):
    service.clock_in(actor=agent, now=datetime(2024, 6, 3, 9, 0))
    on_break = service.start_break(actor=agent, now=datetime(2024, 6, 3, 12, 0))
    assert on_break.status == TimeEntryStatus.BREAK

    back = service.end_break(actor=agent, now=datetime(2024, 6, 3, 12, 30))
    assert back.break_hours == 0.5
    assert back.status == TimeEntryStatus.IN_PROGRESS

    done = service.clock_out(actor=agent, notes="all good", now=datetime(2024, 6, 3, 17, 0))

    assert done.status == TimeEntryStatus.COMPLETED
    assert done.approval_status == ApprovalStatus.PENDING
    assert done.total_hours == 7.5
    assert notifications_repo.titles_for(1) == ["Shift Approval Required"]
    assert service.current_entry(actor=agent) is None


def test_clock_out_closes_an_open_break(service, agent):
    service.clock_in(actor=agent, now=datetime(2024, 6, 3, 9, 0))
    service.start_break(actor=agent, now=datetime(2024, 6, 3, 16, 0))

    done = service.clock_out(actor=agent, now=datetime(2024, 6, 3, 17, 0))

    assert done.break_hours == 1.0
    assert done.total_hours == 7.0


def test_break_allowance_is_enforced(service, tenants_repo, agent):
    tenants_repo.settings = TenantSettings(tenant_id=1, max_break_hours=0.5)
    service.clock_in(actor=agent, now=datetime(2024, 6, 3, 9, 0))
    service.start_break(actor=agent, now=datetime(2024, 6, 3, 12, 0))
    service.end_break(actor=agent, now=datetime(2024, 6, 3, 12, 30))

    with pytest.raises(ValidationError, match="Break allowance"):
        service.start_break(actor=agent, now=datetime(2024, 6, 3, 15, 0))


def test_break_transitions_need_the_right_state(service, agent):
    with pytest.raises(NotFoundError):
        service.start_break(actor=agent, now=datetime(2024, 6, 3, 9, 0))

    service.clock_in(actor=agent, now=datetime(2024, 6, 3, 9, 0))
    with pytest.raises(NotFoundError):
        service.end_break(actor=agent, now=datetime(2024, 6, 3, 10, 0))

    service.start_break(actor=agent, now=datetime(2024, 6, 3, 10, 0))
    with pytest.raises(ValidationError):
        service.start_break(actor=agent, now=datetime(2024, 6, 3, 10, 5))


def test_clock_out_without_shift_is_not_found(service, agent):
    with pytest.raises(NotFoundError):
        service.clock_out(actor=agent, now=datetime(2024, 6, 3, 17, 0))


def test_live_status_carries_poll_interval(service, manager, agent, as_user, employees_repo):
    service.clock_in(actor=agent, now=datetime(2024, 6, 3, 9, 0))
    other = as_user(employees_repo.rows[4])
    service.clock_in(actor=other, now=datetime(2024, 6, 3, 9, 0))
    service.start_break(actor=other, now=datetime(2024, 6, 3, 11, 0))

    status = service.live_status(actor=manager, now=datetime(2024, 6, 3, 11, 30))

    assert (status.clocked_in, status.on_break) == (1, 1)
    assert status.poll_interval_seconds == 10
