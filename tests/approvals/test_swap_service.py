from __future__ import annotations

from datetime import date

import pytest

from rotaclock.approvals.swap_service import SwapService
from rotaclock.core.enums import AssignmentStatus, RequestStatus, Role
from rotaclock.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


@pytest.fixture
def service(swaps_repo, assignments_repo, employee_service, notification_service):
    return SwapService(swaps_repo, assignments_repo, employee_service, notification_service)


@pytest.fixture
def shifts(assignments_repo):
    return (
        assignments_repo.add(employee_id=3, day=date(2024, 6, 3), is_published=True),
        assignments_repo.add(employee_id=4, day=date(2024, 6, 4), is_published=True),
    )


def test_create_swap_notifies_both_parties(service, notifications_repo, agent, shifts):
    req = service.create_request(
        actor=agent, requester_id=3, target_id=4, original_assignment_id=shifts[0], requested_assignment_id=shifts[1]
    )

    assert req.status == RequestStatus.PENDING
    assert notifications_repo.titles_for(4) == ["Shift Swap Request"]
    assert notifications_repo.titles_for(3) == ["Swap Request Submitted"]


def test_swap_across_locations_is_rejected(service, new_employee, assignments_repo, agent, shifts):
    new_employee(8, Role.AGENT, 20)
    theirs = assignments_repo.add(employee_id=8, day=date(2024, 6, 4), is_published=True)

    with pytest.raises(ValidationError, match="not in the same location"):
        service.create_request(
            actor=agent, requester_id=3, target_id=8, original_assignment_id=shifts[0], requested_assignment_id=theirs
        )


def test_swap_with_unassigned_location_is_allowed(service, new_employee, assignments_repo, agent, shifts):
    new_employee(8, Role.AGENT, None)
    theirs = assignments_repo.add(employee_id=8, day=date(2024, 6, 4), is_published=True)

    req = service.create_request(
        actor=agent, requester_id=3, target_id=8, original_assignment_id=shifts[0], requested_assignment_id=theirs
    )
    assert req.target_id == 8


def test_assignments_must_belong_to_each_party(service, agent, shifts):
    with pytest.raises(NotFoundError):
        service.create_request(
            actor=agent, requester_id=3, target_id=4, original_assignment_id=shifts[1], requested_assignment_id=shifts[0]
        )


def test_inactive_target_is_not_found(service, new_employee, agent, shifts):
    new_employee(8, Role.AGENT, 10, active=False)

    with pytest.raises(NotFoundError):
        service.create_request(
            actor=agent, requester_id=3, target_id=8, original_assignment_id=shifts[0], requested_assignment_id=shifts[1]
        )


def test_duplicate_pending_swap_conflicts(service, agent, shifts):
    kwargs = dict(requester_id=3, target_id=4, original_assignment_id=shifts[0], requested_assignment_id=shifts[1])
    service.create_request(actor=agent, **kwargs)

    with pytest.raises(ConflictError):
        service.create_request(actor=agent, **kwargs)


def test_create_by_date_resolves_shifts(service, agent, shifts):
    req = service.create_by_date(
        actor=agent, requester_id=3, target_id=4, original_date=date(2024, 6, 3), requested_date=date(2024, 6, 4)
    )

    assert (req.original_assignment_id, req.requested_assignment_id) == shifts


def test_approval_exchanges_employees(service, assignments_repo, manager, agent, shifts):
    req = service.create_request(
        actor=agent, requester_id=3, target_id=4, original_assignment_id=shifts[0], requested_assignment_id=shifts[1]
    )

    decided = service.decide(actor=manager, request_id=req.id, approve=True)

    assert decided.status == RequestStatus.APPROVED
    assert assignments_repo.rows[shifts[0]].employee_id == 4
    assert assignments_repo.rows[shifts[1]].employee_id == 3
    assert assignments_repo.rows[shifts[0]].status == AssignmentStatus.SWAPPED


def test_rejection_requires_notes_and_leaves_shifts(service, assignments_repo, admin, agent, shifts):
    req = service.create_request(
        actor=agent, requester_id=3, target_id=4, original_assignment_id=shifts[0], requested_assignment_id=shifts[1]
    )

    with pytest.raises(ValidationError):
        service.decide(actor=admin, request_id=req.id, approve=False)

    decided = service.decide(actor=admin, request_id=req.id, approve=False, manager_notes="Understaffed")
    assert decided.status == RequestStatus.REJECTED
    assert assignments_repo.rows[shifts[0]].employee_id == 3


def test_agents_cannot_decide_swaps(service, agent, shifts):
    req = service.create_request(
        actor=agent, requester_id=3, target_id=4, original_assignment_id=shifts[0], requested_assignment_id=shifts[1]
    )

    with pytest.raises(AuthorizationError):
        service.decide(actor=agent, request_id=req.id, approve=True)


def test_manager_outside_location_cannot_decide(service, new_employee, as_user, assignments_repo, admin):
    new_employee(8, Role.AGENT, 20)
    new_employee(9, Role.AGENT, 20)
    mine = assignments_repo.add(employee_id=8, day=date(2024, 6, 3))
    theirs = assignments_repo.add(employee_id=9, day=date(2024, 6, 4))
    req = service.create_request(
        actor=admin, requester_id=8, target_id=9, original_assignment_id=mine, requested_assignment_id=theirs
    )
    other_manager = as_user(new_employee(7, Role.MANAGER, 10), scope=(10,))

    with pytest.raises(AuthorizationError):
        service.decide(actor=other_manager, request_id=req.id, approve=True)
