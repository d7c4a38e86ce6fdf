from __future__ import annotations

from datetime import date, datetime, time

import pytest

from rotaclock.approvals.timesheet_service import TimesheetApprovalService
from rotaclock.core.enums import ApprovalAction, ApprovalStatus, PayPeriodStatus
from rotaclock.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from rotaclock.payroll.service import PayrollService
from rotaclock.tenants.model import TenantSettings


@pytest.fixture
def service(entries_repo, settings_service, periods_repo, employee_service, notification_service):
    payroll = PayrollService(periods_repo, entries_repo, employee_service)
    return TimesheetApprovalService(entries_repo, settings_service, payroll, notification_service)


@pytest.fixture
def entry_id(entries_repo):
    return entries_repo.add(
        employee_id=4,
        clock_in=datetime(2024, 6, 3, 9, 0),
        clock_out=datetime(2024, 6, 3, 17, 0),
        break_hours=0.5,
        total_hours=7.5,
    )


def test_approve_defaults_to_recorded_hours_and_employee_rate(service, entries_repo, notifications_repo, admin, entry_id):
    entry = service.decide(actor=admin, entry_id=entry_id, action=ApprovalAction.APPROVE)

    assert entry.approval_status == ApprovalStatus.APPROVED
    assert entry.approved_hours == 7.5
    assert entry.approved_rate == 20.0
    assert entry.total_pay == 150.0
    assert entry.approved_by == admin.employee_id
    assert entries_repo.approvals[0]["action"] == ApprovalAction.APPROVE
    assert notifications_repo.titles_for(4) == ["Shift Approved"]


def test_approve_accepts_numeric_strings(service, admin, entry_id):
    entry = service.decide(
        actor=admin, entry_id=entry_id, action=ApprovalAction.APPROVE, approved_hours="6", approved_rate="12.5"
    )

    assert entry.total_pay == 75.0


def test_approve_rejects_negative_overrides(service, admin, entry_id):
    with pytest.raises(ValidationError):
        service.decide(actor=admin, entry_id=entry_id, action=ApprovalAction.APPROVE, approved_hours=-1)


def test_reject_requires_a_reason(service, entries_repo, admin, entry_id):
    with pytest.raises(ValidationError, match="rejection_reason"):
        service.decide(actor=admin, entry_id=entry_id, action=ApprovalAction.REJECT, rejection_reason="   ")

    assert entries_repo.rows[entry_id].approval_status == ApprovalStatus.PENDING


def test_reject_with_reason(service, notifications_repo, admin, entry_id):
    entry = service.decide(
        actor=admin, entry_id=entry_id, action=ApprovalAction.REJECT, rejection_reason="Wrong site"
    )

    assert entry.approval_status == ApprovalStatus.REJECTED
    assert entry.rejection_reason == "Wrong site"
    assert entry.total_pay is None
    assert "Wrong site" in notifications_repo.sent[0].message


def test_decided_entries_cannot_be_decided_again(service, admin, entry_id):
    service.decide(actor=admin, entry_id=entry_id, action=ApprovalAction.APPROVE)

    with pytest.raises(ValidationError):
        service.decide(actor=admin, entry_id=entry_id, action=ApprovalAction.REJECT, rejection_reason="late")


def test_edit_action_recomputes_hours_and_marks_edited(service, admin, entry_id):
    entry = service.decide(
        actor=admin,
        entry_id=entry_id,
        action=ApprovalAction.EDIT,
        clock_in="2024-06-03T09:00:00",
        clock_out="2024-06-03T15:00:00",
        break_hours=1,
    )

    assert entry.approval_status == ApprovalStatus.EDITED
    assert entry.total_hours == 5.0
    assert entry.approved_hours == 5.0
    assert entry.total_pay == 100.0


@pytest.mark.parametrize(
    "changes",
    [
        {"clock_in": "2024-06-03T17:00:00", "clock_out": "2024-06-03T09:00:00"},
        {"clock_out": "2024-06-03T09:00:00"},
        {"break_hours": -0.5},
        {"break_hours": 9},
    ],
)
def test_edit_rejects_inconsistent_punches(service, admin, entry_id, changes):
    with pytest.raises(ValidationError):
        service.edit_entry(actor=admin, entry_id=entry_id, **changes)


def test_admin_edit_resets_approval_and_writes_audit(service, entries_repo, admin, entry_id):
    service.decide(actor=admin, entry_id=entry_id, action=ApprovalAction.APPROVE)

    entry = service.edit_entry(actor=admin, entry_id=entry_id, clock_out="2024-06-03T18:00:00")

    assert entry.approval_status == ApprovalStatus.PENDING
    assert entry.total_hours == 8.5
    assert entry.total_pay is None
    audit = entries_repo.audits[0]
    assert audit["changed_by"] == admin.employee_id
    assert audit["changes"]["before"]["clock_out"] == "2024-06-03T17:00:00"
    assert audit["changes"]["after"]["clock_out"] == "2024-06-03T18:00:00"


def test_notes_only_edit_keeps_approval(service, admin, entry_id):
    service.decide(actor=admin, entry_id=entry_id, action=ApprovalAction.APPROVE)

    entry = service.edit_entry(actor=admin, entry_id=entry_id, notes="badge reader offline")

    assert entry.approval_status == ApprovalStatus.APPROVED
    assert entry.notes == "badge reader offline"


def test_break_hours_correction(service, admin, entry_id):
    entry = service.correct_break_hours(actor=admin, entry_id=entry_id, break_hours="1.5")

    assert entry.break_hours == 1.5
    assert entry.total_hours == 6.5


def test_locked_pay_period_blocks_changes(service, periods_repo, admin, entry_id):
    period_id = periods_repo.upsert(tenant_id=1, start_date=date(2024, 6, 1), end_date=date(2024, 6, 14))
    periods_repo.set_status(tenant_id=1, period_id=period_id, status=PayPeriodStatus.LOCKED)

    with pytest.raises(ValidationError, match="locked"):
        service.decide(actor=admin, entry_id=entry_id, action=ApprovalAction.APPROVE)


def test_managers_need_tenant_permission(service, tenants_repo, manager, entry_id):
    with pytest.raises(AuthorizationError):
        service.decide(actor=manager, entry_id=entry_id, action=ApprovalAction.APPROVE)

    tenants_repo.settings = TenantSettings(tenant_id=1, allow_manager_approvals=True)
    entry = service.decide(actor=manager, entry_id=entry_id, action=ApprovalAction.APPROVE)
    assert entry.approval_status == ApprovalStatus.APPROVED


def test_managers_only_see_their_locations(service, entries_repo, tenants_repo, manager):
    tenants_repo.settings = TenantSettings(tenant_id=1, allow_manager_approvals=True)
    other = entries_repo.add(
        employee_id=5, clock_in=datetime(2024, 6, 3, 9), clock_out=datetime(2024, 6, 3, 17), total_hours=8
    )

    with pytest.raises(NotFoundError):
        service.decide(actor=manager, entry_id=other, action=ApprovalAction.APPROVE)


def test_list_approvals_flags_and_paginates(service, entries_repo, admin):
    late = entries_repo.add(
        employee_id=3,
        clock_in=datetime(2024, 6, 3, 9, 10),
        clock_out=datetime(2024, 6, 3, 17, 0),
        total_hours=7.83,
        shift_date=date(2024, 6, 3),
        scheduled_start=time(9, 0),
        scheduled_end=time(17, 0),
    )
    entries_repo.add(employee_id=4, clock_in=datetime(2024, 6, 4, 9), clock_out=datetime(2024, 6, 4, 17), total_hours=8)
    entries_repo.add(employee_id=4, clock_in=datetime(2024, 6, 5, 9), clock_out=datetime(2024, 6, 5, 17), total_hours=8)

    page = service.list_approvals(actor=admin, status="pending", page=1, limit=2)
    body = page.to_dict()

    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert body["stats"]["pending"] == 3
    first = body["items"][0]
    assert first["id"] == late
    assert first["discrepancies"] == {"missing_events": False, "is_late": True, "early_leave": False, "overtime": False}


def test_list_approvals_rejects_unknown_status(service, admin):
    with pytest.raises(ValidationError):
        service.list_approvals(actor=admin, status="archived")


def test_bulk_approve_counts_pending_completed_entries(service, entries_repo, admin, entry_id):
    entries_repo.add(employee_id=3, clock_in=datetime(2024, 6, 20, 9), clock_out=datetime(2024, 6, 20, 17), total_hours=8)

    count = service.bulk_approve(actor=admin, start_date=date(2024, 6, 1), end_date=date(2024, 6, 7))

    assert count == 1
    assert entries_repo.rows[entry_id].approval_status == ApprovalStatus.APPROVED
