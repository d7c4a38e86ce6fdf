from __future__ import annotations

from datetime import date, datetime

import pytest

from rotaclock.core.enums import AdjustmentKind, ApprovalStatus, PayPeriodStatus
from rotaclock.core.exceptions import AuthorizationError, ValidationError
from rotaclock.payroll.service import PayrollService


@pytest.fixture
def service(periods_repo, entries_repo, employee_service):
    return PayrollService(periods_repo, entries_repo, employee_service)


def _worked(entries_repo, employee_id, day, hours, status=ApprovalStatus.APPROVED, **extra):
    return entries_repo.add(
        employee_id=employee_id,
        clock_in=datetime.combine(day, datetime.min.time()).replace(hour=8),
        clock_out=datetime.combine(day, datetime.min.time()).replace(hour=8 + int(hours)),
        total_hours=hours,
        approval_status=status,
        **extra,
    )


def test_summary_counts_only_approved_time_and_adds_adjustments(service, entries_repo, admin):
    period = service.create_period(actor=admin, start_date=date(2024, 6, 1), end_date=date(2024, 6, 14))
    _worked(entries_repo, 4, date(2024, 6, 3), 8)
    _worked(entries_repo, 4, date(2024, 6, 4), 10, status=ApprovalStatus.EDITED, approved_hours=10, total_pay=200)
    _worked(entries_repo, 4, date(2024, 6, 5), 8, status=ApprovalStatus.PENDING)
    _worked(entries_repo, 3, date(2024, 6, 5), 6, status=ApprovalStatus.REJECTED)
    service.add_adjustment(
        actor=admin, kind=AdjustmentKind.BONUS, pay_period_id=period.id, employee_id=4, amount=50, reason="Cover"
    )
    service.add_adjustment(
        actor=admin, kind=AdjustmentKind.DEDUCTION, pay_period_id=period.id, employee_id=4, amount="10.5", reason="Uniform"
    )

    summary = service.summary(actor=admin, pay_period_id=period.id).to_dict()

    assert len(summary["employees"]) == 1
    line = summary["employees"][0]
    assert line["entries"] == 2
    assert line["hours"] == 18.0
    assert line["overtime_hours"] == 2.0
    assert line["gross_pay"] == 360.0
    assert line["net_pay"] == 399.5
    assert summary["totals"]["net_pay"] == 399.5


def test_locked_period_refuses_adjustments(service, admin):
    period = service.create_period(actor=admin, start_date=date(2024, 6, 1), end_date=date(2024, 6, 14))
    service.set_period_status(actor=admin, period_id=period.id, status=PayPeriodStatus.LOCKED)

    with pytest.raises(ValidationError):
        service.add_adjustment(
            actor=admin, kind=AdjustmentKind.BONUS, pay_period_id=period.id, employee_id=4, amount=5, reason="x"
        )
    with pytest.raises(ValidationError):
        service.ensure_unlocked(tenant_id=1, day=date(2024, 6, 7))
    service.ensure_unlocked(tenant_id=1, day=date(2024, 6, 15))


def test_adjustment_amount_must_be_positive(service, admin):
    period = service.create_period(actor=admin, start_date=date(2024, 6, 1), end_date=date(2024, 6, 14))

    with pytest.raises(ValidationError):
        service.add_adjustment(
            actor=admin, kind=AdjustmentKind.BONUS, pay_period_id=period.id, employee_id=4, amount=0, reason="x"
        )


def test_same_period_is_saved_once(service, admin):
    first = service.create_period(actor=admin, start_date=date(2024, 6, 1), end_date=date(2024, 6, 14))
    second = service.create_period(actor=admin, start_date=date(2024, 6, 1), end_date=date(2024, 6, 14))

    assert first.id == second.id


def test_payroll_is_admin_only(service, manager):
    with pytest.raises(AuthorizationError):
        service.summary(actor=manager, start_date=date(2024, 6, 1), end_date=date(2024, 6, 14))
