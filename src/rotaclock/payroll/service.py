from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import fmt_date, today_local
from ..common.validators import require_non_empty, require_positive
from ..core.enums import AdjustmentKind, ApprovalStatus, PayFrequency, PayPeriodStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..tenants.model import ApiUser
from ..timekeeping.repository import TimeEntryRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayPeriod, PayrollAdjustment, PayrollLine, PayrollSummary
from .periods import pay_period_bounds
from .repository import PayPeriodRepository

logger = structlog.get_logger("rotaclock.payroll")

_PAYABLE = (ApprovalStatus.APPROVED, ApprovalStatus.EDITED)


class PayrollService:
    def __init__(
        self,
        periods: PayPeriodRepository,
        entries: TimeEntryRepository,
        employees: EmployeeService,
        *,
        frequency: PayFrequency = PayFrequency.BIWEEKLY,
        anchor: date = date(2024, 1, 1),
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._periods = periods
        self._entries = entries
        self._employees = employees
        self._frequency = frequency
        self._anchor = anchor
        self._calculator = calculator or StandardPayrollCalculator()

    @staticmethod
    def _require_admin(actor: ApiUser) -> None:
        if not actor.is_admin:
            raise AuthorizationError("Only admins can manage payroll")

    def ensure_unlocked(self, *, tenant_id: int, day: Optional[date]) -> None:
        """Refuse changes to time worked inside a locked pay period."""
        if day is None:
            return
        locked = self._periods.find_locked_covering(tenant_id=tenant_id, day=day)
        if locked:
            raise ValidationError(
                f"Pay period {fmt_date(locked.start_date)} to {fmt_date(locked.end_date)} is locked"
            )

    def current_bounds(self, reference: Optional[date] = None) -> tuple[date, date]:
        return pay_period_bounds(self._frequency, reference or today_local(), anchor=self._anchor)

    def create_period(self, *, actor: ApiUser, start_date: date, end_date: date) -> PayPeriod:
        self._require_admin(actor)
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")
        period_id = self._periods.upsert(tenant_id=actor.tenant_id, start_date=start_date, end_date=end_date)
        logger.info("pay_period_saved", period_id=period_id, start_date=fmt_date(start_date), end_date=fmt_date(end_date))
        return self._require_period(actor, period_id)

    def list_periods(self, *, actor: ApiUser, status: Optional[PayPeriodStatus] = None) -> Sequence[PayPeriod]:
        self._require_admin(actor)
        return self._periods.list_periods(tenant_id=actor.tenant_id, status=status)

    def set_period_status(self, *, actor: ApiUser, period_id: int, status: PayPeriodStatus) -> PayPeriod:
        self._require_admin(actor)
        period = self._require_period(actor, period_id)
        self._periods.set_status(tenant_id=actor.tenant_id, period_id=period.id, status=status)
        logger.info("pay_period_status_changed", period_id=period.id, status=status.value)
        return self._require_period(actor, period.id)

    def _require_period(self, actor: ApiUser, period_id: int) -> PayPeriod:
        period = self._periods.get(tenant_id=actor.tenant_id, period_id=int(period_id))
        if not period:
            raise NotFoundError("Pay period not found")
        return period

    def add_adjustment(
        self,
        *,
        actor: ApiUser,
        kind: AdjustmentKind,
        pay_period_id: int,
        employee_id: int,
        amount: float,
        reason: str,
        category: Optional[str] = None,
    ) -> PayrollAdjustment:
        self._require_admin(actor)
        period = self._require_period(actor, pay_period_id)
        if period.is_locked:
            raise ValidationError("Pay period is locked")
        employee = self._employees.require_active(tenant_id=actor.tenant_id, employee_id=int(employee_id))
        clean_amount = require_positive(amount, "amount")
        clean_reason = require_non_empty(reason, "reason")

        adj_id = self._periods.add_adjustment(
            tenant_id=actor.tenant_id,
            pay_period_id=period.id,
            employee_id=employee.id,
            kind=kind,
            amount=clean_amount,
            reason=clean_reason,
            category=category,
            applied_by=actor.employee_id,
        )
        logger.info("payroll_adjustment_added", adjustment_id=adj_id, kind=kind.value, employee_id=employee.id)
        return PayrollAdjustment(
            id=adj_id,
            tenant_id=actor.tenant_id,
            pay_period_id=period.id,
            employee_id=employee.id,
            kind=kind,
            amount=clean_amount,
            reason=clean_reason,
            applied_by=actor.employee_id,
            category=category,
        )

    def list_adjustments(self, *, actor: ApiUser, pay_period_id: int) -> Sequence[PayrollAdjustment]:
        self._require_admin(actor)
        period = self._require_period(actor, pay_period_id)
        return self._periods.list_adjustments(tenant_id=actor.tenant_id, pay_period_id=period.id)

    def summary(
        self,
        *,
        actor: ApiUser,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        pay_period_id: Optional[int] = None,
    ) -> PayrollSummary:
        """Approved hours and pay per employee, with the period's bonuses and deductions."""
        self._require_admin(actor)
        if pay_period_id is not None:
            period = self._require_period(actor, pay_period_id)
            start_date, end_date = period.start_date, period.end_date
        elif start_date is None or end_date is None:
            start_date, end_date = self.current_bounds()
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")

        lines: dict[int, PayrollLine] = {}
        entries = self._entries.list_entries(
            tenant_id=actor.tenant_id, start=start_date, end=end_date, completed_only=True
        )
        for entry in entries:
            if entry.approval_status not in _PAYABLE:
                continue
            line = lines.setdefault(entry.employee_id, PayrollLine(entry.employee_id, entry.employee_name))
            line.entries += 1
            line.hours += self._calculator.payable_hours(entry)
            line.overtime_hours += self._calculator.overtime_hours(entry)
            line.gross_pay += self._calculator.pay(entry)

        adjustments = self._periods.list_adjustments(
            tenant_id=actor.tenant_id,
            pay_period_id=pay_period_id,
            start=None if pay_period_id is not None else start_date,
            end=None if pay_period_id is not None else end_date,
        )
        for adj in adjustments:
            line = lines.setdefault(adj.employee_id, PayrollLine(adj.employee_id, None))
            if adj.kind == AdjustmentKind.BONUS:
                line.bonuses += adj.amount
            else:
                line.deductions += adj.amount

        ordered = sorted(lines.values(), key=lambda x: x.net_pay, reverse=True)
        return PayrollSummary(start_date=start_date, end_date=end_date, lines=ordered)
