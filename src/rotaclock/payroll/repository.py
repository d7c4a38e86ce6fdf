from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AdjustmentKind, PayPeriodStatus
from .model import PayPeriod, PayrollAdjustment


class PayPeriodRepository(Protocol):
    def upsert(self, *, tenant_id: int, start_date: date, end_date: date) -> int:
        """Create the period, or return the id of the identical existing one."""
        raise NotImplementedError

    def get(self, *, tenant_id: int, period_id: int) -> Optional[PayPeriod]:
        raise NotImplementedError

    def list_periods(self, *, tenant_id: int, status: Optional[PayPeriodStatus] = None) -> Sequence[PayPeriod]:
        raise NotImplementedError

    def set_status(self, *, tenant_id: int, period_id: int, status: PayPeriodStatus) -> None:
        raise NotImplementedError

    def find_locked_covering(self, *, tenant_id: int, day: date) -> Optional[PayPeriod]:
        raise NotImplementedError

    def add_adjustment(
        self,
        *,
        tenant_id: int,
        pay_period_id: int,
        employee_id: int,
        kind: AdjustmentKind,
        amount: float,
        reason: str,
        category: Optional[str],
        applied_by: int,
    ) -> int:
        raise NotImplementedError

    def list_adjustments(
        self,
        *,
        tenant_id: int,
        pay_period_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[PayrollAdjustment]:
        raise NotImplementedError
