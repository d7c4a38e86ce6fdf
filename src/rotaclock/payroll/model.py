from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AdjustmentKind, PayPeriodStatus


@dataclass(frozen=True)
class PayPeriod:
    id: int
    tenant_id: int
    start_date: date
    end_date: date
    status: PayPeriodStatus = PayPeriodStatus.OPEN
    created_at: Optional[datetime] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def is_locked(self) -> bool:
        return self.status == PayPeriodStatus.LOCKED


@dataclass(frozen=True)
class PayrollAdjustment:
    id: int
    tenant_id: int
    pay_period_id: int
    employee_id: int
    kind: AdjustmentKind
    amount: float
    reason: str
    applied_by: int
    category: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class PayrollLine:
    employee_id: int
    employee_name: Optional[str]
    hours: float = 0.0
    overtime_hours: float = 0.0
    gross_pay: float = 0.0
    bonuses: float = 0.0
    deductions: float = 0.0
    entries: int = 0

    @property
    def net_pay(self) -> float:
        return round(self.gross_pay + self.bonuses - self.deductions, 2)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "entries": self.entries,
            "hours": round(self.hours, 2),
            "overtime_hours": round(self.overtime_hours, 2),
            "gross_pay": round(self.gross_pay, 2),
            "bonuses": round(self.bonuses, 2),
            "deductions": round(self.deductions, 2),
            "net_pay": self.net_pay,
        }


@dataclass(frozen=True)
class PayrollSummary:
    start_date: date
    end_date: date
    lines: list[PayrollLine] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "employees": [line.to_dict() for line in self.lines],
            "totals": {
                "hours": round(sum(line.hours for line in self.lines), 2),
                "gross_pay": round(sum(line.gross_pay for line in self.lines), 2),
                "bonuses": round(sum(line.bonuses for line in self.lines), 2),
                "deductions": round(sum(line.deductions for line in self.lines), 2),
                "net_pay": round(sum(line.net_pay for line in self.lines), 2),
            },
        }
