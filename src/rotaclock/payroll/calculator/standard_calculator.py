from __future__ import annotations

from ...core.constants import DAILY_OVERTIME_THRESHOLD_HOURS
from ...timekeeping.model import TimeEntry
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: approved hours override recorded hours; pay is hours x rate."""

    def __init__(self, daily_overtime_threshold: float = DAILY_OVERTIME_THRESHOLD_HOURS):
        self._threshold = float(daily_overtime_threshold)

    def payable_hours(self, entry: TimeEntry) -> float:
        if entry.approved_hours is not None:
            return float(entry.approved_hours)
        return max(float(entry.total_hours or 0), 0.0)

    def pay(self, entry: TimeEntry) -> float:
        if entry.total_pay is not None:
            return float(entry.total_pay)
        rate = entry.approved_rate if entry.approved_rate is not None else (entry.hourly_rate or 0)
        return round(self.payable_hours(entry) * float(rate), 2)

    def overtime_hours(self, entry: TimeEntry) -> float:
        return max(self.payable_hours(entry) - self._threshold, 0.0)
