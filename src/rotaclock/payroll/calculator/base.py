from __future__ import annotations

from abc import ABC, abstractmethod

from ...timekeeping.model import TimeEntry


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def payable_hours(self, entry: TimeEntry) -> float:
        raise NotImplementedError

    @abstractmethod
    def pay(self, entry: TimeEntry) -> float:
        raise NotImplementedError

    @abstractmethod
    def overtime_hours(self, entry: TimeEntry) -> float:
        raise NotImplementedError
