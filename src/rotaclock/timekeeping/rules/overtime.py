from __future__ import annotations

from ..model import TimeEntry
from .base import DiscrepancyRule


class OvertimeRule(DiscrepancyRule):
    """Worked hours exceed the scheduled length by more than the tolerance."""

    flag = "overtime"

    def __init__(self, tolerance_hours: float):
        self._tolerance = float(tolerance_hours)

    def applies(self, entry: TimeEntry) -> bool:
        window = entry.scheduled_window
        if window is None or entry.total_hours is None:
            return False
        return float(entry.total_hours) > window.hours + self._tolerance
