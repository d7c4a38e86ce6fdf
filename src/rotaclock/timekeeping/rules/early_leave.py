from __future__ import annotations

from datetime import timedelta

from ..model import TimeEntry
from .base import DiscrepancyRule


class EarlyLeaveRule(DiscrepancyRule):
    """Clocked out before the scheduled end minus grace."""

    flag = "early_leave"

    def __init__(self, grace_minutes: int):
        self._grace = timedelta(minutes=grace_minutes)

    def applies(self, entry: TimeEntry) -> bool:
        window = entry.scheduled_window
        if window is None or entry.clock_out is None:
            return False
        return entry.clock_out < window.end - self._grace
