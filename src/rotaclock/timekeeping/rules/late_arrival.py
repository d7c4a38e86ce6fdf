from __future__ import annotations

from datetime import timedelta

from ..model import TimeEntry
from .base import DiscrepancyRule


class LateArrivalRule(DiscrepancyRule):
    """Clocked in after the scheduled start plus grace."""

    flag = "is_late"

    def __init__(self, grace_minutes: int):
        self._grace = timedelta(minutes=grace_minutes)

    def applies(self, entry: TimeEntry) -> bool:
        window = entry.scheduled_window
        if window is None or entry.clock_in is None:
            return False
        return entry.clock_in > window.start + self._grace
