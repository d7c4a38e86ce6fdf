from __future__ import annotations

from ..model import TimeEntry
from .base import DiscrepancyRule


class MissingEventsRule(DiscrepancyRule):
    """Clock-in or clock-out was never recorded."""

    flag = "missing_events"

    def applies(self, entry: TimeEntry) -> bool:
        return entry.clock_in is None or entry.clock_out is None
