from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ...core.constants import EARLY_LEAVE_GRACE_MINUTES, LATE_GRACE_MINUTES, OVERTIME_TOLERANCE_HOURS
from ..model import DiscrepancyFlags, TimeEntry
from .base import DiscrepancyRule
from .early_leave import EarlyLeaveRule
from .late_arrival import LateArrivalRule
from .missing_events import MissingEventsRule
from .overtime import OvertimeRule


def default_rules(
    *,
    late_grace_minutes: int = LATE_GRACE_MINUTES,
    early_grace_minutes: int = EARLY_LEAVE_GRACE_MINUTES,
    overtime_tolerance_hours: float = OVERTIME_TOLERANCE_HOURS,
) -> list[DiscrepancyRule]:
    return [
        MissingEventsRule(),
        LateArrivalRule(late_grace_minutes),
        EarlyLeaveRule(early_grace_minutes),
        OvertimeRule(overtime_tolerance_hours),
    ]


@dataclass
class DiscrepancyDetector:
    """Factory Pattern: runs the configured rules and folds them into flags."""

    rules: Sequence[DiscrepancyRule] = field(default_factory=default_rules)

    def detect(self, entry: TimeEntry) -> DiscrepancyFlags:
        hits = {rule.flag for rule in self.rules if rule.applies(entry)}
        return DiscrepancyFlags(
            missing_events="missing_events" in hits,
            is_late="is_late" in hits,
            early_leave="early_leave" in hits,
            overtime="overtime" in hits,
        )
