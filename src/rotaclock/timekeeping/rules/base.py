from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import TimeEntry


class DiscrepancyRule(ABC):
    """Strategy Pattern: one way a worked entry can diverge from its schedule."""

    flag: str

    @abstractmethod
    def applies(self, entry: TimeEntry) -> bool:
        raise NotImplementedError
