from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import ApprovalAction, ApprovalStatus
from .model import TimeEntry


class TimeEntryRepository(Protocol):
    def get(self, *, tenant_id: int, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def get_open(self, *, tenant_id: int, employee_id: int) -> Optional[TimeEntry]:
        """The employee's in-progress (or on-break) entry, if any."""
        raise NotImplementedError

    def create_clock_in(self, *, tenant_id: int, employee_id: int, assignment_id: Optional[int], clock_in: datetime) -> int:
        raise NotImplementedError

    def update_fields(self, *, tenant_id: int, entry_id: int, changes: dict[str, Any]) -> None:
        raise NotImplementedError

    def list_entries(
        self,
        *,
        tenant_id: int,
        approval_status: Optional[ApprovalStatus] = None,
        location_ids: Optional[Sequence[int]] = None,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        completed_only: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[TimeEntry]:
        raise NotImplementedError

    def count_entries(
        self,
        *,
        tenant_id: int,
        approval_status: Optional[ApprovalStatus] = None,
        location_ids: Optional[Sequence[int]] = None,
        completed_only: bool = False,
    ) -> int:
        raise NotImplementedError

    def approval_stats(self, *, tenant_id: int, location_ids: Optional[Sequence[int]] = None) -> dict[str, float]:
        """Counts per approval state plus pending/approved hour sums."""
        raise NotImplementedError

    def record_approval(
        self,
        *,
        tenant_id: int,
        entry_id: int,
        action: ApprovalAction,
        decided_by: int,
        approved_hours: Optional[float],
        approved_rate: Optional[float],
        total_pay: Optional[float],
        notes: Optional[str],
        rejection_reason: Optional[str],
    ) -> None:
        raise NotImplementedError

    def write_audit(self, *, tenant_id: int, entry_id: int, changed_by: int, changes: dict[str, Any]) -> None:
        raise NotImplementedError

    def bulk_approve(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        approved_by: int,
        approved_at: datetime,
        location_ids: Optional[Sequence[int]] = None,
    ) -> int:
        raise NotImplementedError

    def live_counts(self, *, tenant_id: int, day: date, location_ids: Optional[Sequence[int]] = None) -> dict[str, int]:
        raise NotImplementedError
