from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.enums import ApprovalStatus, TimeEntryStatus


@dataclass(frozen=True)
class ScheduledWindow:
    """The planned start/end of the shift a time entry was worked against."""

    start: datetime
    end: datetime

    @classmethod
    def from_times(cls, day: date, start: time, end: time) -> "ScheduledWindow":
        s = datetime.combine(day, start)
        e = datetime.combine(day, end)
        if e <= s:
            e += timedelta(days=1)
        return cls(start=s, end=e)

    @property
    def hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600.0


@dataclass(frozen=True)
class TimeEntry:
    id: int
    tenant_id: int
    employee_id: int
    status: TimeEntryStatus
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    assignment_id: Optional[int] = None
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    break_hours: float = 0.0
    break_start: Optional[datetime] = None
    total_hours: Optional[float] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    approved_hours: Optional[float] = None
    approved_rate: Optional[float] = None
    total_pay: Optional[float] = None
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    employee_name: Optional[str] = None
    employee_code: Optional[str] = None
    employee_location_id: Optional[int] = None
    hourly_rate: Optional[float] = None
    shift_date: Optional[date] = None
    shift_name: Optional[str] = None
    scheduled_start: Optional[time] = None
    scheduled_end: Optional[time] = None

    @property
    def scheduled_window(self) -> Optional[ScheduledWindow]:
        if self.scheduled_start is None or self.scheduled_end is None:
            return None
        day = self.shift_date or (self.clock_in.date() if self.clock_in else None)
        if day is None:
            return None
        return ScheduledWindow.from_times(day, self.scheduled_start, self.scheduled_end)

    @property
    def elapsed_hours(self) -> Optional[float]:
        if not self.clock_in or not self.clock_out:
            return None
        return (self.clock_out - self.clock_in).total_seconds() / 3600.0

    @property
    def is_open(self) -> bool:
        return self.status in (TimeEntryStatus.IN_PROGRESS, TimeEntryStatus.BREAK)


@dataclass(frozen=True)
class DiscrepancyFlags:
    missing_events: bool = False
    is_late: bool = False
    early_leave: bool = False
    overtime: bool = False

    @property
    def any(self) -> bool:
        return self.missing_events or self.is_late or self.early_leave or self.overtime


@dataclass(frozen=True)
class LiveStatus:
    clocked_in: int
    on_break: int
    completed_today: int
    pending_approvals: int
    poll_interval_seconds: int


def worked_hours(clock_in: datetime, clock_out: datetime, break_hours: float) -> float:
    """Elapsed hours minus breaks, not below 0, rounded to 2 decimals."""
    elapsed = (clock_out - clock_in).total_seconds() / 3600.0
    return round(max(0.0, elapsed - float(break_hours or 0)), 2)
