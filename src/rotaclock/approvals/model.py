from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveType, RequestStatus
from ..timekeeping.model import DiscrepancyFlags, TimeEntry


@dataclass(frozen=True)
class LeaveRequest:
    id: int
    tenant_id: int
    employee_id: int
    type: LeaveType
    start_date: date
    end_date: date
    days_requested: float
    status: RequestStatus = RequestStatus.PENDING
    reason: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None
    employee_location_id: Optional[int] = None


@dataclass(frozen=True)
class NewLeaveRequest:
    employee_id: int
    type: LeaveType
    start_date: date
    end_date: date
    days_requested: float
    reason: Optional[str] = None


@dataclass(frozen=True)
class SwapRequest:
    id: int
    tenant_id: int
    requester_id: int
    target_id: int
    original_assignment_id: int
    requested_assignment_id: int
    status: RequestStatus = RequestStatus.PENDING
    reason: Optional[str] = None
    manager_notes: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    requester_name: Optional[str] = None
    target_name: Optional[str] = None
    requester_location_id: Optional[int] = None
    target_location_id: Optional[int] = None


@dataclass(frozen=True)
class NewSwapRequest:
    requester_id: int
    target_id: int
    original_assignment_id: int
    requested_assignment_id: int
    reason: Optional[str] = None


@dataclass(frozen=True)
class ApprovalRow:
    entry: TimeEntry
    flags: DiscrepancyFlags

    def to_dict(self) -> dict:
        e = self.entry
        return {
            "id": e.id,
            "employee_id": e.employee_id,
            "employee_name": e.employee_name,
            "employee_code": e.employee_code,
            "shift_date": e.shift_date,
            "shift_name": e.shift_name,
            "scheduled_start": e.scheduled_start,
            "scheduled_end": e.scheduled_end,
            "clock_in": e.clock_in,
            "clock_out": e.clock_out,
            "break_hours": e.break_hours,
            "total_hours": e.total_hours,
            "status": e.status,
            "approval_status": e.approval_status,
            "approved_hours": e.approved_hours,
            "approved_rate": e.approved_rate,
            "total_pay": e.total_pay,
            "hourly_rate": e.hourly_rate,
            "admin_notes": e.admin_notes,
            "rejection_reason": e.rejection_reason,
            "notes": e.notes,
            "discrepancies": {
                "missing_events": self.flags.missing_events,
                "is_late": self.flags.is_late,
                "early_leave": self.flags.early_leave,
                "overtime": self.flags.overtime,
            },
        }


@dataclass(frozen=True)
class ApprovalPage:
    rows: list[ApprovalRow]
    page: int
    limit: int
    total: int
    stats: dict[str, float] = field(default_factory=dict)

    @property
    def pages(self) -> int:
        return max(1, -(-self.total // self.limit)) if self.limit else 1

    def to_dict(self) -> dict:
        return {
            "items": [r.to_dict() for r in self.rows],
            "pagination": {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages},
            "stats": self.stats,
        }
