from __future__ import annotations

from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import ApprovalAction, LeaveType, RequestStatus

Number = Union[float, str]


class ApprovalQuery(BaseModel):
    status: str = "pending"
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class ApprovalDecision(BaseModel):
    action: ApprovalAction
    approved_hours: Optional[Number] = None
    approved_rate: Optional[Number] = None
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    clock_in: Optional[str] = None
    clock_out: Optional[str] = None
    break_hours: Optional[Number] = None


class BulkApprove(BaseModel):
    start_date: date
    end_date: date


class TimesheetEdit(BaseModel):
    clock_in: Optional[str] = None
    clock_out: Optional[str] = None
    break_hours: Optional[Number] = None
    notes: Optional[str] = None


class BreakHoursUpdate(BaseModel):
    break_hours: Number


class LeaveCreate(BaseModel):
    type: str
    start_date: date
    end_date: date
    days_requested: Number
    reason: Optional[str] = None
    employee_id: Optional[int] = None


class LeaveQuery(BaseModel):
    employee_id: Optional[int] = None
    status: Optional[RequestStatus] = None
    type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class LeaveDecision(BaseModel):
    action: str = Field(pattern="^(approve|reject|cancel)$")
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None


class SwapCreate(BaseModel):
    """Either the two assignment ids or the two shift dates."""

    requester_id: Optional[int] = None
    target_id: int
    original_assignment_id: Optional[int] = None
    requested_assignment_id: Optional[int] = None
    original_date: Optional[date] = None
    requested_date: Optional[date] = None
    reason: Optional[str] = None

    @model_validator(mode="after")
    def ids_or_dates(self) -> "SwapCreate":
        by_ids = self.original_assignment_id is not None and self.requested_assignment_id is not None
        by_dates = self.original_date is not None and self.requested_date is not None
        if not (by_ids or by_dates):
            raise ValueError("Provide original/requested assignment ids or original/requested dates")
        return self


class SwapQuery(BaseModel):
    employee_id: Optional[int] = None
    status: Optional[RequestStatus] = None


class SwapDecision(BaseModel):
    action: str = Field(pattern="^(approve|reject)$")
    manager_notes: Optional[str] = None
