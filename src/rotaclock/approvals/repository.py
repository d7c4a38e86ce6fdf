from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import LeaveRequest, NewLeaveRequest, NewSwapRequest, SwapRequest


class LeaveRepository(Protocol):
    def create(self, *, tenant_id: int, data: NewLeaveRequest) -> int:
        raise NotImplementedError

    def get(self, *, tenant_id: int, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        tenant_id: int,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        type: Optional[LeaveType] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        location_ids: Optional[Sequence[int]] = None,
    ) -> list[LeaveRequest]:
        raise NotImplementedError

    def has_overlap(self, *, tenant_id: int, employee_id: int, start: date, end: date) -> bool:
        """True when a pending or approved request of the employee intersects [start, end]."""
        raise NotImplementedError

    def decide(
        self,
        *,
        tenant_id: int,
        request_id: int,
        status: RequestStatus,
        decided_by: Optional[int],
        decided_at: datetime,
        admin_notes: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``; False when it was no longer pending."""
        raise NotImplementedError


class SwapRepository(Protocol):
    def create(self, *, tenant_id: int, data: NewSwapRequest) -> int:
        raise NotImplementedError

    def get(self, *, tenant_id: int, request_id: int) -> Optional[SwapRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        tenant_id: int,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        location_ids: Optional[Sequence[int]] = None,
    ) -> list[SwapRequest]:
        raise NotImplementedError

    def pending_exists(self, *, tenant_id: int, data: NewSwapRequest) -> bool:
        raise NotImplementedError

    def decide(
        self,
        *,
        tenant_id: int,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        manager_notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError
