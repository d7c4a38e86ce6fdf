from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import NewAssignment, PublishSelection, ShiftAssignment


class AssignmentRepository(Protocol):
    def get(self, *, tenant_id: int, assignment_id: int) -> Optional[ShiftAssignment]:
        raise NotImplementedError

    def create(self, *, tenant_id: int, data: NewAssignment) -> int:
        raise NotImplementedError

    def update_fields(self, *, tenant_id: int, assignment_id: int, changes: dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, *, tenant_id: int, assignment_id: int) -> bool:
        raise NotImplementedError

    def list_between(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        employee_ids: Optional[Sequence[int]] = None,
        rota_id: Optional[int] = None,
        published: Optional[bool] = None,
        include_cancelled: bool = True,
    ) -> list[ShiftAssignment]:
        raise NotImplementedError

    def list_drafts(
        self,
        *,
        tenant_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        rota_id: Optional[int] = None,
    ) -> list[ShiftAssignment]:
        raise NotImplementedError

    def publish(self, *, tenant_id: int, selection: PublishSelection) -> list[ShiftAssignment]:
        """Flip matching drafts to published in one statement; return the flipped rows."""
        raise NotImplementedError

    def cancel_for_employee(self, *, tenant_id: int, employee_id: int, start: date, end: date, reason: str) -> int:
        raise NotImplementedError

    def exchange_employees(self, *, tenant_id: int, first_id: int, second_id: int) -> None:
        raise NotImplementedError
