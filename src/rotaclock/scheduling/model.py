from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import window_hours
from ..core.enums import AssignmentStatus
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..rotas.model import Rota
from ..shift_templates.model import ShiftTemplate


@dataclass(frozen=True)
class ShiftAssignment:
    """One employee on one date, on a template or an ad-hoc override.

    The ``template_*`` fields are joined from the template row; the
    ``effective_*`` properties prefer the overrides.
    """

    id: int
    tenant_id: int
    employee_id: int
    template_id: int
    date: date
    status: AssignmentStatus = AssignmentStatus.ASSIGNED
    is_published: bool = False
    rota_id: Optional[int] = None
    notes: Optional[str] = None
    override_name: Optional[str] = None
    override_start_time: Optional[time] = None
    override_end_time: Optional[time] = None
    override_color: Optional[str] = None
    cancellation_reason: Optional[str] = None
    assigned_by: Optional[int] = None
    created_at: Optional[datetime] = None

    template_name: Optional[str] = None
    template_start_time: Optional[time] = None
    template_end_time: Optional[time] = None
    template_color: Optional[str] = None
    employee_name: Optional[str] = None
    employee_location_id: Optional[int] = None
    rota_status: Optional[str] = None

    @property
    def effective_name(self) -> Optional[str]:
        return self.override_name or self.template_name

    @property
    def effective_start_time(self) -> Optional[time]:
        return self.override_start_time or self.template_start_time

    @property
    def effective_end_time(self) -> Optional[time]:
        return self.override_end_time or self.template_end_time

    @property
    def effective_color(self) -> Optional[str]:
        return self.override_color or self.template_color

    @property
    def scheduled_hours(self) -> Optional[float]:
        start, end = self.effective_start_time, self.effective_end_time
        if start is None or end is None:
            return None
        return window_hours(start, end)

    @property
    def visible_to_employee(self) -> bool:
        return self.is_published or self.rota_status == "published"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "template_id": self.template_id,
            "rota_id": self.rota_id,
            "date": self.date,
            "status": self.status,
            "is_published": self.is_published,
            "notes": self.notes,
            "override_name": self.override_name,
            "override_start_time": self.override_start_time,
            "override_end_time": self.override_end_time,
            "override_color": self.override_color,
            "cancellation_reason": self.cancellation_reason,
            "template_name": self.template_name,
            "name": self.effective_name,
            "start_time": self.effective_start_time,
            "end_time": self.effective_end_time,
            "color": self.effective_color,
        }


@dataclass(frozen=True)
class NewAssignment:
    employee_id: int
    template_id: int
    date: date
    rota_id: Optional[int] = None
    notes: Optional[str] = None
    override_name: Optional[str] = None
    override_start_time: Optional[time] = None
    override_end_time: Optional[time] = None
    override_color: Optional[str] = None
    assigned_by: Optional[int] = None


@dataclass(frozen=True)
class PublishSelection:
    """Which draft assignments a publish flips.

    Exactly one of: explicit ids, an inclusive date range, or a whole rota.
    ``rota_id`` may narrow a range selection; ``location_ids`` limits any
    selection to employees at those locations.
    """

    shift_ids: Optional[tuple[int, ...]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rota_id: Optional[int] = None
    location_ids: Optional[tuple[int, ...]] = None

    @classmethod
    def by_ids(cls, shift_ids) -> "PublishSelection":
        ids = tuple(int(x) for x in shift_ids)
        if not ids:
            raise ValidationError("shift_ids must not be empty")
        return cls(shift_ids=ids)

    @classmethod
    def by_range(cls, start_date: date, end_date: date, *, rota_id: Optional[int] = None) -> "PublishSelection":
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")
        return cls(start_date=start_date, end_date=end_date, rota_id=rota_id)

    @classmethod
    def by_rota(cls, rota_id: int) -> "PublishSelection":
        return cls(rota_id=int(rota_id))

    @property
    def is_by_ids(self) -> bool:
        return self.shift_ids is not None

    @property
    def is_by_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def within(self, location_ids: Optional[tuple[int, ...]]) -> "PublishSelection":
        return replace(self, location_ids=None if location_ids is None else tuple(location_ids))


@dataclass(frozen=True)
class PublishResult:
    published_shifts: int
    affected_employees: int
    shifts: list[ShiftAssignment] = field(default_factory=list)

    @property
    def message(self) -> str:
        return (
            f"Successfully published {self.published_shifts} shift(s). "
            f"{self.affected_employees} employees have been notified."
        )

    def to_dict(self) -> dict:
        return {
            "published_shifts": self.published_shifts,
            "affected_employees": self.affected_employees,
            "shifts": [s.to_dict() for s in self.shifts],
        }


@dataclass(frozen=True)
class EmployeeWeek:
    employee: Employee
    assignments: dict[str, list[ShiftAssignment]]

    def to_dict(self) -> dict:
        return {
            "id": self.employee.id,
            "employee_code": self.employee.employee_code,
            "first_name": self.employee.first_name,
            "last_name": self.employee.last_name,
            "full_name": self.employee.full_name,
            "department": self.employee.department,
            "position": self.employee.position,
            "role": self.employee.role,
            "location_id": self.employee.location_id,
            "hourly_rate": self.employee.hourly_rate,
            "assignments": {day: [a.to_dict() for a in items] for day, items in self.assignments.items()},
        }


@dataclass(frozen=True)
class WeekView:
    week_start: date
    week_end: date
    employees: list[EmployeeWeek]
    assignments: list[ShiftAssignment]
    templates: list[ShiftTemplate]
    rotas: list[Rota]
    current_rota: Optional[Rota] = None

    def to_dict(self) -> dict:
        return {
            "week_start": self.week_start,
            "week_end": self.week_end,
            "employees": [e.to_dict() for e in self.employees],
            "assignments": [a.to_dict() for a in self.assignments],
            "templates": self.templates,
            "rotas": self.rotas,
            "current_rota": self.current_rota,
        }
