from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


def attendance_rate(scheduled: int, worked: int) -> float:
    """Percentage of scheduled shifts that were worked, one decimal; 0 when nothing was scheduled."""
    if scheduled <= 0:
        return 0.0
    return round(worked * 100.0 / scheduled, 1)


@dataclass
class EmployeeAttendance:
    employee_id: int
    employee_name: Optional[str]
    scheduled: int = 0
    worked: int = 0
    hours: float = 0.0
    overtime_hours: float = 0.0

    @property
    def rate(self) -> float:
        return attendance_rate(self.scheduled, self.worked)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "scheduled_shifts": self.scheduled,
            "worked_shifts": self.worked,
            "attendance_rate": self.rate,
            "hours": round(self.hours, 2),
            "overtime_hours": round(self.overtime_hours, 2),
        }


@dataclass
class DailyAttendance:
    date: date
    scheduled: int = 0
    worked: int = 0
    hours: float = 0.0

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "scheduled_shifts": self.scheduled,
            "worked_shifts": self.worked,
            "attendance_rate": attendance_rate(self.scheduled, self.worked),
            "hours": round(self.hours, 2),
        }


@dataclass(frozen=True)
class AttendanceReport:
    start_date: date
    end_date: date
    employees: list[EmployeeAttendance] = field(default_factory=list)
    days: list[DailyAttendance] = field(default_factory=list)

    @property
    def scheduled(self) -> int:
        return sum(e.scheduled for e in self.employees)

    @property
    def worked(self) -> int:
        return sum(e.worked for e in self.employees)

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "summary": {
                "scheduled_shifts": self.scheduled,
                "worked_shifts": self.worked,
                "attendance_rate": attendance_rate(self.scheduled, self.worked),
                "total_hours": round(sum(e.hours for e in self.employees), 2),
                "overtime_hours": round(sum(e.overtime_hours for e in self.employees), 2),
            },
            "employees": [e.to_dict() for e in self.employees],
            "daily": [d.to_dict() for d in self.days],
        }
