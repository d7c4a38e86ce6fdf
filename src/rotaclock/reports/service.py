from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.datetime_utils import iter_days
from ..core.enums import AssignmentStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..scheduling.repository import AssignmentRepository
from ..tenants.model import ApiUser
from ..timekeeping.repository import TimeEntryRepository
from .model import AttendanceReport, DailyAttendance, EmployeeAttendance


class ReportService:
    """Attendance figures built from the schedule and completed time entries.

    A shift counts as worked when a completed time entry is linked to it, or,
    for unlinked entries, when the same employee clocked in on the shift date.
    """

    def __init__(
        self,
        assignments: AssignmentRepository,
        entries: TimeEntryRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._assignments = assignments
        self._entries = entries
        self._calculator = calculator or StandardPayrollCalculator()

    def build_attendance_report(
        self,
        *,
        actor: ApiUser,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> AttendanceReport:
        if end < start:
            raise ValidationError("end_date must be on or after start_date")
        if not actor.role.can_manage:
            if employee_id is not None and int(employee_id) != actor.employee_id:
                raise AuthorizationError("You can only view your own attendance")
            employee_id = actor.employee_id
        # staff are pinned to their own rows, whatever their location
        scope = actor.location_scope if actor.role.can_manage else None

        shifts = [
            a
            for a in self._assignments.list_between(
                tenant_id=actor.tenant_id,
                start=start,
                end=end,
                employee_ids=[employee_id] if employee_id is not None else None,
                include_cancelled=False,
            )
            if a.status != AssignmentStatus.CANCELLED and (scope is None or a.employee_location_id in scope)
        ]
        entries = self._entries.list_entries(
            tenant_id=actor.tenant_id,
            employee_id=employee_id,
            start=start,
            end=end,
            completed_only=True,
            location_ids=None if scope is None else list(scope),
        )

        linked = {e.assignment_id for e in entries if e.assignment_id is not None}
        unlinked = {(e.employee_id, e.clock_in.date()) for e in entries if e.assignment_id is None and e.clock_in}

        per_employee: dict[int, EmployeeAttendance] = {}
        per_day = {d: DailyAttendance(date=d) for d in iter_days(start, end)}

        for a in shifts:
            row = per_employee.setdefault(a.employee_id, EmployeeAttendance(a.employee_id, a.employee_name))
            day = per_day[a.date]
            row.scheduled += 1
            day.scheduled += 1
            if a.id in linked or (a.employee_id, a.date) in unlinked:
                row.worked += 1
                day.worked += 1

        for e in entries:
            hours = self._calculator.payable_hours(e)
            row = per_employee.setdefault(e.employee_id, EmployeeAttendance(e.employee_id, e.employee_name))
            row.hours += hours
            row.overtime_hours += self._calculator.overtime_hours(e)
            worked_on = e.clock_in.date() if e.clock_in else None
            if worked_on in per_day:
                per_day[worked_on].hours += hours

        employees = sorted(per_employee.values(), key=lambda r: (r.employee_name or "", r.employee_id))
        return AttendanceReport(start_date=start, end_date=end, employees=employees, days=list(per_day.values()))
