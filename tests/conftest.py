from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from rotaclock.approvals.model import LeaveRequest, SwapRequest
from rotaclock.core.enums import (
    ApprovalStatus,
    AssignmentStatus,
    PayPeriodStatus,
    RequestStatus,
    Role,
    TimeEntryStatus,
)
from rotaclock.employees.model import Employee
from rotaclock.employees.service import EmployeeService
from rotaclock.locations.model import Location, LocationUsage, ManagerLocation
from rotaclock.notifications.model import Notification
from rotaclock.notifications.service import NotificationService
from rotaclock.payroll.model import PayPeriod, PayrollAdjustment
from rotaclock.rotas.model import Rota
from rotaclock.scheduling.model import ShiftAssignment
from rotaclock.shift_templates.model import ShiftTemplate
from rotaclock.shift_templates.service import ShiftTemplateService
from rotaclock.tenants.model import ApiUser, TenantSettings
from rotaclock.tenants.service import TenantSettingsService
from rotaclock.timekeeping.model import TimeEntry

TENANT = 1


class FakeEmployees:
    def __init__(self, employees=()):
        self.rows: dict[int, Employee] = {e.id: e for e in employees}

    def add(self, emp: Employee) -> Employee:
        self.rows[emp.id] = emp
        return emp

    def get(self, *, tenant_id, employee_id):
        emp = self.rows.get(int(employee_id))
        return emp if emp and emp.tenant_id == tenant_id else None

    def find_active_by_id(self, employee_id):
        emp = self.rows.get(int(employee_id))
        return emp if emp and emp.is_active else None

    def find_active_by_code(self, employee_code):
        for emp in self.rows.values():
            if emp.employee_code == employee_code and emp.is_active:
                return emp
        return None

    def list_employees(self, *, tenant_id, roles=None, department=None, location_ids=None, active=True):
        out = []
        for emp in self.rows.values():
            if emp.tenant_id != tenant_id:
                continue
            if roles is not None and emp.role not in roles:
                continue
            if department is not None and emp.department != department:
                continue
            if location_ids is not None and emp.location_id not in location_ids:
                continue
            if active is not None and emp.is_active != active:
                continue
            out.append(emp)
        return sorted(out, key=lambda e: e.id)

    def code_exists(self, *, tenant_id, employee_code):
        return any(e.employee_code == employee_code and e.tenant_id == tenant_id for e in self.rows.values())

    def create(self, *, tenant_id, data):
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = Employee(id=new_id, tenant_id=tenant_id, **data.__dict__)
        return new_id

    def set_active(self, *, tenant_id, employee_id, active):
        emp = self.get(tenant_id=tenant_id, employee_id=employee_id)
        if not emp:
            return False
        self.rows[emp.id] = replace(emp, is_active=active)
        return True

    def first_admin(self, *, tenant_id):
        admins = self.list_employees(tenant_id=tenant_id, roles=[Role.ADMIN], active=True)
        return admins[0] if admins else None


class FakeTenants:
    def __init__(self, settings: Optional[TenantSettings] = None, manager_locations=None):
        self.settings = settings or TenantSettings(tenant_id=TENANT)
        self.manager_locations: dict[int, list[int]] = dict(manager_locations or {})

    def get_settings(self, *, tenant_id):
        return self.settings

    def save_settings(self, settings):
        self.settings = settings

    def manager_location_ids(self, *, tenant_id, manager_id):
        return list(self.manager_locations.get(manager_id, []))

    def tenant_exists(self, *, tenant_id):
        return tenant_id == TENANT


class FakeLocations:
    """Location rows plus manager links; links are mirrored into the tenants fake so auth scope follows them."""

    def __init__(self, employees: FakeEmployees, tenants: FakeTenants, locations=()):
        self.employees = employees
        self.tenants = tenants
        self.rows: dict[int, Location] = {loc.id: loc for loc in locations}
        self.links: dict[int, tuple[int, int]] = {}
        for manager_id, location_ids in tenants.manager_locations.items():
            for location_id in location_ids:
                self.links[len(self.links) + 1] = (manager_id, location_id)

    def _sync(self):
        scope: dict[int, list[int]] = {}
        for manager_id, location_id in self.links.values():
            scope.setdefault(manager_id, []).append(location_id)
        self.tenants.manager_locations = scope

    def _joined(self, link_id):
        manager_id, location_id = self.links[link_id]
        mgr = self.employees.rows.get(manager_id)
        loc = self.rows.get(location_id)
        return ManagerLocation(
            id=link_id,
            tenant_id=TENANT,
            manager_id=manager_id,
            location_id=location_id,
            manager_name=mgr.full_name if mgr else None,
            location_name=loc.name if loc else None,
        )

    def list_locations(self, *, tenant_id, active=True):
        out = [loc for loc in self.rows.values() if active is None or loc.is_active == active]
        return sorted(out, key=lambda loc: loc.name)

    def get(self, *, tenant_id, location_id):
        return self.rows.get(int(location_id))

    def create(self, *, tenant_id, name, description=None):
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = Location(id=new_id, tenant_id=tenant_id, name=name, description=description)
        return new_id

    def update(self, *, tenant_id, location_id, name, description, is_active):
        loc = self.rows.get(int(location_id))
        if not loc:
            return False
        self.rows[loc.id] = replace(loc, name=name, description=description, is_active=is_active)
        return True

    def usage(self, *, tenant_id, location_id):
        return LocationUsage(
            employees=sum(1 for e in self.employees.rows.values() if e.location_id == location_id),
            managers=sum(1 for _, loc_id in self.links.values() if loc_id == location_id),
        )

    def delete(self, *, tenant_id, location_id):
        return self.rows.pop(int(location_id), None) is not None

    def list_manager_locations(self, *, tenant_id, manager_id=None):
        return [
            self._joined(link_id)
            for link_id, (mgr_id, _) in sorted(self.links.items())
            if manager_id is None or mgr_id == manager_id
        ]

    def get_manager_location(self, *, tenant_id, link_id):
        return self._joined(int(link_id)) if int(link_id) in self.links else None

    def assign_manager(self, *, tenant_id, manager_id, location_id):
        if (manager_id, location_id) not in self.links.values():
            self.links[max(self.links, default=0) + 1] = (manager_id, location_id)
            self._sync()

    def unassign_manager(self, *, tenant_id, link_id):
        if self.links.pop(int(link_id), None) is None:
            return False
        self._sync()
        return True


class FakeNotifications:
    def __init__(self, fail: bool = False):
        self.sent: list[Notification] = []
        self.fail = fail

    def create(self, *, tenant_id, employee_id, title, message, type, action_url=None):
        if self.fail:
            raise RuntimeError("notification store down")
        n = Notification(
            id=len(self.sent) + 1,
            tenant_id=tenant_id,
            employee_id=employee_id,
            title=title,
            message=message,
            type=type,
            action_url=action_url,
        )
        self.sent.append(n)
        return n.id

    def list_for_employee(self, *, tenant_id, employee_id, unread_only=False, limit=50):
        return [n for n in self.sent if n.employee_id == employee_id and not (unread_only and n.is_read)][:limit]

    def mark_read(self, *, tenant_id, employee_id, notification_id):
        for i, n in enumerate(self.sent):
            if n.id == notification_id and n.employee_id == employee_id:
                self.sent[i] = replace(n, is_read=True)
                return True
        return False

    def titles_for(self, employee_id):
        return [n.title for n in self.sent if n.employee_id == employee_id]


class FakeTemplates:
    def __init__(self, templates=()):
        self.rows: dict[int, ShiftTemplate] = {t.id: t for t in templates}

    def list_active(self, *, tenant_id):
        return [t for t in self.rows.values() if t.is_active]

    def get_by_id(self, *, tenant_id, template_id):
        return self.rows.get(int(template_id))

    def find_by_name(self, *, tenant_id, name):
        return next((t for t in self.rows.values() if t.name == name), None)

    def create(self, *, tenant_id, fields, created_by=None):
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = ShiftTemplate(id=new_id, tenant_id=tenant_id, **fields.__dict__)
        return new_id

    def update(self, *, tenant_id, template_id, fields):
        current = self.rows.get(int(template_id))
        if not current:
            return False
        self.rows[current.id] = replace(current, **fields.__dict__)
        return True

    def set_active(self, *, tenant_id, template_id, active):
        current = self.rows.get(int(template_id))
        if not current:
            return False
        self.rows[current.id] = replace(current, is_active=active)
        return True


class FakeRotas:
    def __init__(self):
        self.rows: dict[int, Rota] = {}

    def create(self, *, tenant_id, name, week_start_date, created_by):
        new_id = len(self.rows) + 1
        self.rows[new_id] = Rota(
            id=new_id, tenant_id=tenant_id, name=name, week_start_date=week_start_date, created_by=created_by
        )
        return new_id

    def get(self, *, tenant_id, rota_id):
        return self.rows.get(int(rota_id))

    def list_between(self, *, tenant_id, start, end):
        return [r for r in self.rows.values() if start <= r.week_start_date <= end]

    def set_status(self, *, tenant_id, rota_id, status, published_at):
        self.rows[rota_id] = replace(self.rows[rota_id], status=status, published_at=published_at)


class FakeAssignments:
    """In-memory shift assignments; joins template and employee fields like the SQL repository."""

    def __init__(self, employees: FakeEmployees, templates: FakeTemplates, rotas: Optional[FakeRotas] = None):
        self.rows: dict[int, ShiftAssignment] = {}
        self._employees = employees
        self._templates = templates
        self._rotas = rotas

    def _joined(self, a: ShiftAssignment) -> ShiftAssignment:
        emp = self._employees.rows.get(a.employee_id)
        tpl = self._templates.rows.get(a.template_id)
        rota = self._rotas.rows.get(a.rota_id) if self._rotas and a.rota_id else None
        return replace(
            a,
            template_name=tpl.name if tpl else None,
            template_start_time=tpl.start_time if tpl else None,
            template_end_time=tpl.end_time if tpl else None,
            template_color=tpl.color if tpl else None,
            employee_name=emp.full_name if emp else None,
            employee_location_id=emp.location_id if emp else None,
            rota_status=rota.status.value if rota else None,
        )

    def add(self, *, employee_id, day, template_id=1, is_published=False, rota_id=None, status=AssignmentStatus.ASSIGNED):
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = ShiftAssignment(
            id=new_id,
            tenant_id=TENANT,
            employee_id=employee_id,
            template_id=template_id,
            date=day,
            status=status,
            is_published=is_published,
            rota_id=rota_id,
        )
        return new_id

    def get(self, *, tenant_id, assignment_id):
        a = self.rows.get(int(assignment_id))
        return self._joined(a) if a else None

    def create(self, *, tenant_id, data):
        new_id = max(self.rows, default=0) + 1
        self.rows[new_id] = ShiftAssignment(id=new_id, tenant_id=tenant_id, **data.__dict__)
        return new_id

    def update_fields(self, *, tenant_id, assignment_id, changes):
        self.rows[assignment_id] = replace(self.rows[assignment_id], **changes)

    def delete(self, *, tenant_id, assignment_id):
        return self.rows.pop(int(assignment_id), None) is not None

    def list_between(
        self, *, tenant_id, start, end, employee_ids=None, rota_id=None, published=None, include_cancelled=True
    ):
        out = []
        for a in sorted(self.rows.values(), key=lambda x: (x.date, x.id)):
            if not (start <= a.date <= end):
                continue
            if employee_ids is not None and a.employee_id not in employee_ids:
                continue
            if rota_id is not None and a.rota_id != rota_id:
                continue
            if published is not None and a.is_published != published:
                continue
            if not include_cancelled and a.status == AssignmentStatus.CANCELLED:
                continue
            out.append(self._joined(a))
        return out

    def list_drafts(self, *, tenant_id, start=None, end=None, rota_id=None):
        return [
            self._joined(a)
            for a in sorted(self.rows.values(), key=lambda x: (x.date, x.id))
            if not a.is_published
            and (start is None or a.date >= start)
            and (end is None or a.date <= end)
            and (rota_id is None or a.rota_id == rota_id)
        ]

    def publish(self, *, tenant_id, selection):
        flipped = []
        for a in sorted(self.rows.values(), key=lambda x: (x.date, x.id)):
            if a.is_published:
                continue
            if selection.is_by_ids and a.id not in selection.shift_ids:
                continue
            if selection.is_by_range and not (selection.start_date <= a.date <= selection.end_date):
                continue
            if selection.rota_id is not None and a.rota_id != selection.rota_id:
                continue
            if selection.location_ids is not None and self._joined(a).employee_location_id not in selection.location_ids:
                continue
            self.rows[a.id] = replace(a, is_published=True)
            flipped.append(self._joined(self.rows[a.id]))
        return flipped

    def cancel_for_employee(self, *, tenant_id, employee_id, start, end, reason):
        count = 0
        for a in list(self.rows.values()):
            if a.employee_id == employee_id and start <= a.date <= end and a.status != AssignmentStatus.CANCELLED:
                self.rows[a.id] = replace(a, status=AssignmentStatus.CANCELLED, cancellation_reason=reason)
                count += 1
        return count

    def exchange_employees(self, *, tenant_id, first_id, second_id):
        first, second = self.rows[first_id], self.rows[second_id]
        self.rows[first_id] = replace(first, employee_id=second.employee_id, status=AssignmentStatus.SWAPPED)
        self.rows[second_id] = replace(second, employee_id=first.employee_id, status=AssignmentStatus.SWAPPED)


class FakeTimeEntries:
    def __init__(self, employees: FakeEmployees):
        self.rows: dict[int, TimeEntry] = {}
        self.approvals: list[dict] = []
        self.audits: list[dict] = []
        self._employees = employees

    def _joined(self, e: TimeEntry) -> TimeEntry:
        emp = self._employees.rows.get(e.employee_id)
        if not emp:
            return e
        return replace(
            e,
            employee_name=emp.full_name,
            employee_code=emp.employee_code,
            employee_location_id=emp.location_id,
            hourly_rate=emp.hourly_rate,
        )

    def add(self, **fields) -> int:
        new_id = max(self.rows, default=0) + 1
        fields.setdefault("tenant_id", TENANT)
        fields.setdefault("status", TimeEntryStatus.COMPLETED)
        self.rows[new_id] = TimeEntry(id=new_id, **fields)
        return new_id

    def get(self, *, tenant_id, entry_id):
        e = self.rows.get(int(entry_id))
        return self._joined(e) if e else None

    def get_open(self, *, tenant_id, employee_id):
        for e in self.rows.values():
            if e.employee_id == employee_id and e.is_open:
                return self._joined(e)
        return None

    def create_clock_in(self, *, tenant_id, employee_id, assignment_id, clock_in):
        return self.add(
            employee_id=employee_id,
            assignment_id=assignment_id,
            clock_in=clock_in,
            status=TimeEntryStatus.IN_PROGRESS,
        )

    def update_fields(self, *, tenant_id, entry_id, changes):
        self.rows[entry_id] = replace(self.rows[entry_id], **changes)

    def _matching(self, approval_status=None, location_ids=None, employee_id=None, start=None, end=None, completed_only=False):
        out = []
        for e in sorted(self.rows.values(), key=lambda x: x.id):
            j = self._joined(e)
            day = (j.clock_in or j.created_at).date() if (j.clock_in or j.created_at) else None
            if approval_status is not None and j.approval_status != approval_status:
                continue
            if location_ids is not None and j.employee_location_id not in location_ids:
                continue
            if employee_id is not None and j.employee_id != employee_id:
                continue
            if start is not None and (day is None or day < start):
                continue
            if end is not None and (day is None or day > end):
                continue
            if completed_only and j.status != TimeEntryStatus.COMPLETED:
                continue
            out.append(j)
        return out

    def list_entries(
        self,
        *,
        tenant_id,
        approval_status=None,
        location_ids=None,
        employee_id=None,
        start=None,
        end=None,
        completed_only=False,
        limit=None,
        offset=0,
    ):
        rows = self._matching(approval_status, location_ids, employee_id, start, end, completed_only)
        return rows[offset : offset + limit] if limit is not None else rows[offset:]

    def count_entries(self, *, tenant_id, approval_status=None, location_ids=None, completed_only=False):
        return len(self._matching(approval_status, location_ids, completed_only=completed_only))

    def approval_stats(self, *, tenant_id, location_ids=None):
        rows = self._matching(location_ids=location_ids, completed_only=True)
        return {
            "pending": sum(1 for r in rows if r.approval_status == ApprovalStatus.PENDING),
            "approved": sum(1 for r in rows if r.approval_status in (ApprovalStatus.APPROVED, ApprovalStatus.EDITED)),
            "rejected": sum(1 for r in rows if r.approval_status == ApprovalStatus.REJECTED),
            "pending_hours": sum(r.total_hours or 0 for r in rows if r.approval_status == ApprovalStatus.PENDING),
            "approved_hours": sum(r.approved_hours or 0 for r in rows if r.approval_status == ApprovalStatus.APPROVED),
        }

    def record_approval(self, **kwargs):
        self.approvals.append(kwargs)

    def write_audit(self, **kwargs):
        self.audits.append(kwargs)

    def bulk_approve(self, *, tenant_id, start, end, approved_by, approved_at, location_ids=None):
        count = 0
        for e in self._matching(ApprovalStatus.PENDING, location_ids, completed_only=True):
            created = (e.created_at or e.clock_in).date()
            if e.clock_in and e.clock_out and start <= created <= end:
                self.update_fields(
                    tenant_id=tenant_id,
                    entry_id=e.id,
                    changes={"approval_status": ApprovalStatus.APPROVED, "approved_by": approved_by, "approved_at": approved_at},
                )
                count += 1
        return count

    def live_counts(self, *, tenant_id, day, location_ids=None):
        rows = self._matching(location_ids=location_ids)
        return {
            "clocked_in": sum(1 for r in rows if r.status == TimeEntryStatus.IN_PROGRESS),
            "on_break": sum(1 for r in rows if r.status == TimeEntryStatus.BREAK),
            "completed_today": sum(
                1 for r in rows if r.status == TimeEntryStatus.COMPLETED and r.clock_out and r.clock_out.date() == day
            ),
            "pending_approvals": sum(
                1 for r in rows if r.status == TimeEntryStatus.COMPLETED and r.approval_status == ApprovalStatus.PENDING
            ),
        }


class FakePayPeriods:
    def __init__(self):
        self.periods: dict[int, PayPeriod] = {}
        self.adjustments: list[PayrollAdjustment] = []

    def upsert(self, *, tenant_id, start_date, end_date):
        for p in self.periods.values():
            if p.start_date == start_date and p.end_date == end_date:
                return p.id
        new_id = len(self.periods) + 1
        self.periods[new_id] = PayPeriod(id=new_id, tenant_id=tenant_id, start_date=start_date, end_date=end_date)
        return new_id

    def get(self, *, tenant_id, period_id):
        return self.periods.get(int(period_id))

    def list_periods(self, *, tenant_id, status=None):
        return [p for p in self.periods.values() if status is None or p.status == status]

    def set_status(self, *, tenant_id, period_id, status):
        self.periods[period_id] = replace(self.periods[period_id], status=status)

    def find_locked_covering(self, *, tenant_id, day):
        return next((p for p in self.periods.values() if p.status == PayPeriodStatus.LOCKED and p.covers(day)), None)

    def add_adjustment(self, *, tenant_id, pay_period_id, employee_id, kind, amount, reason, category, applied_by):
        adj = PayrollAdjustment(
            id=len(self.adjustments) + 1,
            tenant_id=tenant_id,
            pay_period_id=pay_period_id,
            employee_id=employee_id,
            kind=kind,
            amount=amount,
            reason=reason,
            applied_by=applied_by,
            category=category,
        )
        self.adjustments.append(adj)
        return adj.id

    def list_adjustments(self, *, tenant_id, pay_period_id=None, start=None, end=None):
        out = []
        for adj in self.adjustments:
            if pay_period_id is not None and adj.pay_period_id != pay_period_id:
                continue
            if pay_period_id is None and start is not None:
                period = self.periods[adj.pay_period_id]
                if period.end_date < start or period.start_date > end:
                    continue
            out.append(adj)
        return out


class FakeLeaves:
    def __init__(self, employees: FakeEmployees):
        self.rows: dict[int, LeaveRequest] = {}
        self._employees = employees

    def _joined(self, r):
        emp = self._employees.rows.get(r.employee_id)
        return replace(r, employee_name=emp.full_name if emp else None, employee_location_id=emp.location_id if emp else None)

    def create(self, *, tenant_id, data):
        new_id = len(self.rows) + 1
        self.rows[new_id] = LeaveRequest(id=new_id, tenant_id=tenant_id, **data.__dict__)
        return new_id

    def get(self, *, tenant_id, request_id):
        r = self.rows.get(int(request_id))
        return self._joined(r) if r else None

    def list_requests(self, *, tenant_id, employee_id=None, status=None, type=None, start=None, end=None, location_ids=None):
        out = []
        for r in map(self._joined, self.rows.values()):
            if employee_id is not None and r.employee_id != employee_id:
                continue
            if status is not None and r.status != status:
                continue
            if type is not None and r.type != type:
                continue
            if start is not None and r.end_date < start:
                continue
            if end is not None and r.start_date > end:
                continue
            if location_ids is not None and r.employee_location_id not in location_ids:
                continue
            out.append(r)
        return out

    def has_overlap(self, *, tenant_id, employee_id, start, end):
        return any(
            r.employee_id == employee_id
            and r.status in (RequestStatus.PENDING, RequestStatus.APPROVED)
            and r.start_date <= end
            and r.end_date >= start
            for r in self.rows.values()
        )

    def decide(self, *, tenant_id, request_id, status, decided_by, decided_at, admin_notes=None, rejection_reason=None):
        r = self.rows.get(int(request_id))
        if not r or r.status != RequestStatus.PENDING:
            return False
        self.rows[r.id] = replace(
            r,
            status=status,
            approved_by=decided_by,
            approved_at=decided_at,
            admin_notes=admin_notes,
            rejection_reason=rejection_reason,
        )
        return True


class FakeSwaps:
    def __init__(self, employees: FakeEmployees):
        self.rows: dict[int, SwapRequest] = {}
        self._employees = employees

    def _joined(self, r):
        req = self._employees.rows.get(r.requester_id)
        tgt = self._employees.rows.get(r.target_id)
        return replace(
            r,
            requester_name=req.full_name if req else None,
            target_name=tgt.full_name if tgt else None,
            requester_location_id=req.location_id if req else None,
            target_location_id=tgt.location_id if tgt else None,
        )

    def create(self, *, tenant_id, data):
        new_id = len(self.rows) + 1
        self.rows[new_id] = SwapRequest(id=new_id, tenant_id=tenant_id, **data.__dict__)
        return new_id

    def get(self, *, tenant_id, request_id):
        r = self.rows.get(int(request_id))
        return self._joined(r) if r else None

    def list_requests(self, *, tenant_id, employee_id=None, status=None, location_ids=None):
        out = []
        for r in map(self._joined, self.rows.values()):
            if employee_id is not None and employee_id not in (r.requester_id, r.target_id):
                continue
            if status is not None and r.status != status:
                continue
            if location_ids is not None and r.requester_location_id not in location_ids:
                continue
            out.append(r)
        return out

    def pending_exists(self, *, tenant_id, data):
        return any(
            r.status == RequestStatus.PENDING
            and (r.requester_id, r.target_id, r.original_assignment_id, r.requested_assignment_id)
            == (data.requester_id, data.target_id, data.original_assignment_id, data.requested_assignment_id)
            for r in self.rows.values()
        )

    def decide(self, *, tenant_id, request_id, status, decided_by, decided_at, manager_notes=None):
        r = self.rows.get(int(request_id))
        if not r or r.status != RequestStatus.PENDING:
            return False
        self.rows[r.id] = replace(r, status=status, approved_by=decided_by, approved_at=decided_at, manager_notes=manager_notes)
        return True


def make_employee(emp_id, role=Role.AGENT, location_id=10, *, code=None, hourly_rate=15.0, active=True, first="Emp"):
    return Employee(
        id=emp_id,
        tenant_id=TENANT,
        employee_code=code or f"E{emp_id:03d}",
        first_name=first,
        last_name=str(emp_id),
        role=role,
        hourly_rate=hourly_rate,
        location_id=location_id,
        is_active=active,
    )


def user_for(emp: Employee, scope=None) -> ApiUser:
    if scope is None and emp.role != Role.ADMIN:
        scope = (emp.location_id,) if emp.location_id is not None else ()
    return ApiUser(
        employee_id=emp.id,
        tenant_id=emp.tenant_id,
        role=emp.role,
        employee_code=emp.employee_code,
        location_id=emp.location_id,
        location_scope=scope,
    )


@pytest.fixture
def employees_repo():
    return FakeEmployees(
        [
            make_employee(1, Role.ADMIN, None, code="ADM001", first="Ada"),
            make_employee(2, Role.MANAGER, 10, code="MGR001", first="Max"),
            make_employee(3, Role.AGENT, 10, code="AGT001", first="Ann"),
            make_employee(4, Role.AGENT, 10, code="AGT002", first="Bob", hourly_rate=20.0),
            make_employee(5, Role.EMPLOYEE, 20, code="EMP001", first="Cat"),
        ]
    )


@pytest.fixture
def templates_repo():
    return FakeTemplates(
        [
            ShiftTemplate(id=1, tenant_id=TENANT, name="Morning", start_time=time(9, 0), end_time=time(17, 0)),
            ShiftTemplate(id=2, tenant_id=TENANT, name="Night", start_time=time(22, 0), end_time=time(6, 0)),
        ]
    )


@pytest.fixture
def tenants_repo():
    return FakeTenants(manager_locations={2: [10]})


@pytest.fixture
def locations_repo(employees_repo, tenants_repo):
    return FakeLocations(
        employees_repo,
        tenants_repo,
        [
            Location(id=10, tenant_id=TENANT, name="Head Office"),
            Location(id=20, tenant_id=TENANT, name="Warehouse"),
        ],
    )


@pytest.fixture
def notifications_repo():
    return FakeNotifications()


@pytest.fixture
def rotas_repo():
    return FakeRotas()


@pytest.fixture
def assignments_repo(employees_repo, templates_repo, rotas_repo):
    return FakeAssignments(employees_repo, templates_repo, rotas_repo)


@pytest.fixture
def entries_repo(employees_repo):
    return FakeTimeEntries(employees_repo)


@pytest.fixture
def employee_service(employees_repo):
    return EmployeeService(employees_repo)


@pytest.fixture
def template_service(templates_repo):
    return ShiftTemplateService(templates_repo)


@pytest.fixture
def notification_service(notifications_repo):
    return NotificationService(notifications_repo)


@pytest.fixture
def settings_service(tenants_repo):
    return TenantSettingsService(tenants_repo)


@pytest.fixture
def admin(employees_repo):
    return user_for(employees_repo.rows[1])


@pytest.fixture
def manager(employees_repo):
    return user_for(employees_repo.rows[2], scope=(10,))


@pytest.fixture
def agent(employees_repo):
    return user_for(employees_repo.rows[3])


@pytest.fixture
def today():
    return date(2024, 6, 3)


@pytest.fixture
def morning():
    return datetime(2024, 6, 3, 9, 0)


@pytest.fixture
def as_user():
    return user_for


@pytest.fixture
def new_employee(employees_repo):
    def _add(emp_id, role=Role.AGENT, location_id=10, **kwargs):
        return employees_repo.add(make_employee(emp_id, role, location_id, **kwargs))

    return _add


@pytest.fixture
def periods_repo():
    return FakePayPeriods()


@pytest.fixture
def leaves_repo(employees_repo):
    return FakeLeaves(employees_repo)


@pytest.fixture
def swaps_repo(employees_repo):
    return FakeSwaps(employees_repo)
