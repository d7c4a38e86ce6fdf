from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .approvals.leave_service import LeaveService
from .approvals.mysql_leave_repository import MySQLLeaveRepository
from .approvals.mysql_swap_repository import MySQLSwapRepository
from .approvals.swap_service import SwapService
from .approvals.timesheet_service import TimesheetApprovalService
from .common.datetime_utils import parse_iso_date
from .core import constants
from .core.enums import PayFrequency
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.service import LocationService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .payroll.mysql_pay_period_repository import MySQLPayPeriodRepository
from .payroll.service import PayrollService
from .reports.service import ReportService
from .rotas.mysql_rota_repository import MySQLRotaRepository
from .rotas.service import RotaService
from .scheduling.mysql_assignment_repository import MySQLAssignmentRepository
from .scheduling.service import ScheduleService
from .shift_templates.mysql_template_repository import MySQLShiftTemplateRepository
from .shift_templates.service import ShiftTemplateService
from .tenants.mysql_tenant_repository import MySQLTenantRepository
from .tenants.service import AuthService, TenantSettingsService
from .timekeeping.mysql_time_entry_repository import MySQLTimeEntryRepository
from .timekeeping.rules.detector import DiscrepancyDetector, default_rules
from .timekeeping.service import TimekeepingService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    auth_service: AuthService
    tenant_settings_service: TenantSettingsService
    employee_service: EmployeeService
    location_service: LocationService
    notification_service: NotificationService
    template_service: ShiftTemplateService
    rota_service: RotaService
    schedule_service: ScheduleService
    timekeeping_service: TimekeepingService
    payroll_service: PayrollService
    approval_service: TimesheetApprovalService
    leave_service: LeaveService
    swap_service: SwapService
    report_service: ReportService


def _setting(settings: Any, name: str, default: Any) -> Any:
    return getattr(settings, name, default) if settings is not None else default


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    tenants_repo = MySQLTenantRepository(conn)
    locations_repo = MySQLLocationRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)
    templates_repo = MySQLShiftTemplateRepository(conn)
    rotas_repo = MySQLRotaRepository(conn)
    assignments_repo = MySQLAssignmentRepository(conn)
    entries_repo = MySQLTimeEntryRepository(conn)
    periods_repo = MySQLPayPeriodRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)
    swap_repo = MySQLSwapRepository(conn)

    auth_service = AuthService(
        employees_repo,
        tenants_repo,
        demo_auth=bool(_setting(settings, "DEMO_AUTH", False)),
        demo_tenant_id=int(_setting(settings, "DEMO_TENANT_ID", 1)),
    )
    tenant_settings_service = TenantSettingsService(tenants_repo)
    employee_service = EmployeeService(employees_repo)
    location_service = LocationService(locations_repo, employee_service)
    notification_service = NotificationService(notifications_repo)
    template_service = ShiftTemplateService(templates_repo)
    schedule_service = ScheduleService(
        assignments_repo,
        rotas_repo,
        employee_service,
        template_service,
        tenants_repo,
        notification_service,
    )
    rota_service = RotaService(rotas_repo, schedule_service)
    timekeeping_service = TimekeepingService(
        entries_repo,
        assignments_repo,
        employee_service,
        tenants_repo,
        notification_service,
        poll_interval_seconds=int(_setting(settings, "DASHBOARD_POLL_SECONDS", constants.DASHBOARD_POLL_SECONDS)),
    )
    payroll_service = PayrollService(
        periods_repo,
        entries_repo,
        employee_service,
        frequency=PayFrequency(_setting(settings, "PAY_PERIOD_FREQUENCY", PayFrequency.BIWEEKLY.value)),
        anchor=parse_iso_date(_setting(settings, "PAY_PERIOD_ANCHOR", "2024-01-01")),
    )
    detector = DiscrepancyDetector(
        rules=default_rules(
            late_grace_minutes=int(_setting(settings, "LATE_GRACE_MINUTES", constants.LATE_GRACE_MINUTES)),
            overtime_tolerance_hours=float(
                _setting(settings, "OVERTIME_TOLERANCE_HOURS", constants.OVERTIME_TOLERANCE_HOURS)
            ),
        )
    )
    approval_service = TimesheetApprovalService(
        entries_repo,
        tenant_settings_service,
        payroll_service,
        notification_service,
        detector=detector,
    )
    leave_service = LeaveService(
        leave_repo, assignments_repo, employee_service, tenant_settings_service, notification_service
    )
    swap_service = SwapService(swap_repo, assignments_repo, employee_service, notification_service)
    report_service = ReportService(assignments_repo, entries_repo)

    return Container(
        conn=conn,
        auth_service=auth_service,
        tenant_settings_service=tenant_settings_service,
        employee_service=employee_service,
        location_service=location_service,
        notification_service=notification_service,
        template_service=template_service,
        rota_service=rota_service,
        schedule_service=schedule_service,
        timekeeping_service=timekeeping_service,
        payroll_service=payroll_service,
        approval_service=approval_service,
        leave_service=leave_service,
        swap_service=swap_service,
        report_service=report_service,
    )
