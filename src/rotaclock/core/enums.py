from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee roles used for authorization."""

    ADMIN = "admin"
    MANAGER = "manager"
    TEAM_LEAD = "team_lead"
    PROJECT_MANAGER = "project_manager"
    EMPLOYEE = "employee"
    AGENT = "agent"

    @property
    def is_admin(self) -> bool:
        return self == Role.ADMIN

    @property
    def can_manage(self) -> bool:
        return self in (Role.ADMIN, Role.MANAGER)


SCHEDULABLE_ROLES = (Role.AGENT, Role.EMPLOYEE)


class RotaStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class AssignmentStatus(str, Enum):
    """Lifecycle of a single shift assignment."""

    ASSIGNED = "assigned"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    SWAPPED = "swapped"


class TimeEntryStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    BREAK = "break"
    COMPLETED = "completed"


class ApprovalStatus(str, Enum):
    """Approval state of a time entry.

    pending -> approved | rejected | edited; there is no path back to pending
    except an admin correction of the punches.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EDITED = "edited"


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    EDIT = "edit"


class RequestStatus(str, Enum):
    """Decision state of leave and swap requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    BEREAVEMENT = "bereavement"
    JURY_DUTY = "jury-duty"
    OTHER = "other"


class PayPeriodStatus(str, Enum):
    OPEN = "open"
    LOCKED = "locked"


class PayFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"


class AdjustmentKind(str, Enum):
    BONUS = "bonus"
    DEDUCTION = "deduction"


class NotificationType(str, Enum):
    INFO = "info"
    SCHEDULE = "schedule"
    APPROVAL = "approval"
    LEAVE = "leave"
    SWAP = "swap"
