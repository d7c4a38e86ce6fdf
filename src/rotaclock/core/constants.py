"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

LATE_GRACE_MINUTES = 5
EARLY_LEAVE_GRACE_MINUTES = 5
OVERTIME_TOLERANCE_HOURS = 0.25
DAILY_OVERTIME_THRESHOLD_HOURS = 8.0
MAX_BREAK_HOURS = 1.0

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DASHBOARD_POLL_SECONDS = 10

CUSTOM_TEMPLATE_NAME = "Custom (Ad-hoc)"
CUSTOM_TEMPLATE_COLOR = "#64748B"
CUSTOM_TEMPLATE_DEPARTMENT = "General"

LEAVE_CANCELLATION_REASON = "Employee on approved leave"
NO_DRAFTS_MESSAGE = "No draft shifts found to publish"
