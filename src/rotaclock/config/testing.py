import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rotaclock_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

DEMO_AUTH = False
DEMO_TENANT_ID = 1

LATE_GRACE_MINUTES = 5
OVERTIME_TOLERANCE_HOURS = 0.25
DASHBOARD_POLL_SECONDS = 10

PAY_PERIOD_FREQUENCY = "biweekly"
PAY_PERIOD_ANCHOR = "2024-01-01"
