import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "rotaclock"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rotaclock"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

DEMO_AUTH = False
DEMO_TENANT_ID = int(os.getenv("DEMO_TENANT_ID", "1"))

LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
OVERTIME_TOLERANCE_HOURS = float(os.getenv("OVERTIME_TOLERANCE_HOURS", "0.25"))
DASHBOARD_POLL_SECONDS = int(os.getenv("DASHBOARD_POLL_SECONDS", "10"))

PAY_PERIOD_FREQUENCY = os.getenv("PAY_PERIOD_FREQUENCY", "biweekly")
PAY_PERIOD_ANCHOR = os.getenv("PAY_PERIOD_ANCHOR", "2024-01-01")
