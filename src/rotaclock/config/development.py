import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rotaclock"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Fall back to the seeded admin when a request carries no identity.
DEMO_AUTH = bool(int(os.getenv("DEMO_AUTH", "1")))
DEMO_TENANT_ID = int(os.getenv("DEMO_TENANT_ID", "1"))

LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
OVERTIME_TOLERANCE_HOURS = float(os.getenv("OVERTIME_TOLERANCE_HOURS", "0.25"))
DASHBOARD_POLL_SECONDS = int(os.getenv("DASHBOARD_POLL_SECONDS", "10"))

PAY_PERIOD_FREQUENCY = os.getenv("PAY_PERIOD_FREQUENCY", "biweekly")
PAY_PERIOD_ANCHOR = os.getenv("PAY_PERIOD_ANCHOR", "2024-01-01")
