import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "kpt_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo accounts and students into empty collections
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

# Login password given to faculty accounts created from the faculty page
DEFAULT_FACULTY_PASSWORD = os.getenv("DEFAULT_FACULTY_PASSWORD", "password123")
REPORT_FILE_PREFIX = os.getenv("REPORT_FILE_PREFIX", "KPT_Report")
