import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

DEBUG = True

# Applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Also load the sample classes/students
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SCHOOL_NAME = os.getenv("SCHOOL_NAME", "Sunshine Elementary School")
CHART_DEFAULT_DAYS = int(os.getenv("CHART_DEFAULT_DAYS", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_DIR = os.getenv("LOG_DIR") or None
