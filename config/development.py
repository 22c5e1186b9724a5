import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

# Prototype timings: a 2 minute "day" with a 1 minute check-in window.
ATTENDANCE_WINDOW_SECONDS = float(os.getenv("ATTENDANCE_WINDOW_SECONDS", "60"))
DAY_DURATION_SECONDS = float(os.getenv("DAY_DURATION_SECONDS", "120"))
START_DAY_CYCLE = bool(int(os.getenv("START_DAY_CYCLE", "1")))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the sample roster on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
