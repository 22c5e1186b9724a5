import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

ATTENDANCE_WINDOW_SECONDS = float(os.getenv("ATTENDANCE_WINDOW_SECONDS", "3600"))
DAY_DURATION_SECONDS = float(os.getenv("DAY_DURATION_SECONDS", "86400"))
START_DAY_CYCLE = bool(int(os.getenv("START_DAY_CYCLE", "1")))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
