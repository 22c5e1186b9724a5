from __future__ import annotations

import atexit
import importlib
import logging
import signal
import threading
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.validators import require_positive_seconds
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def register_routes(app: Flask, container: Container) -> None:
    register_students(app, container)
    register_attendance(app, container)
    register_notifications(app, container)
    register_reports(app, container)


def start_background(container: Container) -> None:
    """Start the job scheduler and the day cycle.

    Both are stopped once, at interpreter exit or on SIGTERM, whichever comes first.
    """
    container.jobs.start()
    container.day_cycle.start()

    stopped = threading.Event()

    def _stop() -> None:
        if stopped.is_set():
            return
        stopped.set()
        logger.info("Shutting down day system")
        container.day_cycle.shutdown()
        container.jobs.shutdown(wait=False)

    def _on_sigterm(signum, frame) -> None:
        _stop()
        raise SystemExit(0)

    atexit.register(_stop)
    # Signal handlers can only be installed from the main thread.
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGTERM, _on_sigterm)


def create_app() -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    window = require_positive_seconds(getattr(settings, "ATTENDANCE_WINDOW_SECONDS"), "ATTENDANCE_WINDOW_SECONDS")
    day = require_positive_seconds(getattr(settings, "DAY_DURATION_SECONDS"), "DAY_DURATION_SECONDS")

    logger.info(
        "settings=%s db=%s@%s:%s/%s window=%ss day=%ss",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        window,
        day,
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")

    container = build_container(
        db_config=db_config,
        attendance_window_seconds=window,
        day_duration_seconds=day,
    )
    app.extensions["school_attendance"] = container
    register_routes(app, container)

    if bool(getattr(settings, "START_DAY_CYCLE", True)):
        start_background(container)

    return app
