from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .common.http import fail, ok
from .common.logger import configure_logging
from .container import Container, build_container
from .core.constants import DEFAULT_CHART_DAYS, DEFAULT_SCHOOL_NAME
from .core.exceptions import ConflictError, NotFoundError, ValidationError
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .reports.controller import register as register_reports
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(ConflictError)
    def handle_conflict(e: ConflictError):
        return fail(str(e), 400)

    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        message = str(e) if app.config.get("DEBUG") else "Internal server error"
        return fail(message, 500)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_dir=getattr(settings, "LOG_DIR", None),
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            school_name=getattr(settings, "SCHOOL_NAME", DEFAULT_SCHOOL_NAME),
            chart_default_days=int(getattr(settings, "CHART_DEFAULT_DAYS", DEFAULT_CHART_DAYS)),
        )

    app.extensions["school_attendance"] = container
    _register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "OK", "message": "School Attendance API is running"})

    register_classes(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
