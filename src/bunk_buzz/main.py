from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .common.http import CONTAINER_KEY, fail, ok
from .config import get_settings_module
from .container import Container, build_container
from .core.exceptions import ConfigurationError, DomainError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .predictor.controller import register as register_predictor
from .subjects.controller import register as register_subjects
from .timetable.controller import register as register_timetable
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"

API_INDEX = {
    "auth": "/api/auth",
    "profile": "/api/profile",
    "subjects": "/api/subjects",
    "timetable": "/api/timetable",
    "attendance": "/api/attendance",
    "bunkPredictor": "/api/bunk-predictor",
}


def _check_required(settings, settings_module: str) -> None:
    missing = [name for name in getattr(settings, "REQUIRED_SETTINGS", ()) if not getattr(settings, name, None)]
    if missing:
        raise ConfigurationError(f"{settings_module}: missing required settings {', '.join(missing)}")


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation(exc: ValidationError):
        errors = [{"field": exc.field, "message": str(exc)}] if exc.field else None
        return fail(str(exc), exc.status_code, errors=errors)

    @app.errorhandler(DomainError)
    def handle_domain(exc: DomainError):
        return fail(str(exc), exc.status_code)

    @app.errorhandler(HTTPException)
    def handle_http(exc: HTTPException):
        if exc.code == 404:
            return fail(f"Route {request.path} not found", 404)
        return fail(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = str(exc) if app.config.get("DEBUG") else "Internal server error"
        return fail(message, 500)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app; pass ``container`` to run on pre-built services."""
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _check_required(settings, settings_module)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db_config = getattr(settings, "DB_CONFIG")
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
            conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
            apply_schema(conn, str(db_config["database"]), schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(conn)))
        container = build_container(settings)

    app.extensions[CONTAINER_KEY] = container
    _register_error_handlers(app)

    register_users(app, container)
    register_subjects(app, container)
    register_timetable(app, container)
    register_attendance(app, container)
    register_predictor(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok(message="Bunk Buzz API is running", environment=settings_module.rsplit(".", 1)[-1])

    @app.route("/api", methods=["GET"], endpoint="api_index")
    def api_index():
        return ok(message="Bunk Buzz API v1.0", documentation=API_INDEX)

    return app
