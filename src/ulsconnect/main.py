from __future__ import annotations

import importlib
import logging
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .activities.controller import register as register_activities
from .attendance.controller import register as register_attendance
from .common.log import configure_logging
from .container import build_container
from .core.exceptions import DomainError
from .database.bootstrap import ensure_indexes
from .enrollments.controller import register as register_enrollments
from .panel.controller import register as register_panel
from .registrations.controller import register as register_registrations
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def load_settings(overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {k: getattr(module, k) for k in dir(module) if k.isupper()}
    settings["SETTINGS_MODULE"] = settings_module
    settings.update(overrides or {})
    return settings


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "error": str(e)}), e.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"success": False, "error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error")
        return jsonify({"success": False, "error": str(e)}), 500


def create_app(overrides: Optional[dict[str, Any]] = None, **container_kwargs: Any) -> Flask:
    """Application factory.

    `overrides` replaces settings from the selected config module (tests pass
    STORAGE_BACKEND/DATA_FILE here); `container_kwargs` go to build_container.
    """
    load_dotenv(override=False)
    settings = load_settings(overrides)
    configure_logging(settings.get("LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))
    app.config["JSON_SORT_KEYS"] = False

    logger.info("settings=%s backend=%s", settings["SETTINGS_MODULE"], settings.get("STORAGE_BACKEND"))

    container = build_container(settings=settings, **container_kwargs)
    app.extensions["ulsconnect"] = container

    if container.mongo is not None and settings.get("AUTO_INIT_DB"):
        ensure_indexes(container.mongo)

    register_error_handlers(app)
    register_users(app, container)
    register_registrations(app, container)
    register_activities(app, container)
    register_enrollments(app, container)
    register_attendance(app, container)
    register_panel(app, container)

    return app
