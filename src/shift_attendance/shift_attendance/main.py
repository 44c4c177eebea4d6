from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .core.exceptions import DomainError
from .common.web import status_for
from .database.bootstrap import apply_schema

from .container import build_container
from .attendance.controller import register as register_attendance
from .schedules.controller import register as register_schedules
from .sweeps.controller import register as register_sweeps
from .reports.controller import register as register_reports

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)

    container = build_container(db_config=db_config, rules=getattr(settings, "RULES", {}))

    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        return jsonify(error.to_dict()), status_for(error)

    register_attendance(app, container)
    register_schedules(app, container)
    register_sweeps(app, container)
    register_reports(app, container)

    return app
