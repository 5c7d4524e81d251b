from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_DB_TIMEOUT_SECONDS
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("workforce_attendance")


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )

    if container is None:
        db_config = None
        if getattr(settings, "STORAGE_BACKEND", "memory") == "mysql":
            db_config = dict(getattr(settings, "DB_CONFIG"))
            db_config["timeout"] = getattr(settings, "DB_TIMEOUT_SECONDS", DEFAULT_DB_TIMEOUT_SECONDS)
            if getattr(settings, "AUTO_INIT_DB", False):
                apply_schema(db_config)
                logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
            logger.info(
                "settings=%s db=%s@%s:%s/%s",
                settings_module,
                db_config.get("user"),
                db_config.get("host"),
                db_config.get("port", 3306),
                db_config.get("database"),
            )
        else:
            logger.warning("settings=%s using in-memory storage; data is lost on restart", settings_module)

        container = build_container(
            db_config=db_config,
            punch_policy=getattr(settings, "PUNCH_POLICY", "single"),
            lock_timeout=float(getattr(settings, "LOCK_TIMEOUT_SECONDS", 5)),
        )

    app.extensions["attendance_container"] = container
    register_attendance(app, container)

    return app
