from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .api import register_error_handlers, register_request_logging
from .attendance.controller import register as register_attendance
from .common.datetime_utils import Clock
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables, seed_memory_users
from .logging_config import configure_logging
from .reports.controller import register as register_reports
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

EXTENSION_KEY = "attendance_tracker"


def create_app(*, clock: Optional[Clock] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(
        getattr(settings, "LOG_LEVEL", "INFO"),
        log_to_file=bool(getattr(settings, "LOG_TO_FILE", False)),
        log_file_path=getattr(settings, "LOG_FILE_PATH", None),
    )

    backend = getattr(settings, "STORAGE_BACKEND", "mysql")
    db_config = getattr(settings, "DB_CONFIG", None)
    container = build_container(
        db_config=db_config,
        backend=backend,
        clock=clock,
        fetch_size=int(getattr(settings, "EXPORT_FETCH_SIZE", 500)),
    )
    logger.info("settings=%s backend=%s", settings_module, backend)

    if container.conn is not None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(container.conn)
            logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_users(container.conn)
    elif getattr(settings, "AUTO_SEED_DB", False):
        seed_memory_users(container.users_repo)

    app.extensions[EXTENSION_KEY] = container

    register_error_handlers(app)
    register_request_logging(app)
    register_users(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app


def get_container(app: Flask) -> Container:
    return app.extensions[EXTENSION_KEY]


if __name__ == "__main__":
    create_app().run()
