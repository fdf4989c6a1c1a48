from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .audit.controller import register as register_audit
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_directory, list_tables
from .faculty.controller import register as register_faculty
from .promotion.controller import register as register_promotion
from .reports.controller import register as register_reports
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    With an explicit container (tests), no database bootstrap runs.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            default_faculty_password=getattr(settings, "DEFAULT_FACULTY_PASSWORD", "password123"),
            report_file_prefix=getattr(settings, "REPORT_FILE_PREFIX", "KPT_Report"),
        )

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_directory(container.store)
            logger.info("demo directory ready")

    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_faculty(app, container)
    register_attendance(app, container)
    register_promotion(app, container)
    register_reports(app, container)
    register_audit(app, container)

    return app
