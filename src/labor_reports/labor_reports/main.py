from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .absences.controller import register as register_permissions
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .database.document_store import DocumentStore
from .reports.controller import register as register_daily_reports
from .statistics.controller import register as register_statistics

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(*, store: DocumentStore | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = load_settings()
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("settings=%s db=%s", get_settings_module(), DBConfig.from_dict(db_config).describe())

    if store is None and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        store=store,
        overtime_warning_hours=float(getattr(settings, "OVERTIME_WARNING_HOURS", 12)),
    )
    app.extensions["labor_reports"] = container

    register_daily_reports(app, container)
    register_permissions(app, container)
    register_statistics(app, container)

    return app
