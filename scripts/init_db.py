"""Create the database and apply database/schema.sql for the current APP_ENV."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.labor_reports.labor_reports.database.bootstrap import apply_schema, list_tables
from src.labor_reports.labor_reports.database.connection import DBConfig

logger = logging.getLogger("init_db")


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    logger.info("Schema ready on %s: %s", DBConfig.from_dict(db_config).describe(), ", ".join(tables))


if __name__ == "__main__":
    main()
