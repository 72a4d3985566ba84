"""Load the demo project, crews, employees and type catalogs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.labor_reports.labor_reports.database.connection import DatabaseConnection, DBConfig
from src.labor_reports.labor_reports.database.document_store import MySQLDocumentStore
from src.labor_reports.labor_reports.database.seed import seed_demo_catalogs

logger = logging.getLogger("seed_db")


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))
    config = DBConfig.from_dict(settings.DB_CONFIG)

    written = seed_demo_catalogs(MySQLDocumentStore(DatabaseConnection(config)))
    logger.info("Seeded %d demo documents into %s", written, config.describe())


if __name__ == "__main__":
    main()
