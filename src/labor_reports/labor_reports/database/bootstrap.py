from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# CREATE DATABASE / USE lines are dropped; the configured database always wins.
_DATABASE_DIRECTIVES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")
_STATEMENT_END = re.compile(r";\s*$", re.MULTILINE)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema script into statements.

    A statement ends with ``;`` at the end of a line. Full-line ``--`` comments
    are skipped.
    """

    body = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    body = _DATABASE_DIRECTIVES.sub("", body)
    for chunk in _STATEMENT_END.split(body):
        stmt = chunk.strip()
        if stmt:
            yield stmt


def ensure_database_exists(db_config: dict) -> DBConfig:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()
    return config


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    config = ensure_database_exists(db_config)
    statements = list(iter_sql_statements(Path(schema_path).read_text(encoding="utf-8")))

    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %d schema statements to %s", len(statements), config.describe())


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
