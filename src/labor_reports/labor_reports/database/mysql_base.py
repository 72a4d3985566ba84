from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection and cursor; commit on clean exit, rollback on any error."""

    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def decode_json_column(value: Any) -> Dict[str, Any]:
    """Normalize a JSON column: the pure connector returns str, the C extension bytes."""

    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    raise TypeError(f"Unsupported MySQL JSON value type: {type(value)!r}")


def encode_json_column(doc: Dict[str, Any]) -> str:
    # The id lives in doc_id, never inside the JSON body.
    return json.dumps({k: v for k, v in doc.items() if k != "id"}, ensure_ascii=False)
