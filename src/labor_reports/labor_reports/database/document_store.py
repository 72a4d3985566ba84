from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import mysql.connector

from ..core.constants import COLLECTIONS
from ..core.exceptions import TransactionError
from .connection import DatabaseConnection
from .mysql_base import db_cursor, decode_json_column, encode_json_column
from .unit_of_work import BatchWriter, UnitOfWork, WriteKind, WriteOp

logger = logging.getLogger(__name__)


class DocumentStore(BatchWriter, Protocol):
    """Per-collection read/query plus atomic multi-document batch commit.

    Documents are plain dicts; the returned dict always carries its ``id``.
    """

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def find(self, collection: str, **equals: Any) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        raise NotImplementedError


def begin(store: BatchWriter) -> UnitOfWork:
    return UnitOfWork(store)


def _table_for(collection: str) -> str:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection!r}")
    return collection.replace("-", "_")


def _field_path(field: str) -> str:
    if not field.replace("_", "").isalnum():
        raise ValueError(f"Invalid field name: {field!r}")
    return f"$.{field}"


class MySQLDocumentStore(DocumentStore):
    """Each collection is a table of (doc_id, data JSON)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_doc(row: Dict[str, Any]) -> Dict[str, Any]:
        doc = decode_json_column(row["data"])
        doc["id"] = row["doc_id"]
        return doc

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        table = _table_for(collection)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT doc_id, data FROM {table} WHERE doc_id=%s", (str(doc_id),))
            row = cur.fetchone()
            return self._to_doc(row) if row else None

    def find(self, collection: str, **equals: Any) -> List[Dict[str, Any]]:
        table = _table_for(collection)
        clauses = ["1=1"]
        params: list[object] = []
        for field_name, value in equals.items():
            clauses.append("JSON_UNQUOTE(JSON_EXTRACT(data, %s))=%s")
            params.extend([_field_path(field_name), str(value)])

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT doc_id, data FROM {table} WHERE {where}", tuple(params))
            return [self._to_doc(r) for r in cur.fetchall() or []]

    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        return self.find(collection)

    def commit_batch(self, ops: Sequence[WriteOp]) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for op in ops:
                    self._apply(cur, op)
        except mysql.connector.Error as exc:
            logger.exception("Batch commit of %d writes failed", len(ops))
            raise TransactionError("Could not save changes, please retry") from exc

    @staticmethod
    def _apply(cur, op: WriteOp) -> None:
        table = _table_for(op.collection)
        body = encode_json_column(op.data or {})

        if op.kind == WriteKind.SET:
            cur.execute(
                f"""
                INSERT INTO {table}(doc_id, data) VALUES(%s, %s)
                ON DUPLICATE KEY UPDATE data=VALUES(data)
                """,
                (op.doc_id, body),
            )
        elif op.kind == WriteKind.UPDATE:
            cur.execute(
                f"UPDATE {table} SET data=JSON_MERGE_PATCH(data, %s) WHERE doc_id=%s",
                (body, op.doc_id),
            )
        else:
            cur.execute(f"DELETE FROM {table} WHERE doc_id=%s", (op.doc_id,))
