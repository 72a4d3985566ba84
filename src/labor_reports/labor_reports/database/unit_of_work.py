"""Batch-as-transaction: collect writes, commit them atomically.

The store guarantees atomicity of a single ``commit_batch`` call; nothing is
rolled back client-side.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


class WriteKind(str, Enum):
    SET = "SET"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class WriteOp:
    kind: WriteKind
    collection: str
    doc_id: str
    data: Optional[Dict[str, Any]] = None


class BatchWriter(Protocol):
    def commit_batch(self, ops: Sequence[WriteOp]) -> None:
        """Apply every op or none of them. Raises TransactionError on failure."""

        raise NotImplementedError


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class UnitOfWork:
    writer: BatchWriter
    _ops: list = field(default_factory=list)
    _committed: bool = False

    def _ensure_open(self) -> None:
        if self._committed:
            raise RuntimeError("Unit of work already committed")

    def set(self, collection: str, data: Dict[str, Any], *, doc_id: Optional[str] = None) -> str:
        self._ensure_open()
        doc_id = doc_id or new_id()
        self._ops.append(WriteOp(WriteKind.SET, collection, doc_id, dict(data)))
        return doc_id

    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._ensure_open()
        self._ops.append(WriteOp(WriteKind.UPDATE, collection, doc_id, dict(data)))

    def delete(self, collection: str, doc_id: str) -> None:
        self._ensure_open()
        self._ops.append(WriteOp(WriteKind.DELETE, collection, doc_id))

    @property
    def ops(self) -> tuple:
        return tuple(self._ops)

    def commit(self) -> None:
        self._ensure_open()
        self._committed = True
        if not self._ops:
            return
        logger.debug("Committing batch of %d writes", len(self._ops))
        self.writer.commit_batch(tuple(self._ops))
