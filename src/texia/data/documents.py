"""Collection-based document store on top of SQLite.

Documents are schemaless JSON objects grouped by collection. Queries support
exact-match equality predicates, an optional ordering on one field and an
optional result cap, which is all the screens need.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any
from uuid import uuid4

from texia.data.db import Db

logger = logging.getLogger(__name__)


COLLECTIONS = frozenset({"telas", "inventario_telas", "tareas", "defectos", "users"})

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Placeholder replaced by the store with the write time (UTC).
SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Document:
    id: str
    data: dict[str, Any] = field(default_factory=dict)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_collection(collection: str) -> str:
    name = str(collection or "").strip()
    if name not in COLLECTIONS:
        raise ValueError(f"colección no soportada: {collection!r}")
    return name


def _check_field(name: str) -> str:
    s = str(name or "")
    if not _FIELD_RE.match(s):
        raise ValueError(f"campo inválido: {name!r}")
    return s


def _encode_value(value: Any, *, now: datetime) -> Any:
    if value is SERVER_TIMESTAMP:
        return now.isoformat()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _encode_value(v, now=now) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(v, now=now) for v in value]
    return value


def encode_document(data: dict[str, Any], *, now: datetime | None = None) -> str:
    now = now or utc_now()
    return json.dumps(_encode_value(dict(data), now=now), ensure_ascii=False)


class DocumentStore:
    def __init__(self, db: Db):
        self.db = db

    def query(
        self,
        collection: str,
        *,
        where: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        collection = _check_collection(collection)
        clauses = ["collection = ?"]
        params: list[Any] = [collection]
        for key, value in (where or {}).items():
            path = f"$.{_check_field(key)}"
            if value is None:
                clauses.append("json_extract(data_json, ?) IS NULL")
                params.append(path)
            else:
                clauses.append("json_extract(data_json, ?) = ?")
                params.extend([path, value])

        sql = f"SELECT doc_id, data_json FROM documents WHERE {' AND '.join(clauses)}"
        if order_by:
            direction = "DESC" if descending else "ASC"
            sql += f" ORDER BY json_extract(data_json, ?) {direction}, rowid ASC"
            params.append(f"$.{_check_field(order_by)}")
        else:
            sql += " ORDER BY rowid ASC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(max(0, int(limit)))

        with self.db.connect() as con:
            rows = con.execute(sql, params).fetchall()

        docs: list[Document] = []
        for r in rows:
            try:
                data = json.loads(r["data_json"])
            except ValueError:
                logger.warning("Documento %s/%s con JSON inválido; se omite", collection, r["doc_id"])
                continue
            docs.append(Document(id=str(r["doc_id"]), data=data if isinstance(data, dict) else {}))
        return docs

    def get(self, collection: str, doc_id: str) -> Document | None:
        collection = _check_collection(collection)
        with self.db.connect() as con:
            row = con.execute(
                "SELECT doc_id, data_json FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, str(doc_id)),
            ).fetchone()
        if row is None:
            return None
        try:
            data = json.loads(row["data_json"])
        except ValueError:
            logger.warning("Documento %s/%s con JSON inválido; se omite", collection, row["doc_id"])
            return None
        return Document(id=str(row["doc_id"]), data=data if isinstance(data, dict) else {})

    def add(self, collection: str, data: dict[str, Any]) -> str:
        """Insert a new document with a store-assigned id and return the id."""
        collection = _check_collection(collection)
        doc_id = uuid4().hex[:20]
        with self.db.connect() as con:
            con.execute(
                "INSERT INTO documents(collection, doc_id, data_json) VALUES(?, ?, ?)",
                (collection, doc_id, encode_document(data)),
            )
        logger.info("Documento creado en %s: %s", collection, doc_id)
        return doc_id

    def set(self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = False) -> None:
        """Write a document under a known id.

        With ``merge=True`` existing fields not present in ``data`` are kept.
        """
        collection = _check_collection(collection)
        doc_id = str(doc_id or "").strip()
        if not doc_id:
            raise ValueError("doc_id vacío")

        with self.db.connect() as con:
            current: dict[str, Any] = {}
            if merge:
                row = con.execute(
                    "SELECT data_json FROM documents WHERE collection = ? AND doc_id = ?",
                    (collection, doc_id),
                ).fetchone()
                if row is not None:
                    try:
                        loaded = json.loads(row["data_json"])
                    except ValueError:
                        logger.warning("Documento %s/%s con JSON inválido; se reemplaza", collection, doc_id)
                        loaded = {}
                    current = loaded if isinstance(loaded, dict) else {}
            current.update(data)
            con.execute(
                """
                INSERT INTO documents(collection, doc_id, data_json) VALUES(?, ?, ?)
                ON CONFLICT(collection, doc_id) DO UPDATE SET
                    data_json = excluded.data_json,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (collection, doc_id, encode_document(current)),
            )
        logger.info("Documento %s/%s guardado (merge=%s)", collection, doc_id, merge)

    def count(self, collection: str) -> int:
        collection = _check_collection(collection)
        with self.db.connect() as con:
            return int(con.execute("SELECT COUNT(*) FROM documents WHERE collection = ?", (collection,)).fetchone()[0])
