from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import psycopg2
from psycopg2.extras import Json

"""Remote document store on PostgreSQL.

Documents live in one table, grouped by collection:

    CREATE TABLE report_documents (
        id          BIGSERIAL PRIMARY KEY,
        collection  TEXT NOT NULL,
        payload     JSONB NOT NULL,
        updated_at  TIMESTAMPTZ NOT NULL DEFAULT now()
    );

The first save of a refresh session inserts and returns a new id; later saves
update that id. Transaction boundaries belong to the caller's connection.
"""

__all__ = [
    "DOCUMENTS_TABLE",
    "DocumentStoreError",
    "StoredDocument",
    "ensure_table",
    "save_document",
    "load_latest",
    "clear_collection",
]

DOCUMENTS_TABLE = "report_documents"


class DocumentStoreError(Exception):
    pass


@dataclass(frozen=True)
class StoredDocument:
    id: str
    payload: dict[str, Any]


def ensure_table(cursor: Any) -> None:
    try:
        cursor.execute(
            f"CREATE TABLE IF NOT EXISTS {DOCUMENTS_TABLE} ("
            " id BIGSERIAL PRIMARY KEY,"
            " collection TEXT NOT NULL,"
            " payload JSONB NOT NULL,"
            " updated_at TIMESTAMPTZ NOT NULL DEFAULT now())"
        )
    except psycopg2.Error as e:
        raise DocumentStoreError(f"failed to create {DOCUMENTS_TABLE}: {e}") from e


def save_document(cursor: Any, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
    """Insert (``doc_id`` None) or update a document; returns its id."""
    try:
        if doc_id is None:
            cursor.execute(
                f"INSERT INTO {DOCUMENTS_TABLE} (collection, payload, updated_at)"
                " VALUES (%s, %s, now()) RETURNING id",
                (collection, Json(data)),
            )
            row = cursor.fetchone()
            if row is None:
                raise DocumentStoreError("insert returned no id")
            return str(row[0])
        cursor.execute(
            f"UPDATE {DOCUMENTS_TABLE} SET payload = %s, updated_at = now()"
            " WHERE id = %s AND collection = %s",
            (Json(data), int(doc_id), collection),
        )
        if cursor.rowcount == 0:
            # 既存ドキュメントが消えていた場合は新規作成
            return save_document(cursor, collection, data, None)
        return doc_id
    except psycopg2.Error as e:
        raise DocumentStoreError(f"save failed: {e}") from e


def load_latest(cursor: Any, collection: str) -> StoredDocument | None:
    """Most recently updated document of ``collection``, or None."""
    try:
        cursor.execute(
            f"SELECT id, payload FROM {DOCUMENTS_TABLE}"
            " WHERE collection = %s ORDER BY updated_at DESC, id DESC LIMIT 1",
            (collection,),
        )
        row = cursor.fetchone()
    except psycopg2.Error as e:
        raise DocumentStoreError(f"load failed: {e}") from e
    if row is None:
        return None
    return StoredDocument(id=str(row[0]), payload=row[1] or {})


def clear_collection(cursor: Any, collection: str) -> int:
    try:
        cursor.execute(f"DELETE FROM {DOCUMENTS_TABLE} WHERE collection = %s", (collection,))
    except psycopg2.Error as e:
        raise DocumentStoreError(f"clear failed: {e}") from e
    return cursor.rowcount
