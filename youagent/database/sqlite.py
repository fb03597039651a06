"""Relational wrapper for SQLite (normalized source items)."""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from youagent.models import Document


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteDB:
    """SQLite wrapper for the source_items table. All I/O stays in this module."""

    def __init__(self, db_path: Path) -> None:
        self._path = Path(db_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def init_db(self) -> None:
        """Create source_items table and indexes if they do not exist."""
        with sqlite3.connect(self._path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS source_items (
                    id TEXT PRIMARY KEY,
                    source TEXT NOT NULL,
                    source_id TEXT NOT NULL,
                    content_type TEXT NOT NULL,
                    title TEXT,
                    content TEXT NOT NULL,
                    url TEXT,
                    published_at TEXT,
                    content_hash TEXT NOT NULL,
                    metadata TEXT,
                    fetched_at TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_source_items_source ON source_items(source)"
            )
            conn.commit()

    def upsert_document(self, doc: Document) -> None:
        """Insert a document or replace the stored copy with the same id."""
        now = _now_iso()
        with sqlite3.connect(self._path) as conn:
            conn.execute(
                """
                INSERT INTO source_items (id, source, source_id, content_type, title,
                                          content, url, published_at, content_hash,
                                          metadata, fetched_at, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    source = excluded.source,
                    source_id = excluded.source_id,
                    content_type = excluded.content_type,
                    title = excluded.title,
                    content = excluded.content,
                    url = excluded.url,
                    published_at = excluded.published_at,
                    content_hash = excluded.content_hash,
                    metadata = excluded.metadata,
                    fetched_at = excluded.fetched_at,
                    updated_at = excluded.updated_at
                """,
                (
                    doc.id,
                    doc.source,
                    doc.source_id,
                    doc.content_type,
                    doc.title,
                    doc.content,
                    doc.url,
                    doc.published_at,
                    doc.content_hash,
                    json.dumps(doc.metadata) if doc.metadata else None,
                    doc.fetched_at,
                    now,
                    now,
                ),
            )
            conn.commit()

    def upsert_documents(self, docs: Iterable[Document]) -> None:
        for doc in docs:
            self.upsert_document(doc)

    def find_by_id(self, doc_id: str) -> Optional[Document]:
        """Return one document by id or None."""
        with sqlite3.connect(self._path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(
                "SELECT * FROM source_items WHERE id = ?", (doc_id,)
            ).fetchone()
        return _row_to_document(row) if row else None

    def find_by_source(self, source: str) -> list[Document]:
        """Return every document carrying the given source tag."""
        with sqlite3.connect(self._path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                "SELECT * FROM source_items WHERE source = ? ORDER BY created_at ASC",
                (source,),
            ).fetchall()
        return [_row_to_document(r) for r in rows]

    def find_by_sources(self, sources: Iterable[str]) -> list[Document]:
        """Documents for several source tags, concatenated per tag."""
        docs: list[Document] = []
        for source in sources:
            docs.extend(self.find_by_source(source))
        return docs

    def content_hashes(self, source: str) -> dict[str, str]:
        """Map id -> content_hash for one source (change detection)."""
        with sqlite3.connect(self._path) as conn:
            rows = conn.execute(
                "SELECT id, content_hash FROM source_items WHERE source = ?",
                (source,),
            ).fetchall()
        return {r[0]: r[1] for r in rows}

    def count_by_source(self) -> dict[str, int]:
        """Return document counts grouped by source tag."""
        with sqlite3.connect(self._path) as conn:
            rows = conn.execute(
                "SELECT source, COUNT(*) FROM source_items GROUP BY source"
            ).fetchall()
        return {r[0]: r[1] for r in rows}

    def delete_by_source(self, source: str) -> list[str]:
        """Delete a source's documents and return the removed ids."""
        with sqlite3.connect(self._path) as conn:
            ids = [
                r[0]
                for r in conn.execute(
                    "SELECT id FROM source_items WHERE source = ?", (source,)
                ).fetchall()
            ]
            conn.execute("DELETE FROM source_items WHERE source = ?", (source,))
            conn.commit()
        return ids

    def delete_by_ids(self, ids: Iterable[str]) -> None:
        with sqlite3.connect(self._path) as conn:
            conn.executemany("DELETE FROM source_items WHERE id = ?", [(i,) for i in ids])
            conn.commit()

    def delete_all(self) -> None:
        with sqlite3.connect(self._path) as conn:
            conn.execute("DELETE FROM source_items")
            conn.commit()


def _row_to_document(row: sqlite3.Row) -> Document:
    """Convert database row to Document, tolerating malformed metadata."""
    try:
        metadata = json.loads(row["metadata"] or "{}")
    except json.JSONDecodeError:
        metadata = {}

    return Document(
        id=row["id"],
        source=row["source"],
        source_id=row["source_id"],
        content_type=row["content_type"],
        title=row["title"],
        content=row["content"],
        url=row["url"],
        published_at=row["published_at"],
        content_hash=row["content_hash"],
        metadata=metadata,
        fetched_at=row["fetched_at"],
    )
