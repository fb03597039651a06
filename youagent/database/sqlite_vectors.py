"""SQLite-backed exact vector index.

Embeddings are stored as JSON arrays next to their metadata. Search is a
full scan scored with cosine similarity, which is fine for the hundreds to
low thousands of entries a personal footprint produces.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Collection, Iterator, Optional, Sequence

import numpy as np

from youagent.errors import DimensionMismatch, StoreUnavailable

from .similarity import cosine_scores, rank
from .vector_store import SearchHit, VectorEntry

logger = logging.getLogger(__name__)

DEFAULT_DIMENSION = 768

# One writer lock per database file, shared by every store instance in the process.
_write_locks: dict[str, threading.Lock] = {}
_write_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _write_locks_guard:
        lock = _write_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _write_locks[key] = lock
        return lock


class SqliteVectorStore:
    """Durable id -> (embedding, metadata) store with exact cosine search."""

    def __init__(self, db_path: Path, dimension: int = DEFAULT_DIMENSION) -> None:
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self._path = Path(db_path)
        self._dimension = dimension
        self._closed = False
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._init_db()
        except (OSError, sqlite3.Error) as exc:
            raise StoreUnavailable(
                f"Failed to initialize vector index at {self._path}", details=str(exc)
            ) from exc
        self._write_lock = _lock_for(self._path)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection; commit on success, roll back on error, always close."""
        if self._closed:
            raise StoreUnavailable(f"Vector index at {self._path} is closed")
        try:
            conn = sqlite3.connect(self._path)
        except sqlite3.Error as exc:
            raise StoreUnavailable(
                f"Cannot open vector index at {self._path}", details=str(exc)
            ) from exc
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Create tables, enable WAL and pin the store dimension."""
        conn = sqlite3.connect(self._path)
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS vector_index (
                        id TEXT PRIMARY KEY,
                        embedding TEXT NOT NULL,
                        metadata TEXT
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS vector_meta (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                    """
                )
                conn.execute(
                    "INSERT OR IGNORE INTO vector_meta (key, value) VALUES ('dimension', ?)",
                    (str(self._dimension),),
                )
                row = conn.execute(
                    "SELECT value FROM vector_meta WHERE key = 'dimension'"
                ).fetchone()
        finally:
            conn.close()
        stored = int(row[0])
        if stored != self._dimension:
            raise DimensionMismatch(
                expected=stored, actual=self._dimension, what="store dimension"
            )

    def _check(self, vector: Sequence[float], what: str) -> list[float]:
        if len(vector) != self._dimension:
            raise DimensionMismatch(
                expected=self._dimension, actual=len(vector), what=what
            )
        values = [float(x) for x in vector]
        if not np.isfinite(values).all():
            raise ValueError(f"{what} contains NaN or infinite components")
        return values

    def upsert(self, entries: Sequence[VectorEntry]) -> None:
        """Insert or replace entries by id in one transaction.

        Every vector is validated before anything is written, so a bad entry
        leaves the store untouched. Replacing an id keeps its original
        insertion position for tie-breaking.
        """
        rows = [
            (
                entry.id,
                json.dumps(self._check(entry.vector, f"vector for '{entry.id}'")),
                json.dumps(entry.metadata) if entry.metadata else None,
            )
            for entry in entries
        ]
        if not rows:
            return
        with self._write_lock, self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO vector_index (id, embedding, metadata)
                VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    embedding = excluded.embedding,
                    metadata = excluded.metadata
                """,
                rows,
            )
        logger.debug("Upserted %d vectors into %s", len(rows), self._path.name)

    def search(
        self,
        query_vector: Sequence[float],
        k: int,
        sources: Optional[Collection[str]] = None,
    ) -> list[SearchHit]:
        """Return the k most similar entries, highest score first.

        With `sources`, only entries whose metadata "source" is in it are
        scanned; the k best of those are returned.
        """
        query = self._check(query_vector, "query vector")
        if k <= 0:
            return []
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, embedding, metadata FROM vector_index ORDER BY rowid"
            ).fetchall()
        entries = [(row[0], row[1], json.loads(row[2]) if row[2] else {}) for row in rows]
        if sources is not None:
            entries = [e for e in entries if e[2].get("source") in sources]
        if not entries:
            return []
        matrix = np.array([json.loads(e[1]) for e in entries], dtype=np.float64)
        scores = cosine_scores(query, matrix)
        return [
            SearchHit(id=entries[idx][0], score=float(scores[idx]), metadata=entries[idx][2])
            for idx in rank(scores, k)
        ]

    def delete(self, ids: Sequence[str]) -> None:
        """Remove entries by id; unknown ids are ignored."""
        if not ids:
            return
        with self._write_lock, self._connect() as conn:
            conn.executemany(
                "DELETE FROM vector_index WHERE id = ?", [(i,) for i in ids]
            )

    def delete_all(self) -> None:
        with self._write_lock, self._connect() as conn:
            conn.execute("DELETE FROM vector_index")

    def count(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM vector_index").fetchone()
        return int(row[0])

    def close(self) -> None:
        """Mark the store closed; later calls raise StoreUnavailable."""
        self._closed = True
