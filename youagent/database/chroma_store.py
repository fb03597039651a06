"""ChromaDB-backed approximate vector store (opt-in).

Uses an HNSW collection in cosine space behind the same interface as
SqliteVectorStore. Rankings are approximate and ties are not ordered by
insertion; select it with YOUAGENT_VECTOR_BACKEND=chroma.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Collection, Optional, Sequence

from youagent.errors import DimensionMismatch, StoreUnavailable

from .vector_store import SearchHit, VectorEntry

logger = logging.getLogger(__name__)


class ChromaVectorStore:
    """Persistent local Chroma collection with caller-supplied embeddings."""

    def __init__(
        self,
        store_path: Path,
        dimension: int = 768,
        collection_name: str = "youagent_vectors",
        client: Optional[Any] = None,
    ) -> None:
        self._store_path = Path(store_path)
        self._dimension = dimension
        self._collection_name = collection_name
        self._closed = False
        try:
            self._client = client or self._make_client()
            self._collection = self._open_collection()
        except StoreUnavailable:
            raise
        except Exception as exc:
            raise StoreUnavailable(
                f"Failed to initialize Chroma store at {self._store_path}",
                details=str(exc),
            ) from exc

    @property
    def dimension(self) -> int:
        return self._dimension

    def _make_client(self) -> Any:
        try:
            import chromadb
            from chromadb.config import Settings
        except ImportError as exc:
            raise StoreUnavailable(
                "chromadb package is required for the chroma backend. "
                "Install with: pip install chromadb"
            ) from exc
        self._store_path.mkdir(parents=True, exist_ok=True)
        return chromadb.PersistentClient(
            path=str(self._store_path),
            settings=Settings(anonymized_telemetry=False),
        )

    def _open_collection(self) -> Any:
        return self._client.get_or_create_collection(
            name=self._collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreUnavailable(f"Chroma store at {self._store_path} is closed")

    def _check(self, vector: Sequence[float], what: str) -> list[float]:
        if len(vector) != self._dimension:
            raise DimensionMismatch(
                expected=self._dimension, actual=len(vector), what=what
            )
        values = [float(x) for x in vector]
        if not all(math.isfinite(x) for x in values):
            raise ValueError(f"{what} contains NaN or infinite components")
        return values

    def upsert(self, entries: Sequence[VectorEntry]) -> None:
        self._ensure_open()
        embeddings = [self._check(e.vector, f"vector for '{e.id}'") for e in entries]
        if not embeddings:
            return
        self._collection.upsert(
            ids=[e.id for e in entries],
            embeddings=embeddings,
            # Chroma rejects empty metadata dicts
            metadatas=[dict(e.metadata) or None for e in entries],
        )

    def search(
        self,
        query_vector: Sequence[float],
        k: int,
        sources: Optional[Collection[str]] = None,
    ) -> list[SearchHit]:
        self._ensure_open()
        query = self._check(query_vector, "query vector")
        if k <= 0:
            return []
        total = self._collection.count()
        if total == 0:
            return []
        if sources is not None and not sources:
            return []
        where = {"source": {"$in": sorted(sources)}} if sources else None
        result = self._collection.query(
            query_embeddings=[query],
            n_results=min(k, total),
            where=where,
            include=["metadatas", "distances"],
        )
        ids = result.get("ids", [[]])[0]
        metas = (result.get("metadatas") or [[]])[0]
        distances = (result.get("distances") or [[]])[0]
        hits: list[SearchHit] = []
        for idx, entry_id in enumerate(ids):
            meta = metas[idx] if idx < len(metas) and metas[idx] else {}
            distance = distances[idx] if idx < len(distances) else 1.0
            # Cosine distance is 1 - similarity.
            score = 1.0 - float(distance)
            if math.isnan(score):
                score = 0.0
            hits.append(SearchHit(id=entry_id, score=score, metadata=dict(meta)))
        return hits

    def delete(self, ids: Sequence[str]) -> None:
        self._ensure_open()
        if ids:
            self._collection.delete(ids=list(ids))

    def delete_all(self) -> None:
        self._ensure_open()
        self._client.delete_collection(name=self._collection_name)
        self._collection = self._open_collection()

    def count(self) -> int:
        self._ensure_open()
        return int(self._collection.count())

    def close(self) -> None:
        self._closed = True
