"""Vector store interfaces for local semantic retrieval."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Optional, Protocol, Sequence


@dataclass
class VectorEntry:
    """One (id, embedding, metadata) triple to be written."""

    id: str
    vector: Sequence[float]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchHit:
    """Semantic retrieval hit."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


class VectorStore(Protocol):
    """Protocol for local vector stores."""

    @property
    def dimension(self) -> int:
        ...

    def upsert(self, entries: Sequence[VectorEntry]) -> None:
        ...

    def search(
        self,
        query_vector: Sequence[float],
        k: int,
        sources: Optional[Collection[str]] = None,
    ) -> list[SearchHit]:
        ...

    def delete(self, ids: Sequence[str]) -> None:
        ...

    def delete_all(self) -> None:
        ...

    def count(self) -> int:
        ...

    def close(self) -> None:
        ...
