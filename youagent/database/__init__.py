"""Database layer - SQLite wrappers for source items, settings and vectors."""

from pathlib import Path

from .settings import SettingsDB
from .sqlite import SqliteDB
from .sqlite_vectors import SqliteVectorStore
from .vector_store import SearchHit, VectorEntry, VectorStore


def create_vector_store(backend: str, path: Path, dimension: int) -> VectorStore:
    """Open the configured vector backend ("sqlite" exact, "chroma" approximate)."""
    if backend == "sqlite":
        return SqliteVectorStore(path, dimension=dimension)
    if backend == "chroma":
        from .chroma_store import ChromaVectorStore

        return ChromaVectorStore(path, dimension=dimension)
    raise ValueError(f"Unsupported vector backend: {backend}")


__all__ = [
    "SearchHit",
    "SettingsDB",
    "SqliteDB",
    "SqliteVectorStore",
    "VectorEntry",
    "VectorStore",
    "create_vector_store",
]
