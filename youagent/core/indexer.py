"""Refresh pipeline: fetch, detect changes, persist, embed in batches."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from youagent.connectors import Connector
from youagent.database import SqliteDB, VectorEntry, VectorStore
from youagent.errors import YouAgentError
from youagent.models import Document
from youagent.utils.hashing import sha256
from youagent.utils.llm import LLMProvider
from youagent.utils.retry import with_retries

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


@dataclass
class RefreshReport:
    """Outcome of refreshing one source."""

    source: str
    fetched: int = 0
    updated: int = 0
    embedded: int = 0
    failed: int = 0
    removed: int = 0
    error: Optional[str] = None
    updated_ids: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and self.failed == 0


class Indexer:
    """Keeps the content store and vector index in step with the connectors."""

    def __init__(
        self,
        db: SqliteDB,
        store: VectorStore,
        provider: LLMProvider,
        batch_size: int = DEFAULT_BATCH_SIZE,
        retry_attempts: int = 3,
        retry_base_delay: float = 1.0,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._db = db
        self._store = store
        self._provider = provider
        self._batch_size = batch_size
        self._retry_attempts = retry_attempts
        self._retry_base_delay = retry_base_delay

    def changed(self, source: str, docs: Sequence[Document]) -> list[Document]:
        """Documents that are new or whose content hash differs from the stored one."""
        stored = self._db.content_hashes(source)
        changed: list[Document] = []
        for doc in docs:
            digest = doc.content_hash or sha256(doc.content)
            if stored.get(doc.id) != digest:
                changed.append(doc.model_copy(update={"content_hash": digest}))
        return changed

    def remove_missing(self, source: str, docs: Sequence[Document]) -> int:
        """Delete stored documents and vectors of `source` that were not fetched."""
        fetched = {doc.id for doc in docs}
        stale = sorted(set(self._db.content_hashes(source)) - fetched)
        if stale:
            self._db.delete_by_ids(stale)
            self._store.delete(stale)
            logger.info("Removed %d documents no longer returned by %s", len(stale), source)
        return len(stale)

    def _embed_batches(self, docs: Sequence[Document]) -> Iterator[int]:
        """Embed and upsert one batch at a time, yielding the running total."""
        done = 0
        for start in range(0, len(docs), self._batch_size):
            batch = list(docs[start : start + self._batch_size])
            texts = [doc.embedding_text() for doc in batch]
            vectors = with_retries(
                lambda: self._provider.embed(texts),
                attempts=self._retry_attempts,
                base_delay=self._retry_base_delay,
            )
            self._store.upsert(
                [
                    VectorEntry(id=doc.id, vector=vector, metadata={"source": doc.source})
                    for doc, vector in zip(batch, vectors)
                ]
            )
            done += len(batch)
            logger.debug("Embedded batch of %d (%d/%d)", len(batch), done, len(docs))
            yield done

    def embed_documents(self, docs: Sequence[Document]) -> int:
        """Embed docs in batches; returns how many were embedded.

        Each batch is written to the vector store as soon as it is embedded,
        so a failure leaves earlier batches committed. The failing batch's
        error propagates once retries are exhausted.
        """
        done = 0
        for done in self._embed_batches(docs):
            pass
        return done

    def refresh(self, connector: Connector) -> RefreshReport:
        """Refresh one source. Failures are recorded on the report, not raised."""
        report = RefreshReport(source=connector.source)
        try:
            docs = connector.fetch()
        except YouAgentError as exc:
            logger.warning("Fetching %s failed: %s", connector.source, exc)
            report.error = str(exc)
            return report

        report.fetched = len(docs)
        report.removed = self.remove_missing(connector.source, docs)
        changed = self.changed(connector.source, docs)
        report.updated = len(changed)
        report.updated_ids = [doc.id for doc in changed]
        # Stored with an empty hash until embedded, so an interrupted run
        # re-embeds them next time.
        self._db.upsert_documents(
            doc.model_copy(update={"content_hash": ""}) for doc in changed
        )

        try:
            for done in self._embed_batches(changed):
                for doc in changed[report.embedded : done]:
                    self._db.upsert_document(doc)
                report.embedded = done
        except YouAgentError as exc:
            report.failed = len(changed) - report.embedded
            report.error = str(exc)
            logger.warning(
                "Embedding %s failed after %d/%d documents: %s",
                connector.source,
                report.embedded,
                len(changed),
                exc,
            )

        logger.info(
            "Refreshed %s: fetched=%d updated=%d embedded=%d",
            report.source,
            report.fetched,
            report.updated,
            report.embedded,
        )
        return report
