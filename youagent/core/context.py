"""Turn ranked vector hits into a bounded, source-diverse context."""

from __future__ import annotations

import logging
from typing import Collection, Iterable, Mapping, Optional, Sequence, Union

from youagent.database.vector_store import VectorStore
from youagent.models import ContextFragment, Document

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS_PER_FRAGMENT = 2000  # ~500 tokens at 4 chars per token
DEFAULT_MAX_PER_SOURCE = 3
TRUNCATION_MARKER = "..."

Documents = Union[Mapping[str, Document], Iterable[Document]]


def _index(documents: Documents) -> Mapping[str, Document]:
    if isinstance(documents, Mapping):
        return documents
    return {doc.id: doc for doc in documents}


def truncate(content: str, max_chars: int) -> str:
    """Cut at exactly max_chars and append the marker; shorter text is unchanged."""
    if len(content) <= max_chars:
        return content
    return content[:max_chars] + TRUNCATION_MARKER


def to_fragment(doc: Document, max_chars: int) -> ContextFragment:
    return ContextFragment(
        content=truncate(doc.content, max_chars),
        source=doc.source,
        title=doc.title,
        url=doc.url,
        date=doc.published_at or doc.fetched_at,
    )


def pick_context(
    query: str,
    query_vector: Sequence[float],
    store: VectorStore,
    documents: Documents,
    *,
    max_results: int,
    max_chars_per_fragment: int = DEFAULT_MAX_CHARS_PER_FRAGMENT,
    max_per_source: int = DEFAULT_MAX_PER_SOURCE,
    sources: Optional[Collection[str]] = None,
) -> list[ContextFragment]:
    """Select context fragments for a query.

    Searches `store` for `max_results` hits, resolves each hit id against
    `documents` (ids with no document are skipped), keeps at most
    `max_per_source` fragments per source tag and truncates long content.
    Rank order is preserved. An empty list means nothing relevant was found.

    `sources` restricts the store scan to those source tags, so the
    `max_results` window is filled from eligible entries only.

    Store errors (DimensionMismatch, StoreUnavailable) propagate.
    """
    hits = store.search(query_vector, max_results, sources=sources)
    by_id = _index(documents)

    per_source: dict[str, int] = {}
    fragments: list[ContextFragment] = []
    skipped = 0
    for hit in hits:
        doc = by_id.get(hit.id)
        if doc is None:
            skipped += 1
            continue
        if per_source.get(doc.source, 0) >= max_per_source:
            continue
        per_source[doc.source] = per_source.get(doc.source, 0) + 1
        fragments.append(to_fragment(doc, max_chars_per_fragment))

    logger.debug(
        "Context for %r: %d hits, %d unresolved, %d fragments",
        query[:80],
        len(hits),
        skipped,
        len(fragments),
    )
    return fragments
