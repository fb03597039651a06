"""Main workflow: Plan -> Retrieve -> Synthesize, plus source refresh."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Mapping, Optional

from youagent.config import Settings, get_settings
from youagent.connectors import Connector, create_connector
from youagent.core.context import pick_context
from youagent.core.indexer import Indexer, RefreshReport
from youagent.core.planner import DEFAULT_PLAN_TABLE, Intent, Plan, make_plan
from youagent.core.synthesis import synthesize, synthesize_stream
from youagent.database import SettingsDB, SqliteDB, VectorStore, create_vector_store
from youagent.errors import ConfigError, UpstreamFailure
from youagent.models import SOURCE_TAGS, ContextFragment, Document, SourceTag
from youagent.utils.llm import LLMManager, LLMProvider
from youagent.utils.retry import with_retries

logger = logging.getLogger(__name__)

ConnectorFactory = Callable[[str], Connector]


@dataclass
class Answer:
    """A synthesized answer with the context it was grounded on."""

    query: str
    plan: Plan
    fragments: list[ContextFragment]
    text: str

    @property
    def source_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for fragment in self.fragments:
            counts[fragment.source] = counts.get(fragment.source, 0) + 1
        return counts


class Engine:
    """Orchestrates planning, retrieval, synthesis and refresh.

    Every collaborator can be injected; anything omitted is built from
    Settings on first use.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        db: Optional[SqliteDB] = None,
        settings_db: Optional[SettingsDB] = None,
        store: Optional[VectorStore] = None,
        provider: Optional[LLMProvider] = None,
        llm: Optional[LLMManager] = None,
        connector_factory: Optional[ConnectorFactory] = None,
        plan_table: Mapping[Intent, tuple[frozenset[SourceTag], int]] = DEFAULT_PLAN_TABLE,
    ) -> None:
        self._settings = settings or get_settings()
        self._db = db or SqliteDB(self._settings.db_path)
        self._db.init_db()
        self._settings_db = settings_db or SettingsDB(self._settings.db_path)
        self._settings_db.init_db()
        self._store = store
        self._provider = provider
        self._llm = llm
        self._connector_factory = connector_factory or self._default_connector
        self._plan_table = plan_table

    # ---- Collaborators ----

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def db(self) -> SqliteDB:
        return self._db

    @property
    def settings_db(self) -> SettingsDB:
        return self._settings_db

    @property
    def store(self) -> VectorStore:
        """Vector index, opened lazily."""
        if self._store is None:
            self._store = create_vector_store(
                self._settings.vector_backend,
                self._settings.vector_db_path,
                self._settings.embedding_dimension,
            )
        return self._store

    @property
    def provider(self) -> LLMProvider:
        """LLM provider; raises ConfigError when none is configured."""
        if self._provider is None:
            manager = self._llm or LLMManager(dimension=self._settings.embedding_dimension)
            self._provider = manager.require_provider()
        return self._provider

    def _default_connector(self, source: str) -> Connector:
        username = self._settings_db.get("github_username")
        return create_connector(source, self._settings, github_username=username)

    def indexer(self) -> Indexer:
        return Indexer(
            self._db,
            self.store,
            self.provider,
            batch_size=self._settings.embed_batch_size,
            retry_attempts=self._settings.retry_attempts,
        )

    # ---- Retrieval ----

    def plan(self, text: str) -> Plan:
        return make_plan(text, self._plan_table)

    def documents_for(self, plan: Plan) -> list[Document]:
        """Content store documents of the plan's eligible categories."""
        return self._db.find_by_sources(sorted(plan.eligible_categories))

    def embed_query(self, text: str) -> list[float]:
        vectors = with_retries(
            lambda: self.provider.embed([text]), attempts=self._settings.retry_attempts
        )
        if not vectors:
            raise UpstreamFailure("Embedding provider returned no vector for the query")
        return vectors[0]

    def retrieve(
        self, text: str, plan: Optional[Plan] = None
    ) -> tuple[Plan, list[ContextFragment]]:
        """Plan, optionally refresh, then pick context for a message."""
        plan = plan or self.plan(text)
        if plan.force_fresh:
            self.refresh(sorted(plan.eligible_categories))
        scoped = plan.eligible_categories < frozenset(SOURCE_TAGS)
        fragments = pick_context(
            text,
            self.embed_query(text),
            self.store,
            self.documents_for(plan),
            max_results=plan.max_results,
            max_chars_per_fragment=self._settings.context_max_chars,
            max_per_source=self._settings.context_max_per_source,
            sources=plan.eligible_categories if scoped else None,
        )
        logger.info(
            "Retrieved %d fragments (intent=%s, max_results=%d)",
            len(fragments),
            plan.intent.value,
            plan.max_results,
        )
        return plan, fragments

    def ask(self, text: str) -> Answer:
        plan, fragments = self.retrieve(text)
        return Answer(
            query=text,
            plan=plan,
            fragments=fragments,
            text=synthesize(self.provider, text, fragments),
        )

    def stream(self, text: str) -> tuple[Plan, list[ContextFragment], Iterator[str]]:
        """Retrieve eagerly; the returned iterator streams the answer."""
        plan, fragments = self.retrieve(text)
        return plan, fragments, synthesize_stream(self.provider, text, fragments)

    # ---- Sources ----

    def grant(self, source: str) -> None:
        self._settings_db.grant(source)

    def revoke(self, source: str, purge: bool = True) -> int:
        """Revoke consent; with purge, drop the source's documents and vectors."""
        self._settings_db.revoke(source)
        if not purge:
            return 0
        ids = self._db.delete_by_source(source)
        if ids:
            self.store.delete(ids)
        logger.info("Revoked %s and removed %d documents", source, len(ids))
        return len(ids)

    def refresh(self, sources: Optional[Iterable[str]] = None) -> list[RefreshReport]:
        """Refresh consented sources; one failing source never stops the others."""
        reports: list[RefreshReport] = []
        indexer: Optional[Indexer] = None
        for source in sources or SOURCE_TAGS:
            if not self._settings_db.is_granted(source):
                logger.debug("Skipping %s: no consent", source)
                continue
            try:
                connector = self._connector_factory(source)
            except ConfigError as exc:
                logger.warning("Cannot refresh %s: %s", source, exc)
                reports.append(RefreshReport(source=source, error=str(exc)))
                continue
            if indexer is None:
                indexer = self.indexer()
            reports.append(indexer.refresh(connector))
        return reports

    def stats(self) -> dict:
        counts = self._db.count_by_source()
        return {
            "documents": {tag: counts.get(tag, 0) for tag in SOURCE_TAGS},
            "total_documents": sum(counts.values()),
            "vectors": self.store.count(),
            "consent": {c.source: c.granted for c in self._settings_db.list_consent()},
        }

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
