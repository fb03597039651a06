"""Global fixtures: temp DBs, vector store, fake LLM provider, sample documents."""

import tempfile
from pathlib import Path
from typing import Callable, Iterator, Optional

import pytest

from youagent.config import Settings
from youagent.database import SettingsDB, SqliteDB, SqliteVectorStore
from youagent.models import Document
from youagent.utils.llm import LLMProvider

FAKE_DIMENSION = 4


class FakeProvider(LLMProvider):
    """Deterministic in-memory provider.

    Texts found in `vectors` embed to that vector; anything else embeds to a
    letter-frequency vector over "aeio". Generation echoes a fixed answer.
    """

    def __init__(
        self,
        vectors: Optional[dict[str, list[float]]] = None,
        answer: str = "Fake answer (Source: GitHub — 2024-01-01)",
        dimension: int = FAKE_DIMENSION,
    ) -> None:
        self.vectors = vectors or {}
        self.answer = answer
        self.dimension = dimension
        self.embed_calls: list[list[str]] = []
        self.prompts: list[tuple[str, Optional[str]]] = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def default_model(self) -> str:
        return "fake-model"

    @property
    def embedding_model(self) -> str:
        return "fake-embed"

    def _vector(self, text: str) -> list[float]:
        if text in self.vectors:
            return list(self.vectors[text])
        lowered = text.lower()
        return [float(lowered.count(c)) for c in "aeio"][: self.dimension]

    def embed(self, texts: list[str]) -> list[list[float]]:
        self.embed_calls.append(list(texts))
        return [self._vector(t) for t in texts]

    def generate_text(self, prompt, system=None, model=None, sanitize=True) -> str:
        self.prompts.append((prompt, system))
        return self.answer

    def generate_stream(self, prompt, system=None, model=None, sanitize=True) -> Iterator[str]:
        self.prompts.append((prompt, system))
        for word in self.answer.split(" "):
            yield word + " "


@pytest.fixture
def temp_db_path() -> Path:
    """Temporary SQLite path (cleaned up after test)."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    if path.exists():
        path.unlink(missing_ok=True)


@pytest.fixture
def db(temp_db_path: Path) -> SqliteDB:
    """Initialized SqliteDB with temp path."""
    d = SqliteDB(temp_db_path)
    d.init_db()
    return d


@pytest.fixture
def settings_db(temp_db_path: Path) -> SettingsDB:
    """Initialized SettingsDB sharing the temp database file."""
    s = SettingsDB(temp_db_path)
    s.init_db()
    return s


@pytest.fixture
def vector_path(tmp_path: Path) -> Path:
    return tmp_path / "vectors.db"


@pytest.fixture
def vector_store(vector_path: Path) -> Iterator[SqliteVectorStore]:
    """2-dimensional exact vector store."""
    store = SqliteVectorStore(vector_path, dimension=2)
    yield store
    store.close()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_provider() -> Callable[..., FakeProvider]:
    """Factory for FakeProviders with explicit vectors or answers."""
    return FakeProvider


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings rooted in tmp_path with a 4-dimensional index."""
    return Settings(
        home=tmp_path,
        db_path=tmp_path / "youagent.db",
        vector_db_path=tmp_path / "vectors.db",
        embedding_dimension=FAKE_DIMENSION,
        log_file=tmp_path / "youagent.log",
        github_username="octocat",
        site_rss_url="https://blog.example.com/feed.xml",
        social_rss_url="https://rsshub.example.com/twitter/user/octocat",
    )


@pytest.fixture
def make_doc() -> Callable[..., Document]:
    """Factory for Documents with sensible defaults."""

    def _make(
        doc_id: str,
        source: str = "profile-host",
        content: str = "content",
        **kwargs: object,
    ) -> Document:
        fields = {
            "title": f"Title {doc_id}",
            "fetched_at": "2024-05-01T12:00:00+00:00",
        }
        fields.update(kwargs)
        return Document(id=doc_id, source=source, content=content, **fields)

    return _make
