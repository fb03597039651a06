"""Unit tests for the Typer CLI with an injected engine."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

import pytest
from typer.testing import CliRunner

from youagent.cli import app
from youagent.config import Settings
from youagent.connectors import Connector
from youagent.core.engine import Engine
from youagent.database import SqliteVectorStore
from youagent.errors import StoreUnavailable
from youagent.models import Document
from youagent.utils.llm import save_config

runner = CliRunner()


class _FeedConnector(Connector):
    source = "feed"
    name = "rss"

    def __init__(self, docs: list[Document]) -> None:
        super().__init__()
        self.docs = docs

    def fetch(self) -> list[Document]:
        return list(self.docs)


@pytest.fixture
def engine(
    test_settings: Settings, tmp_path: Path, fake_provider, make_doc, monkeypatch: Any
) -> Iterator[Engine]:
    docs = [
        make_doc(
            "post1",
            source="feed",
            content="An article about testing",
            url="https://blog.example.com/testing",
            published_at="2024-04-01T09:30:00+00:00",
        )
    ]
    e = Engine(
        test_settings,
        store=SqliteVectorStore(tmp_path / "cli-vectors.db", dimension=4),
        provider=fake_provider,
        connector_factory=lambda source: _FeedConnector(docs),
    )
    monkeypatch.setattr("youagent.cli._engine", lambda: e)
    yield e
    e.close()


def test_no_args_shows_help() -> None:
    result = runner.invoke(app, [])
    assert "Usage" in result.output


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("youagent ")


def test_plan_command(engine: Engine) -> None:
    result = runner.invoke(app, ["plan", "Write a cover letter"])
    assert result.exit_code == 0
    assert "Intent: career" in result.output
    assert "Sources: GitHub, Resume" in result.output
    assert "Max Results: 10" in result.output
    assert "Force Fresh: No" in result.output


def test_ask_without_data(engine: Engine) -> None:
    result = runner.invoke(app, ["ask", "Tell me about myself"])
    assert result.exit_code == 0
    assert "No relevant information found." in result.output


def test_ask_streams_answer_with_citations(engine: Engine, fake_provider) -> None:
    engine.grant("feed")
    engine.refresh()

    result = runner.invoke(app, ["ask", "Which blog article did I write?"])

    assert result.exit_code == 0
    assert "Using sources: [BLOG]" in result.output
    assert fake_provider.answer in result.output
    assert "[1] Blog — Title post1 (2024-04-01)" in result.output


def test_ask_json(engine: Engine) -> None:
    engine.grant("feed")
    engine.refresh()

    result = runner.invoke(app, ["ask", "--json", "Which blog article did I write?"])

    payload = json.loads(result.output)
    assert payload["intent"] == "branding"
    assert payload["sources"] == {"feed": 1}
    assert payload["context"][0]["url"] == "https://blog.example.com/testing"


def test_ask_json_reports_errors(engine: Engine, monkeypatch: Any) -> None:
    def broken(message: str) -> None:
        raise StoreUnavailable("vector store is closed")

    monkeypatch.setattr(engine, "stream", broken)
    result = runner.invoke(app, ["ask", "--json", "hello"])
    assert result.exit_code == 1
    assert json.loads(result.output) == {
        "error": {"code": "STORE_UNAVAILABLE", "message": "vector store is closed"}
    }


def test_refresh_without_consent(engine: Engine) -> None:
    result = runner.invoke(app, ["refresh"])
    assert result.exit_code == 0
    assert "No consented sources" in result.output


def test_refresh_by_alias(engine: Engine) -> None:
    engine.grant("feed")
    result = runner.invoke(app, ["refresh", "--source", "blog"])
    assert result.exit_code == 0
    assert "✓ Blog: 1 of 1 items updated" in result.output


def test_unknown_source_exits_2(engine: Engine) -> None:
    result = runner.invoke(app, ["refresh", "-s", "myspace"])
    assert result.exit_code == 2


def test_revoke_removes_items(engine: Engine) -> None:
    engine.grant("feed")
    engine.refresh()
    result = runner.invoke(app, ["revoke", "rss"])
    assert result.exit_code == 0
    assert "Revoked Blog (1 items removed)" in result.output
    assert engine.db.count_by_source() == {}


def test_chat_repl_commands(engine: Engine) -> None:
    result = runner.invoke(app, ["chat"], input=":plan latest tweet\n:bogus\nbye\n")
    assert result.exit_code == 0
    assert "Intent: branding" in result.output
    assert "Force Fresh: Yes" in result.output
    assert "Unknown command: bogus" in result.output
    assert "Goodbye!" in result.output


def test_config_redacts_keys(tmp_path: Path, monkeypatch: Any) -> None:
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "YOUAGENT_GEMINI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    path = save_config("gemini", {"api_key": "super-secret"}, tmp_path / "config.toml")

    result = runner.invoke(app, ["config", "--path", str(path)])

    assert result.exit_code == 0
    assert "super-secret" not in result.output
    data = json.loads(result.output)
    assert data["llm"]["gemini"]["api_key"] == "[REDACTED]"
    assert data["llm"]["provider"] == "gemini"
