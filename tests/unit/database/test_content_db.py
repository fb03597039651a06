"""Unit tests for the source_items content store."""

from typing import Callable

from youagent.database import SqliteDB
from youagent.models import Document


def test_init_db_is_idempotent(db: SqliteDB) -> None:
    db.init_db()
    assert db.count_by_source() == {}


def test_upsert_and_find_by_id(db: SqliteDB, make_doc: Callable[..., Document]) -> None:
    doc = make_doc(
        "github-repo-1",
        content="A CLI tool",
        url="https://github.com/octocat/tool",
        published_at="2024-03-01T00:00:00+00:00",
        metadata={"stars": 10},
        content_hash="abc",
    )
    db.upsert_document(doc)

    got = db.find_by_id("github-repo-1")
    assert got is not None
    assert got.content == "A CLI tool"
    assert got.url == "https://github.com/octocat/tool"
    assert got.metadata == {"stars": 10}
    assert got.published_at == "2024-03-01T00:00:00+00:00"
    assert db.find_by_id("missing") is None


def test_upsert_replaces_existing(db: SqliteDB, make_doc: Callable[..., Document]) -> None:
    db.upsert_document(make_doc("a", content="old", content_hash="1"))
    db.upsert_document(make_doc("a", content="new", content_hash="2"))
    got = db.find_by_id("a")
    assert got is not None
    assert got.content == "new"
    assert db.content_hashes("profile-host") == {"a": "2"}


def test_find_by_source_and_counts(db: SqliteDB, make_doc: Callable[..., Document]) -> None:
    db.upsert_documents(
        [
            make_doc("g1", source="profile-host"),
            make_doc("g2", source="profile-host"),
            make_doc("f1", source="feed"),
        ]
    )
    assert {d.id for d in db.find_by_source("profile-host")} == {"g1", "g2"}
    assert db.find_by_source("social") == []
    assert {d.id for d in db.find_by_sources(["feed", "social"])} == {"f1"}
    assert db.count_by_source() == {"profile-host": 2, "feed": 1}


def test_delete_by_source_returns_ids(db: SqliteDB, make_doc: Callable[..., Document]) -> None:
    db.upsert_documents([make_doc("f1", source="feed"), make_doc("g1")])
    removed = db.delete_by_source("feed")
    assert removed == ["f1"]
    assert db.find_by_id("f1") is None
    assert db.find_by_id("g1") is not None


def test_delete_all(db: SqliteDB, make_doc: Callable[..., Document]) -> None:
    db.upsert_documents([make_doc("a"), make_doc("b", source="social")])
    db.delete_all()
    assert db.count_by_source() == {}
