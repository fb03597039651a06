"""Normalized content records, consent rows and context fragments."""

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

SourceTag = Literal["profile-host", "feed", "document", "social"]
ContentType = Literal["profile", "repo", "article", "post", "fact"]

SOURCE_TAGS: tuple[SourceTag, ...] = ("profile-host", "feed", "document", "social")

SOURCE_LABELS: dict[str, str] = {
    "profile-host": "GitHub",
    "feed": "Blog",
    "document": "Resume",
    "social": "Twitter",
}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Document(BaseModel):
    """A normalized content record produced by a connector.

    Stored in the `source_items` SQLite table. The retrieval core only reads
    `id`, `source`, `title`, `content`, `url` and the two timestamps.
    """

    id: str = Field(description="Stable unique identifier")
    source: SourceTag = Field(description="Content category tag")
    source_id: str = Field("", description="Identifier at the origin service")
    content_type: ContentType = Field("fact", description="Kind of record")
    title: Optional[str] = Field(None, description="Display title")
    content: str = Field(description="Full text body")
    url: Optional[str] = Field(None, description="Origin link")
    published_at: Optional[str] = Field(None, description="ISO-8601 publish time")
    fetched_at: str = Field(default_factory=_utc_now_iso, description="ISO-8601 fetch time")
    content_hash: str = Field("", description="SHA-256 of content for change detection")
    metadata: dict[str, Any] = Field(default_factory=dict)

    def embedding_text(self) -> str:
        """Text sent to the embedding provider."""
        return f"{self.title or ''}\n{self.content}".strip()


class Consent(BaseModel):
    """Per-source consent for data collection."""

    source: SourceTag
    granted: bool = False
    granted_at: Optional[str] = None
    revoked_at: Optional[str] = None


class ContextFragment(BaseModel):
    """Bounded, attributed snippet handed to synthesis."""

    content: str
    source: SourceTag
    title: Optional[str] = None
    url: Optional[str] = None
    date: Optional[str] = None
