"""Blog connector: articles from an RSS or Atom feed."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from youagent.errors import ConnectorError, YouAgentError
from youagent.models import Document
from youagent.utils.dates import now_iso, to_iso
from youagent.utils.hashing import sha256

from .base import Connector
from .feed import parse_feed
from .http import is_allowed_url, safe_fetch
from .text import html_to_text

logger = logging.getLogger(__name__)

ARTICLE_MAX_CHARS = 5000


class RSSConnector(Connector):
    source = "feed"
    name = "rss"

    def __init__(
        self,
        url: str,
        max_items: int = 20,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(client=client, timeout=timeout)
        self._url = url
        self._max_items = max_items

    def fetch(self) -> list[Document]:
        if not is_allowed_url(self._url):
            raise ConnectorError(f"Feed URL not allowed: {self._url}")
        try:
            response = safe_fetch(self._url, timeout=self._timeout, client=self._client)
        except ConnectorError:
            raise
        except YouAgentError as exc:
            raise ConnectorError("RSS fetch failed", details=str(exc)) from exc

        fetched_at = now_iso()
        docs: list[Document] = []
        for entry in parse_feed(response.text)[: self._max_items]:
            # Entries without both a title and a link cannot be cited.
            if not entry.title or not entry.link:
                continue
            content = html_to_text(entry.content)[:ARTICLE_MAX_CHARS]
            docs.append(
                Document(
                    id=f"rss-{sha256(entry.link)}",
                    source=self.source,
                    source_id=entry.link,
                    content_type="article",
                    title=entry.title,
                    content=content,
                    url=entry.link,
                    published_at=to_iso(entry.published) or fetched_at,
                    fetched_at=fetched_at,
                    content_hash=sha256(content),
                    metadata={"author": entry.author, "categories": entry.categories},
                )
            )
        logger.info("RSS: %d articles from %s", len(docs), self._url)
        return docs
