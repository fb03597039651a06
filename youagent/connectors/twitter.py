"""Social connector: posts from an RSS bridge feed (e.g. RSSHub)."""

from __future__ import annotations

import logging
import re
from typing import Optional

import httpx

from youagent.errors import ConnectorError, YouAgentError
from youagent.models import Document
from youagent.utils.dates import now_iso, to_iso
from youagent.utils.hashing import sha256

from .base import Connector
from .feed import parse_feed
from .http import is_allowed_url, safe_fetch
from .text import html_to_text, strip_tracking_links

logger = logging.getLogger(__name__)

_STATUS_ID = re.compile(r"status/(\d+)")


def extract_status_id(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = _STATUS_ID.search(url)
    return match.group(1) if match else None


class TwitterConnector(Connector):
    source = "social"
    name = "twitter"

    def __init__(
        self,
        rss_url: str,
        max_items: int = 50,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(client=client, timeout=timeout)
        self._rss_url = rss_url
        self._max_items = max_items

    def fetch(self) -> list[Document]:
        if not is_allowed_url(self._rss_url):
            raise ConnectorError(f"Feed URL not allowed: {self._rss_url}")
        try:
            response = safe_fetch(self._rss_url, timeout=self._timeout, client=self._client)
        except ConnectorError:
            raise
        except YouAgentError as exc:
            raise ConnectorError("Social feed fetch failed", details=str(exc)) from exc

        fetched_at = now_iso()
        docs: list[Document] = []
        for entry in parse_feed(response.text)[: self._max_items]:
            content = strip_tracking_links(html_to_text(entry.content or entry.title or ""))
            if not content:
                continue
            status_id = extract_status_id(entry.link) or extract_status_id(entry.guid)
            docs.append(
                Document(
                    id=f"twitter-{status_id or sha256(content)}",
                    source=self.source,
                    source_id=status_id or content[:50],
                    content_type="post",
                    title=entry.title,
                    content=content,
                    url=entry.link,
                    published_at=to_iso(entry.published) or fetched_at,
                    fetched_at=fetched_at,
                    content_hash=sha256(content),
                )
            )
        logger.info("Social feed: %d posts", len(docs))
        return docs
