"""RSS 2.0 / Atom parsing shared by the blog and social connectors."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from youagent.errors import ConnectorError

logger = logging.getLogger(__name__)

ATOM_NS = "{http://www.w3.org/2005/Atom}"
CONTENT_NS = "{http://purl.org/rss/1.0/modules/content/}"
DC_NS = "{http://purl.org/dc/elements/1.1/}"


@dataclass
class FeedEntry:
    title: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    published: Optional[str] = None
    content: str = ""
    author: Optional[str] = None
    categories: list[str] = field(default_factory=list)


def _text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None or element.text is None:
        return None
    value = element.text.strip()
    return value or None


def _rss_item(item: ET.Element) -> FeedEntry:
    content = (
        _text(item.find(f"{CONTENT_NS}encoded"))
        or _text(item.find("description"))
        or ""
    )
    return FeedEntry(
        title=_text(item.find("title")),
        link=_text(item.find("link")),
        guid=_text(item.find("guid")),
        published=_text(item.find("pubDate")) or _text(item.find(f"{DC_NS}date")),
        content=content,
        author=_text(item.find(f"{DC_NS}creator")) or _text(item.find("author")),
        categories=[c.text.strip() for c in item.findall("category") if c.text],
    )


def _atom_link(entry: ET.Element) -> Optional[str]:
    fallback = None
    for link in entry.findall(f"{ATOM_NS}link"):
        href = link.get("href")
        if not href:
            continue
        if link.get("rel", "alternate") == "alternate":
            return href
        fallback = fallback or href
    return fallback


def _atom_entry(entry: ET.Element) -> FeedEntry:
    author = entry.find(f"{ATOM_NS}author")
    return FeedEntry(
        title=_text(entry.find(f"{ATOM_NS}title")),
        link=_atom_link(entry),
        guid=_text(entry.find(f"{ATOM_NS}id")),
        published=_text(entry.find(f"{ATOM_NS}published"))
        or _text(entry.find(f"{ATOM_NS}updated")),
        content=_text(entry.find(f"{ATOM_NS}content"))
        or _text(entry.find(f"{ATOM_NS}summary"))
        or "",
        author=_text(author.find(f"{ATOM_NS}name")) if author is not None else None,
        categories=[
            c.get("term", "") for c in entry.findall(f"{ATOM_NS}category") if c.get("term")
        ],
    )


def parse_feed(xml_text: str) -> list[FeedEntry]:
    """Parse an RSS 2.0 or Atom document into entries, in document order."""
    try:
        root = fromstring(xml_text)
    except ET.ParseError as exc:
        raise ConnectorError("Feed is not valid XML", details=str(exc)) from exc
    except DefusedXmlException as exc:
        raise ConnectorError("Feed uses forbidden XML constructs", details=str(exc)) from exc

    if root.tag == f"{ATOM_NS}feed":
        return [_atom_entry(e) for e in root.findall(f"{ATOM_NS}entry")]
    if root.tag == "rss" or root.find("channel") is not None:
        return [_rss_item(i) for i in root.iter("item")]
    raise ConnectorError(f"Unsupported feed format: <{root.tag}>")
