"""HTML to plain text for feed entries (trafilatura)."""

import re

from trafilatura import html2txt

_WHITESPACE = re.compile(r"\s+")
_TRACKING_LINK = re.compile(r"https?://t\.co/\w+")


def html_to_text(raw: str) -> str:
    """Strip markup and collapse whitespace."""
    if not raw:
        return ""
    text = raw
    if "<" in raw and ">" in raw:
        text = html2txt(raw) or raw
    return _WHITESPACE.sub(" ", text).strip()


def strip_tracking_links(text: str) -> str:
    """Remove t.co short links and re-collapse whitespace."""
    return _WHITESPACE.sub(" ", _TRACKING_LINK.sub("", text)).strip()
