"""Timestamp helpers. Stored timestamps are ISO-8601 strings in UTC."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse ISO-8601 or RFC 822 (RSS pubDate) strings; None when unparseable."""
    if not value:
        return None
    text = value.strip()
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            dt = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso(value: Optional[str]) -> Optional[str]:
    """Normalize a feed/API date string to ISO-8601 UTC, or None."""
    dt = parse_date(value)
    return dt.astimezone(timezone.utc).isoformat() if dt else None


def format_date(value: Optional[str]) -> str:
    """Absolute YYYY-MM-DD for citations; 'unknown date' when missing."""
    dt = parse_date(value)
    if dt is None:
        return "unknown date"
    return dt.strftime("%Y-%m-%d")
