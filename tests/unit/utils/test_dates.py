"""Unit tests for date helpers."""

from datetime import datetime, timezone

from youagent.utils.dates import format_date, parse_date, to_iso


def test_parse_iso_with_z_suffix() -> None:
    assert parse_date("2024-03-01T10:00:00Z") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)


def test_parse_rfc822() -> None:
    assert to_iso("Mon, 01 Apr 2024 09:30:00 +0200") == "2024-04-01T07:30:00+00:00"


def test_naive_dates_assumed_utc() -> None:
    assert to_iso("2024-03-01T10:00:00") == "2024-03-01T10:00:00+00:00"


def test_unparseable_and_missing() -> None:
    assert parse_date("yesterday-ish") is None
    assert parse_date(None) is None
    assert to_iso("") is None


def test_format_date() -> None:
    assert format_date("2024-03-01T23:59:00+00:00") == "2024-03-01"
    assert format_date(None) == "unknown date"
