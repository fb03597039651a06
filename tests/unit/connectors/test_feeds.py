"""Unit tests for feed parsing and the blog/social connectors."""

import httpx
import pytest

from youagent.connectors.feed import parse_feed
from youagent.connectors.rss import RSSConnector
from youagent.connectors.text import html_to_text, strip_tracking_links
from youagent.connectors.twitter import TwitterConnector, extract_status_id
from youagent.errors import ConnectorError

RSS = """<?xml version="1.0"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Blog</title>
    <item>
      <title>Testing in Python</title>
      <link>https://blog.example.com/testing</link>
      <description>&lt;p&gt;Fixtures   and &lt;b&gt;mocks&lt;/b&gt;&lt;/p&gt;</description>
      <pubDate>Mon, 01 Apr 2024 09:30:00 GMT</pubDate>
      <dc:creator>Octo Cat</dc:creator>
      <category>python</category>
    </item>
    <item>
      <title>No link here</title>
      <description>Dropped</description>
    </item>
  </channel>
</rss>
"""

ATOM = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Blog</title>
  <entry>
    <title>Atom post</title>
    <link rel="self" href="https://blog.example.com/self"/>
    <link href="https://blog.example.com/atom-post"/>
    <id>urn:uuid:1</id>
    <updated>2024-02-03T04:05:06Z</updated>
    <summary>Short summary</summary>
    <author><name>Octo</name></author>
    <category term="notes"/>
  </entry>
</feed>
"""

SOCIAL = """<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <item>
      <title>Shipped v2</title>
      <description>Shipped v2 today https://t.co/AbC123</description>
      <link>https://twitter.com/octocat/status/1234567890</link>
      <pubDate>Tue, 02 Apr 2024 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title></title>
      <description></description>
    </item>
  </channel>
</rss>
"""


def _client(body: str) -> httpx.Client:
    return httpx.Client(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text=body))
    )


class TestParseFeed:
    def test_rss_items(self) -> None:
        first, second = parse_feed(RSS)
        assert first.title == "Testing in Python"
        assert first.link == "https://blog.example.com/testing"
        assert first.author == "Octo Cat"
        assert first.categories == ["python"]
        assert second.link is None

    def test_atom_entries_prefer_alternate_link(self) -> None:
        (entry,) = parse_feed(ATOM)
        assert entry.link == "https://blog.example.com/atom-post"
        assert entry.published == "2024-02-03T04:05:06Z"
        assert entry.content == "Short summary"
        assert entry.author == "Octo"
        assert entry.categories == ["notes"]

    def test_invalid_xml(self) -> None:
        with pytest.raises(ConnectorError):
            parse_feed("<rss><channel>")

    def test_unsupported_root(self) -> None:
        with pytest.raises(ConnectorError):
            parse_feed("<html><body/></html>")

    def test_entity_declarations_rejected(self) -> None:
        feed = (
            '<?xml version="1.0"?>\n'
            '<!DOCTYPE rss [<!ENTITY boom "boom boom boom">]>\n'
            "<rss><channel><item><title>&boom;</title></item></channel></rss>"
        )
        with pytest.raises(ConnectorError, match="forbidden"):
            parse_feed(feed)


class TestRSSConnector:
    def test_fetch_normalizes_articles(self) -> None:
        (doc,) = RSSConnector(
            "https://blog.example.com/feed.xml", client=_client(RSS)
        ).fetch()
        assert doc.source == "feed"
        assert doc.id.startswith("rss-")
        assert doc.title == "Testing in Python"
        assert "<" not in doc.content
        assert "mocks" in doc.content
        assert doc.published_at == "2024-04-01T09:30:00+00:00"
        assert doc.metadata["author"] == "Octo Cat"

    def test_ids_are_stable(self) -> None:
        url = "https://blog.example.com/feed.xml"
        first = RSSConnector(url, client=_client(RSS)).fetch()
        second = RSSConnector(url, client=_client(RSS)).fetch()
        assert [d.id for d in first] == [d.id for d in second]

    def test_private_url_rejected(self) -> None:
        with pytest.raises(ConnectorError):
            RSSConnector("http://127.0.0.1/feed", client=_client(RSS)).fetch()

    def test_max_items(self) -> None:
        docs = RSSConnector(
            "https://blog.example.com/feed.xml", max_items=0, client=_client(RSS)
        ).fetch()
        assert docs == []


class TestTwitterConnector:
    def test_fetch_strips_tracking_links(self) -> None:
        (doc,) = TwitterConnector(
            "https://rsshub.example.com/twitter/user/octocat", client=_client(SOCIAL)
        ).fetch()
        assert doc.id == "twitter-1234567890"
        assert doc.source == "social"
        assert doc.content == "Shipped v2 today"
        assert doc.published_at == "2024-04-02T10:00:00+00:00"

    def test_extract_status_id(self) -> None:
        assert extract_status_id("https://x.com/a/status/42?s=20") == "42"
        assert extract_status_id("https://x.com/a") is None
        assert extract_status_id(None) is None


def test_html_to_text_plain_passthrough() -> None:
    assert html_to_text("  plain   text ") == "plain text"
    assert html_to_text("") == ""


def test_strip_tracking_links() -> None:
    assert strip_tracking_links("see https://t.co/xyz now") == "see now"
