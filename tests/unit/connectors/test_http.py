"""Unit tests for safe_fetch and URL allow-listing."""

import httpx
import pytest

from youagent.connectors.http import USER_AGENT, is_allowed_url, safe_fetch
from youagent.errors import ConnectorError, RateLimited


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    ("url", "allowed"),
    [
        ("https://blog.example.com/feed.xml", True),
        ("http://93.184.216.34/rss", True),
        ("ftp://example.com/feed", False),
        ("http://localhost:8000/feed", False),
        ("http://127.0.0.1/feed", False),
        ("http://10.0.0.5/feed", False),
        ("http://169.254.169.254/latest/meta-data", False),
        ("not a url", False),
    ],
)
def test_is_allowed_url(url: str, allowed: bool) -> None:
    assert is_allowed_url(url) is allowed


def test_sends_user_agent_and_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="ok")

    response = safe_fetch(
        "https://example.com/a", headers={"Accept": "text/xml"}, client=_client(handler)
    )
    assert response.text == "ok"
    assert seen[0].headers["User-Agent"] == USER_AGENT
    assert seen[0].headers["Accept"] == "text/xml"


def test_client_error_is_not_retried() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(404, text="missing")

    with pytest.raises(ConnectorError) as exc_info:
        safe_fetch("https://example.com/a", client=_client(handler))
    assert len(calls) == 1
    assert exc_info.value.details["status"] == 404


def test_server_error_is_retried_then_succeeds() -> None:
    statuses = iter([503, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses), text="body")

    assert safe_fetch("https://example.com/a", client=_client(handler)).status_code == 200


def test_rate_limit_exhausts_retries() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(429)

    with pytest.raises(RateLimited):
        safe_fetch("https://example.com/a", client=_client(handler), retries=2, base_delay=0.0)
    assert len(calls) == 2


def test_transport_error_becomes_connector_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ConnectorError):
        safe_fetch("https://example.com/a", client=_client(handler), retries=1)
