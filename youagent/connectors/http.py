"""HTTP fetching for connectors (httpx) with bounded retries."""

from __future__ import annotations

import ipaddress
import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from youagent import __version__
from youagent.errors import ConnectorError, RateLimited
from youagent.utils.retry import with_retries

logger = logging.getLogger(__name__)

USER_AGENT = f"YouAgent/{__version__}"
DEFAULT_TIMEOUT = 30.0
MAX_REDIRECTS = 3
MAX_RETRIES = 3


def is_allowed_url(url: str) -> bool:
    """Only http(s) URLs to public hosts; localhost and private ranges are rejected."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False
    hostname = parsed.hostname.lower()
    if hostname == "localhost" or hostname.endswith(".localhost"):
        return False
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return True
    return not (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_reserved
        or address.is_unspecified
    )


def _get_once(client: httpx.Client, url: str, headers: dict[str, str]) -> httpx.Response:
    try:
        response = client.get(url, headers=headers)
    except httpx.TooManyRedirects as exc:
        raise ConnectorError(f"Too many redirects: {url}", details=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise ConnectorError(f"Failed to fetch {url}", details=str(exc)) from exc
    if response.status_code == 429:
        raise RateLimited(f"HTTP 429: {url}")
    if response.status_code >= 500:
        raise _status_error(url, response)
    return response


def _status_error(url: str, response: httpx.Response) -> ConnectorError:
    return ConnectorError(
        f"HTTP {response.status_code}: {url}",
        details={"status": response.status_code, "body": response.text[:500]},
    )


def safe_fetch(
    url: str,
    headers: Optional[dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    retries: int = MAX_RETRIES,
    client: Optional[httpx.Client] = None,
    base_delay: float = 1.0,
) -> httpx.Response:
    """GET a URL with a timeout, a redirect cap and bounded retries.

    Raises:
        RateLimited: The server kept answering 429.
        ConnectorError: Transport failure or any other HTTP error status.
    """
    merged = {"User-Agent": USER_AGENT, **(headers or {})}
    owns_client = client is None
    http = client or httpx.Client(
        timeout=timeout, follow_redirects=True, max_redirects=MAX_REDIRECTS
    )
    try:
        response = with_retries(
            lambda: _get_once(http, url, merged), attempts=retries, base_delay=base_delay
        )
    finally:
        if owns_client:
            http.close()
    # Client errors other than 429 are final; only 5xx and transport errors retry.
    if response.status_code >= 400:
        raise _status_error(url, response)
    return response
