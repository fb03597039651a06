"""Content connectors: each fetches one source and returns Documents."""

from typing import Optional

import httpx

from youagent.config import Settings
from youagent.errors import ConfigError

from .base import Connector
from .github import GitHubConnector
from .resume import ResumeConnector
from .rss import RSSConnector
from .twitter import TwitterConnector


def create_connector(
    source: str,
    settings: Settings,
    github_username: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> Connector:
    """Build the connector for a source tag from settings.

    Raises:
        ConfigError: When the source is unknown or its settings are missing.
    """
    if source == "profile-host":
        username = github_username or settings.github_username
        if not username:
            raise ConfigError("GitHub username is not configured (YOUAGENT_GITHUB_USERNAME)")
        return GitHubConnector(
            username, token=settings.github_token, client=client, timeout=settings.http_timeout
        )
    if source == "feed":
        if not settings.site_rss_url:
            raise ConfigError("Blog feed URL is not configured (YOUAGENT_SITE_RSS_URL)")
        return RSSConnector(settings.site_rss_url, client=client, timeout=settings.http_timeout)
    if source == "social":
        if not settings.social_rss_url:
            raise ConfigError("Social feed URL is not configured (YOUAGENT_SOCIAL_RSS_URL)")
        return TwitterConnector(
            settings.social_rss_url, client=client, timeout=settings.http_timeout
        )
    if source == "document":
        if not settings.resume_path:
            raise ConfigError("Resume path is not configured (YOUAGENT_RESUME_PATH)")
        return ResumeConnector(settings.resume_path)
    raise ConfigError(f"Unknown source: {source}")


__all__ = [
    "Connector",
    "GitHubConnector",
    "RSSConnector",
    "ResumeConnector",
    "TwitterConnector",
    "create_connector",
]
