"""GitHub connector: profile, recently updated repositories and READMEs."""

from __future__ import annotations

import json
import logging
from typing import Optional

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from youagent.errors import ConnectorError, YouAgentError
from youagent.models import Document
from youagent.utils.dates import now_iso, to_iso
from youagent.utils.hashing import sha256

from .base import Connector
from .http import safe_fetch

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
MAX_REPOS = 20
README_MAX_CHARS = 10000
README_MIN_STARS = 5
README_TOP_N = 5


class GitHubProfile(BaseModel):
    login: str
    name: Optional[str] = None
    bio: Optional[str] = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: str
    updated_at: str


class GitHubRepo(BaseModel):
    id: int
    name: str
    full_name: str
    description: Optional[str] = None
    html_url: str
    language: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    updated_at: str
    pushed_at: Optional[str] = None
    topics: list[str] = []


_repos_adapter = TypeAdapter(list[GitHubRepo])


def repo_summary(repo: GitHubRepo) -> str:
    """Plain-text description of a repository used as its document content."""
    lines = [
        repo.description or "",
        f"Language: {repo.language or 'Unknown'}",
        f"Stars: {repo.stargazers_count}",
        f"Forks: {repo.forks_count}",
        f"Topics: {', '.join(repo.topics)}" if repo.topics else "",
    ]
    return "\n".join(line for line in lines if line)


class GitHubConnector(Connector):
    source = "profile-host"
    name = "github"

    def __init__(
        self,
        username: str,
        token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(client=client, timeout=timeout)
        self._username = username
        self._token = token

    def _headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        headers = {"Accept": accept}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _get(self, path: str, accept: str = "application/vnd.github+json") -> httpx.Response:
        return safe_fetch(
            f"{API_ROOT}{path}",
            headers=self._headers(accept),
            timeout=self._timeout,
            client=self._client,
        )

    def get_profile(self) -> GitHubProfile:
        return GitHubProfile.model_validate_json(self._get(f"/users/{self._username}").text)

    def list_repos(self, per_page: int = MAX_REPOS) -> list[GitHubRepo]:
        response = self._get(f"/users/{self._username}/repos?sort=updated&per_page={per_page}")
        return _repos_adapter.validate_json(response.text)

    def get_readme(self, full_name: str) -> Optional[str]:
        """Raw README text (first README_MAX_CHARS chars), or None when unavailable."""
        try:
            response = self._get(f"/repos/{full_name}/readme", accept="application/vnd.github.raw")
        except YouAgentError as exc:
            logger.info("No README for %s: %s", full_name, exc)
            return None
        return response.text[:README_MAX_CHARS] or None

    def fetch(self) -> list[Document]:
        fetched_at = now_iso()
        try:
            profile = self.get_profile()
            repos = self.list_repos()
        except ValidationError as exc:
            raise ConnectorError("GitHub returned an unexpected payload", details=str(exc)) from exc
        except ConnectorError:
            raise
        except YouAgentError as exc:
            raise ConnectorError("GitHub fetch failed", details=str(exc)) from exc

        docs = [
            Document(
                id=f"github-profile-{self._username}",
                source=self.source,
                source_id=self._username,
                content_type="profile",
                title=f"{profile.name or profile.login}'s GitHub Profile",
                content=profile.bio or "No bio available",
                url=f"https://github.com/{self._username}",
                published_at=to_iso(profile.created_at),
                fetched_at=fetched_at,
                content_hash=sha256(json.dumps(profile.model_dump(), sort_keys=True)),
                metadata={
                    "public_repos": profile.public_repos,
                    "followers": profile.followers,
                    "following": profile.following,
                },
            )
        ]

        for position, repo in enumerate(repos):
            content = repo_summary(repo)
            published = to_iso(repo.pushed_at or repo.updated_at)
            docs.append(
                Document(
                    id=f"github-repo-{repo.id}",
                    source=self.source,
                    source_id=str(repo.id),
                    content_type="repo",
                    title=repo.full_name,
                    content=content,
                    url=repo.html_url,
                    published_at=published,
                    fetched_at=fetched_at,
                    content_hash=sha256(content),
                    metadata={
                        "language": repo.language,
                        "stars": repo.stargazers_count,
                        "forks": repo.forks_count,
                        "topics": repo.topics,
                    },
                )
            )
            if repo.stargazers_count <= README_MIN_STARS and position >= README_TOP_N:
                continue
            readme = self.get_readme(repo.full_name)
            if readme:
                docs.append(
                    Document(
                        id=f"github-readme-{repo.id}",
                        source=self.source,
                        source_id=f"readme-{repo.id}",
                        content_type="repo",
                        title=f"{repo.full_name} README",
                        content=readme,
                        url=f"{repo.html_url}#readme",
                        published_at=published,
                        fetched_at=fetched_at,
                        content_hash=sha256(readme),
                        metadata={"repo": repo.full_name},
                    )
                )

        logger.info("GitHub: %d documents for %s", len(docs), self._username)
        return docs
