"""GitHub REST API repository for releases, tags and commits."""

import json
from typing import Any, Optional
from urllib.parse import quote

import httpx

from app.config.settings import Settings


class InvalidPathError(ValueError):
    """A repository or ref that cannot be used as a GitHub API path segment."""


class GitHubResponseError(ValueError):
    """GitHub answered with a success status but an unexpected body."""


def _path_segment(value: str) -> str:
    # Dot segments would be collapsed by the URL parser and leave /repos/{owner}/{name}
    if value in ("", ".", ".."):
        raise InvalidPathError(f"Invalid path segment: {value!r}")
    return quote(value, safe="")


def split_repository(repository: str) -> tuple[str, str]:
    """Split "owner/name" into its parts, rejecting anything else."""
    parts = repository.split("/")
    if len(parts) != 2:
        raise InvalidPathError(f"Repository must be owner/name: {repository!r}")
    owner, name = parts
    _path_segment(owner)
    _path_segment(name)
    return owner, name


def is_valid_repository(repository: str) -> bool:
    try:
        split_repository(repository)
    except InvalidPathError:
        return False
    return True


class GitHubRepository:
    """Repository for reading reference data from api.github.com."""

    def __init__(
        self, settings: Settings, client: Optional[httpx.AsyncClient] = None
    ) -> None:
        """Initialize GitHub repository."""
        self.settings = settings
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if settings.github_token:
            headers["Authorization"] = f"Bearer {settings.github_token}"
        if client is None:
            client = httpx.AsyncClient(
                base_url=settings.github_api_url,
                timeout=settings.github_timeout_seconds,
                follow_redirects=True,
            )
        client.headers.update(headers)
        self.client = client

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

    def _repo_path(self, repository: str) -> str:
        owner, name = split_repository(repository)
        return f"/repos/{_path_segment(owner)}/{_path_segment(name)}"

    async def _get_json(self, url: str, expected: type) -> Any:
        response = await self.client.get(url)
        response.raise_for_status()
        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise GitHubResponseError(f"Invalid JSON from {url}: {e}") from e
        if not isinstance(payload, expected):
            raise GitHubResponseError(
                f"Expected {expected.__name__} from {url}, got {type(payload).__name__}"
            )
        if isinstance(payload, list) and not all(isinstance(i, dict) for i in payload):
            raise GitHubResponseError(f"Expected a list of objects from {url}")
        return payload

    async def list_releases(self, repository: str) -> list[dict]:
        """List releases, newest first."""
        return await self._get_json(f"{self._repo_path(repository)}/releases", list)

    async def list_tags(self, repository: str) -> list[dict]:
        """List tags in the order GitHub returns them."""
        return await self._get_json(f"{self._repo_path(repository)}/tags", list)

    async def get_commit(self, repository: str, ref: str) -> dict:
        """Get a single commit by SHA, branch or tag name."""
        # Branch names may contain "/"; GitHub accepts it encoded as %2F
        url = f"{self._repo_path(repository)}/commits/{_path_segment(ref)}"
        return await self._get_json(url, dict)

    async def list_commits(self, repository: str) -> list[dict]:
        """List commits on the default branch, newest first."""
        return await self._get_json(f"{self._repo_path(repository)}/commits", list)
