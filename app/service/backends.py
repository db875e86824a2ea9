"""Reference backends: release, tag and commit lookups against GitHub."""

import logging
from datetime import datetime
from typing import Optional

import httpx

from app.repository.github_repository import (
    GitHubRepository,
    GitHubResponseError,
    InvalidPathError,
)
from app.schema.reference import BackendOutcome, StandardizedEntity, StandardizedOutput
from app.service.standardize import (
    standardize_commit,
    standardize_release,
    standardize_tag,
)

logger = logging.getLogger(__name__)

# Failures that leave a best-effort lookup without a candidate
UPSTREAM_ERRORS = (httpx.HTTPError, GitHubResponseError, InvalidPathError)


def _is_upstream_not_found(exc: Exception) -> bool:
    if isinstance(exc, InvalidPathError):
        return True
    return (
        isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code == 404
    )


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _commit_date(commit: Optional[dict]) -> Optional[str]:
    if not commit:
        return None
    return ((commit.get("commit") or {}).get("author") or {}).get("date")


def _tag_commit_sha(tag: dict) -> Optional[str]:
    return (tag.get("commit") or {}).get("sha")


async def fetch_latest_reference(
    github: GitHubRepository,
    repository: str,
    tags: Optional[list[dict]] = None,
    known_commits: Optional[dict[str, dict]] = None,
) -> Optional[StandardizedEntity]:
    """
    Return the most recent release or tag, compared by date.

    The newest release wins over the newest tag when it was published at the
    same time as or after the tag's commit, or when either date is unknown.
    Lookups are best-effort: a failing upstream call only removes that
    candidate.
    """
    latest_release = None
    try:
        releases = await github.list_releases(repository)
        if releases:
            latest_release = releases[0]
    except UPSTREAM_ERRORS as e:
        logger.warning(f"Could not list releases for {repository}: {e}")

    latest_tag = None
    latest_tag_commit = None
    if tags is None:
        try:
            tags = await github.list_tags(repository)
        except UPSTREAM_ERRORS as e:
            logger.warning(f"Could not list tags for {repository}: {e}")
            tags = []
    if tags:
        latest_tag = tags[0]
        sha = _tag_commit_sha(latest_tag)
        if sha and known_commits and sha in known_commits:
            latest_tag_commit = known_commits[sha]
        elif sha:
            try:
                latest_tag_commit = await github.get_commit(repository, sha)
            except UPSTREAM_ERRORS as e:
                logger.warning(f"Could not fetch commit {sha} for {repository}: {e}")

    if latest_release is not None and latest_tag_commit is not None:
        release_time = _parse_timestamp(latest_release.get("published_at"))
        tag_time = _parse_timestamp(_commit_date(latest_tag_commit))
        if release_time is None or tag_time is None or release_time >= tag_time:
            return standardize_release(latest_release)
        return standardize_tag(latest_tag, latest_tag_commit)

    if latest_release is not None:
        return standardize_release(latest_release)
    if latest_tag is not None:
        return standardize_tag(latest_tag, latest_tag_commit)
    return None


class ReleaseBackend:
    """Resolve a reference as a published GitHub release."""

    name = "releases"

    def __init__(self, github: GitHubRepository) -> None:
        self.github = github

    async def lookup(self, repository: str, ref: str) -> BackendOutcome:
        try:
            releases = await self.github.list_releases(repository)
        except UPSTREAM_ERRORS as e:
            if _is_upstream_not_found(e):
                return BackendOutcome.failure(
                    404, "No release found for the given repository and gitRef"
                )
            logger.error(f"Error fetching releases for {repository}: {e}")
            return BackendOutcome.failure(500, "Failed to fetch release information")

        # GitHub lists releases newest first
        latest = releases[0] if releases else None
        current = next((r for r in releases if r.get("tag_name") == ref), None)

        if latest is None or current is None:
            return BackendOutcome.failure(
                404, "No release found for the given repository and gitRef"
            )

        return BackendOutcome.found(
            StandardizedOutput(
                latest=standardize_release(latest),
                current=standardize_release(current),
            )
        )


class TagBackend:
    """Resolve a reference as a git tag that has no release attached."""

    name = "tags"

    def __init__(self, github: GitHubRepository) -> None:
        self.github = github

    async def lookup(self, repository: str, ref: str) -> BackendOutcome:
        try:
            tags = await self.github.list_tags(repository)
        except UPSTREAM_ERRORS as e:
            if _is_upstream_not_found(e):
                return BackendOutcome.failure(404, "Tag not found")
            logger.error(f"Error fetching tags for {repository}: {e}")
            return BackendOutcome.failure(500, "Failed to fetch tag information")

        matching = next((t for t in tags if t.get("name") == ref), None)
        if matching is None:
            return BackendOutcome.failure(404, "Tag not found")

        sha = _tag_commit_sha(matching)
        if not sha:
            logger.error(f"Tag {ref} in {repository} has no commit")
            return BackendOutcome.failure(500, "Failed to fetch tag information")

        try:
            commit = await self.github.get_commit(repository, sha)
        except UPSTREAM_ERRORS as e:
            logger.error(f"Failed to fetch commit for tag {ref} in {repository}: {e}")
            return BackendOutcome.failure(500, "Failed to fetch tag information")

        latest = await fetch_latest_reference(
            self.github, repository, tags=tags, known_commits={sha: commit}
        )
        return BackendOutcome.found(
            StandardizedOutput(latest=latest, current=standardize_tag(matching, commit))
        )


class CommitBackend:
    """Resolve a reference as a commit; the last resort of the fallback chain."""

    name = "commits"

    def __init__(self, github: GitHubRepository) -> None:
        self.github = github

    async def lookup(self, repository: str, ref: str) -> BackendOutcome:
        try:
            current = await self.github.get_commit(repository, ref)
        except InvalidPathError:
            return BackendOutcome.failure(
                404, "No commit found for the given repository and gitRef"
            )
        except httpx.HTTPStatusError as e:
            # GitHub answers 422 for refs that are not valid commit-ish
            if e.response.status_code in (404, 422):
                return BackendOutcome.failure(
                    404, "No commit found for the given repository and gitRef"
                )
            logger.error(f"Error fetching commit {ref} for {repository}: {e}")
            return BackendOutcome.failure(500, "Failed to fetch commit information")
        except (httpx.RequestError, GitHubResponseError) as e:
            logger.error(f"Error fetching commit {ref} for {repository}: {e}")
            return BackendOutcome.failure(500, "Failed to fetch commit information")

        latest = None
        try:
            commits = await self.github.list_commits(repository)
            if commits:
                latest = commits[0]
        except UPSTREAM_ERRORS as e:
            logger.warning(f"Error fetching latest commit for {repository}: {e}")

        return BackendOutcome.found(
            StandardizedOutput(
                latest=standardize_commit(latest),
                current=standardize_commit(current),
            )
        )
