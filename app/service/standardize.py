"""Normalize GitHub API payloads into StandardizedEntity objects."""

from typing import Optional

from app.schema.reference import StandardizedEntity


def _login(user: Optional[dict]) -> str:
    if not user:
        return ""
    return user.get("login") or ""


def standardize_commit(commit: Optional[dict]) -> Optional[StandardizedEntity]:
    """Convert a GitHub commit object into a StandardizedEntity."""
    if commit is None:
        return None

    details = commit.get("commit") or {}
    git_author = details.get("author") or {}
    return StandardizedEntity(
        ref=commit.get("sha") or "",
        url=commit.get("html_url") or "",
        message=details.get("message") or "",
        author=_login(commit.get("author")),
        published_at=git_author.get("date") or "",
    )


def standardize_release(release: Optional[dict]) -> Optional[StandardizedEntity]:
    """Convert a GitHub release object into a StandardizedEntity."""
    if release is None:
        return None

    return StandardizedEntity(
        ref=release.get("tag_name") or "",
        url=release.get("html_url") or "",
        message=release.get("body") or "",
        author=_login(release.get("author")),
        published_at=release.get("published_at") or "",
    )


def standardize_tag(
    tag: Optional[dict], commit: Optional[dict] = None
) -> Optional[StandardizedEntity]:
    """
    Convert a tag and the commit it points to into a StandardizedEntity.

    The tag name is always the ref; URL, message, author and date come from
    the commit when its details are available and are left empty otherwise.
    """
    if tag is None:
        return None

    name = tag.get("name") or ""
    if not commit or not commit.get("commit"):
        return StandardizedEntity(ref=name)

    entity = standardize_commit(commit)
    return entity.model_copy(update={"ref": name})
