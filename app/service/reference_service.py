"""Reference resolution service: fallback dispatch with cache-aside caching."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from app.repository.base_repository import CacheRepository, ReferenceBackend
from app.repository.github_repository import is_valid_repository
from app.schema.cache import CacheConfiguration, CachedResponse
from app.service.cache_keys import canonicalize_ref, make_cache_key
from app.service.cache_policy import expires_at, is_expired

logger = logging.getLogger(__name__)

MISSING_PARAMETER_MESSAGE = "Missing 'repo' or 'gitRef' query parameter"
INVALID_REPOSITORY_MESSAGE = "Invalid 'repo' query parameter: expected owner/name"
LATEST_REF_MESSAGE = (
    "'latest' is not a valid value for 'gitRef'. Please use an immutable image."
)


class ReferenceValidationError(ValueError):
    """Raised for requests that must be rejected before cache or backends."""


@dataclass(frozen=True)
class ResolvedReference:
    status_code: int
    body: bytes
    cache_hit: bool = False


def _fmt(ts: float) -> str:
    return datetime.fromtimestamp(ts).isoformat(sep=" ", timespec="seconds")


class ReferenceService:
    """Resolve repository references through release, tag and commit backends."""

    def __init__(
        self,
        config: CacheConfiguration,
        cache_repo: CacheRepository,
        release_backend: ReferenceBackend,
        commit_backend: ReferenceBackend,
        tag_backend: Optional[ReferenceBackend] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize reference service."""
        self.config = config
        self.cache_repo = cache_repo
        self.clock = clock
        # Priority order; the last backend is always conclusive
        self.backends: list[ReferenceBackend] = [
            backend
            for backend in (release_backend, tag_backend, commit_backend)
            if backend is not None
        ]

    def _validate(self, repository: str, raw_ref: str) -> None:
        if not repository or not raw_ref:
            raise ReferenceValidationError(MISSING_PARAMETER_MESSAGE)
        if not is_valid_repository(repository):
            raise ReferenceValidationError(INVALID_REPOSITORY_MESSAGE)
        if raw_ref == "latest":
            raise ReferenceValidationError(LATEST_REF_MESSAGE)

    def _get_from_cache(self, key: str) -> Optional[CachedResponse]:
        cached = self.cache_repo.get(key)
        if cached is None:
            logger.info(f"Cache miss for key: {key}")
            return None

        expiration = expires_at(cached, self.config)
        if is_expired(cached, self.clock(), self.config):
            logger.info(
                f"Cache expired for key: {key} "
                f"(Stored at: {_fmt(cached.stored_at)}, Expired at: {_fmt(expiration)})"
            )
            self.cache_repo.remove(key)
            return None

        logger.info(
            f"Cache hit for key: {key} "
            f"(Stored at: {_fmt(cached.stored_at)}, Expires at: {_fmt(expiration)}), "
            f"Status: {cached.status_code}"
        )
        return cached

    def _store_in_cache(self, key: str, status_code: int, body: bytes) -> None:
        stored_at = int(self.clock())
        self.cache_repo.put(
            key,
            CachedResponse(status_code=status_code, body=body, stored_at=stored_at),
        )
        logger.info(
            f"Cached response for key: {key}, Status: {status_code} (Stored at {stored_at})"
        )

    def cached(self, repository: str, raw_ref: str) -> Optional[CachedResponse]:
        """Return the live cache entry for a reference, if any."""
        key = make_cache_key(repository, canonicalize_ref(raw_ref))
        return self._get_from_cache(key)

    async def resolve(self, repository: str, raw_ref: str) -> ResolvedReference:
        """
        Resolve a reference to a (status, body) pair.

        Validation errors raise ReferenceValidationError and are never cached.
        Otherwise the cache is consulted first; on a miss the backends are
        tried in order and the first outcome that is not a 404 is cached and
        returned. The last backend's outcome is used whatever its status.
        """
        self._validate(repository, raw_ref)

        # Tags with different metadata suffixes share one cache entry
        base_ref = canonicalize_ref(raw_ref)
        cache_key = make_cache_key(repository, base_ref)

        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return ResolvedReference(cached.status_code, cached.body, cache_hit=True)

        last_index = len(self.backends) - 1
        for index, backend in enumerate(self.backends):
            outcome = await backend.lookup(repository, base_ref)
            if outcome.is_conclusive or index == last_index:
                logger.info(
                    f"Resolved {repository}@{base_ref} via {backend.name} "
                    f"(Status: {outcome.status_code})"
                )
                self._store_in_cache(cache_key, outcome.status_code, outcome.body)
                return ResolvedReference(outcome.status_code, outcome.body)

            logger.info(
                f"No {backend.name} match for {repository}@{base_ref}, falling back"
            )

        raise RuntimeError("No reference backends configured")
