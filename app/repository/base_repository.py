"""Base interfaces for the cache store and reference backends."""

from typing import Protocol, Optional, runtime_checkable

from app.schema.cache import CachedResponse
from app.schema.reference import BackendOutcome


@runtime_checkable
class CacheRepository(Protocol):
    """Protocol for cache repository implementations."""

    def get(self, key: str) -> Optional[CachedResponse]: ...

    def put(self, key: str, value: CachedResponse) -> None: ...

    def remove(self, key: str) -> None: ...

    def __len__(self) -> int: ...


@runtime_checkable
class ReferenceBackend(Protocol):
    """A lookup strategy resolving (repository, ref) to an outcome."""

    name: str

    async def lookup(self, repository: str, ref: str) -> BackendOutcome: ...
