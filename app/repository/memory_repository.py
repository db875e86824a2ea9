"""In-memory LRU repository for cached reference responses."""

import logging
from collections import OrderedDict
from threading import Lock
from typing import Callable, Optional

from app.repository.base_repository import CacheRepository
from app.schema.cache import CachedResponse

logger = logging.getLogger(__name__)

EvictionCallback = Callable[[str, CachedResponse], None]


def log_eviction(key: str, value: CachedResponse) -> None:
    """Default eviction observer."""
    logger.info(f"Evicted from cache: {key}")


class MemoryCacheRepository(CacheRepository):
    """Bounded, thread-safe LRU store keyed by canonical reference key."""

    def __init__(
        self,
        max_entries: int = 1000,
        on_evict: Optional[EvictionCallback] = log_eviction,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self.max_entries = max_entries
        self._on_evict = on_evict
        self._lock = Lock()
        self._entries: OrderedDict[str, CachedResponse] = OrderedDict()

    def get(self, key: str) -> Optional[CachedResponse]:
        """Return the entry for key and mark it most recently used."""
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                return None
            self._entries.move_to_end(key, last=True)
            return value

    def put(self, key: str, value: CachedResponse) -> None:
        """Insert or replace an entry, evicting the least recently used on overflow."""
        evicted: list[tuple[str, CachedResponse]] = []
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key, last=True)
            while len(self._entries) > self.max_entries:
                evicted.append(self._entries.popitem(last=False))

        for evicted_key, evicted_value in evicted:
            self._notify_evicted(evicted_key, evicted_value)

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def _notify_evicted(self, key: str, value: CachedResponse) -> None:
        if self._on_evict is None:
            return
        try:
            self._on_evict(key, value)
        except Exception:
            logger.exception(f"Eviction callback failed for key: {key}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
