from app.schema.cache import CacheConfiguration, CachedResponse

HTTP_OK = 200


def expires_at(cached: CachedResponse, config: CacheConfiguration) -> int:
    """Unix timestamp after which the cached entry is stale."""
    ttl = config.success_ttl if cached.status_code == HTTP_OK else config.error_ttl
    return cached.stored_at + int(ttl.total_seconds())


def is_expired(cached: CachedResponse, now: float, config: CacheConfiguration) -> bool:
    return now > expires_at(cached, config)
