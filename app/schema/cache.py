"""Cache-related data schemas."""

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field


class CachedResponse(BaseModel):
    """Response envelope stored in the cache for a canonical reference key."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., description="HTTP status of the resolved response")
    body: bytes = Field(..., description="Response body, forwarded verbatim")
    stored_at: int = Field(..., description="Unix timestamp when the entry was stored")


class CacheConfiguration(BaseModel):
    """Expiration durations for successful and failed resolutions."""

    model_config = ConfigDict(frozen=True)

    success_ttl: timedelta = timedelta(hours=24)
    error_ttl: timedelta = timedelta(hours=1)
