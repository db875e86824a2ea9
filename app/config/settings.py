"""Application settings using Pydantic Settings."""

import logging
from datetime import timedelta

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.schema.cache import CacheConfiguration

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 1000
DEFAULT_SUCCESS_DURATION_HOURS = 24
DEFAULT_ERROR_DURATION_HOURS = 1


def _parse_int_or_default(name: str, value, default: int, minimum: int) -> int:
    """Parse an integer setting, falling back to the default with a warning."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {name}: {value!r}. Using default: {default}")
        return default
    if parsed < minimum:
        logger.warning(f"Invalid {name}: {value!r}. Using default: {default}")
        return default
    return parsed


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    github_api_url: str = "https://api.github.com"
    github_token: str | None = None
    github_timeout_seconds: float = 30.0

    # Cache configuration
    cache_size: int = Field(
        default=DEFAULT_CACHE_SIZE,
        validation_alias=AliasChoices("cache_size", "CacheSize"),
    )
    cache_success_duration: int = DEFAULT_SUCCESS_DURATION_HOURS  # hours
    cache_error_duration: int = DEFAULT_ERROR_DURATION_HOURS  # hours

    # Release -> Tag -> Commit when enabled, Release -> Commit otherwise
    tags_enabled: bool = True

    @field_validator("cache_size", mode="before")
    @classmethod
    def parse_cache_size(cls, v):
        return _parse_int_or_default("CacheSize", v, DEFAULT_CACHE_SIZE, 1)

    @field_validator("cache_success_duration", mode="before")
    @classmethod
    def parse_success_duration(cls, v):
        return _parse_int_or_default(
            "CACHE_SUCCESS_DURATION", v, DEFAULT_SUCCESS_DURATION_HOURS, 0
        )

    @field_validator("cache_error_duration", mode="before")
    @classmethod
    def parse_error_duration(cls, v):
        return _parse_int_or_default(
            "CACHE_ERROR_DURATION", v, DEFAULT_ERROR_DURATION_HOURS, 0
        )

    # Server configuration
    server_host: str = "0.0.0.0"
    server_port: int = Field(
        default=8000,
        validation_alias=AliasChoices("server_port", "PORT"),
    )
    dev: bool = False
    workers: int = 1

    @property
    def cache_config(self) -> CacheConfiguration:
        """Success/error expiration durations for cached responses."""
        return CacheConfiguration(
            success_ttl=timedelta(hours=self.cache_success_duration),
            error_ttl=timedelta(hours=self.cache_error_duration),
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()
