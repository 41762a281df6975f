"""
Server settings loaded from the environment (and an optional ``.env`` file).
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for providers, caching and logging."""

    skyfi_api_key: str | None = Field(
        None,
        description="SkyFi Platform API key; imagery tools report AUTH_INVALID without it.",
    )
    skyfi_base_url: str = Field("https://app.skyfi.com/platform-api")
    skyfi_timeout_seconds: float = Field(30.0, gt=0)
    skyfi_transport_retries: int = Field(
        3,
        ge=0,
        description="Connection-level retries performed by the httpx transport.",
    )

    nominatim_domain: str = Field("nominatim.openstreetmap.org")
    nominatim_user_agent: str = Field("skyfi-mcp")
    nominatim_timeout_seconds: float = Field(10.0, gt=0)
    nominatim_min_delay_seconds: float = Field(
        1.0,
        ge=0,
        description="Minimum delay between Nominatim requests (usage policy: 1 req/s).",
    )

    geocode_cache_ttl_seconds: float = Field(24 * 60 * 60, ge=0)
    log_level: str = Field("INFO")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
