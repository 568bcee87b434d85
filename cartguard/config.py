"""Runtime settings, read from ``CARTGUARD_*`` environment variables or ``.env``.

Only the HTTP shell reads these. Core functions take TTLs and dates as
arguments, so tests can drive them without touching the environment.
"""

from datetime import date
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CARTGUARD_", case_sensitive=False,
    )

    # fallback TTL for evidence keys without a known validity period
    default_evidence_ttl_days: int = Field(365, gt=0)
    # stands in for a missing last_verified_at when upgrading legacy documents
    legacy_sentinel_date: date = date(2000, 1, 1)

    cors_origins: list[str] = ["http://localhost:5173"]

    log_level: str = "INFO"
    log_format: str = Field("json", pattern="^(json|text)$")


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings; call ``get_settings.cache_clear()`` after env changes."""
    return Settings()
