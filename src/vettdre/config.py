"""Configuration management for the ownership resolution engine.

Uses pydantic-settings to load configuration from environment variables
and an optional ``.env`` file. Only the ambient concerns (logging and the
geocoding escalation) are configurable; matching thresholds are fixed
constants next to the algorithms.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE_VARIABLE = "VETTDRE_ENV_FILE"

# src/vettdre/config.py -> checkout root
_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _find_env_file() -> Path | None:
    """Locate the .env file to read.

    An explicit ``VETTDRE_ENV_FILE`` wins. Otherwise the working directory
    and its parents are searched up to the checkout root, then the
    checkout root itself.
    """
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        return Path(explicit)

    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / ".env"
        if candidate.exists():
            return candidate
        if directory == _PROJECT_ROOT:
            break

    fallback = _PROJECT_ROOT / ".env"
    return fallback if fallback.exists() else None


_env_file = _find_env_file()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_env_file) if _env_file else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================
    # Environment
    # =========================
    environment: Literal["development", "staging", "production"] = "development"

    # =========================
    # Logging
    # =========================
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # =========================
    # Geocodio (address escalation)
    # =========================
    geocodio_api_key: str = Field(default="", repr=False)
    geocodio_base_url: str = "https://api.geocod.io/v1.7"
    geocodio_daily_limit: int = Field(
        default=2500,
        ge=0,
        description="Free-tier lookups per UTC day before the hook stops calling out",
    )
    geocodio_timeout_seconds: float = Field(default=10.0, gt=0)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def geocoding_enabled(self) -> bool:
        """Whether an API key is configured for the geocoding escalation."""
        return bool(self.geocodio_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
