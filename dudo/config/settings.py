"""
Dudo - Application Settings

Loads configuration from environment variables (prefixed DUDO_) or a .env
file using Pydantic Settings.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dudo.engine.opponent import PROFILES
from dudo.engine.validators import MAX_STARTING_DICE

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Match
    starting_dice: int = Field(default=5, ge=1, le=MAX_STARTING_DICE)
    log_capacity: int = Field(default=20, ge=1)
    rng_seed: int | None = None
    opponent_profile: str = "balanced"

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DUDO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("opponent_profile")
    @classmethod
    def _known_profile(cls, value: str) -> str:
        name = value.lower()
        if name not in PROFILES:
            raise ValueError(f"Unknown opponent profile {value!r}; choose one of {sorted(PROFILES)}.")
        return name

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}.")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Install a basic root handler at the configured level."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
