"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All nested settings are frozen after
initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.music.value_objects import PlaybackMode, PlaybackSource
from ..domain.shared.messages import ErrorMessages

SLEEP_TIMER_CHOICES: tuple[int, ...] = (15, 30, 45, 60)


class PlayerSettings(BaseModel):
    """Playback session behaviour."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    restart_threshold_seconds: float = Field(
        default=3.0,
        ge=0.0,
        le=60.0,
        validation_alias=AliasChoices("restart_threshold_seconds", "restart_threshold"),
    )
    load_timeout_seconds: float = Field(
        default=15.0,
        gt=0.0,
        le=300.0,
        validation_alias=AliasChoices("load_timeout_seconds", "load_timeout"),
    )
    default_mode: PlaybackMode = PlaybackMode.NORMAL
    default_source: PlaybackSource = PlaybackSource.STREAMING


class SleepTimerSettings(BaseModel):
    """Sleep timer configuration."""

    model_config = ConfigDict(frozen=True)

    default_minutes: int = 30

    @field_validator("default_minutes")
    @classmethod
    def validate_default_minutes(cls, v: int) -> int:
        if v not in SLEEP_TIMER_CHOICES:
            raise ValueError(ErrorMessages.INVALID_SLEEP_TIMER.format(choices=SLEEP_TIMER_CHOICES))
        return v


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - PLAYER__RESTART_THRESHOLD_SECONDS, PLAYER__LOAD_TIMEOUT_SECONDS, PLAYER__DEFAULT_MODE (nested)
    - SLEEP_TIMER__DEFAULT_MINUTES (nested)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    player: PlayerSettings = Field(default_factory=PlayerSettings)
    sleep_timer: SleepTimerSettings = Field(default_factory=SleepTimerSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
