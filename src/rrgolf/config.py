"""
Configuration management for rrgolf.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for development. The remote store URL should be set
via environment variables or a .env file in deployed environments.

Usage:
    from rrgolf.config import settings
    print(settings.save_debounce_seconds)
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ==========================================================================
    # Remote Store (authoritative, keyed by owner identity)
    # ==========================================================================

    database_url: str = Field(
        default="sqlite:///rrgolf.db",
        description="SQLAlchemy URL of the remote match store",
    )
    db_pool_size: int = Field(
        default=5,
        description="Number of connections to keep in the pool (ignored for SQLite)",
    )
    db_max_overflow: int = Field(
        default=10,
        description="Max additional connections beyond pool_size (ignored for SQLite)",
    )

    # ==========================================================================
    # Local Cache (fast, one match per device)
    # ==========================================================================

    local_cache_dir: Path = Field(
        default=Path.home() / ".rrgolf",
        description="Directory holding the local match cache file",
    )
    local_cache_key: str = Field(
        default="golf-match-state",
        description="Well-known key (file stem) of the cached match",
    )

    # ==========================================================================
    # Synchronization Timing
    # ==========================================================================

    save_debounce_seconds: float = Field(
        default=0.8,
        description="Quiet period before a state change is written to the remote store",
    )
    spectator_poll_interval_seconds: float = Field(
        default=15.0,
        description="How often a spectator re-fetches the shared match",
    )

    # ==========================================================================
    # Share Codes
    # ==========================================================================

    share_code_max_attempts: int = Field(
        default=5,
        description="Fresh codes tried before share code creation gives up",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("save_debounce_seconds", "spectator_poll_interval_seconds")
    @classmethod
    def validate_positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timing values must be positive")
        return v

    @field_validator("share_code_max_attempts")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("share_code_max_attempts must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
