"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: DUMP_FILTER_
    """

    model_config = SettingsConfigDict(
        env_prefix="DUMP_FILTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Filtering
    exclude: str = Field(
        default="",
        description="Comma-separated tables whose INSERT statements are always dropped",
    )
    read_buffer_size: int = Field(
        default=1024 * 1024,
        gt=0,
        description="Read buffer size in bytes for the input dump",
    )

    # Timing records
    timing_format: Literal["default", "csv"] = Field(
        default="default",
        description="Timing record format when --format is not given ('default' or 'csv')",
    )

    # Progress bar
    progress_refresh_per_second: float = Field(
        default=10.0,
        gt=0,
        description="Progress bar redraw rate",
    )

    # Logging
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="console")  # 'json' or 'console'

    @property
    def excluded_tables(self) -> list[str]:
        """Configured exclusions as a list of raw values."""
        return [self.exclude] if self.exclude else []


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
