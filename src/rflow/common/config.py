"""Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"
    include_timestamp: bool = True
    include_caller: bool = False


class ReplaySettings(BaseSettings):
    """Capture replay configuration."""

    model_config = SettingsConfigDict(env_prefix="REPLAY_")

    # Upper bound on bytes handed to the decoder from one capture
    max_capture_bytes: int = Field(default=2048, ge=24, le=16 * 1024 * 1024)

    # How the uptime delta between a flow and its header is interpreted
    uptime_unit: Literal["seconds", "milliseconds"] = "seconds"

    output_format: Literal["text", "json"] = "text"


class Settings(BaseSettings):
    """Main application settings aggregating all configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application info
    app_name: str = "rflow"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Sub-configurations
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    replay: ReplaySettings = Field(default_factory=ReplaySettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
