"""
Application configuration.

Settings are read from environment variables prefixed with SHEET_EXPORT_
(e.g. SHEET_EXPORT_DIALOG_WIDTH=640) or from a local .env file.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SHEET_EXPORT_",
        env_file=".env",
        extra="ignore",
    )

    # Host UI
    menu_title: str = "Export to JSON"
    dialog_title: str = "Export to JSON"
    dialog_width: int = Field(default=500, gt=0)
    dialog_height: int = Field(default=300, gt=0)

    # Output
    json_indent: int = Field(default=2, ge=0)

    # REST API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """
    Install a basic log format for the entry points.

    Args:
        level: Log level name. Defaults to the configured log_level.
    """
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
