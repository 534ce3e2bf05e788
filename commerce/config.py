"""
Configuration settings for the storefront data layer.

Loads STOREFRONT_* environment variables (and an optional .env file) and
provides typed configuration plus the logging setup shared by the API and
the demo.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_LOG_FORMAT = "%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Field(
        default=DEFAULT_DATA_DIR,
        description="Directory with JSON seed fixtures for the in-memory store",
    )
    store_latency: float = Field(
        default=0.0, ge=0, description="Simulated store round-trip time in seconds"
    )
    log_level: str = Field(default="INFO")
    log_format: str = Field(default=DEFAULT_LOG_FORMAT)
    api_title: str = Field(default="Storefront Data Layer")

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format=settings.log_format,
        datefmt="%H:%M:%S",
    )
