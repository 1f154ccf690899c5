"""
Application configuration using Pydantic Settings.

Environment-level settings (database, API keys, logging). Tunable limits
such as quota caps and scheduler cadence live in config/defaults.yaml and
are read through ``defaults_loader``.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/remindr.db"
    database_echo: bool = False

    # API Keys (optional, loaded from env)
    openai_api_key: Optional[str] = None

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
