"""Pydantic settings configuration for the PrizmDoc client."""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PRIZMDOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    base_url: str = "http://localhost:18681"
    api_key: str | None = None
    timeout_seconds: float = Field(default=60.0, gt=0)

    log_level: LogLevel = LogLevel.INFO


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
