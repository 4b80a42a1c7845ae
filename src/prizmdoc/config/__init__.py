"""Configuration module for the PrizmDoc client."""

from prizmdoc.config.logging import configure_logging
from prizmdoc.config.settings import LogLevel, Settings, get_settings

__all__ = [
    "LogLevel",
    "Settings",
    "configure_logging",
    "get_settings",
]
