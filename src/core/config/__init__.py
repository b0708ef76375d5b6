"""Configuration management for cabal-builder."""

from src.core.config.loader import ConfigLoader
from src.core.config.settings import (
    CabalSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = [
    "CabalSettings",
    "ConfigLoader",
    "LoggingSettings",
    "Settings",
    "get_settings",
]
