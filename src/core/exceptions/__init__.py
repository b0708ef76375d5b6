"""Exception definitions module."""

from src.core.exceptions.errors import (
    CabalBuilderError,
    ConfigurationError,
    LineReadError,
    PhaseTimeoutError,
    ProcessLaunchError,
)

__all__ = [
    "CabalBuilderError",
    "ConfigurationError",
    "LineReadError",
    "PhaseTimeoutError",
    "ProcessLaunchError",
]
