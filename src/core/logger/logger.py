"""Logging setup for build runs, rendered with Rich on stderr."""

import logging
import sys
from functools import lru_cache
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from src.core.config.settings import LoggingSettings, get_settings

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Diagnostics go to stdout; stderr is reserved for logging
_console: Console | None = None


def setup_logging(settings: LoggingSettings | None = None, level: str | None = None) -> None:
    """Configure the root logger for a build run.

    Args:
        settings: Logging settings. Uses global settings if not provided.
        level: Overrides the configured level (e.g. "DEBUG" for --verbose).
    """
    if settings is None:
        settings = get_settings().logging

    log_level = getattr(logging, (level or settings.level).upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_stderr_handler(settings))

    if settings.file:
        root_logger.addHandler(_file_handler(settings.file, log_level))


def _stderr_handler(settings: LoggingSettings) -> logging.Handler:
    if not settings.use_rich:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(settings.format))
        return handler

    return RichHandler(
        console=get_console(),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    return handler


@lru_cache(maxsize=None)
def get_logger(name: str) -> logging.Logger:
    """Get a logger, configuring logging on first use if nothing else has.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)


def get_console() -> Console:
    """Get the shared stderr console used for log output."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console
