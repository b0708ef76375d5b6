"""Unit tests for logging setup."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from rich.logging import RichHandler

from src.core.config.settings import LoggingSettings
from src.core.logger.logger import get_console, get_logger, setup_logging


@pytest.fixture
def restore_root_logger() -> Generator[None, None, None]:
    """Restore root logger handlers and level after the test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test logging configuration."""

    def test_rich_handler(self, restore_root_logger):
        """Test the Rich handler is installed by default."""
        setup_logging(LoggingSettings())
        root = logging.getLogger()
        assert any(isinstance(h, RichHandler) for h in root.handlers)
        assert root.level == logging.INFO

    def test_plain_handler_and_level_override(self, restore_root_logger):
        """Test plain output and a verbose override."""
        setup_logging(LoggingSettings(use_rich=False), level="DEBUG")
        root = logging.getLogger()
        assert not any(isinstance(h, RichHandler) for h in root.handlers)
        assert root.level == logging.DEBUG

    def test_file_handler(self, restore_root_logger, tmp_path: Path):
        """Test a log file is written."""
        log_file = tmp_path / "logs" / "build.log"
        setup_logging(LoggingSettings(use_rich=False, file=log_file))

        logging.getLogger("cabal.test").info("configure started")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "configure started" in log_file.read_text()


class TestGetLogger:
    """Test logger lookup."""

    def test_cached(self):
        """Test loggers are reused by name."""
        assert get_logger("src.builder.test") is get_logger("src.builder.test")

    def test_console_writes_to_stderr(self):
        """Test the shared console targets stderr."""
        assert get_console().stderr is True
