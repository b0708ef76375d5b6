"""Message sinks receiving build progress and diagnostics."""

from typing import Protocol

from src.core.logger.logger import get_logger
from src.models.diagnostic import Diagnostic, DiagnosticSeverity

logger = get_logger(__name__)


class MessageSink(Protocol):
    """Receiver of build progress and diagnostics.

    Called from the single thread driving the build, once per message,
    in the order messages are resolved.
    """

    def progress(self, message: str) -> None:
        """Announce the start of a build step."""
        ...

    def emit(self, diagnostic: Diagnostic) -> None:
        """Deliver one classified diagnostic."""
        ...


class CollectingSink:
    """Sink that keeps every message in memory."""

    def __init__(self) -> None:
        self.progress_messages: list[str] = []
        self.diagnostics: list[Diagnostic] = []

    def progress(self, message: str) -> None:
        self.progress_messages.append(message)

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.WARNING]


class LoggingSink:
    """Sink that writes messages to the application log."""

    LEVELS = {
        DiagnosticSeverity.INFO: "info",
        DiagnosticSeverity.WARNING: "warning",
        DiagnosticSeverity.ERROR: "error",
    }

    def progress(self, message: str) -> None:
        logger.info(message)

    def emit(self, diagnostic: Diagnostic) -> None:
        log = getattr(logger, self.LEVELS[diagnostic.severity])
        log(diagnostic.to_display())
