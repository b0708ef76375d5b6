"""Custom exception definitions for cabal-builder."""

from typing import Any


class CabalBuilderError(Exception):
    """Base exception for all cabal-builder errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(CabalBuilderError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)


class ProcessLaunchError(CabalBuilderError):
    """Exception raised when the build tool process cannot be started."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        cwd: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize process launch error.

        Args:
            message: Error message.
            command: Command line that failed to start.
            cwd: Working directory of the attempted launch.
            details: Additional error details.
        """
        details = details or {}
        if command:
            details["command"] = " ".join(command)
        if cwd:
            details["cwd"] = cwd
        super().__init__(message, details)


class LineReadError(CabalBuilderError):
    """Exception raised when reading a line of process output fails."""

    def __init__(
        self,
        message: str,
        lines_read: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize line read error.

        Args:
            message: Error message.
            lines_read: Number of lines successfully read before the failure.
            details: Additional error details.
        """
        details = details or {}
        if lines_read is not None:
            details["lines_read"] = lines_read
        super().__init__(message, details)


class PhaseTimeoutError(CabalBuilderError):
    """Exception raised when a build phase does not exit within its timeout."""

    def __init__(
        self,
        message: str,
        phase: str | None = None,
        timeout: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize phase timeout error.

        Args:
            message: Error message.
            phase: Name of the phase that timed out.
            timeout: Timeout in seconds that was exceeded.
            details: Additional error details.
        """
        details = details or {}
        if phase:
            details["phase"] = phase
        if timeout is not None:
            details["timeout"] = timeout
        super().__init__(message, details)
