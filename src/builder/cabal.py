"""Launching cabal configure/build processes for a descriptor file."""

import os
import subprocess
from pathlib import Path
from typing import IO, Protocol

from src.core.config.settings import CabalSettings
from src.core.exceptions.errors import ProcessLaunchError
from src.core.logger.logger import get_logger

logger = get_logger(__name__)


class BuildProcess(Protocol):
    """A running build tool process."""

    stdout: IO[bytes] | None

    def wait(self, timeout: float | None = None) -> int: ...

    def kill(self) -> None: ...


class BuildToolLauncher(Protocol):
    """Starts the phases of a build tool for one descriptor file."""

    def configure(self) -> BuildProcess: ...

    def build(self) -> BuildProcess: ...


class CabalInterface:
    """Runs ``cabal configure`` and ``cabal build`` next to a descriptor file.

    stderr is merged into stdout so that both grammars arrive on the one
    stream the classifier reads.
    """

    def __init__(
        self,
        cabal_path: str,
        descriptor_file: Path,
        configure_args: list[str] | None = None,
        build_args: list[str] | None = None,
        env_vars: dict[str, str] | None = None,
    ):
        """Initialize the launcher.

        Args:
            cabal_path: Path to the cabal executable (or its name on PATH).
            descriptor_file: The module's ``.cabal`` file.
            configure_args: Extra arguments for the configure phase.
            build_args: Extra arguments for the build phase.
            env_vars: Environment variables added to the process environment.
        """
        self.cabal_path = cabal_path
        self.descriptor_file = Path(descriptor_file)
        self.configure_args = configure_args or []
        self.build_args = build_args or []
        self.env_vars = env_vars or {}

    @classmethod
    def from_settings(cls, settings: CabalSettings, descriptor_file: Path) -> "CabalInterface":
        """Create a launcher from the configured cabal settings."""
        return cls(
            cabal_path=settings.path,
            descriptor_file=descriptor_file,
            configure_args=list(settings.configure_args),
            build_args=list(settings.build_args),
            env_vars=dict(settings.env_vars),
        )

    @property
    def working_dir(self) -> Path:
        return self.descriptor_file.parent

    def command(self, subcommand: str) -> list[str]:
        """Build the command line for a cabal subcommand."""
        extra = self.configure_args if subcommand == "configure" else self.build_args
        return [self.cabal_path, subcommand, *extra]

    def configure(self) -> subprocess.Popen:
        return self._start(self.command("configure"))

    def build(self) -> subprocess.Popen:
        return self._start(self.command("build"))

    def _start(self, cmd: list[str]) -> subprocess.Popen:
        env = os.environ.copy()
        if self.env_vars:
            env.update(self.env_vars)

        logger.info(f"Running {' '.join(cmd)} in {self.working_dir}")

        try:
            return subprocess.Popen(
                cmd,
                cwd=self.working_dir,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            raise ProcessLaunchError(
                f"Failed to start {cmd[0]}: {e}",
                command=cmd,
                cwd=str(self.working_dir),
            ) from e
