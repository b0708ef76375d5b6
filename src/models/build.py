"""Build orchestration data models."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class BuildPhase(str, Enum):
    """External process invocations that make up a module build."""

    CONFIGURE = "configure"
    BUILD = "build"


class BuildExitCode(str, Enum):
    """Overall outcome of a build driver run."""

    OK = "ok"
    ABORT = "abort"


@dataclass
class PhaseResult:
    """Result of running one build phase.

    Attributes:
        phase: The phase that ran.
        exit_code: Exit code of the build tool process.
        duration_seconds: Wall time from launch to exit.
        diagnostic_count: Diagnostics classified from the phase output.
    """

    phase: BuildPhase
    exit_code: int
    duration_seconds: float = 0.0
    diagnostic_count: int = 0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "phase": self.phase.value,
            "exit_code": self.exit_code,
            "succeeded": self.succeeded,
            "duration_seconds": self.duration_seconds,
            "diagnostic_count": self.diagnostic_count,
        }


@dataclass
class ModuleJob:
    """A module to build and the descriptor file found for it.

    A missing descriptor means the module is skipped, not failed.
    """

    module_path: Path
    descriptor_file: Path | None = None

    @property
    def skipped(self) -> bool:
        return self.descriptor_file is None
