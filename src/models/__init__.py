"""Data models module."""

from src.models.build import BuildExitCode, BuildPhase, ModuleJob, PhaseResult
from src.models.diagnostic import (
    UNKNOWN_POSITION,
    Diagnostic,
    DiagnosticOrigin,
    DiagnosticSeverity,
)

__all__ = [
    "BuildExitCode",
    "BuildPhase",
    "Diagnostic",
    "DiagnosticOrigin",
    "DiagnosticSeverity",
    "ModuleJob",
    "PhaseResult",
    "UNKNOWN_POSITION",
]
