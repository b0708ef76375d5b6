"""Cabal build orchestration and output classification.

This module provides:
- A pull cursor over build tool output (LineSource)
- Classification of cabal and ghc messages into diagnostics
- Phase execution (configure, build) and the multi-module build driver
"""

from src.builder.cabal import BuildProcess, BuildToolLauncher, CabalInterface
from src.builder.classifier import (
    CompilerMessageLine,
    DiagnosticClassifier,
    ToolMessageLine,
    UnrecognizedLine,
    classify,
    classify_output,
    resolve_severity,
)
from src.builder.descriptor import find_descriptor, is_compilable
from src.builder.driver import CabalBuilder, run_build
from src.builder.line_source import END_OF_STREAM, LineSource
from src.builder.phase import PhaseRunner
from src.builder.sink import CollectingSink, LoggingSink, MessageSink

__all__ = [
    "BuildProcess",
    "BuildToolLauncher",
    "CabalBuilder",
    "CabalInterface",
    "CollectingSink",
    "CompilerMessageLine",
    "DiagnosticClassifier",
    "END_OF_STREAM",
    "LineSource",
    "LoggingSink",
    "MessageSink",
    "PhaseRunner",
    "ToolMessageLine",
    "UnrecognizedLine",
    "classify",
    "classify_output",
    "find_descriptor",
    "is_compilable",
    "resolve_severity",
    "run_build",
]
