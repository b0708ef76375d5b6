"""Diagnostic data models produced from build tool output."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

UNKNOWN_POSITION = -1


class DiagnosticOrigin(str, Enum):
    """Which grammar a diagnostic was recognized by."""

    TOOL_MESSAGE = "tool_message"  # cabal's own "Warning: ..." lines
    COMPILER_MESSAGE = "compiler_message"  # ghc "file:line:col: kind:" blocks


class DiagnosticSeverity(str, Enum):
    """Severity of a diagnostic."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """A classified message derived from build tool output.

    Tool messages never carry a location. Compiler messages always carry
    the source file, line and column they were reported against.
    """

    origin: DiagnosticOrigin = Field(..., description="Grammar that produced this diagnostic")
    severity: DiagnosticSeverity = Field(..., description="Resolved severity")
    text: str = Field(..., description="Trimmed message text, may span several lines")
    source: str = Field(default="cabal", description="Tool that reported the message")
    source_file: str | None = Field(default=None, description="Absolute path of the reported file")
    line: int = Field(default=UNKNOWN_POSITION, ge=UNKNOWN_POSITION, description="1-based line or -1")
    column: int = Field(default=UNKNOWN_POSITION, ge=UNKNOWN_POSITION, description="1-based column or -1")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_location(self) -> "Diagnostic":
        """Enforce the location invariant for each origin."""
        if self.origin == DiagnosticOrigin.TOOL_MESSAGE:
            if self.source_file is not None or self.line != UNKNOWN_POSITION or self.column != UNKNOWN_POSITION:
                raise ValueError("tool messages cannot carry a source location")
        elif self.source_file is None or self.line == UNKNOWN_POSITION or self.column == UNKNOWN_POSITION:
            raise ValueError("compiler messages require source_file, line and column")
        return self

    @classmethod
    def tool_message(cls, severity: DiagnosticSeverity, text: str) -> "Diagnostic":
        """Create a location-less diagnostic reported by cabal itself."""
        return cls(origin=DiagnosticOrigin.TOOL_MESSAGE, severity=severity, text=text)

    @property
    def has_location(self) -> bool:
        """Whether an editor can navigate to this diagnostic."""
        return self.source_file is not None

    @property
    def is_error(self) -> bool:
        return self.severity == DiagnosticSeverity.ERROR

    def to_display(self) -> str:
        """Format as ``file:line:col: severity: text`` (or ``source: severity: text``)."""
        if self.has_location:
            prefix = f"{self.source_file}:{self.line}:{self.column}"
        else:
            prefix = self.source
        return f"{prefix}: {self.severity.value}: {self.text}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "origin": self.origin.value,
            "severity": self.severity.value,
            "source": self.source,
            "text": self.text,
            "source_file": self.source_file,
            "line": self.line,
            "column": self.column,
        }
