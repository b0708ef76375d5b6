"""Classification of cabal and ghc output into structured diagnostics.

Two unrelated grammars share one output stream:

- cabal's own messages, a ``Warning: `` line followed by one line of detail::

    Warning: The package list for 'hackage.haskell.org' does not exist. Run
    'cabal update' to download it.

- ghc messages, a ``file:line:col: kind:`` header followed by an indented
  body that ends at a blank line, a ``... warning generated.`` line, or the
  first line of the next compile step::

    [74 of 92] Compiling Feldspar.Core.UntypedRepresentation ( src/... )
    src/Feldspar/Core/UntypedRepresentation.hs:483:5: Warning:
        Pattern match(es) are overlapped
        In an equation for `typeof': typeof e = ...
    [74 of 92] Compiling Feldspar.Core.UntypedRepresentation ( src/... )

Everything else (progress lines, linker chatter) is dropped.
"""

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO

from src.builder.line_source import LineSource
from src.builder.sink import MessageSink
from src.core.logger.logger import get_logger
from src.models.diagnostic import Diagnostic, DiagnosticOrigin, DiagnosticSeverity

logger = get_logger(__name__)

WARNING_PREFIX = "Warning: "

# file:line:col: kind:rest -- greedy, so the last colon on the line ends "kind"
COMPILER_MESSAGE_PATTERN = re.compile(r"(.*):(\d+):(\d+):\s*(.*):(.*)", re.ASCII)

WARNING_GENERATED_SUFFIX = "warning generated."

# A body line starting with one of these is the first line of the next message.
NEXT_MESSAGE_PREFIXES = ("[", "In-place")

# Matched against the "kind" field; catches "Warning", "warning", "Warnings"...
SEVERITY_HINT = "arn"


@dataclass(frozen=True)
class ToolMessageLine:
    """A ``Warning: `` line reported by cabal itself."""

    text: str


@dataclass(frozen=True)
class CompilerMessageLine:
    """A ``file:line:col: kind:rest`` header reported by ghc."""

    file: str
    line: int
    column: int
    kind: str
    rest: str


@dataclass(frozen=True)
class UnrecognizedLine:
    """A line matching neither grammar."""

    text: str


ClassifiedLine = ToolMessageLine | CompilerMessageLine | UnrecognizedLine


class BodyState(Enum):
    """States of the multi-line body accumulation."""

    SCANNING_BODY = "scanning_body"
    AWAITING_PUSHBACK_REPLAY = "awaiting_pushback_replay"
    DONE = "done"


def classify(line: str) -> ClassifiedLine:
    """Classify a single output line.

    The tool-message prefix is checked first; a line carrying it is never
    tested against the compiler grammar.
    """
    if line.startswith(WARNING_PREFIX):
        return ToolMessageLine(text=line[len(WARNING_PREFIX):])

    match = COMPILER_MESSAGE_PATTERN.search(line)
    if match:
        return CompilerMessageLine(
            file=match.group(1),
            line=int(match.group(2)),
            column=int(match.group(3)),
            kind=match.group(4),
            rest=match.group(5),
        )

    return UnrecognizedLine(text=line)


def resolve_severity(kind: str) -> DiagnosticSeverity:
    """Map a ghc message kind to a severity.

    Anything containing "arn" is a warning, everything else an error. The
    vocabulary of the kind field is open-ended, so no fixed list is used.
    """
    return DiagnosticSeverity.WARNING if SEVERITY_HINT in kind else DiagnosticSeverity.ERROR


class DiagnosticClassifier:
    """Streams diagnostics out of one phase's output as lines arrive.

    Holds at most one line of pushback: a line that ends a ghc body because
    it starts the next message is replayed through ``classify`` before any
    new line is read.
    """

    def __init__(self, sink: MessageSink, content_root: Path | str) -> None:
        """Initialize the classifier.

        Args:
            sink: Receiver of every diagnostic, emitted as soon as it is resolved.
            content_root: Module root that ghc reports file paths relative to.
        """
        self.sink = sink
        self.content_root = str(content_root)

    def process(self, source: LineSource) -> int:
        """Consume ``source`` until it is exhausted.

        Args:
            source: Output of the running phase.

        Returns:
            Number of diagnostics emitted.
        """
        deferred: str | None = None
        emitted = 0

        while deferred is not None or source.has_next():
            if deferred is not None:
                line, deferred = deferred, None
            else:
                line = source.advance()

            parsed = classify(line)
            if isinstance(parsed, ToolMessageLine):
                diagnostic = self._tool_message(parsed, source)
            elif isinstance(parsed, CompilerMessageLine):
                diagnostic, deferred = self._compiler_message(parsed, source)
            else:
                logger.debug(f"Skipping output line: {parsed.text}")
                continue

            self.sink.emit(diagnostic)
            emitted += 1

        return emitted

    def resolve_source_path(self, file: str) -> str:
        """Join a reported file with the content root using host separators."""
        return os.path.join(self.content_root, file.replace("\\", os.sep))

    def _tool_message(self, parsed: ToolMessageLine, source: LineSource) -> Diagnostic:
        text = parsed.text
        if source.has_next():
            text = text + os.linesep + source.advance()
        return Diagnostic.tool_message(DiagnosticSeverity.WARNING, text)

    def _compiler_message(
        self,
        parsed: CompilerMessageLine,
        source: LineSource,
    ) -> tuple[Diagnostic, str | None]:
        body, deferred = self._read_body(parsed.rest, source)
        diagnostic = Diagnostic(
            origin=DiagnosticOrigin.COMPILER_MESSAGE,
            severity=resolve_severity(parsed.kind),
            source="ghc",
            text=body,
            source_file=self.resolve_source_path(parsed.file),
            line=parsed.line,
            column=parsed.column,
        )
        return diagnostic, deferred

    def _read_body(self, first: str, source: LineSource) -> tuple[str, str | None]:
        """Accumulate body lines following a ghc header.

        Returns:
            The trimmed body and the line to replay next, if any.
        """
        parts = [first]
        deferred: str | None = None
        state = BodyState.SCANNING_BODY

        while state is BodyState.SCANNING_BODY:
            if not source.has_next():
                state = BodyState.DONE
                continue

            line = source.advance()
            if line.endswith(WARNING_GENERATED_SUFFIX) or not line.strip():
                state = BodyState.DONE
            elif line.startswith(NEXT_MESSAGE_PREFIXES):
                deferred = line
                state = BodyState.AWAITING_PUSHBACK_REPLAY
            else:
                parts.append(line)

        # the header text is separated from the first body line as well
        return os.linesep.join(parts).strip(), deferred


def classify_output(
    stream: IO[bytes] | IO[str],
    sink: MessageSink,
    content_root: Path | str,
) -> int:
    """Convenience function to classify a whole output stream.

    Args:
        stream: Readable stream of build tool output.
        sink: Receiver of the diagnostics.
        content_root: Module root that ghc reports file paths relative to.

    Returns:
        Number of diagnostics emitted.
    """
    classifier = DiagnosticClassifier(sink, content_root)
    return classifier.process(LineSource(stream))
