"""Pull cursor over the output stream of a running build tool process.

Reading blocks until the process writes a line or closes its end of the
pipe, so the consumer never runs ahead of the producer.
"""

from collections import deque
from typing import IO, Final

from src.core.exceptions.errors import LineReadError


class EndOfStream:
    """Marker returned by ``peek`` once the stream is exhausted."""

    _instance: "EndOfStream | None" = None

    def __new__(cls) -> "EndOfStream":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END_OF_STREAM"


END_OF_STREAM: Final = EndOfStream()


class LineSource:
    """Lazy, forward-only sequence of text lines with one line of lookahead.

    ``peek`` and ``has_next`` read at most one line ahead and hold it until
    ``advance`` hands it out, so repeated lookahead never loses data. LF, CRLF
    and a lone CR all end a line and are stripped; an empty line is a
    regular line and only ``END_OF_STREAM`` marks the end.
    """

    def __init__(self, stream: IO[bytes] | IO[str], encoding: str = "utf-8") -> None:
        """Initialize the line source.

        Args:
            stream: Readable binary or text stream, typically ``process.stdout``.
            encoding: Encoding used when the stream yields bytes.
        """
        self._stream = stream
        self._encoding = encoding
        self._lookahead: str | EndOfStream | None = None
        self._lines_read = 0
        self._pending: deque[str] = deque()

    @property
    def lines_read(self) -> int:
        """Number of lines handed out by ``advance``."""
        return self._lines_read

    def peek(self) -> str | EndOfStream:
        """Return the next line without consuming it, or ``END_OF_STREAM``."""
        if self._lookahead is None:
            self._lookahead = self._fetch()
        return self._lookahead

    def has_next(self) -> bool:
        return self.peek() is not END_OF_STREAM

    def advance(self) -> str:
        """Consume and return the next line.

        Raises:
            StopIteration: If the stream is exhausted.
            LineReadError: If reading from the stream fails.
        """
        line = self.peek()
        if line is END_OF_STREAM:
            raise StopIteration
        self._lookahead = None
        self._lines_read += 1
        return line

    def __iter__(self) -> "LineSource":
        return self

    def __next__(self) -> str:
        return self.advance()

    def _fetch(self) -> str | EndOfStream:
        if self._pending:
            return self._pending.popleft()

        try:
            raw = self._stream.readline()
        except (OSError, ValueError) as e:
            raise LineReadError(
                f"Failed to read build output: {e}",
                lines_read=self._lines_read,
            ) from e

        if not raw:
            return END_OF_STREAM

        if isinstance(raw, bytes):
            raw = raw.decode(self._encoding, errors="replace")

        # readline() only stops at "\n"; a lone "\r" ends a line as well
        if raw.endswith("\n"):
            raw = raw[:-1]
        if raw.endswith("\r"):
            raw = raw[:-1]
        first, *rest = raw.split("\r")
        self._pending.extend(rest)
        return first
