"""Pytest configuration and shared fixtures."""

import io
import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from src.builder.line_source import LineSource
from src.builder.sink import CollectingSink


class FakeProcess:
    """Stand-in for a finished build tool process."""

    def __init__(self, output: str = "", exit_code: int = 0) -> None:
        self.stdout = io.BytesIO(output.encode("utf-8"))
        self.exit_code = exit_code
        self.killed = False
        self.wait_timeouts: list[float | None] = []

    def wait(self, timeout: float | None = None) -> int:
        self.wait_timeouts.append(timeout)
        return self.exit_code

    def kill(self) -> None:
        self.killed = True


class FakeLauncher:
    """Launcher returning prepared processes and recording phase calls."""

    def __init__(
        self,
        configure: FakeProcess | None = None,
        build: FakeProcess | None = None,
    ) -> None:
        self.configure_process = configure or FakeProcess()
        self.build_process = build or FakeProcess()
        self.calls: list[str] = []

    def configure(self) -> FakeProcess:
        self.calls.append("configure")
        return self.configure_process

    def build(self) -> FakeProcess:
        self.calls.append("build")
        return self.build_process


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sink() -> CollectingSink:
    """Create a sink that records every message."""
    return CollectingSink()


@pytest.fixture
def make_source() -> Callable[..., LineSource]:
    """Create a LineSource over the given lines.

    Returns:
        Factory taking lines and returning a LineSource over their bytes.
    """

    def _make(*lines: str) -> LineSource:
        return LineSource(io.BytesIO("".join(f"{line}\n" for line in lines).encode("utf-8")))

    return _make


@pytest.fixture
def fake_process() -> type[FakeProcess]:
    """Factory for finished build tool processes."""
    return FakeProcess


@pytest.fixture
def fake_launcher() -> type[FakeLauncher]:
    """Factory for launchers returning prepared processes."""
    return FakeLauncher


@pytest.fixture
def module_root(temp_dir: Path) -> Path:
    """Create a module directory containing a cabal descriptor.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to the module root.
    """
    root = temp_dir / "demo"
    (root / "src").mkdir(parents=True)
    (root / "demo.cabal").write_text("name: demo\nversion: 0.1.0.0\n")
    (root / "src" / "Main.hs").write_text("main = putStrLn \"hi\"\n")
    return root
