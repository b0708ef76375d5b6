"""Running a single build phase and classifying its output."""

import subprocess
import time
from pathlib import Path

from src.builder.cabal import BuildProcess, BuildToolLauncher
from src.builder.classifier import DiagnosticClassifier
from src.builder.line_source import LineSource
from src.builder.sink import MessageSink
from src.core.exceptions.errors import LineReadError, PhaseTimeoutError
from src.core.logger.logger import get_logger
from src.models.build import BuildPhase, PhaseResult
from src.models.diagnostic import Diagnostic, DiagnosticSeverity

logger = get_logger(__name__)

PROGRESS_MESSAGES = {
    BuildPhase.CONFIGURE: "cabal configure",
    BuildPhase.BUILD: "cabal build",
}

FAILURE_MESSAGES = {
    BuildPhase.CONFIGURE: "configure failed.",
    BuildPhase.BUILD: "build errors.",
}


class PhaseRunner:
    """Runs one cabal phase to completion.

    Output is classified while the process is still running; the wait for
    exit only starts once the output stream has closed.
    """

    def __init__(self, sink: MessageSink, wait_timeout: int | None = None):
        """Initialize the phase runner.

        Args:
            sink: Receiver of progress messages and diagnostics.
            wait_timeout: Seconds to wait for exit after the output closes.
                None waits forever, so a hung build tool blocks the build.
        """
        self.sink = sink
        self.wait_timeout = wait_timeout

    def run(
        self,
        phase: BuildPhase,
        launcher: BuildToolLauncher,
        content_root: Path | str,
    ) -> PhaseResult:
        """Run a phase and report its diagnostics.

        Args:
            phase: The phase to run.
            launcher: Launcher bound to the module's descriptor file.
            content_root: Module root used to resolve reported file paths.

        Returns:
            PhaseResult with the process exit code.

        Raises:
            ProcessLaunchError: If the process cannot be started.
            LineReadError: If reading the process output fails.
            PhaseTimeoutError: If the process outlives ``wait_timeout``.
        """
        self.sink.progress(PROGRESS_MESSAGES[phase])
        start_time = time.time()

        process = launcher.configure() if phase is BuildPhase.CONFIGURE else launcher.build()

        exit_code: int | None = None
        try:
            if process.stdout is None:
                raise LineReadError(f"cabal {phase.value} has no output stream")
            classifier = DiagnosticClassifier(self.sink, content_root)
            diagnostic_count = classifier.process(LineSource(process.stdout))
            exit_code = self._wait(phase, process)
        finally:
            # kill the child unless its exit status was reaped
            if exit_code is None:
                self._terminate(process)
            if process.stdout is not None:
                process.stdout.close()

        result = PhaseResult(
            phase=phase,
            exit_code=exit_code,
            duration_seconds=time.time() - start_time,
            diagnostic_count=diagnostic_count,
        )
        logger.debug(f"Phase finished: {result.to_dict()}")

        if not result.succeeded:
            logger.warning(f"cabal {phase.value} exited with code {exit_code}")
            self.sink.emit(
                Diagnostic.tool_message(DiagnosticSeverity.ERROR, FAILURE_MESSAGES[phase])
            )

        return result

    def _wait(self, phase: BuildPhase, process: BuildProcess) -> int:
        try:
            return process.wait(timeout=self.wait_timeout)
        except subprocess.TimeoutExpired as e:
            raise PhaseTimeoutError(
                f"cabal {phase.value} did not exit within {self.wait_timeout} seconds",
                phase=phase.value,
                timeout=self.wait_timeout,
            ) from e

    def _terminate(self, process: BuildProcess) -> None:
        process.kill()
        process.wait()
