"""Build driver running cabal configure and build over project modules."""

from collections.abc import Callable, Iterable
from pathlib import Path

from src.builder.cabal import BuildToolLauncher, CabalInterface
from src.builder.descriptor import (
    COMPILABLE_FILE_EXTENSIONS,
    content_root_path,
    find_descriptor,
)
from src.builder.phase import PhaseRunner
from src.builder.sink import MessageSink
from src.core.config.settings import CabalSettings, get_settings
from src.core.exceptions.errors import CabalBuilderError
from src.core.logger.logger import get_logger
from src.models.build import BuildExitCode, BuildPhase, ModuleJob
from src.models.diagnostic import Diagnostic, DiagnosticSeverity

logger = get_logger(__name__)

DescriptorLocator = Callable[[Path], Path | None]
LauncherFactory = Callable[[Path], BuildToolLauncher]


class CabalBuilder:
    """Builds modules one at a time with cabal.

    For every module the descriptor file is located first; modules without
    one are skipped so that projects can mix build systems. The first failed
    phase aborts the whole build.
    """

    presentable_name = "Cabal builder"

    def __init__(
        self,
        sink: MessageSink,
        settings: CabalSettings | None = None,
        descriptor_locator: DescriptorLocator = find_descriptor,
        launcher_factory: LauncherFactory | None = None,
    ):
        """Initialize the builder.

        Args:
            sink: Receiver of progress messages and diagnostics.
            settings: Cabal settings. Uses global settings if not provided.
            descriptor_locator: Finds the descriptor file of a content root.
            launcher_factory: Creates the phase launcher for a descriptor file.
        """
        self.sink = sink
        self.settings = settings or get_settings().cabal
        self.descriptor_locator = descriptor_locator
        self.launcher_factory = launcher_factory or self._cabal_launcher
        self.phase_runner = PhaseRunner(sink, wait_timeout=self.settings.wait_timeout)

    def build(self, modules: Iterable[Path | str]) -> BuildExitCode:
        """Configure and build each module in order.

        Args:
            modules: Module content roots (paths or ``file://`` URLs).

        Returns:
            OK when every module was built or skipped, ABORT otherwise.
        """
        try:
            for module in modules:
                job = self.resolve(module)
                if job.skipped:
                    logger.debug(f"No descriptor file in {job.module_path}, skipping")
                    continue

                if not self._build_module(job):
                    return BuildExitCode.ABORT

            return BuildExitCode.OK
        except (CabalBuilderError, OSError, KeyboardInterrupt) as e:
            logger.error(f"Build aborted: {e}", exc_info=True)
            message = e.message if isinstance(e, CabalBuilderError) else str(e)
            self.sink.emit(
                Diagnostic.tool_message(DiagnosticSeverity.ERROR, message or type(e).__name__)
            )
            return BuildExitCode.ABORT

    def resolve(self, module: Path | str) -> ModuleJob:
        """Pair a module with its descriptor file, if it has one."""
        module_path = content_root_path(module)
        return ModuleJob(
            module_path=module_path,
            descriptor_file=self.descriptor_locator(module_path),
        )

    def compilable_file_extensions(self) -> list[str]:
        return list(COMPILABLE_FILE_EXTENSIONS)

    def __str__(self) -> str:
        return self.presentable_name

    def _build_module(self, job: ModuleJob) -> bool:
        logger.info(f"Building {job.module_path} with {job.descriptor_file.name}")
        launcher = self.launcher_factory(job.descriptor_file)

        for phase in (BuildPhase.CONFIGURE, BuildPhase.BUILD):
            result = self.phase_runner.run(phase, launcher, job.module_path)
            if not result.succeeded:
                return False

        return True

    def _cabal_launcher(self, descriptor_file: Path) -> CabalInterface:
        return CabalInterface.from_settings(self.settings, descriptor_file)


def run_build(
    modules: Iterable[Path | str],
    sink: MessageSink,
    settings: CabalSettings | None = None,
) -> BuildExitCode:
    """Convenience function to build modules with cabal.

    Args:
        modules: Module content roots (paths or ``file://`` URLs).
        sink: Receiver of progress messages and diagnostics.
        settings: Cabal settings. Uses global settings if not provided.

    Returns:
        BuildExitCode of the run.
    """
    builder = CabalBuilder(sink, settings=settings)
    return builder.build(modules)
