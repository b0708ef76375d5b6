"""Unit tests for the CabalBuilder build driver."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from src.builder.driver import CabalBuilder, run_build
from src.core.config.settings import CabalSettings
from src.core.exceptions.errors import ProcessLaunchError
from src.models.build import BuildExitCode
from src.models.diagnostic import DiagnosticSeverity


@pytest.fixture
def modules(temp_dir: Path) -> list[Path]:
    """Create three module roots; the second has no descriptor."""
    roots = []
    for name in ("alpha", "beta", "gamma"):
        root = temp_dir / name
        root.mkdir()
        if name != "beta":
            (root / f"{name}.cabal").write_text(f"name: {name}\n")
        roots.append(root)
    return roots


class RecordingFactory:
    """Launcher factory handing out prepared launchers in order."""

    def __init__(self, launchers):
        self.launchers = list(launchers)
        self.descriptors: list[Path] = []

    def __call__(self, descriptor_file: Path):
        self.descriptors.append(descriptor_file)
        return self.launchers.pop(0)


class TestCabalBuilderSuccess:
    """Test builds that complete."""

    def test_module_without_descriptor_is_skipped(self, sink, modules, fake_launcher):
        """Test modules 1 and 3 are built and module 2 is never touched."""
        first, third = fake_launcher(), fake_launcher()
        factory = RecordingFactory([first, third])
        builder = CabalBuilder(sink, settings=CabalSettings(), launcher_factory=factory)

        assert builder.build(modules) == BuildExitCode.OK

        assert factory.descriptors == [
            modules[0] / "alpha.cabal",
            modules[2] / "gamma.cabal",
        ]
        assert first.calls == ["configure", "build"]
        assert third.calls == ["configure", "build"]
        assert sink.progress_messages == ["cabal configure", "cabal build"] * 2
        assert sink.errors == []

    def test_all_modules_skipped_is_success(self, sink, temp_dir):
        """Test a project with no cabal modules builds successfully."""
        factory = MagicMock()
        builder = CabalBuilder(sink, settings=CabalSettings(), launcher_factory=factory)

        assert builder.build([temp_dir]) == BuildExitCode.OK
        factory.assert_not_called()
        assert sink.diagnostics == []

    def test_file_url_modules(self, sink, modules, fake_launcher):
        """Test content roots given as file:// URLs."""
        factory = RecordingFactory([fake_launcher()])
        builder = CabalBuilder(sink, settings=CabalSettings(), launcher_factory=factory)

        assert builder.build([f"file://{modules[0]}"]) == BuildExitCode.OK
        assert factory.descriptors == [modules[0] / "alpha.cabal"]

    def test_custom_descriptor_locator(self, sink, fake_launcher, temp_dir):
        """Test the descriptor lookup collaborator is used."""
        descriptor = temp_dir / "elsewhere.cabal"
        locator = MagicMock(return_value=descriptor)
        factory = RecordingFactory([fake_launcher()])
        builder = CabalBuilder(
            sink,
            settings=CabalSettings(),
            descriptor_locator=locator,
            launcher_factory=factory,
        )

        builder.build([temp_dir])

        locator.assert_called_once_with(temp_dir)
        assert factory.descriptors == [descriptor]


class TestCabalBuilderAbort:
    """Test builds that abort."""

    def test_configure_failure_aborts_before_next_module(
        self, sink, modules, fake_launcher, fake_process
    ):
        """Test a failed configure stops the build immediately."""
        first = fake_launcher(configure=fake_process("", exit_code=1))
        factory = RecordingFactory([first, fake_launcher()])
        builder = CabalBuilder(sink, settings=CabalSettings(), launcher_factory=factory)

        assert builder.build(modules) == BuildExitCode.ABORT

        assert first.calls == ["configure"]
        assert len(factory.descriptors) == 1
        assert [d.text for d in sink.errors] == ["configure failed."]

    def test_build_failure_aborts(self, sink, modules, fake_launcher, fake_process):
        """Test a failed build stops before the next module."""
        first = fake_launcher(build=fake_process("", exit_code=2))
        factory = RecordingFactory([first, fake_launcher()])
        builder = CabalBuilder(sink, settings=CabalSettings(), launcher_factory=factory)

        assert builder.build(modules) == BuildExitCode.ABORT

        assert first.calls == ["configure", "build"]
        assert len(factory.descriptors) == 1
        assert [d.text for d in sink.errors] == ["build errors."]

    def test_launch_error_reported_once(self, sink, modules):
        """Test a process launch failure becomes one error diagnostic."""
        launcher = MagicMock()
        launcher.configure.side_effect = ProcessLaunchError(
            "Failed to start cabal: not found",
            command=["cabal", "configure"],
        )
        builder = CabalBuilder(
            sink,
            settings=CabalSettings(),
            launcher_factory=lambda descriptor: launcher,
        )

        assert builder.build(modules) == BuildExitCode.ABORT

        assert len(sink.diagnostics) == 1
        assert sink.diagnostics[0].severity == DiagnosticSeverity.ERROR
        assert sink.diagnostics[0].text == "Failed to start cabal: not found"

    def test_os_error_during_lookup_aborts(self, sink, temp_dir):
        """Test filesystem failures are caught at the top level."""
        locator = MagicMock(side_effect=PermissionError("permission denied"))
        builder = CabalBuilder(sink, settings=CabalSettings(), descriptor_locator=locator)

        assert builder.build([temp_dir]) == BuildExitCode.ABORT
        assert [d.text for d in sink.errors] == ["permission denied"]

    def test_interrupt_aborts(self, sink, modules):
        """Test an interruption is converted to an abort result."""
        launcher = MagicMock()
        launcher.configure.side_effect = KeyboardInterrupt()
        builder = CabalBuilder(
            sink,
            settings=CabalSettings(),
            launcher_factory=lambda descriptor: launcher,
        )

        assert builder.build(modules) == BuildExitCode.ABORT
        assert [d.text for d in sink.errors] == ["KeyboardInterrupt"]


class TestCabalBuilderMetadata:
    """Test builder metadata."""

    def test_compilable_extensions(self, sink):
        """Test the Haskell source extensions."""
        builder = CabalBuilder(sink, settings=CabalSettings())
        assert builder.compilable_file_extensions() == ["hs", "lhs"]

    def test_presentable_name(self, sink):
        """Test the display name."""
        assert str(CabalBuilder(sink, settings=CabalSettings())) == "Cabal builder"

    def test_wait_timeout_from_settings(self, sink):
        """Test the phase runner picks up the configured timeout."""
        builder = CabalBuilder(sink, settings=CabalSettings(wait_timeout=30))
        assert builder.phase_runner.wait_timeout == 30

    def test_default_launcher_uses_settings(self, sink, module_root):
        """Test the default launcher is configured from settings."""
        builder = CabalBuilder(sink, settings=CabalSettings(path="/opt/ghc/bin/cabal"))
        launcher = builder.launcher_factory(module_root / "demo.cabal")
        assert launcher.cabal_path == "/opt/ghc/bin/cabal"
        assert launcher.working_dir == module_root


class TestRunBuild:
    """Test the convenience function."""

    @patch("src.builder.driver.CabalBuilder")
    def test_run_build(self, mock_builder_cls, sink, module_root):
        """Test run_build delegates to CabalBuilder."""
        mock_builder_cls.return_value.build.return_value = BuildExitCode.OK
        settings = CabalSettings()

        assert run_build([module_root], sink, settings=settings) == BuildExitCode.OK

        mock_builder_cls.assert_called_once_with(sink, settings=settings)
        mock_builder_cls.return_value.build.assert_called_once_with([module_root])
