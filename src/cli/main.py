"""Main CLI entry point for cabal-builder."""

import json
import sys
from pathlib import Path

import click

from src.builder.classifier import classify_output
from src.builder.driver import CabalBuilder
from src.builder.sink import CollectingSink
from src.cli.display import ConsoleSink, console, show_error, show_success, show_summary
from src.core.config.settings import Settings, get_settings
from src.core.exceptions.errors import ConfigurationError, LineReadError
from src.core.logger.logger import setup_logging
from src.models.build import BuildExitCode


def load_settings(config_path: str | None) -> Settings:
    """Load settings from an explicit YAML file or the default locations."""
    if config_path:
        return Settings.from_yaml(Path(config_path))
    return get_settings()


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False), help="YAML configuration file")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, version: bool, config_path: str | None, verbose: bool) -> None:
    """cabal-builder - Build Haskell modules with cabal and classify diagnostics."""
    if version:
        from src import __version__

        click.echo(f"cabal-builder version {__version__}")
        return

    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        show_error("Configuration Error", str(e))
        sys.exit(2)

    setup_logging(settings.logging, level="DEBUG" if verbose else None)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.argument("modules", nargs=-1, required=True, type=click.Path(exists=True, file_okay=False))
@click.option("--cabal-path", help="Path to the cabal executable")
@click.pass_obj
def build(settings: Settings, modules: tuple[str, ...], cabal_path: str | None) -> None:
    """Configure and build each MODULE directory with cabal.

    Example:
        cabal-builder build ./core ./server
    """
    cabal_settings = settings.cabal
    if cabal_path:
        cabal_settings = cabal_settings.model_copy(update={"path": cabal_path})

    sink = ConsoleSink()
    builder = CabalBuilder(sink, settings=cabal_settings)
    exit_code = builder.build(Path(m) for m in modules)

    show_summary(sink.diagnostics, exit_code)

    if exit_code == BuildExitCode.ABORT:
        sys.exit(1)

    show_success("Build Complete", f"Built {len(modules)} module(s)")


@main.command()
@click.argument("logfile", type=click.Path(exists=True, dir_okay=False))
@click.option("--root", "-r", default=".", type=click.Path(file_okay=False), help="Module root for reported paths")
@click.option("--json", "as_json", is_flag=True, help="Print diagnostics as JSON")
def parse(logfile: str, root: str, as_json: bool) -> None:
    """Classify the diagnostics in a saved cabal build LOGFILE.

    Example:
        cabal-builder parse build.log --root ./core
    """
    sink = CollectingSink()
    try:
        with open(logfile, "rb") as f:
            classify_output(f, sink, Path(root).resolve())
    except LineReadError as e:
        show_error("Read Error", str(e))
        sys.exit(2)

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in sink.diagnostics], indent=2))
    else:
        for diagnostic in sink.diagnostics:
            console.print(diagnostic.to_display(), markup=False, highlight=False, soft_wrap=True)
        show_summary(sink.diagnostics)

    if sink.errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
