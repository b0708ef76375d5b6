"""Display components for CLI using Rich."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.models.build import BuildExitCode
from src.models.diagnostic import Diagnostic, DiagnosticSeverity

console = Console()

SEVERITY_STYLES = {
    DiagnosticSeverity.INFO: "blue",
    DiagnosticSeverity.WARNING: "yellow",
    DiagnosticSeverity.ERROR: "bold red",
}


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="green",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_diagnostic(diagnostic: Diagnostic) -> None:
    """Print one diagnostic as soon as it is classified."""
    style = SEVERITY_STYLES[diagnostic.severity]
    if diagnostic.has_location:
        location = f"{diagnostic.source_file}:{diagnostic.line}:{diagnostic.column}"
    else:
        location = diagnostic.source
    console.print(
        f"[cyan]{escape(location)}[/]: [{style}]{diagnostic.severity.value}[/]: {escape(diagnostic.text)}",
        soft_wrap=True,
    )


def show_summary(diagnostics: list[Diagnostic], exit_code: BuildExitCode | None = None) -> None:
    """Display diagnostic counts per severity and the build outcome."""
    console.print()

    table = Table(title="[bold]Build Summary[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    if exit_code is not None:
        status = "[bold green]OK[/]" if exit_code == BuildExitCode.OK else "[bold red]ABORTED[/]"
        table.add_row("Status", status)

    for severity in DiagnosticSeverity:
        count = sum(1 for d in diagnostics if d.severity == severity)
        table.add_row(severity.value.capitalize(), f"[{SEVERITY_STYLES[severity]}]{count}[/]")

    console.print(table)


class ConsoleSink:
    """Sink that renders messages on the console and keeps the diagnostics."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def progress(self, message: str) -> None:
        console.rule(f"[bold cyan]{escape(message)}[/]")

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        show_diagnostic(diagnostic)
