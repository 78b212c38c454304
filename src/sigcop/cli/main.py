"""
SigCop CLI - Main entry point.

Provides commands for checking Ruby sources for Sorbet signature problems and
autocorrecting them.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sigcop.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigurationError,
    generate_default_config,
    load_config_from_yaml,
)
from sigcop.config.models import SigCopConfig
from sigcop.cops.registry import CopRegistry
from sigcop.runner import FileReport, Runner, discover_files

app = typer.Typer(
    name="sigcop",
    help="Sorbet signature checks with autocorrection for Ruby sources",
    no_args_is_help=True,
)

console = Console()


# =============================================================================
# Helper Functions
# =============================================================================


def load_config(config: Optional[str]) -> SigCopConfig:
    """Load the given config file, or the default one when present."""
    known = CopRegistry.list_cops()
    if config:
        return load_config_from_yaml(Path(config), known_cops=known)
    default_path = Path(DEFAULT_CONFIG_FILE)
    if default_path.exists():
        return load_config_from_yaml(default_path, known_cops=known)
    return SigCopConfig()


def print_reports(reports: list[FileReport], autocorrect: bool) -> None:
    """Print an offense table and a summary line."""
    table = Table(title="Offenses", show_lines=False)
    table.add_column("File", style="cyan")
    table.add_column("Line:Col", justify="right")
    table.add_column("Cop", style="magenta")
    table.add_column("Message")
    table.add_column("Status", style="green")

    offense_count = 0
    corrected_count = 0
    for report in reports:
        if report.error:
            table.add_row(str(report.path), "-", "Lint/Syntax", escape(report.error), "[red]skipped[/red]")
            continue
        # remaining offenses carry positions in the corrected source
        remaining = {(o.cop_name, o.message) for o in report.remaining}
        for offense in report.offenses:
            offense_count += 1
            if not offense.correctable:
                status = ""
            elif (offense.cop_name, offense.message) in remaining:
                status = "correctable"
            elif autocorrect and report.corrected:
                status = "corrected"
                corrected_count += 1
            else:
                status = ""
            table.add_row(
                str(report.path),
                f"{offense.line}:{offense.column + 1}",
                offense.cop_name,
                offense.message,
                status,
            )

    if offense_count or any(report.error for report in reports):
        console.print(table)

    summary = f"{len(reports)} file(s) inspected, {offense_count} offense(s) detected"
    if autocorrect:
        summary += f", {corrected_count} corrected"
    style = "green" if offense_count == corrected_count else "yellow"
    console.print(f"[{style}]{summary}[/{style}]")


# =============================================================================
# Commands
# =============================================================================


@app.command()
def check(
    paths: List[str] = typer.Argument(..., help="Ruby files or directories to inspect"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to configuration YAML file"),
    autocorrect: bool = typer.Option(False, "--autocorrect", "-a", help="Apply corrections in place"),
    only: Optional[List[str]] = typer.Option(None, "--only", help="Run only the named cop (repeatable)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Inspect Ruby sources for missing or detached Sorbet signatures.

    Examples:
        sigcop check app/ lib/
        sigcop check -a --only Sorbet/MethodsShouldHaveSignatures app/models/user.rb
    """
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(name)s: %(message)s")

    try:
        sigcop_config = load_config(config)
        runner = Runner(sigcop_config, only=only or None)
    except (ConfigurationError, ValueError) as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2)

    files = discover_files([Path(p) for p in paths], sigcop_config.all_cops)
    reports = runner.run_files(files, autocorrect=autocorrect)
    print_reports(reports, autocorrect)

    if any(report.error or report.remaining for report in reports):
        raise typer.Exit(code=1)


@app.command()
def init(
    output: str = typer.Option(DEFAULT_CONFIG_FILE, "--output", "-o", help="Output path for config file"),
):
    """
    Generate a default configuration file.
    """
    output_path = Path(output)

    if output_path.exists():
        if not typer.confirm(f"{output} already exists. Overwrite?"):
            console.print("[yellow]Cancelled.[/yellow]")
            raise typer.Abort()

    generate_default_config(output_path, CopRegistry.list_cops())
    console.print(f"[green]✓[/green] Generated configuration file: {output}")


@app.command()
def cops():
    """List the available cops."""
    table = Table(title="Cops")
    table.add_column("Name", style="magenta")
    table.add_column("Description")
    for name in CopRegistry.list_cops():
        table.add_row(name, CopRegistry.get_cop(name).description())
    console.print(table)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
