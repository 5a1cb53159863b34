"""
Discrepancies - CLI Interface.

A command-line interface for comparing a baseline ZIP archive against a
working directory, previewing text differences and exporting changed files.

Usage Examples:
    # Compare an archive against a working directory
    discrepancies compare backup.zip ./project

    # Show a line diff of one file
    discrepancies diff backup.zip ./project src/main.py

    # Export every added or modified file, then zip the result
    discrepancies export backup.zip ./project ./changes --package

    # Choose the files to export interactively and write a report
    discrepancies export backup.zip ./project ./changes -i --log-file export.log

    # Manage exclusion rules
    discrepancies rules list
    discrepancies rules add "*.bak" --comment "Editor backups"
"""

import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from discrepancies.config import SettingsManager
from discrepancies.errors import DiscrepanciesError
from discrepancies.logging_config import setup_logging
from discrepancies.models import ExclusionRule, RuleKind
from discrepancies.orchestration import CompareOrchestrator
from discrepancies.scanning import ArchiveReader
from discrepancies.ui import CompareTUI

__version__ = "1.0.0"

app = typer.Typer(
    name="discrepancies",
    help="Discrepancies - Compare a ZIP archive against a working directory.",
    add_completion=False,
    no_args_is_help=True,
)

rules_app = typer.Typer(
    help="Manage exclusion rules.",
    no_args_is_help=True,
)
app.add_typer(rules_app, name="rules")

console = Console()

CONFIG_OPTION_HELP = "Settings file (defaults to ~/.discrepancies/config.json)."


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"Discrepancies v{__version__}")
        raise typer.Exit()


def print_error(message: str) -> None:
    CompareTUI(console).display_error(message)


def load_settings(config: Optional[Path]) -> SettingsManager:
    """
    Open the settings file.

    Raises:
        typer.Exit: If the settings file cannot be read or created.
    """
    try:
        return SettingsManager(config)
    except DiscrepanciesError as e:
        print_error(str(e))
        raise typer.Exit(1)


def remember_paths(
    settings: SettingsManager,
    archive: Path,
    workdir: Path,
    output: Optional[Path] = None,
) -> None:
    """Store the paths of a successful run. Failures only produce a warning."""
    try:
        settings.set_last_archive_path(archive.resolve())
        settings.set_last_working_dir(workdir.resolve())
        if output is not None:
            settings.set_last_output_dir(output.resolve())
    except DiscrepanciesError as e:
        console.print(f"[yellow]Warning:[/yellow] Could not save settings: {escape(str(e))}")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Discrepancies - Compare a ZIP archive against a working directory."""
    pass


@app.command()
def compare(
    archive: Path = typer.Argument(..., help="Baseline ZIP archive."),
    workdir: Path = typer.Argument(..., help="Working directory to compare."),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for the report file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """
    Compare an archive against a working directory.

    Lists every file that was added, modified or deleted in the working
    directory relative to the archive. Nothing is modified.
    """
    setup_logging(verbose)
    settings = load_settings(config)

    try:
        orchestrator = CompareOrchestrator(
            archive_path=archive,
            working_dir=workdir,
            rules=settings.get_exclusion_rules(),
            log_file_path=log_file,
            verbose=verbose,
            tui=CompareTUI(console),
        )
        orchestrator.run_compare()

    except KeyboardInterrupt:
        console.print("\n[yellow]Comparison interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except DiscrepanciesError as e:
        print_error(str(e))
        raise typer.Exit(1)

    remember_paths(settings, archive, workdir)


@app.command()
def diff(
    archive: Path = typer.Argument(..., help="Baseline ZIP archive."),
    workdir: Path = typer.Argument(..., help="Working directory to compare."),
    rel_path: str = typer.Argument(..., help="Relative path of the file to preview."),
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """
    Show a line diff of one text file between the archive and the working directory.
    """
    setup_logging()
    settings = load_settings(config)

    try:
        orchestrator = CompareOrchestrator(
            archive_path=archive,
            working_dir=workdir,
            rules=settings.get_exclusion_rules(),
            tui=CompareTUI(console),
        )
        text_diff = orchestrator.preview(rel_path)

    except KeyboardInterrupt:
        console.print("\n[yellow]Preview interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except DiscrepanciesError as e:
        print_error(str(e))
        raise typer.Exit(1)

    orchestrator.tui.display_text_diff(rel_path, text_diff)


@app.command()
def export(
    archive: Path = typer.Argument(..., help="Baseline ZIP archive."),
    workdir: Path = typer.Argument(..., help="Working directory to compare."),
    output: Path = typer.Argument(..., help="Directory the changed files are copied into."),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Choose the files to export.",
    ),
    package: bool = typer.Option(
        False,
        "--package",
        "-p",
        help="Also write the exported files into a ZIP archive next to OUTPUT.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for the report file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """
    Compare, then copy added and modified files into OUTPUT.

    Deleted files are listed but never exported. The relative layout of the
    working directory is preserved under OUTPUT.
    """
    setup_logging(verbose)
    settings = load_settings(config)

    try:
        orchestrator = CompareOrchestrator(
            archive_path=archive,
            working_dir=workdir,
            rules=settings.get_exclusion_rules(),
            log_file_path=log_file,
            verbose=verbose,
            tui=CompareTUI(console),
        )
        result = orchestrator.run_compare()

        if interactive:
            selected = orchestrator.tui.select_items(result.items)
        else:
            selected = result.selected_items()

        if not selected:
            console.print("[yellow]Nothing to export.[/yellow]")
            remember_paths(settings, archive, workdir)
            return

        orchestrator.run_export(result, output, package=package)

    except KeyboardInterrupt:
        console.print("\n[yellow]Export interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except DiscrepanciesError as e:
        print_error(str(e))
        raise typer.Exit(1)

    remember_paths(settings, archive, workdir, output)


@app.command()
def root(
    archive: Path = typer.Argument(..., help="ZIP archive."),
) -> None:
    """Print the root folder name inferred from an archive."""
    setup_logging()

    try:
        with ArchiveReader(archive) as reader:
            name = reader.root_folder()
    except DiscrepanciesError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(escape(name))


@rules_app.command("list")
def list_rules(
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """Show the configured exclusion rules."""
    settings = load_settings(config)
    CompareTUI(console).display_rules(settings.get_exclusion_rules())


@rules_app.command("add")
def add_rule(
    pattern: str = typer.Argument(..., help="Glob or regular expression."),
    regex: bool = typer.Option(False, "--regex", help="Treat PATTERN as a regular expression."),
    directory: bool = typer.Option(
        False,
        "--dir",
        help="Match directory names only (the rule excludes everything below them).",
    ),
    comment: str = typer.Option("", "--comment", help="Description of the rule."),
    disabled: bool = typer.Option(False, "--disabled", help="Store the rule disabled."),
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """Add an exclusion rule."""
    if regex:
        try:
            re.compile(pattern)
        except re.error as e:
            print_error(f"Invalid regular expression {pattern!r}: {e}")
            raise typer.Exit(1)

    settings = load_settings(config)
    rule = ExclusionRule(
        pattern=pattern,
        kind=RuleKind.REGEX if regex else RuleKind.GLOB,
        directory_scoped=directory,
        enabled=not disabled,
        comment=comment,
    )

    try:
        settings.add_exclusion_rule(rule)
    except DiscrepanciesError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(f"[green]Added rule:[/green] {escape(pattern)}")


@rules_app.command("remove")
def remove_rule(
    index: int = typer.Argument(..., help="Index of the rule as shown by 'rules list'."),
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """Remove an exclusion rule by index."""
    settings = load_settings(config)

    try:
        removed = settings.remove_exclusion_rule(index)
    except DiscrepanciesError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not removed:
        print_error(f"Rule index out of range: {index}")
        raise typer.Exit(1)

    console.print(f"[green]Removed rule {index}.[/green]")


@rules_app.command("reset")
def reset_rules(
    config: Optional[Path] = typer.Option(None, "--config", help=CONFIG_OPTION_HELP),
) -> None:
    """Restore the built-in exclusion rules."""
    settings = load_settings(config)

    try:
        settings.reset_exclusion_rules()
    except DiscrepanciesError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print("[green]Exclusion rules reset to defaults.[/green]")


if __name__ == "__main__":
    app()
