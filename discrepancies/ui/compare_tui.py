"""Terminal User Interface for Discrepancies.

This module provides the CompareTUI class, a Rich-based interface for
displaying comparison results, text diff previews and export summaries, and
for interactively choosing which differences to export.

Example:
    from discrepancies.ui import CompareTUI

    tui = CompareTUI()
    tui.display_compare_summary(result)
    selected = tui.select_items(result.items)
    tui.display_export_summary(summary)
"""

from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from discrepancies.models import (
    ChangeKind,
    CompareResult,
    DiffItem,
    DiffLineKind,
    ExclusionRule,
    ExportSummary,
    TextDiff,
)

_KIND_STYLES = {
    ChangeKind.ADDED: "green",
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.DELETED: "red",
}

_LINE_PREFIXES = {
    DiffLineKind.EQUAL: ("  ", "dim"),
    DiffLineKind.INSERT: ("+ ", "green"),
    DiffLineKind.DELETE: ("- ", "red"),
}


class CompareTUI:
    """Rich-based Terminal User Interface for comparison and export.

    Args:
        console: Optional Rich Console instance for output. Pass a Console
            writing to a StringIO to capture output in tests.

    Attributes:
        console: The Rich Console instance used for all output.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def display_compare_summary(
        self,
        result: CompareResult,
        archive_path: Optional[str] = None,
        working_dir: Optional[str] = None,
    ) -> None:
        """Display the counts of a comparison followed by the item table.

        Args:
            result: CompareResult to display.
            archive_path: Optional archive path shown in the header.
            working_dir: Optional working directory shown in the header.
        """
        header_lines = []
        if archive_path:
            header_lines.append(f"Archive: {escape(str(archive_path))}")
        if working_dir:
            header_lines.append(f"Working directory: {escape(str(working_dir))}")
        header_lines.extend([
            f"Differences: {result.total_files:,}",
            f"[green]Added: {result.added_count:,}[/green]",
            f"[yellow]Modified: {result.modified_count:,}[/yellow]",
            f"[red]Deleted: {result.deleted_count:,}[/red]",
            f"Duration: {self._format_duration(result.duration_seconds)}",
        ])
        self.console.print(Panel("\n".join(header_lines), title="Comparison Results", border_style="blue"))

        if result.skipped_paths:
            self.console.print(
                f"[yellow]{len(result.skipped_paths)} file(s) could not be read and were skipped.[/yellow]"
            )

        if not result.items:
            self.console.print("[green]No differences found.[/green]")
            return

        self.display_items(result.items)

    def display_items(self, items: Sequence[DiffItem]) -> None:
        """Display diff items in a numbered table."""
        table = Table(title="Differences")
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Status", justify="center")
        table.add_column("Path", style="white")
        table.add_column("Export", justify="center")

        for idx, item in enumerate(items, start=1):
            style = _KIND_STYLES[item.kind]
            status = f"[{style}]{item.kind.value}[/{style}]"
            export_mark = "[green]yes[/green]" if item.is_exportable else "[dim]no[/dim]"
            table.add_row(str(idx), status, escape(self._truncate_name(item.relative_path, 80)), export_mark)

        self.console.print(table)

    def display_text_diff(self, rel_path: str, text_diff: TextDiff) -> None:
        """Display a line-level diff preview with +/- prefixes."""
        body = Text()
        for index, line in enumerate(text_diff.lines):
            prefix, style = _LINE_PREFIXES[line.kind]
            if index:
                body.append("\n")
            body.append(prefix + line.content, style=style)

        if not text_diff.lines:
            body.append("(empty)", style="dim")

        self.console.print(Panel(body, title=f"Diff: {escape(rel_path)}", border_style="blue"))

    def display_export_summary(self, summary: ExportSummary) -> None:
        """Display final statistics after an export."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Files exported", f"{summary.files_exported:,}")
        table.add_row("Output directory", escape(str(summary.output_dir or "")))
        if summary.archive_path is not None:
            table.add_row("Archive", escape(str(summary.archive_path)))
        table.add_row("Duration", self._format_duration(summary.duration_seconds))

        self.console.print(Panel(table, title="Export Summary", border_style="green"))

    def display_rules(self, rules: Sequence[ExclusionRule]) -> None:
        """Display an exclusion rule set."""
        table = Table(title="Exclusion Rules")
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Pattern", style="white")
        table.add_column("Type")
        table.add_column("Directory", justify="center")
        table.add_column("Enabled", justify="center")
        table.add_column("Comment", style="dim")

        for idx, rule in enumerate(rules):
            table.add_row(
                str(idx),
                escape(rule.pattern),
                rule.kind.value,
                "yes" if rule.directory_scoped else "no",
                "[green]yes[/green]" if rule.enabled else "[red]no[/red]",
                escape(rule.comment),
            )

        self.console.print(table)

    def select_items(self, items: Sequence[DiffItem]) -> List[DiffItem]:
        """Interactively choose which items to export.

        Displays the item table and updates each item's ``selected`` flag
        from the answer. Deleted items are never exportable regardless of
        their flag.

        Args:
            items: Diff items to choose from.

        Returns:
            The exportable items after selection.
        """
        if not items:
            return []

        self.display_items(items)
        count = len(items)

        while True:
            answer = Prompt.ask(
                "Select items to export (e.g., '1 3 5', 'all' or 'none')",
                default="all",
            ).strip().lower()

            if answer == "all":
                chosen = set(range(count))
                break
            if answer == "none":
                chosen = set()
                break

            indices = set()
            for part in answer.replace(",", " ").split():
                try:
                    idx = int(part)
                    if idx < 1 or idx > count:
                        raise ValueError(f"Index {idx} out of range")
                    indices.add(idx - 1)
                except ValueError:
                    self.console.print(
                        f"[red]Invalid selection '{escape(part)}'. Please enter numbers "
                        f"(1-{count}), 'all' or 'none'.[/red]"
                    )
                    break
            else:
                chosen = indices
                break

        for idx, item in enumerate(items):
            item.selected = idx in chosen

        return [item for item in items if item.is_exportable]

    def create_progress_callback(
        self, description: str
    ) -> tuple[Progress, Callable[[int, int, str], None]]:
        """Create a progress bar and a (current, total, message) callback for it.

        The caller must use the returned Progress as a context manager around
        the operation that invokes the callback.

        Example:
            progress, callback = tui.create_progress_callback("Comparing")
            with progress:
                engine.compare(reader, files, progress=callback)
        """
        progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        )
        task_id = progress.add_task(description, total=None)

        def callback(current: int, total: int, message: str) -> None:
            progress.update(
                task_id,
                completed=current,
                total=total,
                description=f"{description}: {escape(self._truncate_name(message, 60))}",
            )

        return progress, callback

    def display_error(self, message: str) -> None:
        """Display a single fatal error."""
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    def _format_duration(self, seconds: float) -> str:
        """Convert seconds to a short human-readable duration (e.g. "1m 5s", "0.4s")."""
        if seconds < 0:
            seconds = 0
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"

    def _truncate_name(self, name: str, max_length: int = 60) -> str:
        """Truncate long paths with a leading ellipsis, keeping the file name visible."""
        if len(name) > max_length:
            return "..." + name[-(max_length - 3):]
        return name
