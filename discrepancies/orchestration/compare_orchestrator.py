"""CompareOrchestrator for coordinating comparison, preview and export workflows.

This module provides the CompareOrchestrator class that ties the archive
reader, directory scanner, comparison engine, text differ, exporter, TUI and
report logger together for the command-line interface.

Example:
    from discrepancies.orchestration import CompareOrchestrator
    from pathlib import Path

    orchestrator = CompareOrchestrator(
        archive_path=Path("/backups/project.zip"),
        working_dir=Path("/work/project"),
    )

    result = orchestrator.run_compare()
    summary = orchestrator.run_export(result, Path("/tmp/changes"), package=True)
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

from discrepancies.comparison import ComparisonEngine, TextDiffer
from discrepancies.config import default_exclusion_rules
from discrepancies.errors import ArchiveNotFoundError, DirectoryNotFoundError
from discrepancies.matching import ExclusionMatcher
from discrepancies.models import CompareResult, ExclusionRule, ExportSummary, TextDiff
from discrepancies.operations import Exporter, package_directory
from discrepancies.orchestration.compare_logger import CompareLogger
from discrepancies.scanning import ArchiveReader, DirectoryScanner, FileHasher
from discrepancies.ui import CompareTUI

logger = logging.getLogger(__name__)


class CompareOrchestrator:
    """Orchestrates comparison, preview and export workflows.

    Every workflow opens its own ArchiveReader and closes it before
    returning, so no archive handle outlives a call.

    Attributes:
        archive_path: Resolved path of the baseline archive.
        working_dir: Resolved path of the working directory.
        rules: Exclusion rules applied to both sides.
        log_file_path: Optional report path.
        write_log: Whether a report is written.
        verbose: Whether to display additional details.
        tui: CompareTUI used for all output.
    """

    def __init__(
        self,
        archive_path: Path,
        working_dir: Path,
        rules: Optional[List[ExclusionRule]] = None,
        log_file_path: Optional[Path] = None,
        verbose: bool = False,
        tui: Optional[CompareTUI] = None,
        write_log: bool = False,
    ) -> None:
        """Initialize the CompareOrchestrator.

        Args:
            archive_path: Baseline ZIP archive.
            working_dir: Working directory compared against the archive.
            rules: Exclusion rules. Defaults to the built-in rule set.
            log_file_path: Report path. Giving one implies ``write_log``.
            verbose: Display skipped files and the report location.
            tui: Optional CompareTUI instance.
            write_log: Write a report with a timestamped default name.

        Raises:
            ArchiveNotFoundError: If the archive is not an existing file.
            DirectoryNotFoundError: If the working directory does not exist.
        """
        archive_path = Path(archive_path)
        working_dir = Path(working_dir)
        if not archive_path.is_file():
            raise ArchiveNotFoundError(f"Archive not found: {archive_path}", path=str(archive_path))
        if not working_dir.is_dir():
            raise DirectoryNotFoundError(
                f"Working directory not found: {working_dir}", path=str(working_dir)
            )

        self.archive_path = archive_path.resolve()
        self.working_dir = working_dir.resolve()
        self.rules = list(rules) if rules is not None else default_exclusion_rules()
        self.log_file_path = log_file_path
        self.write_log = write_log or log_file_path is not None
        self.verbose = verbose
        self.tui = tui or CompareTUI()

        self._hasher = FileHasher()
        self._scanner = DirectoryScanner()
        self._engine = ComparisonEngine(
            matcher=ExclusionMatcher(self.rules),
            file_hasher=self._hasher,
        )
        self._differ = TextDiffer()
        self._exporter = Exporter()

    def run_compare(self) -> CompareResult:
        """Compare the archive against the working directory and display the result.

        Returns:
            The CompareResult.

        Raises:
            CorruptArchiveError: If the archive cannot be opened.
            ScanError: If the working directory cannot be walked.
        """
        scan = self._scanner.scan(self.working_dir)
        logger.debug(f"Scanned {len(scan.files)} file(s) under {self.working_dir}")

        with ArchiveReader(self.archive_path, file_hasher=self._hasher) as reader:
            progress, callback = self.tui.create_progress_callback("Comparing")
            with progress:
                result = self._engine.compare(reader, scan.files, progress=callback)

        self.tui.display_compare_summary(
            result,
            archive_path=str(self.archive_path),
            working_dir=str(self.working_dir),
        )

        if self.verbose and result.skipped_paths:
            self.tui.console.print("[yellow]Skipped files:[/yellow]")
            for path in result.skipped_paths:
                self.tui.console.print(f"  [dim]- {path}[/dim]")

        self._write_report(result)
        return result

    def preview(self, rel_path: str) -> TextDiff:
        """Build a text diff of one file between the archive and the working directory.

        Raises:
            UnsupportedPreviewError: If the file is not a text file.
            ArchiveEntryNotFoundError: If the file is not in the archive.
            PreviewReadError: If the working copy cannot be read.
        """
        with ArchiveReader(self.archive_path, file_hasher=self._hasher) as reader:
            return self._differ.preview(reader, rel_path, self.working_dir / rel_path)

    def root_folder_name(self) -> str:
        """Return the root folder name inferred from the archive."""
        with ArchiveReader(self.archive_path) as reader:
            return reader.root_folder()

    def run_export(
        self,
        result: CompareResult,
        output_dir: Path,
        package: bool = False,
        base_name: Optional[str] = None,
    ) -> ExportSummary:
        """Copy the selected items of ``result`` into ``output_dir``.

        Args:
            result: CompareResult whose items carry the selection flags.
            output_dir: Export target, created if missing.
            package: Also write the exported tree into a ZIP archive next to it.
            base_name: Archive base name. Defaults to the archive's root
                folder, then to the archive file name.

        Returns:
            ExportSummary describing the export.

        Raises:
            ExportError: If the output directory cannot be created or a copy fails.
            ArchiveCreationError: If packaging fails.
        """
        start_time = time.time()
        output_dir = Path(output_dir)

        progress, callback = self.tui.create_progress_callback("Exporting")
        with progress:
            exported = self._exporter.export(result.items, output_dir, progress=callback)

        archive_path = None
        if package:
            name = base_name or self.root_folder_name() or self.archive_path.stem
            archive_path = package_directory(output_dir, name)

        summary = ExportSummary(
            files_exported=exported,
            output_dir=output_dir,
            archive_path=archive_path,
            duration_seconds=time.time() - start_time,
        )

        self.tui.display_export_summary(summary)
        self._write_report(result, summary)
        return summary

    def _write_report(self, result: CompareResult, summary: Optional[ExportSummary] = None) -> None:
        """Write the report when one was requested. Failures only produce a warning."""
        if not self.write_log:
            return

        try:
            with CompareLogger(
                log_file_path=self.log_file_path,
                archive_path=self.archive_path,
                working_dir=self.working_dir,
            ) as report:
                report.log_header()
                report.log_compare_phase(result)
                if summary is not None:
                    report.log_export_phase(summary)
                report.log_summary(result, summary)
                self.log_file_path = report.get_log_path()
        except OSError as e:
            logger.warning(f"Could not create log file: {e}")
            return

        if self.verbose:
            self.tui.console.print(f"[dim]Log file: {self.log_file_path}[/dim]")
