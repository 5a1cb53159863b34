"""CompareLogger for writing comparison and export reports.

The report is a plain text file with a header, a COMPARE PHASE section listing
every difference found, an optional EXPORT PHASE section and a SUMMARY.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from discrepancies.models import CompareResult, ExportSummary


class CompareLogger:
    """Writes a structured report of one comparison run.

    Usage:
        with CompareLogger(archive_path=zip_path, working_dir=work_dir) as report:
            report.log_header()
            report.log_compare_phase(result)
            report.log_export_phase(summary)
            report.log_summary(result, summary)

    Attributes:
        SEPARATOR: The separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(
        self,
        log_file_path: Optional[Path] = None,
        archive_path: Optional[Path] = None,
        working_dir: Optional[Path] = None,
    ) -> None:
        """Initialize the CompareLogger.

        Args:
            log_file_path: Optional report path. Defaults to a timestamped
                ``compare_log_<ts>.log`` in the current directory.
            archive_path: Archive being compared (used in the header).
            working_dir: Working directory being compared (used in the header).

        Raises:
            OSError: If the report's parent directory is missing or not writable.
        """
        self._archive_path = archive_path
        self._working_dir = working_dir
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None

        if log_file_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._log_file_path = Path.cwd() / f"compare_log_{timestamp_str}.log"
        else:
            self._log_file_path = Path(log_file_path)

        self._validate_path()

    def _validate_path(self) -> None:
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")
        try:
            probe = parent / f".discrepancies_probe_{id(self)}"
            probe.touch()
            probe.unlink()
        except PermissionError:
            raise OSError(f"Permission denied: cannot write to {parent}")

    def __enter__(self) -> "CompareLogger":
        try:
            self._file_handle = open(self._log_file_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_log_path(self) -> Path:
        return self._log_file_path

    def log_header(self) -> None:
        """Write the title, timestamp and the two compared inputs."""
        self._write_separator()
        self._write_line("Discrepancies - Comparison Report")
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        if self._archive_path is not None:
            self._write_line(f"Archive: {self._archive_path}")
        if self._working_dir is not None:
            self._write_line(f"Working directory: {self._working_dir}")
        self._write_line("")

    def log_compare_phase(self, result: CompareResult) -> None:
        """Write the counts of a comparison followed by one line per difference."""
        self._write_separator()
        self._write_line("COMPARE PHASE")
        self._write_separator()
        self._write_line(f"Differences found: {result.total_files}")
        self._write_line(f"Added: {result.added_count}", indent=2)
        self._write_line(f"Modified: {result.modified_count}", indent=2)
        self._write_line(f"Deleted: {result.deleted_count}", indent=2)
        self._write_line("")

        if result.items:
            self._write_line("Items:")
            for item in result.items:
                self._write_line(f"[{item.kind.value:<8}] {item.relative_path}", indent=2)
            self._write_line("")

        if result.skipped_paths:
            self._write_line("Skipped (unreadable):")
            for path in result.skipped_paths:
                self._write_line(f"- {path}", indent=2)
            self._write_line("")

    def log_export_phase(self, summary: ExportSummary) -> None:
        self._write_separator()
        self._write_line("EXPORT PHASE")
        self._write_separator()
        self._write_line(f"[{self._format_timestamp(datetime.now())}] Export completed")
        self._write_line(f"Output directory: {summary.output_dir}", indent=2)
        self._write_line(f"Files exported: {summary.files_exported}", indent=2)
        if summary.archive_path is not None:
            self._write_line(f"Archive: {summary.archive_path}", indent=2)
        self._write_line("")

    def log_summary(self, result: CompareResult, summary: Optional[ExportSummary] = None) -> None:
        """Write the closing summary section."""
        self._write_separator()
        self._write_line("SUMMARY")
        self._write_separator()
        self._write_line(f"Total differences: {result.total_files:,}")
        self._write_line(f"Files skipped: {len(result.skipped_paths):,}")
        duration = result.duration_seconds
        if summary is not None:
            self._write_line(f"Files exported: {summary.files_exported:,}")
            duration += summary.duration_seconds
        self._write_line(f"Duration: {self._format_duration(duration)}")
        self._write_line("")
        self._write_line(f"Log file: {self._log_file_path}")
        self._write_separator()

    def _format_duration(self, seconds: float) -> str:
        """Format duration as "45s", "5m 23s" or "1h 5m 30s"."""
        total_seconds = int(seconds)

        if total_seconds < 60:
            return f"{total_seconds}s"

        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        secs = total_seconds % 60

        if hours > 0:
            return f"{hours}h {minutes}m {secs}s"
        return f"{minutes}m {secs}s"

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        if self._file_handle is None:
            print(f"Warning: Attempted to write to closed log file: {text}", file=sys.stderr)
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
