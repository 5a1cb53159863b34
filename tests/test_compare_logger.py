"""Unit tests for CompareLogger."""

import os
import re
from pathlib import Path

import pytest

from discrepancies.models import ChangeKind, CompareResult, DiffItem, ExportSummary
from discrepancies.orchestration import CompareLogger


@pytest.fixture
def compare_result() -> CompareResult:
    items = [
        DiffItem("src/main.py", ChangeKind.MODIFIED, source_path=Path("/w/src/main.py")),
        DiffItem("src/old.py", ChangeKind.DELETED),
        DiffItem("src/new.py", ChangeKind.ADDED, source_path=Path("/w/src/new.py")),
    ]
    return CompareResult(
        items=items,
        total_files=3,
        added_count=1,
        modified_count=1,
        deleted_count=1,
        skipped_paths=["locked.db"],
        duration_seconds=75.0,
    )


class TestCompareLoggerBasic:
    """Test basic CompareLogger functionality."""

    def test_auto_generated_filename(self, temp_dir: Path) -> None:
        original_cwd = os.getcwd()
        try:
            os.chdir(temp_dir)
            with CompareLogger() as report:
                log_path = report.get_log_path()
                assert log_path.parent == temp_dir
                assert re.match(r"compare_log_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.log", log_path.name)
        finally:
            os.chdir(original_cwd)

    def test_custom_path_and_header(self, temp_dir: Path) -> None:
        log_path = temp_dir / "report.log"

        with CompareLogger(log_path, archive_path=Path("/b/p.zip"), working_dir=Path("/w")) as report:
            report.log_header()

        content = log_path.read_text()
        assert "Discrepancies - Comparison Report" in content
        assert "Archive: /b/p.zip" in content
        assert "Working directory: /w" in content
        assert re.search(r"Timestamp: \d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", content)

    def test_missing_parent_directory(self, temp_dir: Path) -> None:
        with pytest.raises(OSError, match="Parent directory does not exist"):
            CompareLogger(temp_dir / "missing" / "report.log")

    def test_parent_is_a_file(self, temp_dir: Path) -> None:
        blocker = temp_dir / "file.txt"
        blocker.write_text("x")

        with pytest.raises(OSError, match="not a directory"):
            CompareLogger(blocker / "report.log")

    def test_write_after_close_warns(self, temp_dir: Path, capsys) -> None:
        report = CompareLogger(temp_dir / "report.log")
        with report:
            pass

        report.log_header()

        assert "closed log file" in capsys.readouterr().err


class TestCompareLoggerSections:
    """Test the report sections."""

    def test_compare_phase(self, temp_dir: Path, compare_result: CompareResult) -> None:
        log_path = temp_dir / "report.log"

        with CompareLogger(log_path) as report:
            report.log_compare_phase(compare_result)

        content = log_path.read_text()
        assert "COMPARE PHASE" in content
        assert "Differences found: 3" in content
        assert "Added: 1" in content
        assert "[modified] src/main.py" in content
        assert "[deleted ] src/old.py" in content
        assert "[added   ] src/new.py" in content
        assert "- locked.db" in content

    def test_export_phase(self, temp_dir: Path) -> None:
        log_path = temp_dir / "report.log"
        summary = ExportSummary(
            files_exported=2,
            output_dir=Path("/tmp/out"),
            archive_path=Path("/tmp/p_diff_20240101.zip"),
        )

        with CompareLogger(log_path) as report:
            report.log_export_phase(summary)

        content = log_path.read_text()
        assert "EXPORT PHASE" in content
        assert "Files exported: 2" in content
        assert "Archive: /tmp/p_diff_20240101.zip" in content

    def test_summary_without_export(self, temp_dir: Path, compare_result: CompareResult) -> None:
        log_path = temp_dir / "report.log"

        with CompareLogger(log_path) as report:
            report.log_summary(compare_result)

        content = log_path.read_text()
        assert "SUMMARY" in content
        assert "Total differences: 3" in content
        assert "Files skipped: 1" in content
        assert "Files exported" not in content
        assert "Duration: 1m 15s" in content
        assert f"Log file: {log_path}" in content

    def test_summary_with_export(self, temp_dir: Path, compare_result: CompareResult) -> None:
        log_path = temp_dir / "report.log"
        summary = ExportSummary(files_exported=2, output_dir=Path("/tmp/out"), duration_seconds=3700.0)

        with CompareLogger(log_path) as report:
            report.log_summary(compare_result, summary)

        content = log_path.read_text()
        assert "Files exported: 2" in content
        assert "Duration: 1h 2m 55s" in content

    @pytest.mark.parametrize("seconds, expected", [(0, "0s"), (59.9, "59s"), (60, "1m 0s"), (3661, "1h 1m 1s")])
    def test_format_duration(self, temp_dir: Path, seconds: float, expected: str) -> None:
        report = CompareLogger(temp_dir / "report.log")

        assert report._format_duration(seconds) == expected
