"""Unit tests for ComparisonEngine."""

from pathlib import Path
from typing import List, Tuple
from unittest.mock import patch

import pytest

from discrepancies.comparison import ComparisonEngine
from discrepancies.errors import HashError, OperationCancelledError
from discrepancies.matching import ExclusionMatcher
from discrepancies.models import ChangeKind, ExclusionRule
from discrepancies.scanning import ArchiveReader, DirectoryScanner


def run_compare(archive: Path, workdir: Path, engine: ComparisonEngine = None, **kwargs):
    """Scan ``workdir`` and compare it against ``archive``."""
    engine = engine or ComparisonEngine()
    files = DirectoryScanner().scan(workdir).files
    with ArchiveReader(archive) as reader:
        return engine.compare(reader, files, **kwargs)


def kinds(result) -> List[Tuple[str, ChangeKind]]:
    return [(item.relative_path, item.kind) for item in result.items]


class TestClassification:
    """Tests for added / modified / deleted classification."""

    def test_added_and_deleted(self, make_zip, make_tree) -> None:
        """The canonical scenario: one file removed, one file created."""
        archive = make_zip({"root/a.txt": "1", "root/b.txt": "2"})
        workdir = make_tree({"a.txt": "1", "c.txt": "3"})

        result = run_compare(archive, workdir)

        assert kinds(result) == [("b.txt", ChangeKind.DELETED), ("c.txt", ChangeKind.ADDED)]
        assert result.total_files == 2
        assert result.added_count == 1
        assert result.deleted_count == 1
        assert result.modified_count == 0

    def test_modified(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "old"})
        workdir = make_tree({"a.txt": "new"})

        result = run_compare(archive, workdir)

        assert kinds(result) == [("a.txt", ChangeKind.MODIFIED)]
        assert result.items[0].source_path == workdir.resolve() / "a.txt"

    def test_identical_trees_produce_no_items(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/": None, "root/a.txt": "1", "root/sub/b.txt": "2"})
        workdir = make_tree({"a.txt": "1", "sub/b.txt": "2"})

        result = run_compare(archive, workdir)

        assert result.items == []
        assert result.total_files == 0

    def test_same_size_different_content_is_modified(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "abc"})
        workdir = make_tree({"a.txt": "abd"})

        result = run_compare(archive, workdir)

        assert result.modified_count == 1

    def test_empty_archive_marks_everything_added(self, make_zip, make_tree) -> None:
        archive = make_zip({})
        workdir = make_tree({"a.txt": "1", "b/c.txt": "2"})

        result = run_compare(archive, workdir)

        assert result.added_count == 2
        assert all(item.kind is ChangeKind.ADDED for item in result.items)

    def test_empty_working_directory_marks_everything_deleted(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "1", "root/b.txt": "2"})
        workdir = make_tree({})

        result = run_compare(archive, workdir)

        assert kinds(result) == [("a.txt", ChangeKind.DELETED), ("b.txt", ChangeKind.DELETED)]
        assert all(item.source_path is None for item in result.items)

    def test_archive_items_come_before_added_items(self, sample_project) -> None:
        result = run_compare(sample_project["archive"], sample_project["workdir"])

        assert kinds(result) == [
            ("src/main.py", ChangeKind.MODIFIED),
            ("src/old.py", ChangeKind.DELETED),
            ("src/new.py", ChangeKind.ADDED),
        ]

    def test_counts_match_items(self, sample_project) -> None:
        result = run_compare(sample_project["archive"], sample_project["workdir"])

        assert result.total_files == len(result.items)
        assert result.added_count + result.modified_count + result.deleted_count == result.total_files

    def test_items_are_selected_by_default(self, sample_project) -> None:
        result = run_compare(sample_project["archive"], sample_project["workdir"])

        assert all(item.selected for item in result.items)


class TestExclusions:
    """Tests for exclusion rule application."""

    def test_default_rules_exclude_both_sides(self, sample_project) -> None:
        result = run_compare(sample_project["archive"], sample_project["workdir"])

        paths = [item.relative_path for item in result.items]
        assert "bin/app.exe" not in paths
        assert "app.csproj" not in paths

    def test_custom_rules(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "1", "root/cache/x.tmp": "x"})
        workdir = make_tree({"a.txt": "2", "debug.log": "log"})
        engine = ComparisonEngine(matcher=ExclusionMatcher([
            ExclusionRule(pattern="cache", directory_scoped=True),
            ExclusionRule(pattern="*.log"),
        ]))

        result = run_compare(archive, workdir, engine)

        assert kinds(result) == [("a.txt", ChangeKind.MODIFIED)]

    def test_empty_rule_set_compares_everything(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/bin/app.exe": "1"})
        workdir = make_tree({"bin/app.exe": "2"})
        engine = ComparisonEngine(matcher=ExclusionMatcher([]))

        result = run_compare(archive, workdir, engine)

        assert kinds(result) == [("bin/app.exe", ChangeKind.MODIFIED)]


class TestProgress:
    """Tests for progress reporting."""

    def test_progress_messages_and_totals(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "1", "root/b.txt": "2"})
        workdir = make_tree({"a.txt": "1", "c.txt": "3"})
        events = []

        run_compare(archive, workdir, progress=lambda c, t, m: events.append((c, t, m)))

        assert events == [
            (1, 4, "Checking: a.txt"),
            (2, 4, "Checking: b.txt"),
            (3, 4, "Checking: a.txt"),
            (4, 4, "Checking: c.txt"),
        ]

    def test_excluded_paths_emit_no_progress(self, sample_project) -> None:
        events = []

        run_compare(
            sample_project["archive"],
            sample_project["workdir"],
            progress=lambda c, t, m: events.append(m),
        )

        assert not any("bin/app.exe" in message for message in events)
        assert not any("app.csproj" in message for message in events)
        # readme.txt, src/main.py and src/old.py from the archive, then three working files
        assert len(events) == 3 + 3

    def test_failing_progress_sink_does_not_abort(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "1"})
        workdir = make_tree({"b.txt": "2"})

        def broken(current: int, total: int, message: str) -> None:
            raise RuntimeError("display gone")

        result = run_compare(archive, workdir, progress=broken)

        assert result.total_files == 2


class TestFailures:
    """Tests for hash failures and cancellation."""

    def test_unhashable_working_file_is_skipped(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "1", "root/b.txt": "2"})
        workdir = make_tree({"a.txt": "changed", "b.txt": "2"})
        engine = ComparisonEngine()

        original = engine.file_hasher.hash_file

        def flaky(path):
            if Path(path).name == "a.txt":
                return None
            return original(path)

        with patch.object(engine.file_hasher, "hash_file", side_effect=flaky):
            result = run_compare(archive, workdir, engine)

        assert result.items == []
        assert result.skipped_paths == ["a.txt"]

    def test_unhashable_file_raises_when_strict(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "1"})
        workdir = make_tree({"a.txt": "1"})
        engine = ComparisonEngine(skip_unhashable=False)

        with patch.object(engine.file_hasher, "hash_file", return_value=None):
            with pytest.raises(HashError, match="a.txt"):
                run_compare(archive, workdir, engine)

    def test_unreadable_archive_entry_is_skipped(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "1"})
        workdir = make_tree({"a.txt": "2"})

        with patch.object(ArchiveReader, "hash", side_effect=HashError("Bad CRC-32")):
            result = run_compare(archive, workdir)

        assert result.items == []
        assert result.skipped_paths == ["a.txt"]

    def test_cancellation(self, sample_project) -> None:
        with pytest.raises(OperationCancelledError):
            run_compare(sample_project["archive"], sample_project["workdir"], should_cancel=lambda: True)

    def test_cancellation_after_some_paths(self, make_zip, make_tree) -> None:
        archive = make_zip({"root/a.txt": "1", "root/b.txt": "2", "root/c.txt": "3"})
        workdir = make_tree({})
        seen = []

        with pytest.raises(OperationCancelledError):
            run_compare(
                archive,
                workdir,
                progress=lambda c, t, m: seen.append(m),
                should_cancel=lambda: len(seen) >= 2,
            )

        assert seen == ["Checking: a.txt", "Checking: b.txt"]
