"""Tests for Exporter and the archive packaging helpers."""

import os
import zipfile
from datetime import date
from pathlib import Path

import pytest

from discrepancies.errors import ArchiveCreationError, ExportError
from discrepancies.models import ChangeKind, DiffItem
from discrepancies.operations import (
    Exporter,
    create_archive,
    generate_archive_name,
    package_directory,
)


@pytest.fixture
def working_files(make_tree) -> Path:
    return make_tree({
        "a.txt": "added",
        "src/b.py": "modified",
        "src/deep/c.md": "nested",
    })


def item(workdir: Path, rel_path: str, kind: ChangeKind = ChangeKind.ADDED, selected: bool = True) -> DiffItem:
    source = None if kind is ChangeKind.DELETED else workdir / rel_path
    return DiffItem(relative_path=rel_path, kind=kind, selected=selected, source_path=source)


class TestExport:
    """Tests for Exporter.export()."""

    def test_copies_selected_files_preserving_layout(self, working_files: Path, temp_dir: Path) -> None:
        output = temp_dir / "out"
        items = [
            item(working_files, "a.txt"),
            item(working_files, "src/b.py", ChangeKind.MODIFIED),
            item(working_files, "src/deep/c.md"),
        ]

        count = Exporter().export(items, output)

        assert count == 3
        assert (output / "a.txt").read_text() == "added"
        assert (output / "src" / "b.py").read_text() == "modified"
        assert (output / "src" / "deep" / "c.md").read_text() == "nested"

    def test_skips_deleted_and_unselected(self, working_files: Path, temp_dir: Path) -> None:
        output = temp_dir / "out"
        items = [
            item(working_files, "a.txt"),
            item(working_files, "src/b.py", selected=False),
            item(working_files, "gone.txt", ChangeKind.DELETED),
        ]

        count = Exporter().export(items, output)

        assert count == 1
        assert (output / "a.txt").exists()
        assert not (output / "src").exists()
        assert not (output / "gone.txt").exists()

    def test_empty_selection_creates_output_dir(self, temp_dir: Path) -> None:
        output = temp_dir / "nested" / "out"

        assert Exporter().export([], output) == 0
        assert output.is_dir()

    def test_preserves_modification_time(self, working_files: Path, temp_dir: Path) -> None:
        source = working_files / "a.txt"
        os.utime(source, (1_000_000_000, 1_000_000_000))
        output = temp_dir / "out"

        Exporter().export([item(working_files, "a.txt")], output)

        assert int((output / "a.txt").stat().st_mtime) == 1_000_000_000

    def test_progress(self, working_files: Path, temp_dir: Path) -> None:
        events = []
        items = [item(working_files, "a.txt"), item(working_files, "src/b.py")]

        Exporter().export(items, temp_dir / "out", progress=lambda c, t, m: events.append((c, t, m)))

        assert events == [(1, 2, "Exporting: a.txt"), (2, 2, "Exporting: src/b.py")]

    def test_stops_at_first_failure(self, working_files: Path, temp_dir: Path) -> None:
        output = temp_dir / "out"
        items = [
            item(working_files, "a.txt"),
            item(working_files, "missing.txt"),
            item(working_files, "src/b.py"),
        ]

        with pytest.raises(ExportError, match="missing.txt") as exc_info:
            Exporter().export(items, output)

        assert isinstance(exc_info.value.__cause__, OSError)
        assert (output / "a.txt").exists()
        assert not (output / "src" / "b.py").exists()

    def test_output_dir_cannot_be_created(self, temp_dir: Path) -> None:
        blocker = temp_dir / "file.txt"
        blocker.write_text("x")

        with pytest.raises(ExportError, match="output directory"):
            Exporter().export([], blocker / "out")

    def test_item_without_source(self, temp_dir: Path) -> None:
        broken = DiffItem(relative_path="a.txt", kind=ChangeKind.ADDED, source_path=None)

        with pytest.raises(ExportError):
            Exporter().export([broken], temp_dir / "out")


class TestArchiveHelpers:
    """Tests for create_archive, generate_archive_name and package_directory."""

    def test_generate_archive_name(self) -> None:
        assert generate_archive_name("project", date(2024, 1, 31)) == "project_diff_20240131.zip"

    def test_generate_archive_name_without_base(self) -> None:
        assert generate_archive_name("", date(2024, 1, 31)) == "export_diff_20240131.zip"

    def test_create_archive(self, make_tree, temp_dir: Path) -> None:
        source = make_tree({"a.txt": "1", "src/b.py": "2", "empty": None}, name="export")
        target = temp_dir / "out.zip"

        assert create_archive(source, target) == target

        with zipfile.ZipFile(target) as archive:
            names = archive.namelist()
            assert archive.read("src/b.py") == b"2"
            assert archive.getinfo("a.txt").compress_type == zipfile.ZIP_DEFLATED
        assert set(names) == {"a.txt", "empty/", "src/", "src/b.py"}

    def test_archive_inside_source_is_not_added_to_itself(self, make_tree) -> None:
        source = make_tree({"a.txt": "1"}, name="export")
        target = source / "self.zip"

        create_archive(source, target)

        with zipfile.ZipFile(target) as archive:
            assert archive.namelist() == ["a.txt"]

    def test_create_archive_failure(self, make_tree, temp_dir: Path) -> None:
        source = make_tree({"a.txt": "1"}, name="export")

        with pytest.raises(ArchiveCreationError):
            create_archive(source, temp_dir / "missing-dir" / "out.zip")

    def test_package_directory_writes_next_to_source(self, make_tree, temp_dir: Path) -> None:
        source = make_tree({"a.txt": "1"}, name="export")

        archive_path = package_directory(source, "project", date(2024, 5, 6))

        assert archive_path == temp_dir / "project_diff_20240506.zip"
        assert archive_path.is_file()

    def test_package_round_trips_through_reader(self, make_tree) -> None:
        from discrepancies.scanning import ArchiveReader

        source = make_tree({"src/b.py": "2"}, name="export")

        archive_path = package_directory(source, "project")

        with ArchiveReader(archive_path) as reader:
            # The first entry is the "src/" directory, which becomes the root folder
            assert reader.root_folder() == "src"
            assert set(reader.list_files()) == {"b.py"}
