"""
Export operations for Discrepancies.

This module contains the Exporter class, which copies selected diff items
into an output directory, and helpers for repackaging an exported directory
as a ZIP archive.
"""

import logging
import os
import shutil
import zipfile
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from discrepancies.errors import ArchiveCreationError, ExportError
from discrepancies.models import DiffItem

# Configure module logger
logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class Exporter:
    """
    Copies the source files of selected diff items into an output tree.

    Only items that are selected and not deleted are exported. The batch runs
    sequentially and stops at the first failed copy; files copied before the
    failure stay in place.
    """

    def export(
        self,
        items: Iterable[DiffItem],
        output_dir: Union[str, Path],
        progress: Optional[ProgressCallback] = None,
    ) -> int:
        """
        Copy every exportable item to ``output_dir/<relative path>``.

        Parameters:
            items (Iterable[DiffItem]): Diff items, typically CompareResult.items.
            output_dir (Path): Target directory, created with parents if missing.
            progress (callable): Optional callback receiving (current, total, message),
                invoked once per item before its copy starts.

        Returns:
            int: Number of files copied.

        Raises:
            ExportError: If the output directory cannot be created or a copy fails.
        """
        output_path = Path(output_dir)
        try:
            output_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(
                f"Failed to create output directory {output_path}: {e}", path=str(output_path)
            ) from e

        selected = [item for item in items if item.is_exportable]
        total = len(selected)

        for index, item in enumerate(selected, start=1):
            self._emit_progress(progress, index, total, f"Exporting: {item.relative_path}")

            dest_file = output_path / item.relative_path
            try:
                self._copy_file(item.source_path, dest_file)
            except (OSError, TypeError) as e:
                logger.error(f"Export aborted at {item.relative_path}: {e}")
                raise ExportError(
                    f"Failed to copy file {item.relative_path}: {e}",
                    relative_path=item.relative_path,
                ) from e

            logger.debug(f"Exported: {item.relative_path}")

        logger.info(f"Exported {total} file(s) to {output_path}")
        return total

    def _copy_file(self, source: Optional[Path], dest: Path) -> None:
        """
        Copy a file to the destination, creating parent directories as needed and preserving file metadata.
        """
        if source is None:
            raise TypeError("item has no source file")

        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)

    @staticmethod
    def _emit_progress(
        progress: Optional[ProgressCallback], current: int, total: int, message: str
    ) -> None:
        if progress is None:
            return
        try:
            progress(current, total, message)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")


def create_archive(source_dir: Union[str, Path], archive_path: Union[str, Path]) -> Path:
    """
    Write ``source_dir`` into a deflated ZIP archive.

    Entry names are forward-slash paths relative to ``source_dir``; directories
    are stored as entries with a trailing slash.

    Raises:
        ArchiveCreationError: If the tree cannot be read or the archive cannot be written.
    """
    source_path = Path(source_dir)
    target_path = Path(archive_path)

    try:
        with zipfile.ZipFile(target_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for dirpath, dirnames, filenames in os.walk(source_path):
                dirnames.sort()
                current = Path(dirpath)

                for dirname in dirnames:
                    rel_dir = (current / dirname).relative_to(source_path).as_posix()
                    archive.writestr(zipfile.ZipInfo(rel_dir + "/"), b"")

                for filename in sorted(filenames):
                    file_path = current / filename
                    if file_path.resolve() == target_path.resolve():
                        continue
                    archive.write(file_path, file_path.relative_to(source_path).as_posix())

    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveCreationError(
            f"Failed to create archive {target_path}: {e}", path=str(target_path)
        ) from e

    logger.info(f"Created archive {target_path}")
    return target_path


def generate_archive_name(base_name: str, today: Optional[date] = None) -> str:
    """Build the file name of a repackaged archive, e.g. ``project_diff_20240131.zip``."""
    stamp = (today or date.today()).strftime("%Y%m%d")
    return f"{base_name or 'export'}_diff_{stamp}.zip"


def package_directory(source_dir: Union[str, Path], base_name: str, today: Optional[date] = None) -> Path:
    """
    Archive an exported directory next to it (in its parent directory).

    Returns:
        Path: Location of the created archive.
    """
    source_path = Path(source_dir)
    archive_path = source_path.parent / generate_archive_name(base_name, today)
    return create_archive(source_path, archive_path)
