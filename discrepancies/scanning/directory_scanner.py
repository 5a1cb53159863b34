"""Working directory scanning utility.

This module provides the DirectoryScanner class, which walks a working
directory and produces a mapping of forward-slash relative paths to absolute
file paths, keyed the same way as the archive listing.

The walk fails fast: the first directory that cannot be listed aborts the
whole scan with a ScanError. There is no partial-result mode.

Example:
    >>> from discrepancies.scanning import DirectoryScanner
    >>> scanner = DirectoryScanner()
    >>> result = scanner.scan(Path("/work/project"))
    >>> for rel_path, abs_path in result.files.items():
    ...     print(rel_path, abs_path)
"""

import logging
import os
from pathlib import Path
from typing import Dict, FrozenSet, Tuple, Union

from discrepancies.errors import DirectoryNotFoundError, ScanError
from discrepancies.models import ScanResult

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Walks a working directory tree and lists its files and directories.

    Directory symlinks are followed. Each directory is identified by its
    (device, inode) pair and is not entered again below itself, so a symlink
    that points back at one of its ancestors cannot cause an infinite walk.
    Aliases of a sibling directory are listed under both names.

    Entries are visited in name order at every level, which keeps the
    enumeration order stable across runs on the same tree.
    """

    def scan(self, root: Union[str, Path]) -> ScanResult:
        """Walk ``root`` and collect every file and directory below it.

        Args:
            root: Working directory to scan.

        Returns:
            ScanResult with relative path keys (forward slashes, relative to
            the resolved root) mapped to absolute paths.

        Raises:
            DirectoryNotFoundError: If ``root`` does not exist or is not a directory.
            ScanError: If any directory in the tree cannot be read.
        """
        root_path = Path(root)
        if not root_path.is_dir():
            raise DirectoryNotFoundError(
                f"Working directory not found: {root_path}", path=str(root_path)
            )

        resolved_root = root_path.resolve()
        result = ScanResult(root=resolved_root)

        def on_error(error: OSError) -> None:
            raise ScanError(
                f"Failed to scan {error.filename or resolved_root}: {error.strerror or error}",
                path=str(error.filename or resolved_root),
            ) from error

        try:
            root_stat = resolved_root.stat()
        except OSError as e:
            raise ScanError(f"Failed to scan {resolved_root}: {e}", path=str(resolved_root)) from e

        # Identities of each walked directory and all of its ancestors.
        ancestry: Dict[str, FrozenSet[Tuple[int, int]]] = {
            str(resolved_root): frozenset({(root_stat.st_dev, root_stat.st_ino)})
        }

        for dirpath, dirnames, filenames in os.walk(resolved_root, onerror=on_error, followlinks=True):
            current = Path(dirpath)
            ancestors = ancestry.pop(dirpath)

            dirnames.sort()
            kept_dirs = []
            for dirname in dirnames:
                dir_path = current / dirname
                try:
                    dir_stat = dir_path.stat()
                except OSError as e:
                    raise ScanError(f"Failed to scan {dir_path}: {e}", path=str(dir_path)) from e

                dir_id = (dir_stat.st_dev, dir_stat.st_ino)
                if dir_id in ancestors:
                    logger.debug(f"Skipping symlink cycle: {dir_path}")
                    continue
                ancestry[os.path.join(dirpath, dirname)] = ancestors | {dir_id}
                kept_dirs.append(dirname)
                result.directories.add(self._relative_key(dir_path, resolved_root))

            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                file_path = current / filename
                result.files[self._relative_key(file_path, resolved_root)] = file_path

        logger.debug(
            f"Scanned {resolved_root}: {len(result.files)} files, "
            f"{len(result.directories)} directories"
        )
        return result

    @staticmethod
    def _relative_key(path: Path, root: Path) -> str:
        return path.relative_to(root).as_posix()
