"""Read access to the baseline ZIP archive.

This module provides the ArchiveReader class, which opens a ZIP snapshot,
infers its wrapping root folder and exposes a listing keyed by relative path
so that it can be compared against a working directory scan.

Root folder inference takes the first segment of the *first* entry name and
strips ``<root>/`` from every entry that carries that prefix. Entries without
the prefix keep their name unchanged, so an archive with several top-level
items is not normalized and colliding keys keep the last entry.

Example:
    >>> from discrepancies.scanning import ArchiveReader
    >>> with ArchiveReader("snapshot.zip") as reader:
    ...     print(reader.root_folder())
    ...     for rel_path, entry in reader.list_files().items():
    ...         print(rel_path, entry.size, reader.hash(rel_path))
"""

import logging
import zipfile
from pathlib import Path
from typing import Dict, Optional, Set, Union

from discrepancies.errors import (
    ArchiveEntryNotFoundError,
    ArchiveNotFoundError,
    ArchiveReadError,
    CorruptArchiveError,
    HashError,
)
from discrepancies.models import ArchiveEntry

from .file_hasher import FileHasher

logger = logging.getLogger(__name__)

# Exceptions zipfile raises while decompressing a single entry
_ENTRY_READ_ERRORS = (OSError, zipfile.BadZipFile, RuntimeError, NotImplementedError, EOFError)


class ArchiveReader:
    """Normalized, read-only view of a ZIP archive.

    The file listing is built on first use and cached for the lifetime of the
    reader. Use the reader as a context manager so the underlying handle is
    released on every exit path.

    Attributes:
        path: Path of the archive file.
    """

    def __init__(self, path: Union[str, Path], file_hasher: Optional[FileHasher] = None) -> None:
        """Open the archive.

        Args:
            path: Path to the ZIP file.
            file_hasher: Optional FileHasher used for entry digests.

        Raises:
            ArchiveNotFoundError: If the path does not exist or is not a file.
            CorruptArchiveError: If the file cannot be parsed as a ZIP archive.
        """
        self.path = Path(path)
        self._file_hasher = file_hasher if file_hasher is not None else FileHasher()
        self._files: Optional[Dict[str, ArchiveEntry]] = None
        self._infos: Dict[str, zipfile.ZipInfo] = {}

        if not self.path.is_file():
            raise ArchiveNotFoundError(f"Archive not found: {self.path}", path=str(self.path))

        try:
            self._zip: Optional[zipfile.ZipFile] = zipfile.ZipFile(self.path, "r")
        except (zipfile.BadZipFile, OSError) as e:
            raise CorruptArchiveError(
                f"Failed to open archive {self.path}: {e}", path=str(self.path)
            ) from e

        logger.debug(f"Opened archive {self.path} ({len(self._zip.infolist())} entries)")

    @classmethod
    def open(cls, path: Union[str, Path], file_hasher: Optional[FileHasher] = None) -> "ArchiveReader":
        """Open an archive; equivalent to calling the constructor."""
        return cls(path, file_hasher=file_hasher)

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the archive handle. Safe to call more than once."""
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    @property
    def closed(self) -> bool:
        """Whether the archive handle has been released."""
        return self._zip is None

    def root_folder(self) -> str:
        """Return the inferred wrapping folder name.

        Returns:
            First path segment of the first entry, or an empty string for an
            empty archive.
        """
        infos = self._archive().infolist()
        if not infos:
            return ""

        first_name = self._normalize(infos[0].filename)
        if first_name.startswith("/"):
            first_name = first_name[1:]
        return first_name.split("/")[0]

    def list_files(self) -> Dict[str, ArchiveEntry]:
        """List file entries keyed by relative path.

        Directory entries are excluded. The listing is computed once.

        Returns:
            Dictionary mapping relative paths to ArchiveEntry instances, in
            archive order.
        """
        if self._files is None:
            files: Dict[str, ArchiveEntry] = {}
            infos: Dict[str, zipfile.ZipInfo] = {}
            root = self.root_folder()

            for info in self._archive().infolist():
                if info.is_dir():
                    continue

                rel_path = self._strip_root(self._normalize(info.filename), root)
                if not rel_path:
                    continue

                files[rel_path] = ArchiveEntry(
                    relative_path=rel_path,
                    archive_name=info.filename,
                    size=info.file_size,
                )
                infos[rel_path] = info

            self._files = files
            self._infos = infos

        return self._files

    def list_dirs(self) -> Set[str]:
        """List directory entries as relative paths, excluding the root folder itself."""
        dirs: Set[str] = set()
        root = self.root_folder()

        for info in self._archive().infolist():
            if not info.is_dir():
                continue

            rel_path = self._normalize(info.filename).rstrip("/")
            if rel_path == root:
                continue
            rel_path = self._strip_root(rel_path, root)
            if rel_path:
                dirs.add(rel_path)

        return dirs

    def get_entry(self, rel_path: str) -> ArchiveEntry:
        """Look up a file entry.

        Raises:
            ArchiveEntryNotFoundError: If the path is not in the listing.
        """
        entry = self.list_files().get(rel_path)
        if entry is None:
            raise ArchiveEntryNotFoundError(
                f"File not found in archive: {rel_path}", relative_path=rel_path
            )
        return entry

    def size(self, rel_path: str) -> int:
        """Return the uncompressed size of an entry."""
        return self.get_entry(rel_path).size

    def read_content(self, rel_path: str) -> bytes:
        """Read the decompressed content of an entry.

        Raises:
            ArchiveEntryNotFoundError: If the path is not in the listing.
            ArchiveReadError: If decompression or reading fails.
        """
        self.get_entry(rel_path)
        try:
            with self._archive().open(self._infos[rel_path]) as f:
                return f.read()
        except _ENTRY_READ_ERRORS as e:
            raise ArchiveReadError(
                f"Failed to read {rel_path} from archive {self.path}: {e}",
                relative_path=rel_path,
            ) from e

    def hash(self, rel_path: str) -> str:
        """Compute the MD5 digest of an entry's decompressed content.

        Raises:
            ArchiveEntryNotFoundError: If the path is not in the listing.
            HashError: If decompression or reading fails.
        """
        self.get_entry(rel_path)
        try:
            with self._archive().open(self._infos[rel_path]) as f:
                return self._file_hasher.hash_stream(f)
        except _ENTRY_READ_ERRORS as e:
            raise HashError(
                f"Failed to hash {rel_path} in archive {self.path}: {e}",
                relative_path=rel_path,
            ) from e

    def _archive(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise ValueError(f"Archive is closed: {self.path}")
        return self._zip

    @staticmethod
    def _normalize(name: str) -> str:
        return name.replace("\\", "/")

    @staticmethod
    def _strip_root(rel_path: str, root: str) -> str:
        prefix = root + "/"
        if root and rel_path.startswith(prefix):
            return rel_path[len(prefix):]
        return rel_path
