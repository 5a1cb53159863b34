"""Scanning package for Discrepancies.

This package provides the two enumerations a comparison is built from, plus
the hashing utility both sides share:

- ArchiveReader: Opens the baseline ZIP archive, strips its root folder and
  lists entries by relative path, with on-demand content and digests.
- DirectoryScanner: Walks the working directory into a relative path mapping.
- FileHasher: Computes MD5 digests of files and streams with caching support.

Example:
    >>> from discrepancies.scanning import ArchiveReader, DirectoryScanner
    >>> from pathlib import Path
    >>>
    >>> scan = DirectoryScanner().scan(Path("/work/project"))
    >>> with ArchiveReader(Path("/backups/project.zip")) as reader:
    ...     only_in_archive = set(reader.list_files()) - set(scan.files)
"""

from .archive_reader import ArchiveReader
from .directory_scanner import DirectoryScanner
from .file_hasher import FileHasher

__all__ = ["ArchiveReader", "DirectoryScanner", "FileHasher"]
