"""Error definitions for Discrepancies.

Structural failures (archive cannot be opened, working directory cannot be
walked, export copy failed) are raised as one of these exceptions with a
human-readable message naming the input at fault. The underlying ``OSError``
is chained as ``__cause__``.
"""

from typing import Any, Dict


class DiscrepanciesError(Exception):
    """Base exception for all Discrepancies errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class NotFoundError(DiscrepanciesError):
    """An archive, directory or archive entry does not exist."""
    pass


class ArchiveNotFoundError(NotFoundError):
    """The archive file does not exist."""
    pass


class DirectoryNotFoundError(NotFoundError):
    """The working directory does not exist or is not a directory."""
    pass


class ArchiveEntryNotFoundError(NotFoundError):
    """A relative path is not present in the archive listing."""
    pass


class CorruptArchiveError(DiscrepanciesError):
    """The archive cannot be opened or parsed."""
    pass


class IOFailure(DiscrepanciesError):
    """Base exception for read/write failures."""
    pass


class ScanError(IOFailure):
    """Walking the working directory failed."""
    pass


class ArchiveReadError(IOFailure):
    """Reading an entry's content from the archive failed."""
    pass


class HashError(IOFailure):
    """Reading content for hashing failed."""
    pass


class ExportError(IOFailure):
    """Copying a file into the output directory failed."""
    pass


class ArchiveCreationError(IOFailure):
    """Writing a repackaged archive failed."""
    pass


class PreviewReadError(IOFailure):
    """Reading a working-directory file for preview failed."""
    pass


class UnsupportedPreviewError(DiscrepanciesError):
    """Preview requested for a file that is not recognized as text."""
    pass


class ConfigError(DiscrepanciesError):
    """The settings file cannot be read or written."""
    pass


class OperationCancelledError(DiscrepanciesError):
    """A cooperative cancellation check stopped the operation."""
    pass
