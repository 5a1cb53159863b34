"""Comparison of an archive listing against a working directory listing.

This module provides the ComparisonEngine class, which normalizes the two
asymmetric enumerations (archive entries and a filesystem walk) into one
classified diff set.

Algorithm:
    1. For each archive path that is not excluded: missing from the working
       directory -> DELETED; present -> compare MD5 digests, different ->
       MODIFIED. A path whose digest cannot be computed on either side is
       skipped (best-effort policy for locked or unreadable files).
    2. For each working path that is not excluded and missing from the
       archive -> ADDED.

Progress is reported once per examined path with a running counter and the
combined size of both enumerations as the total.

Example:
    >>> from discrepancies.comparison import ComparisonEngine
    >>> from discrepancies.scanning import ArchiveReader, DirectoryScanner
    >>> scan = DirectoryScanner().scan(Path("/work/project"))
    >>> with ArchiveReader(Path("/backups/project.zip")) as reader:
    ...     result = ComparisonEngine().compare(reader, scan.files)
    >>> print(result.added_count, result.modified_count, result.deleted_count)
"""

import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

from discrepancies.config.defaults import default_exclusion_rules
from discrepancies.errors import HashError, NotFoundError, OperationCancelledError
from discrepancies.matching import ExclusionMatcher
from discrepancies.models import ChangeKind, CompareResult, DiffItem
from discrepancies.scanning import ArchiveReader, FileHasher

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]
CancelCheck = Callable[[], bool]


class ComparisonEngine:
    """Builds a CompareResult from an archive reader and a working file mapping.

    Attributes:
        matcher: ExclusionMatcher applied to both enumerations.
        file_hasher: FileHasher used for working-directory digests.
        skip_unhashable: When True (the default), a path whose digest cannot
            be computed is left out of the result and recorded in
            ``CompareResult.skipped_paths``. When False, a HashError is raised.
    """

    def __init__(
        self,
        matcher: Optional[ExclusionMatcher] = None,
        file_hasher: Optional[FileHasher] = None,
        skip_unhashable: bool = True,
    ) -> None:
        """Initialize the engine.

        Args:
            matcher: Exclusion matcher. Defaults to the built-in rule set.
            file_hasher: Optional FileHasher instance.
            skip_unhashable: Best-effort policy for hash failures.
        """
        self.matcher = matcher if matcher is not None else ExclusionMatcher(default_exclusion_rules())
        self.file_hasher = file_hasher if file_hasher is not None else FileHasher()
        self.skip_unhashable = skip_unhashable

    def compare(
        self,
        reader: ArchiveReader,
        working_files: Dict[str, Path],
        progress: Optional[ProgressCallback] = None,
        should_cancel: Optional[CancelCheck] = None,
    ) -> CompareResult:
        """Compare the archive against the working directory listing.

        Args:
            reader: Open ArchiveReader for the baseline archive.
            working_files: Relative path -> absolute path mapping from
                DirectoryScanner.scan().
            progress: Optional callback receiving (current, total, message).
            should_cancel: Optional cooperative cancellation check, polled
                before each path.

        Returns:
            CompareResult with archive-side items first, then added items.

        Raises:
            OperationCancelledError: If ``should_cancel`` returned True.
            HashError: If a digest fails and ``skip_unhashable`` is False.
        """
        start_time = time.time()
        archive_files = reader.list_files()

        items: List[DiffItem] = []
        skipped: List[str] = []
        total = len(archive_files) + len(working_files)
        processed = 0

        for rel_path in archive_files:
            self._check_cancel(should_cancel)
            if self.matcher.should_exclude(rel_path, False):
                continue

            processed += 1
            self._emit_progress(progress, processed, total, f"Checking: {rel_path}")

            working_path = working_files.get(rel_path)
            if working_path is None:
                items.append(DiffItem(relative_path=rel_path, kind=ChangeKind.DELETED))
                continue

            if not self._contents_equal(reader, rel_path, working_path, skipped):
                items.append(
                    DiffItem(
                        relative_path=rel_path,
                        kind=ChangeKind.MODIFIED,
                        source_path=working_path,
                    )
                )

        for rel_path, working_path in working_files.items():
            self._check_cancel(should_cancel)
            if self.matcher.should_exclude(rel_path, False):
                continue

            processed += 1
            self._emit_progress(progress, processed, total, f"Checking: {rel_path}")

            if rel_path not in archive_files:
                items.append(
                    DiffItem(
                        relative_path=rel_path,
                        kind=ChangeKind.ADDED,
                        source_path=working_path,
                    )
                )

        result = CompareResult(
            items=items,
            total_files=len(items),
            added_count=sum(1 for item in items if item.kind is ChangeKind.ADDED),
            modified_count=sum(1 for item in items if item.kind is ChangeKind.MODIFIED),
            deleted_count=sum(1 for item in items if item.kind is ChangeKind.DELETED),
            skipped_paths=skipped,
            duration_seconds=time.time() - start_time,
        )

        logger.info(
            f"Compared {reader.path}: {result.added_count} added, "
            f"{result.modified_count} modified, {result.deleted_count} deleted"
        )
        return result

    def _contents_equal(
        self,
        reader: ArchiveReader,
        rel_path: str,
        working_path: Path,
        skipped: List[str],
    ) -> bool:
        """Compare both digests of a path present on both sides.

        Returns True when the contents match, or when a digest failed and the
        path is skipped under the best-effort policy.
        """
        try:
            archive_hash = reader.hash(rel_path)
        except (HashError, NotFoundError) as e:
            return self._handle_hash_failure(rel_path, str(e), skipped, e)

        working_hash = self.file_hasher.hash_file(working_path)
        if working_hash is None:
            errors = self.file_hasher.get_errors()
            reason = errors[-1] if errors else f"Could not hash {working_path}"
            return self._handle_hash_failure(rel_path, reason, skipped, None)

        return archive_hash == working_hash

    def _handle_hash_failure(
        self,
        rel_path: str,
        reason: str,
        skipped: List[str],
        cause: Optional[Exception],
    ) -> bool:
        if not self.skip_unhashable:
            raise HashError(f"Could not compare {rel_path}: {reason}", relative_path=rel_path) from cause

        logger.debug(f"Skipping {rel_path}: {reason}")
        skipped.append(rel_path)
        return True

    @staticmethod
    def _check_cancel(should_cancel: Optional[CancelCheck]) -> None:
        if should_cancel is not None and should_cancel():
            raise OperationCancelledError("Comparison cancelled")

    @staticmethod
    def _emit_progress(
        progress: Optional[ProgressCallback], current: int, total: int, message: str
    ) -> None:
        if progress is None:
            return
        try:
            progress(current, total, message)
        except Exception as e:
            # A failing sink must not abort the comparison
            logger.warning(f"Progress callback failed: {e}")
