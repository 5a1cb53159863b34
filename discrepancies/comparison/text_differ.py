"""Text diff previews between the archived and the working copy of a file.

This module provides the TextDiffer class, built on diff-match-patch. The
diff is computed with line mode enabled and then passed through semantic
cleanup, which coalesces small adjacent edits into coherent runs. Each span
is finally split into per-line DiffLine records for display.

Example:
    >>> from discrepancies.comparison import TextDiffer, is_text_file
    >>> differ = TextDiffer()
    >>> diff = differ.diff("a\\nb\\n", "a\\nc\\n")
    >>> [(line.kind.value, line.content) for line in diff.lines]
"""

import logging
from pathlib import Path
from typing import List, Tuple, Union

from diff_match_patch import diff_match_patch

from discrepancies.errors import PreviewReadError, UnsupportedPreviewError
from discrepancies.models import DiffLine, DiffLineKind, TextDiff
from discrepancies.scanning import ArchiveReader

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = frozenset({
    ".txt", ".md", ".json", ".xml", ".html", ".htm", ".css", ".js", ".ts",
    ".go", ".py", ".java", ".c", ".cpp", ".h", ".hpp", ".cs", ".vb", ".sql",
    ".sh", ".bat", ".ps1", ".yaml", ".yml", ".toml", ".ini", ".cfg", ".conf",
    ".log", ".csv", ".tsv", ".svg", ".vue", ".jsx", ".tsx", ".svelte",
})

_OPERATION_KINDS = {
    diff_match_patch.DIFF_EQUAL: DiffLineKind.EQUAL,
    diff_match_patch.DIFF_INSERT: DiffLineKind.INSERT,
    diff_match_patch.DIFF_DELETE: DiffLineKind.DELETE,
}

Content = Union[str, bytes]


def file_extension(path: str) -> str:
    """Return the extension of the last path segment, including the dot."""
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def is_text_file(path: str) -> bool:
    """Decide by extension (case-insensitive) whether a file can be previewed as text."""
    return file_extension(path).lower() in TEXT_EXTENSIONS


class TextDiffer:
    """Computes line-level diffs for previews."""

    def __init__(self, timeout_seconds: float = 1.0) -> None:
        """Initialize the differ.

        Args:
            timeout_seconds: diff-match-patch time budget; 0 means unlimited.
        """
        self._dmp = diff_match_patch()
        self._dmp.Diff_Timeout = timeout_seconds

    def diff_spans(self, old: Content, new: Content) -> List[Tuple[DiffLineKind, str]]:
        """Compute the cleaned-up diff spans between two contents.

        Concatenating the EQUAL and INSERT spans yields ``new``; concatenating
        the EQUAL and DELETE spans yields ``old``.
        """
        diffs = self._dmp.diff_main(self._decode(old), self._decode(new), True)
        self._dmp.diff_cleanupSemantic(diffs)
        return [(_OPERATION_KINDS[op], text) for op, text in diffs]

    def diff(self, old: Content, new: Content) -> TextDiff:
        """Compute a line-level diff.

        Args:
            old: Archived content (str, or bytes decoded as UTF-8).
            new: Working-directory content.

        Returns:
            TextDiff with one DiffLine per line of each span. The empty piece
            that follows a span's terminal newline is not emitted.
        """
        old_text = self._decode(old)
        new_text = self._decode(new)
        result = TextDiff(old_content=old_text, new_content=new_text)

        for kind, text in self.diff_spans(old_text, new_text):
            pieces = text.split("\n")
            if pieces and pieces[-1] == "":
                pieces.pop()
            result.lines.extend(DiffLine(kind=kind, content=piece) for piece in pieces)

        return result

    def compare_files(self, reader: ArchiveReader, rel_path: str, working_path: Path) -> TextDiff:
        """Diff an archive entry against a working-directory file.

        Raises:
            ArchiveEntryNotFoundError: If ``rel_path`` is not in the archive.
            ArchiveReadError: If the archive entry cannot be read.
            PreviewReadError: If the working-directory file cannot be read.
        """
        old_content = reader.read_content(rel_path)
        try:
            new_content = Path(working_path).read_bytes()
        except OSError as e:
            raise PreviewReadError(
                f"Failed to read working file {working_path}: {e}", path=str(working_path)
            ) from e

        return self.diff(old_content, new_content)

    def preview(self, reader: ArchiveReader, rel_path: str, working_path: Path) -> TextDiff:
        """Diff a file for preview after checking it is a text file.

        Raises:
            UnsupportedPreviewError: If ``rel_path`` does not have a text extension.
        """
        if not is_text_file(rel_path):
            raise UnsupportedPreviewError(
                f"Preview is not supported for non-text files: {rel_path}", relative_path=rel_path
            )
        logger.debug(f"Building preview for {rel_path}")
        return self.compare_files(reader, rel_path, working_path)

    @staticmethod
    def _decode(content: Content) -> str:
        if isinstance(content, bytes):
            return content.decode("utf-8", errors="replace")
        return content
