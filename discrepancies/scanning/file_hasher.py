"""Content hashing utility with caching support.

This module provides the FileHasher class for computing MD5 digests of
working-directory files and archive entry streams. The digest is used for
content equality only, never for security.

Example:
    >>> from discrepancies.scanning import FileHasher
    >>> hasher = FileHasher()
    >>> digest = hasher.hash_file(Path("/path/to/file.txt"))
    >>> if digest:
    ...     print(f"MD5: {digest}")
"""

import hashlib
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Tuple

# Buffer size for chunked reading (64KB)
CHUNK_SIZE = 65536


def _new_digest():
    return hashlib.md5(usedforsecurity=False)


class FileHasher:
    """Computes MD5 digests of files and streams with caching support.

    File digests are cached keyed by (path, modification time, size) so a
    file that changes on disk is re-hashed automatically. Stream digests are
    never cached.

    Errors are not raised from ``hash_file``: the method returns None and the
    error message is recorded, leaving the skip-or-fail decision to the caller.

    Attributes:
        _cache: Dictionary mapping (path, mtime, size) tuples to hex digests.
        _errors: List of error messages encountered during hashing operations.
        _cache_hits: Counter for cache hits.
        _cache_misses: Counter for cache misses.
    """

    def __init__(self) -> None:
        """Initialize the FileHasher with an empty cache."""
        self._cache: Dict[Tuple[Path, float, int], str] = {}
        self._errors: List[str] = []
        self._cache_hits: int = 0
        self._cache_misses: int = 0

    def hash_file(self, file_path: Path) -> Optional[str]:
        """Compute the MD5 digest of a file.

        Args:
            file_path: Path to the file to hash.

        Returns:
            The hex digest, or None if the file could not be read
            (missing, permission denied, locked, other I/O errors).
        """
        try:
            resolved_path = Path(file_path).resolve()

            if not resolved_path.is_file():
                self._errors.append(f"Not a readable file: {file_path}")
                return None

            stat_result = resolved_path.stat()
            cache_key = (resolved_path, stat_result.st_mtime, stat_result.st_size)
            if cache_key in self._cache:
                self._cache_hits += 1
                return self._cache[cache_key]

            self._cache_misses += 1
            with open(resolved_path, "rb") as f:
                digest = self.hash_stream(f)

            self._cache[cache_key] = digest
            return digest

        except PermissionError:
            self._errors.append(f"Permission denied: {file_path}")
            return None
        except FileNotFoundError:
            self._errors.append(f"File not found: {file_path}")
            return None
        except OSError as e:
            self._errors.append(f"Error reading {file_path}: {e}")
            return None

    def hash_stream(self, stream: BinaryIO) -> str:
        """Compute the MD5 digest of a binary stream, reading it in chunks.

        Args:
            stream: Readable binary file object, consumed to EOF.

        Returns:
            The hex digest.

        Raises:
            OSError: Propagated from the stream on read failure.
        """
        digest = _new_digest()
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            digest.update(chunk)
        return digest.hexdigest()

    def clear_cache(self) -> None:
        """Clear the digest cache and reset the hit/miss counters."""
        self._cache.clear()
        self._cache_hits = 0
        self._cache_misses = 0

    def get_cache_stats(self) -> Dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with 'size', 'hits' and 'misses'.
        """
        return {
            "size": len(self._cache),
            "hits": self._cache_hits,
            "misses": self._cache_misses,
        }

    def get_errors(self) -> List[str]:
        """Get list of errors encountered during hashing operations."""
        return self._errors.copy()

    def clear_errors(self) -> None:
        """Clear the list of accumulated errors."""
        self._errors.clear()
