"""Export operations package for Discrepancies.

This package provides the Exporter class for copying selected differences into
an output directory, and helpers for repackaging that directory as a ZIP.

Example:
    >>> from discrepancies.operations import Exporter, package_directory
    >>> copied = Exporter().export(result.items, Path("/tmp/out/project"))
    >>> archive = package_directory(Path("/tmp/out/project"), "project")
"""

from .exporter import Exporter, create_archive, generate_archive_name, package_directory

__all__ = ["Exporter", "create_archive", "generate_archive_name", "package_directory"]
