"""Discrepancies - Archive vs. working directory comparison tool.

Compares a baseline ZIP archive against a working directory, classifies every
file as added, modified or deleted, previews text differences and exports the
changed files.
"""

__version__ = "1.0.0"

from .models import (
    AppSettings,
    ChangeKind,
    CompareResult,
    DiffItem,
    ExclusionRule,
    ExportSummary,
    RuleKind,
    TextDiff,
)

__all__ = [
    "__version__",
    "AppSettings",
    "ChangeKind",
    "CompareResult",
    "DiffItem",
    "ExclusionRule",
    "ExportSummary",
    "RuleKind",
    "TextDiff",
]


def main() -> None:
    """Entry point for the Discrepancies CLI application."""
    from discrepancies.cli import app
    app()
