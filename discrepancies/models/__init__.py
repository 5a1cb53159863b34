"""
Models package for Discrepancies.

This package provides convenient imports for all data models:
- RuleKind, ChangeKind, DiffLineKind: Enums
- ExclusionRule: Exclusion rule definition
- ArchiveEntry: Archive listing entry
- ScanResult: Working directory listing
- DiffItem / CompareResult: Comparison output
- DiffLine / TextDiff: Text diff preview
- ExportSummary: Export outcome
- AppSettings: Persisted settings
"""

from .kinds import ChangeKind, DiffLineKind, RuleKind
from .data_models import (
    AppSettings,
    ArchiveEntry,
    CompareResult,
    DiffItem,
    DiffLine,
    ExclusionRule,
    ExportSummary,
    ScanResult,
    TextDiff,
)

__all__ = [
    "ChangeKind",
    "DiffLineKind",
    "RuleKind",
    "AppSettings",
    "ArchiveEntry",
    "CompareResult",
    "DiffItem",
    "DiffLine",
    "ExclusionRule",
    "ExportSummary",
    "ScanResult",
    "TextDiff",
]
