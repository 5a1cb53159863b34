"""
Core data models for Discrepancies.

This module contains the following dataclasses:
- ExclusionRule: A user-configurable pattern that removes paths from comparison
- ArchiveEntry: One entry of the baseline archive, keyed by its relative path
- ScanResult: Files and directories found by walking the working directory
- DiffItem: One classified path-level difference
- CompareResult: The unified, classified diff set of a comparison run
- DiffLine / TextDiff: Line-level text diff used for previews
- ExportSummary: Outcome of exporting selected items
- AppSettings: Persisted user settings (paths and exclusion rules)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from .kinds import ChangeKind, DiffLineKind, RuleKind


@dataclass(frozen=True)
class ExclusionRule:
    """A pattern that excludes matching relative paths from comparison."""
    pattern: str                      # Glob or regex pattern
    kind: RuleKind = RuleKind.GLOB    # Pattern syntax
    directory_scoped: bool = False    # Rule matches directory segments only
    enabled: bool = True              # Disabled rules are ignored
    comment: str = ""                 # Free-form description

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the keys of the settings file."""
        return {
            "pattern": self.pattern,
            "type": self.kind.value,
            "isDir": self.directory_scoped,
            "enabled": self.enabled,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExclusionRule":
        """Build a rule from a settings file entry."""
        return cls(
            pattern=str(data.get("pattern", "")),
            kind=RuleKind.from_string(data.get("type", RuleKind.GLOB.value)),
            directory_scoped=bool(data.get("isDir", False)),
            enabled=bool(data.get("enabled", True)),
            comment=str(data.get("comment", "")),
        )


@dataclass(frozen=True)
class ArchiveEntry:
    """An entry of the baseline archive."""
    relative_path: str                # Forward-slash path, root folder stripped
    archive_name: str                 # Raw entry name inside the archive
    size: int                         # Uncompressed size in bytes
    is_dir: bool = False              # Directory entry


@dataclass
class ScanResult:
    """Files and directories found under a working directory root."""
    root: Path                                              # Resolved scan root
    files: Dict[str, Path] = field(default_factory=dict)    # Relative path -> absolute path
    directories: Set[str] = field(default_factory=set)      # Relative directory paths


@dataclass
class DiffItem:
    """One path that differs between the archive and the working directory."""
    relative_path: str                # Forward-slash relative path
    kind: ChangeKind                  # Added, modified or deleted
    selected: bool = True             # Chosen for export
    source_path: Optional[Path] = None  # Working-directory file (None when deleted)

    @property
    def is_exportable(self) -> bool:
        """Whether this item would be copied by an export."""
        return self.selected and self.kind is not ChangeKind.DELETED


@dataclass
class CompareResult:
    """Classified differences produced by a comparison run."""
    items: List[DiffItem] = field(default_factory=list)       # Archive-side items first, then added
    total_files: int = 0              # Number of items
    added_count: int = 0              # Items only in the working directory
    modified_count: int = 0           # Items whose content differs
    deleted_count: int = 0            # Items only in the archive
    skipped_paths: List[str] = field(default_factory=list)    # Paths dropped because hashing failed
    duration_seconds: float = 0.0     # Wall-clock duration of the run

    def selected_items(self) -> List[DiffItem]:
        """Return the items that an export would copy."""
        return [item for item in self.items if item.is_exportable]


@dataclass
class DiffLine:
    """A single line of a flattened text diff."""
    kind: DiffLineKind
    content: str


@dataclass
class TextDiff:
    """Line-level diff between the archived and the working copy of a file."""
    old_content: str
    new_content: str
    lines: List[DiffLine] = field(default_factory=list)


@dataclass
class ExportSummary:
    """Outcome of an export run."""
    files_exported: int = 0           # Files copied into the output directory
    output_dir: Optional[Path] = None  # Export target
    archive_path: Optional[Path] = None  # Repackaged archive, if requested
    duration_seconds: float = 0.0     # Wall-clock duration


@dataclass
class AppSettings:
    """Persisted user settings."""
    last_archive_path: str = ""
    last_working_dir: str = ""
    last_output_dir: str = ""
    exclusion_rules: List[ExclusionRule] = field(default_factory=list)
