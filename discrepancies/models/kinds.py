"""
Enums shared by the comparison engine, the exclusion matcher and the text differ.

- RuleKind: How an exclusion rule pattern is interpreted
- ChangeKind: Classification of a path-level difference
- DiffLineKind: Classification of a single line in a text diff preview
"""

from enum import Enum


class RuleKind(Enum):
    """Pattern syntax of an exclusion rule."""
    GLOB = "glob"      # Shell-style wildcards translated to an anchored regex
    REGEX = "regex"    # Regular expression used verbatim (search semantics)

    @classmethod
    def from_string(cls, value: str) -> "RuleKind":
        """Parse a persisted rule type, falling back to GLOB for unknown values."""
        for kind in cls:
            if kind.value == str(value).lower():
                return kind
        return cls.GLOB


class ChangeKind(Enum):
    """Classification of a relative path that differs between archive and working directory."""
    ADDED = "added"          # Present only in the working directory
    MODIFIED = "modified"    # Present in both with different content
    DELETED = "deleted"      # Present only in the archive


class DiffLineKind(Enum):
    """Classification of one flattened line of a text diff."""
    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"
