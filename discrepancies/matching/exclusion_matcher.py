"""Exclusion rule matching for Discrepancies.

This module provides the ExclusionMatcher class which compiles a rule set of
glob and regex patterns once and answers "is this path excluded" for both the
archive listing and the working directory listing.

Rule semantics:
    - Disabled rules are skipped entirely.
    - Glob patterns are translated to an anchored regex: ``**`` crosses
      separators, ``*`` stays within one segment, ``?`` is one character.
    - Regex patterns are used verbatim with search semantics.
    - Directory-scoped rules match path segments. For a file path only the
      ancestor directories are checked, so the rule covers everything nested
      below a matching directory.
    - Other rules match the base name or the full relative path.
    - A pattern that fails to compile never matches anything.

Example:
    >>> from discrepancies.matching import ExclusionMatcher
    >>> from discrepancies.models import ExclusionRule
    >>> matcher = ExclusionMatcher([ExclusionRule("bin", directory_scoped=True)])
    >>> matcher.should_exclude("src/bin/app.dll")
    True
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Tuple

from discrepancies.models import ExclusionRule, RuleKind

logger = logging.getLogger(__name__)


@dataclass
class CompiledRule:
    """An enabled rule paired with its compiled pattern (None if it failed to compile)."""
    rule: ExclusionRule
    regex: Optional[Pattern[str]]


def glob_to_regex(pattern: str) -> str:
    """Translate a glob pattern into an anchored regular expression.

    Args:
        pattern: Glob pattern such as ``*.log`` or ``**/test``.

    Returns:
        Regular expression source string anchored with ``^`` and ``$``.

    Example:
        >>> glob_to_regex("*.log")
        '^[^/]*\\\\.log$'
    """
    result = re.escape(pattern)
    result = result.replace(r"\*\*", ".*")
    result = result.replace(r"\*", "[^/]*")
    result = result.replace(r"\?", ".")
    return "^" + result + "$"


class ExclusionMatcher:
    """Answers whether a relative path is excluded by a rule set.

    Rules are compiled once at construction; the matcher is immutable
    afterwards. Build a new matcher when the rule set changes.

    Attributes:
        rules: The rule set the matcher was built from (including disabled rules).
    """

    def __init__(self, rules: Iterable[ExclusionRule]) -> None:
        """Compile the given rule set.

        Args:
            rules: Ordered rule sequence. Order has no effect on matching.
        """
        self._rules: Tuple[ExclusionRule, ...] = tuple(rules)
        self._compiled: List[CompiledRule] = [
            CompiledRule(rule=rule, regex=self._compile_rule(rule))
            for rule in self._rules
            if rule.enabled
        ]

    @property
    def rules(self) -> Tuple[ExclusionRule, ...]:
        """The rule set the matcher was built from."""
        return self._rules

    @property
    def compiled_rules(self) -> Tuple[CompiledRule, ...]:
        """Compiled entries for every enabled rule."""
        return tuple(self._compiled)

    @property
    def active_rule_count(self) -> int:
        """Number of enabled rules whose pattern compiled."""
        return sum(1 for cr in self._compiled if cr.regex is not None)

    def should_exclude(self, path: str, is_dir: bool = False) -> bool:
        """Check whether a relative path is excluded.

        Args:
            path: Relative path; backslashes are normalized to forward slashes.
            is_dir: True when the path names a directory.

        Returns:
            True if any enabled rule matches the path.
        """
        path = path.replace("\\", "/")
        parts = path.split("/")

        for cr in self._compiled:
            if cr.regex is None:
                continue

            if cr.rule.directory_scoped:
                # Files are excluded when any ancestor directory matches
                segments = parts if is_dir else parts[:-1]
                if any(cr.regex.search(segment) for segment in segments):
                    return True
            else:
                if cr.regex.search(parts[-1]) or cr.regex.search(path):
                    return True

        return False

    def _compile_rule(self, rule: ExclusionRule) -> Optional[Pattern[str]]:
        """Compile a single rule, returning None when the pattern is invalid."""
        source = rule.pattern if rule.kind is RuleKind.REGEX else glob_to_regex(rule.pattern)
        try:
            return re.compile(source)
        except re.error as e:
            logger.debug(f"Ignoring exclusion rule {rule.pattern!r}: {e}")
            return None


def compile_rules(rules: Iterable[ExclusionRule]) -> ExclusionMatcher:
    """Compile a rule set into an ExclusionMatcher."""
    return ExclusionMatcher(rules)
