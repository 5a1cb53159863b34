"""Exclusion matching package for Discrepancies.

This package contains the ExclusionMatcher implementation that decides which
relative paths take part in a comparison.

Example:
    >>> from discrepancies.matching import compile_rules
    >>> from discrepancies.config import default_exclusion_rules
    >>> matcher = compile_rules(default_exclusion_rules())
    >>> matcher.should_exclude("obj/Debug/app.pdb")
    True
"""

from .exclusion_matcher import CompiledRule, ExclusionMatcher, compile_rules, glob_to_regex

__all__ = [
    "CompiledRule",
    "ExclusionMatcher",
    "compile_rules",
    "glob_to_regex",
]
