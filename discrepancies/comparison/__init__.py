"""Comparison package for Discrepancies.

- ComparisonEngine: Classifies archive and working-directory paths into
  added, modified and deleted items.
- TextDiffer: Line-level text diffs for previewing a single item.
"""

from .comparison_engine import ComparisonEngine
from .text_differ import TEXT_EXTENSIONS, TextDiffer, is_text_file

__all__ = ["ComparisonEngine", "TEXT_EXTENSIONS", "TextDiffer", "is_text_file"]
