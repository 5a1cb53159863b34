"""Terminal user interface package for Discrepancies."""

from .compare_tui import CompareTUI

__all__ = ["CompareTUI"]
