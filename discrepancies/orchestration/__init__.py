"""Workflow orchestration package for Discrepancies.

This package contains orchestration components for comparison workflows:
- CompareLogger: Structured report of a comparison and export run.
- CompareOrchestrator: Central coordinator for compare, preview and export.
"""

from discrepancies.orchestration.compare_logger import CompareLogger
from discrepancies.orchestration.compare_orchestrator import CompareOrchestrator

__all__ = ["CompareLogger", "CompareOrchestrator"]
