"""Utility functions for pcbcoat.

This module provides utility functions including:

- Logging setup and configuration
- Generation statistics
- Progress reporting helpers
"""

from pcbcoat.utils.logging import (
    GenerationLogger,
    GenerationStats,
    configure_logging,
)
from pcbcoat.utils.progress import ProgressCallback, ProgressReporter

__all__ = [
    "GenerationLogger",
    "GenerationStats",
    "ProgressCallback",
    "ProgressReporter",
    "configure_logging",
]
