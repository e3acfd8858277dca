"""Utility functions for inkfit.

This module provides utility functions including:

- Logging setup and configuration
- Batch statistics tracking
- The readers-writer lock guarding pixel buffers
"""

from inkfit.utils.locking import ReadWriteLock, UpgradeHandle
from inkfit.utils.logging import (
    FitStats,
    ProcessingLogger,
    configure_logging,
)

__all__ = [
    "FitStats",
    "ProcessingLogger",
    "ReadWriteLock",
    "UpgradeHandle",
    "configure_logging",
]
