"""Input layer for inkfit.

This module reads stroke data for the developer CLI. It is an input
convenience only; the engine itself has no file format.

Key classes:
- StrokeReader: Load strokes from JSON
"""

from inkfit.io.reader import StrokeReader

__all__ = [
    "StrokeReader",
]
