"""Domain models for inkfit.

This module contains the value types exchanged between the fitter, the
rasterizer and the editor shell. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel fitting)
- Free of any windowing or document-model concerns

Key classes:
- Point: A 2D point / vector
- LineSegment: A straight segment between two points
- BezierCurve: A cubic Bezier curve with exactly four control points
- Color, Brush: Solid stroke settings
- Polygon: A closed sequence of straight and curved edges
- PixelBuffer: The shared raster target
"""

from inkfit.domain.brush import BUFFERED_BRUSH, SELECTION_BRUSH, Brush, Color, colors
from inkfit.domain.buffer import PixelBuffer, PixelCanvas, UpgradableView
from inkfit.domain.curve import BezierCurve, FlattenedCurve
from inkfit.domain.geometry import LineSegment, Point
from inkfit.domain.polygon import Polygon, PolygonEdge, PolygonMode

__all__: list[str] = [
    # Enums
    "PolygonMode",
    # Core types
    "Point",
    "LineSegment",
    "BezierCurve",
    "FlattenedCurve",
    "Color",
    "Brush",
    "colors",
    "BUFFERED_BRUSH",
    "SELECTION_BRUSH",
    "Polygon",
    "PolygonEdge",
    "PixelBuffer",
    "PixelCanvas",
    "UpgradableView",
]
