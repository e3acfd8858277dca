"""inkfit - Curve fitting and rasterization for a vector drawing tool.

inkfit turns freehand point sequences into a short list of cubic Bezier
curves within an error bound, and draws lines, curves and polygons into a
shared pixel buffer.

Example:
    >>> from inkfit import Point, fit_curve
    >>> curves = fit_curve([Point(0, 0), Point(5, 0), Point(10, 0)], 0.0)
    >>> len(curves)
    1
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

from inkfit.core import Rasterizer, fit_curve, fit_curve_detailed, rasterize
from inkfit.domain import BezierCurve, Brush, Color, LineSegment, PixelBuffer, Point, Polygon, PolygonMode, colors

__all__ = [
    "BezierCurve",
    "Brush",
    "Color",
    "LineSegment",
    "PixelBuffer",
    "Point",
    "Polygon",
    "PolygonMode",
    "Rasterizer",
    "__author__",
    "__version__",
    "colors",
    "fit_curve",
    "fit_curve_detailed",
    "rasterize",
]
