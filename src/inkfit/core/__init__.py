"""Core algorithms for inkfit.

This module contains the core algorithms for:

- Geometry operations (distances, line fitting, intersections)
- Curve fitting (least squares with Newton-Raphson reparameterization)
- Rasterization (Bresenham lines, disc stamping, scanline fill)
- Polygon stitching and batch stroke fitting

Key functions:
- fit_curve: Fit cubic Bezier curves to a point sequence
- fit_line: Least-squares straight line through points
- intersection_parameter: Where two segments cross
- rasterize: Draw a line, curve or polygon into a pixel buffer
- polygonify: Close a run of lines and curves into a polygon

Key classes:
- CurveFitter: Configured curve fitter with diagnostics
- Rasterizer: Configured rasterizer
- StrokeProcessor: Parallel batch fitting
"""

from inkfit.core.fitter import (
    CurveFitter,
    FitResult,
    FitSegment,
    fit_curve,
    fit_curve_detailed,
)
from inkfit.core.geometry import (
    bounding_box,
    cross,
    distance,
    dot,
    fit_line,
    intersection_parameter,
    lerp,
    normalize,
    sample,
    squared_distance,
)
from inkfit.core.polygon import polygonify, stitch_edges
from inkfit.core.processor import BatchResult, StrokeProcessor, fit_stroke
from inkfit.core.raster import (
    Rasterizer,
    draw_curve,
    draw_line,
    draw_polygon,
    fill_polygon,
    rasterize,
)

__all__ = [
    "BatchResult",
    "CurveFitter",
    "FitResult",
    "FitSegment",
    "Rasterizer",
    "StrokeProcessor",
    "bounding_box",
    "cross",
    "distance",
    "dot",
    "draw_curve",
    "draw_line",
    "draw_polygon",
    "fill_polygon",
    "fit_curve",
    "fit_curve_detailed",
    "fit_line",
    "fit_stroke",
    "intersection_parameter",
    "lerp",
    "normalize",
    "polygonify",
    "rasterize",
    "sample",
    "squared_distance",
    "stitch_edges",
]
