"""Geometric operations on points and line segments.

This module provides the primitive math used by the fitter and rasterizer:
- Distances, dot and cross products, interpolation
- Safe vector normalization
- Least-squares line fitting
- Segment intersection and sampling

All functions are pure and stateless.
"""

import math
from collections.abc import Iterable, Sequence

from inkfit.domain import LineSegment, Point
from inkfit.exceptions import FitInputError

# Relative tolerance for parallel segments and parameter range checks
INTERSECTION_EPSILON = 1e-9


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points.

    Examples:
        >>> distance(Point(0.0, 0.0), Point(3.0, 4.0))
        5.0
    """
    return math.hypot(b.x - a.x, b.y - a.y)


def squared_distance(a: Point, b: Point) -> float:
    dx = b.x - a.x
    dy = b.y - a.y
    return dx * dx + dy * dy


def dot(a: Point, b: Point) -> float:
    return a.x * b.x + a.y * b.y


def cross(a: Point, b: Point) -> float:
    """Z component of the 3D cross product of two 2D vectors.

    Positive when b is counter-clockwise from a.
    """
    return a.x * b.y - a.y * b.x


def lerp(a: Point, b: Point, t: float) -> Point:
    """Linear interpolation from a (t=0) to b (t=1)."""
    s = 1.0 - t
    return Point(s * a.x + t * b.x, s * a.y + t * b.y)


def normalize(v: Point) -> Point:
    """Scale a vector to unit length.

    The zero vector (and any vector whose length is not finite) is returned
    as the zero vector instead of NaN.
    """
    length = math.hypot(v.x, v.y)
    if length == 0.0 or not math.isfinite(length):
        return Point(0.0, 0.0)
    return Point(v.x / length, v.y / length)


def perpendicular(v: Point) -> Point:
    """Vector rotated 90 degrees counter-clockwise."""
    return Point(-v.y, v.x)


def fit_line(points: Sequence[Point]) -> LineSegment:
    """Fit a straight line through points by ordinary least squares.

    Regresses y on x. The returned segment covers the points' y-extent on
    the fitted line. Two cases are handled without dividing by zero:

    - All points share one x-coordinate: a vertical segment at that x
    - Zero slope: a horizontal segment covering the x-extent

    Args:
        points: Points to fit (at least one)

    Returns:
        Segment lying on the best-fit line

    Raises:
        FitInputError: If points is empty
    """
    if not points:
        raise FitInputError("cannot fit a line through zero points")

    n = float(len(points))
    mean_x = sum(p.x for p in points) / n
    mean_y = sum(p.y for p in points) / n
    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)

    sxx = sum((p.x - mean_x) ** 2 for p in points)
    if sxx == 0.0:
        return LineSegment(Point(mean_x, min_y), Point(mean_x, max_y))

    sxy = sum((p.x - mean_x) * (p.y - mean_y) for p in points)
    slope = sxy / sxx
    intercept = mean_y - slope * mean_x

    if slope == 0.0:
        return LineSegment(Point(min_x, intercept), Point(max_x, intercept))

    # x = (y - b) / m at both ends of the y-extent
    return LineSegment(
        Point((min_y - intercept) / slope, min_y),
        Point((max_y - intercept) / slope, max_y),
    )


def intersection_parameter(seg_a: LineSegment, seg_b: LineSegment) -> float | None:
    """Find where two segments cross, as a parameter along the first.

    Uses the parametric form ``a.start + t * a.vector``. Crossings at the
    segment endpoints count, within a small tolerance.

    Args:
        seg_a: Segment the returned parameter refers to
        seg_b: Second segment

    Returns:
        t in [0, 1], or None if the segments are parallel, degenerate or
        do not cross

    Examples:
        >>> a = LineSegment(Point(0.0, 0.0), Point(2.0, 2.0))
        >>> b = LineSegment(Point(0.0, 2.0), Point(2.0, 0.0))
        >>> intersection_parameter(a, b)
        0.5
    """
    r = seg_a.vector
    s = seg_b.vector
    denom = cross(r, s)

    scale = math.hypot(r.x, r.y) * math.hypot(s.x, s.y)
    if scale == 0.0 or not math.isfinite(denom) or abs(denom) <= INTERSECTION_EPSILON * scale:
        return None

    qp = seg_b.start - seg_a.start
    t = cross(qp, s) / denom
    u = cross(qp, r) / denom

    eps = INTERSECTION_EPSILON
    if -eps <= t <= 1.0 + eps and -eps <= u <= 1.0 + eps:
        return min(max(t, 0.0), 1.0)
    return None


def sample(segment: LineSegment, t: float) -> Point:
    """Point at parameter t along a segment (t=0 is start, t=1 is end)."""
    return lerp(segment.start, segment.end, t)


def bounding_box(segments: Iterable[LineSegment]) -> tuple[float, float, float, float] | None:
    """Bounding box of the endpoints of a collection of segments.

    Returns:
        Tuple of (min_x, min_y, max_x, max_y), or None when there are no
        segments
    """
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    seen = False
    for seg in segments:
        seen = True
        for p in (seg.start, seg.end):
            min_x = min(min_x, p.x)
            min_y = min(min_y, p.y)
            max_x = max(max_x, p.x)
            max_y = max(max_y, p.y)
    if not seen:
        return None
    return (min_x, min_y, max_x, max_y)
