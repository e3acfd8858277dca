"""Cubic Bezier curve representation.

This module defines the fixed-degree Bezier curve produced by the fitter and
consumed by the rasterizer and polygons:
- BezierCurve: Exactly four control points [P0, P1, P2, P3]
- FlattenedCurve: Restartable sequence of line segments approximating a curve
- de_casteljau: Evaluation of any control polygon by repeated interpolation
"""

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from inkfit.domain.geometry import LineSegment, Point
from inkfit.exceptions import CurveDegreeError, ParameterRangeError

# Tuning knobs for flatten(): segments = ceil(sqrt(bound^2 + bias) / divisor)
FLATTEN_BIAS = 800.0
FLATTEN_DIVISOR = 8.0


def de_casteljau(points: Sequence[Point], t: float) -> Point:
    """Evaluate a Bezier control polygon at parameter t.

    Repeatedly interpolates adjacent pairs until one point remains. Works for
    any degree, so the fitter also uses it on derivative curves. No range
    check is made on t.

    Args:
        points: Control points (at least one)
        t: Curve parameter

    Returns:
        The point on the curve at t
    """
    pts = list(points)
    s = 1.0 - t
    for level in range(len(pts) - 1, 0, -1):
        for i in range(level):
            a, b = pts[i], pts[i + 1]
            pts[i] = Point(s * a.x + t * b.x, s * a.y + t * b.y)
    return pts[0]


def derivative_points(points: Sequence[Point]) -> tuple[Point, ...]:
    """Control points of the derivative of a Bezier curve.

    A degree-n curve with n+1 points yields n points scaled by n.
    """
    n = len(points) - 1
    return tuple((points[i + 1] - points[i]) * float(n) for i in range(n))


@dataclass(frozen=True, slots=True)
class BezierCurve:
    """A cubic Bezier curve.

    Always exactly four control points: start, two handles, end. Instances
    are immutable; editors reconnect endpoints by replacement (``with_start``,
    ``with_end``).

    Attributes:
        control_points: Tuple (P0, P1, P2, P3)
    """

    control_points: tuple[Point, Point, Point, Point]

    def __post_init__(self) -> None:
        if len(self.control_points) != 4:
            raise CurveDegreeError(len(self.control_points))
        # Accept lists and other sequences but store a tuple
        object.__setattr__(self, "control_points", tuple(self.control_points))

    @classmethod
    def from_points(cls, p0: Point, p1: Point, p2: Point, p3: Point) -> "BezierCurve":
        return cls((p0, p1, p2, p3))

    @property
    def start(self) -> Point:
        return self.control_points[0]

    @property
    def end(self) -> Point:
        return self.control_points[3]

    def points(self) -> tuple[Point, Point, Point, Point]:
        return self.control_points

    def evaluate(self, t: float) -> Point:
        """Evaluate the curve with de Casteljau's algorithm.

        Args:
            t: Curve parameter in [0, 1]

        Returns:
            Point on the curve

        Raises:
            ParameterRangeError: If t is NaN or outside [0, 1]

        Examples:
            >>> c = BezierCurve.from_points(Point(0, 0), Point(1, 2), Point(3, 2), Point(4, 0))
            >>> c.evaluate(0.0)
            Point(x=0.0, y=0.0)
        """
        if not 0.0 <= t <= 1.0:
            raise ParameterRangeError(t)
        return de_casteljau(self.control_points, t)

    def derivative(self) -> tuple[Point, Point, Point]:
        """Control points of the first derivative (a quadratic curve)."""
        return derivative_points(self.control_points)  # type: ignore[return-value]

    def second_derivative(self) -> tuple[Point, Point]:
        """Control points of the second derivative (a linear curve)."""
        return derivative_points(self.derivative())  # type: ignore[return-value]

    def control_polygon_length(self) -> float:
        """Sum of the three control-polygon edge lengths.

        An upper bound on the arc length of the curve.
        """
        p = self.control_points
        return sum(math.hypot(p[i + 1].x - p[i].x, p[i + 1].y - p[i].y) for i in range(3))

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Bounding box of the control points (contains the curve).

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        xs = [p.x for p in self.control_points]
        ys = [p.y for p in self.control_points]
        return (min(xs), min(ys), max(xs), max(ys))

    def flatten(
        self, bias: float = FLATTEN_BIAS, divisor: float = FLATTEN_DIVISOR
    ) -> "FlattenedCurve":
        """Approximate the curve with straight segments.

        Args:
            bias: Added to the squared arc-length bound
            divisor: Pixels of estimated length per segment

        Returns:
            Lazy, restartable sequence of LineSegment
        """
        return FlattenedCurve(self, bias=bias, divisor=divisor)

    def reversed(self) -> "BezierCurve":
        return BezierCurve(tuple(reversed(self.control_points)))  # type: ignore[arg-type]

    def with_start(self, point: Point) -> "BezierCurve":
        p = self.control_points
        return BezierCurve((point, p[1], p[2], p[3]))

    def with_end(self, point: Point) -> "BezierCurve":
        p = self.control_points
        return BezierCurve((p[0], p[1], p[2], point))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with the flat coordinate list
        """
        return {"coords": [c for p in self.control_points for c in p.to_tuple()]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BezierCurve":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with the flat coordinate list

        Returns:
            BezierCurve instance

        Raises:
            CurveDegreeError: If the coordinates do not describe four points
        """
        coords = data["coords"]
        if len(coords) % 2:
            raise CurveDegreeError(len(coords) // 2)
        points = tuple(Point(coords[i], coords[i + 1]) for i in range(0, len(coords), 2))
        return cls(points)  # type: ignore[arg-type]


class FlattenedCurve:
    """Line-segment view of a Bezier curve.

    Iterating evaluates the curve lazily; every new iteration starts over,
    and the segment count is fixed at construction.
    """

    def __init__(self, curve: BezierCurve, bias: float = FLATTEN_BIAS, divisor: float = FLATTEN_DIVISOR) -> None:
        self.curve = curve
        bound = curve.control_polygon_length()
        estimate = math.sqrt(bound * bound + bias) / divisor
        # NaN control points or a tiny bias can leave no usable count
        self._count = max(1, math.ceil(estimate)) if math.isfinite(estimate) else 1

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[LineSegment]:
        n = self._count
        points = self.curve.control_points
        previous = points[0]
        for i in range(1, n + 1):
            current = points[3] if i == n else de_casteljau(points, i / n)
            yield LineSegment(previous, current)
            previous = current

    def __repr__(self) -> str:
        return f"FlattenedCurve(segments={self._count})"
