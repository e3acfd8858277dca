"""Fitting cubic Bezier curves to freehand point sequences.

This module implements the least-squares fitting method from Graphics Gems
("An Algorithm for Automatically Fitting Digitized Curves"):

1. Parameterize a run of points by chord length
2. Solve for the two handle lengths along fixed end tangents
3. Measure the worst squared error
4. If close, refine the parameters with Newton-Raphson and retry
5. Otherwise split at the worst point and fit both halves

Recursion is replaced by an explicit worklist, so deep splits cannot
exhaust the interpreter stack and curves come out in input order.

Key components:
- fit_curve: Functional entry point returning the curves only
- fit_curve_detailed: Same, with per-curve diagnostics
- CurveFitter: Configured fitter used by the batch processor and CLI
"""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from inkfit.config import FitConfig
from inkfit.core._bezier import (
    center_tangent,
    chord_length_parameterize,
    compute_max_error,
    generate_bezier,
    left_tangent,
    reparameterize,
    right_tangent,
)
from inkfit.core.geometry import distance
from inkfit.domain import BezierCurve, Point
from inkfit.exceptions import FitInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitSegment:
    """Diagnostics for one fitted curve.

    Attributes:
        curve: The fitted curve
        start_index: Index of the first point it covers
        end_index: Index of the last point it covers (shared with the next curve)
        parameters: Curve parameter assigned to each covered point
        max_error: Largest squared distance between a covered point and the curve
        used_fallback: True if the handles came from the chord heuristic
    """

    curve: BezierCurve
    start_index: int
    end_index: int
    parameters: tuple[float, ...]
    max_error: float
    used_fallback: bool

    @property
    def point_count(self) -> int:
        return self.end_index - self.start_index + 1


@dataclass
class FitResult:
    """Outcome of fitting one point sequence.

    Indices in the segments refer to ``points``, the input after
    consecutive duplicates were collapsed.
    """

    points: tuple[Point, ...] = ()
    error: float = 0.0
    segments: list[FitSegment] = field(default_factory=list)
    splits: int = 0
    reparameterizations: int = 0

    @property
    def curves(self) -> list[BezierCurve]:
        return [segment.curve for segment in self.segments]

    @property
    def max_error(self) -> float:
        return max((segment.max_error for segment in self.segments), default=0.0)

    @property
    def fallback_count(self) -> int:
        return sum(1 for segment in self.segments if segment.used_fallback)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the curves and counters for IPC.

        Returns:
            Dictionary with curves and summary fields
        """
        return {
            "curves": [curve.to_dict() for curve in self.curves],
            "point_count": len(self.points),
            "splits": self.splits,
            "reparameterizations": self.reparameterizations,
            "max_error": self.max_error,
        }


def collapse_duplicates(points: Iterable[Point]) -> list[Point]:
    """Drop points identical to their predecessor."""
    collapsed: list[Point] = []
    for point in points:
        if not collapsed or collapsed[-1] != point:
            collapsed.append(point)
    return collapsed


class CurveFitter:
    """Fits sequences of points with cubic Bezier curves.

    Example:
        fitter = CurveFitter(FitConfig(error_tolerance=2.0))
        curves = fitter.fit(points).curves
    """

    def __init__(self, config: FitConfig | None = None) -> None:
        self.config = config or FitConfig()

    def fit(
        self,
        points: Sequence[Point],
        error: float | None = None,
        *,
        strict: bool = False,
    ) -> FitResult:
        """Fit a point sequence.

        Args:
            points: Ordered input points
            error: Squared-distance tolerance (config default if None)
            strict: Raise instead of returning an empty result for fewer
                than two distinct points

        Returns:
            FitResult whose curves share endpoints and follow input order

        Raises:
            FitInputError: If error is negative or not finite, a coordinate
                is not finite, or strict is set and the input is too small
        """
        if error is None:
            error = self.config.error_tolerance
        if not math.isfinite(error) or error < 0.0:
            raise FitInputError(f"error tolerance must be a finite value >= 0, got {error!r}")

        pts = list(points)
        for index, point in enumerate(pts):
            if not point.is_finite():
                raise FitInputError(f"point {index} has non-finite coordinates {point.to_tuple()}")

        if self.config.collapse_duplicates:
            pts = collapse_duplicates(pts)

        result = FitResult(points=tuple(pts), error=error)
        if len(pts) < 2:
            if strict:
                raise FitInputError(f"need at least 2 distinct points, got {len(pts)}")
            return result

        last = len(pts) - 1
        worklist: list[tuple[int, int, Point, Point]] = [
            (0, last, left_tangent(pts, 0), right_tangent(pts, last))
        ]
        while worklist:
            start, end, t_left, t_right = worklist.pop()
            segment, split = self._fit_run(pts, start, end, t_left, t_right, error, result)
            if segment is not None:
                result.segments.append(segment)
                continue

            # Each half must keep at least two points
            split = min(max(split, start + 1), end - 1)
            t_center = center_tangent(pts, split)
            result.splits += 1
            # Right half first so the left half is fitted first
            worklist.append((split, end, -t_center, t_right))
            worklist.append((start, split, t_left, t_center))

        logger.debug(
            "Fitted %d points with %d curves (splits=%d, reparameterizations=%d)",
            len(pts), len(result.segments), result.splits, result.reparameterizations,
        )
        return result

    def _fit_run(
        self,
        points: list[Point],
        start: int,
        end: int,
        t_left: Point,
        t_right: Point,
        error: float,
        result: FitResult,
    ) -> tuple[FitSegment | None, int]:
        """Try to fit points[start..end] with a single curve.

        Returns:
            Tuple of (segment, split_index); segment is None when the run
            must be split at split_index
        """
        p0 = points[start]
        p3 = points[end]

        if end - start == 1:
            dist = distance(p0, p3) / 3.0
            curve = BezierCurve.from_points(p0, p0 + t_left * dist, p3 + t_right * dist, p3)
            return FitSegment(curve, start, end, (0.0, 1.0), 0.0, True), end

        u = chord_length_parameterize(points, start, end)
        curve, used_fallback = generate_bezier(points, start, end, u, t_left, t_right)
        max_error, split = compute_max_error(points, start, end, curve, u)
        if max_error <= error:
            return FitSegment(curve, start, end, tuple(u), max_error, used_fallback), split

        if used_fallback:
            logger.debug("Chord-length handle fallback for run %d..%d", start, end)

        # Close misses get a few rounds of reparameterization before splitting
        if max_error < error * error:
            for _ in range(self.config.max_iterations):
                u = reparameterize(points, start, end, u, curve)
                curve, used_fallback = generate_bezier(points, start, end, u, t_left, t_right)
                max_error, split = compute_max_error(points, start, end, curve, u)
                result.reparameterizations += 1
                if max_error <= error:
                    return FitSegment(curve, start, end, tuple(u), max_error, used_fallback), split

        return None, split


def fit_curve_detailed(
    points: Sequence[Point],
    error: float,
    *,
    max_iterations: int = 4,
    strict: bool = False,
) -> FitResult:
    """Fit a point sequence and return per-curve diagnostics.

    See ``CurveFitter.fit``.
    """
    fitter = CurveFitter(FitConfig(max_iterations=max_iterations))
    return fitter.fit(points, error, strict=strict)


def fit_curve(
    points: Sequence[Point],
    error: float,
    *,
    max_iterations: int = 4,
    strict: bool = False,
) -> list[BezierCurve]:
    """Fit a minimal sequence of cubic Bezier curves to points.

    Args:
        points: Ordered input points
        error: Maximum squared distance from any input point to its curve
        max_iterations: Newton-Raphson rounds tried before splitting
        strict: Raise FitInputError on fewer than two distinct points
            instead of returning an empty list

    Returns:
        Curves in input order; adjacent curves share an endpoint exactly

    Examples:
        >>> curves = fit_curve([Point(0, 0), Point(5, 0), Point(10, 0)], 0.0)
        >>> len(curves)
        1
    """
    return fit_curve_detailed(
        points, error, max_iterations=max_iterations, strict=strict
    ).curves
