"""Internal least-squares helpers for the curve fitter.

This is an internal module containing the numerical pieces of the Graphics
Gems fitting method. Not intended for public use.
"""

import math
from collections.abc import Sequence

from inkfit.core.geometry import distance, dot, normalize, perpendicular, squared_distance
from inkfit.domain import BezierCurve, Point
from inkfit.domain.curve import de_casteljau, derivative_points

# Relative threshold below which the normal-equations determinant counts as zero
DETERMINANT_EPSILON = 1e-12

# Solved handle lengths shorter than this fraction of the chord are rejected
MIN_ALPHA_RATIO = 1e-6


def b0(u: float) -> float:
    s = 1.0 - u
    return s * s * s


def b1(u: float) -> float:
    s = 1.0 - u
    return 3.0 * u * s * s


def b2(u: float) -> float:
    s = 1.0 - u
    return 3.0 * u * u * s


def b3(u: float) -> float:
    return u * u * u


def chord_length_parameterize(points: Sequence[Point], start: int, end: int) -> list[float]:
    """Assign parameters in [0, 1] by cumulative chord length.

    A run whose points all coincide gets uniformly spaced parameters.
    """
    u = [0.0]
    for i in range(start + 1, end + 1):
        u.append(u[-1] + distance(points[i - 1], points[i]))

    total = u[-1]
    count = end - start
    if total == 0.0 or not math.isfinite(total):
        return [i / count for i in range(count + 1)]
    return [value / total for value in u]


def generate_bezier(
    points: Sequence[Point],
    start: int,
    end: int,
    u: Sequence[float],
    left_tangent: Point,
    right_tangent: Point,
) -> tuple[BezierCurve, bool]:
    """Least-squares cubic through a run with fixed end tangents.

    Solves the 2x2 normal equations for the handle lengths alpha_l and
    alpha_r by Cramer's rule. A singular system or a handle length that is
    negative or too small falls back to the Wu/Barsky estimate of one third
    of the chord.

    Args:
        points: All input points
        start: Index of the first point of the run
        end: Index of the last point of the run
        u: Parameter for each point of the run
        left_tangent: Unit tangent at the start
        right_tangent: Unit tangent at the end (pointing back into the run)

    Returns:
        Tuple of (curve, used_fallback)
    """
    p0 = points[start]
    p3 = points[end]

    c00 = c01 = c11 = 0.0
    x0 = x1 = 0.0
    for i, ui in enumerate(u):
        a1 = left_tangent * b1(ui)
        a2 = right_tangent * b2(ui)
        c00 += dot(a1, a1)
        c01 += dot(a1, a2)
        c11 += dot(a2, a2)

        tmp = points[start + i] - (p0 * (b0(ui) + b1(ui)) + p3 * (b2(ui) + b3(ui)))
        x0 += dot(a1, tmp)
        x1 += dot(a2, tmp)

    det = c00 * c11 - c01 * c01
    seg_length = distance(p0, p3)
    min_alpha = MIN_ALPHA_RATIO * seg_length

    alpha_l = alpha_r = -1.0
    if abs(det) > DETERMINANT_EPSILON * c00 * c11:
        alpha_l = (x0 * c11 - x1 * c01) / det
        alpha_r = (c00 * x1 - c01 * x0) / det

    if not (alpha_l >= min_alpha and alpha_r >= min_alpha):
        dist = seg_length / 3.0
        curve = BezierCurve.from_points(
            p0, p0 + left_tangent * dist, p3 + right_tangent * dist, p3
        )
        return curve, True

    curve = BezierCurve.from_points(
        p0, p0 + left_tangent * alpha_l, p3 + right_tangent * alpha_r, p3
    )
    return curve, False


def compute_max_error(
    points: Sequence[Point],
    start: int,
    end: int,
    curve: BezierCurve,
    u: Sequence[float],
) -> tuple[float, int]:
    """Largest squared distance between run points and the curve.

    Only interior points are measured since the endpoints are interpolated.

    Returns:
        Tuple of (max_squared_error, absolute index of the worst point)
    """
    control = curve.control_points
    max_error = 0.0
    split_index = (start + end + 1) // 2
    for i in range(start + 1, end):
        err = squared_distance(de_casteljau(control, u[i - start]), points[i])
        if err > max_error:
            max_error = err
            split_index = i
    return max_error, split_index


def newton_raphson_root_find(control: Sequence[Point], point: Point, u: float) -> float:
    """Improve one parameter so the curve point is closer to point.

    One Newton step on f(u) = (Q(u) - P) . Q'(u), with
    f'(u) = Q'(u) . Q'(u) + (Q(u) - P) . Q''(u).
    A zero or non-finite denominator leaves u unchanged.
    """
    q1 = derivative_points(control)
    q2 = derivative_points(q1)

    diff = de_casteljau(control, u) - point
    q1_u = de_casteljau(q1, u)
    q2_u = de_casteljau(q2, u)

    numerator = dot(diff, q1_u)
    denominator = dot(q1_u, q1_u) + dot(diff, q2_u)
    if denominator == 0.0 or not math.isfinite(denominator):
        return u

    improved = u - numerator / denominator
    if not math.isfinite(improved):
        return u
    return min(max(improved, 0.0), 1.0)


def reparameterize(
    points: Sequence[Point],
    start: int,
    end: int,
    u: Sequence[float],
    curve: BezierCurve,
) -> list[float]:
    """Apply one Newton-Raphson step to every parameter of a run."""
    control = curve.control_points
    return [
        newton_raphson_root_find(control, points[start + i], ui) for i, ui in enumerate(u)
    ]


def left_tangent(points: Sequence[Point], start: int) -> Point:
    return normalize(points[start + 1] - points[start])


def right_tangent(points: Sequence[Point], end: int) -> Point:
    return normalize(points[end - 1] - points[end])


def center_tangent(points: Sequence[Point], center: int) -> Point:
    """Unit tangent at an interior point, pointing back toward the start.

    Averages the two chords meeting at the point. When they cancel (the
    stroke doubles back on itself) the normal of the incoming chord is used.
    """
    v1 = points[center - 1] - points[center]
    v2 = points[center] - points[center + 1]
    tangent = normalize((v1 + v2) / 2.0)
    if tangent.x == 0.0 and tangent.y == 0.0:
        return normalize(perpendicular(v1))
    return tangent
