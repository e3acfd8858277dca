"""Tests for geometric primitives."""

import pytest

from inkfit.core.geometry import (
    bounding_box,
    cross,
    distance,
    dot,
    fit_line,
    intersection_parameter,
    lerp,
    normalize,
    perpendicular,
    sample,
    squared_distance,
)
from inkfit.domain import LineSegment, Point
from inkfit.exceptions import FitInputError


class TestVectorOps:
    """Tests for distance and vector products."""

    def test_distance(self) -> None:
        """Test Euclidean and squared distance."""
        assert distance(Point(0, 0), Point(3, 4)) == 5.0
        assert squared_distance(Point(1, 1), Point(4, 5)) == 25.0

    def test_dot_and_cross(self) -> None:
        """Test dot and cross products."""
        assert dot(Point(1, 2), Point(3, 4)) == 11.0
        assert cross(Point(1, 0), Point(0, 1)) == 1.0
        assert cross(Point(0, 1), Point(1, 0)) == -1.0
        assert cross(Point(2, 2), Point(4, 4)) == 0.0

    def test_lerp(self) -> None:
        """Test interpolation at both ends and the middle."""
        a, b = Point(0, 10), Point(10, 20)
        assert lerp(a, b, 0.0) == a
        assert lerp(a, b, 1.0) == b
        assert lerp(a, b, 0.5) == Point(5, 15)

    def test_normalize(self) -> None:
        """Test unit vectors."""
        unit = normalize(Point(3, 4))
        assert unit.x == pytest.approx(0.6)
        assert unit.y == pytest.approx(0.8)

    def test_normalize_zero_vector(self) -> None:
        """Test that the zero vector stays zero instead of becoming NaN."""
        assert normalize(Point(0, 0)) == Point(0.0, 0.0)

    def test_perpendicular(self) -> None:
        """Test counter-clockwise rotation."""
        assert perpendicular(Point(1, 0)) == Point(0, 1)


class TestFitLine:
    """Tests for least-squares line fitting."""

    def test_exact_line(self) -> None:
        """Test points lying exactly on y = 2x + 1."""
        seg = fit_line([Point(0, 1), Point(1, 3), Point(2, 5)])
        assert seg.slope() == pytest.approx(2.0)
        assert seg.y_intercept() == pytest.approx(1.0)
        assert seg.start == Point(0.0, 1.0)
        assert seg.end == Point(2.0, 5.0)

    def test_noisy_points(self) -> None:
        """Test that the fit averages out symmetric noise."""
        seg = fit_line([Point(0, 0), Point(1, 2), Point(2, 2), Point(3, 4)])
        assert seg.slope() == pytest.approx(1.2)
        assert seg.y_intercept() == pytest.approx(0.2)

    def test_shared_x_gives_vertical_segment(self) -> None:
        """Test the all-same-x case without dividing by zero."""
        seg = fit_line([Point(3, 0), Point(3, 5), Point(3, 2)])
        assert seg == LineSegment(Point(3, 0), Point(3, 5))
        assert seg.slope() is None

    def test_zero_slope_gives_horizontal_segment(self) -> None:
        """Test that a flat point set spans its x-extent."""
        seg = fit_line([Point(0, 2), Point(4, 2), Point(9, 2)])
        assert seg == LineSegment(Point(0, 2), Point(9, 2))

    def test_single_point(self) -> None:
        """Test that a single point gives a degenerate segment."""
        assert fit_line([Point(1, 1)]).is_degenerate()

    def test_empty_input(self) -> None:
        """Test that no points is a precondition failure."""
        with pytest.raises(FitInputError):
            fit_line([])


class TestIntersection:
    """Tests for segment intersection and sampling."""

    def test_crossing_segments(self) -> None:
        """Test the parameter of two crossing diagonals."""
        a = LineSegment(Point(0, 0), Point(2, 2))
        b = LineSegment(Point(0, 2), Point(2, 0))
        t = intersection_parameter(a, b)
        assert t == pytest.approx(0.5)
        assert sample(a, t) == Point(1.0, 1.0)

    def test_parameter_refers_to_first_segment(self) -> None:
        """Test that the parameter is measured along the first argument."""
        a = LineSegment(Point(0, 0), Point(4, 0))
        b = LineSegment(Point(1, -1), Point(1, 3))
        assert intersection_parameter(a, b) == pytest.approx(0.25)
        assert intersection_parameter(b, a) == pytest.approx(0.25)

    def test_touching_endpoint_counts(self) -> None:
        """Test that crossings at an endpoint are reported."""
        a = LineSegment(Point(0, 0), Point(2, 0))
        b = LineSegment(Point(2, -1), Point(2, 1))
        assert intersection_parameter(a, b) == pytest.approx(1.0)

    def test_parallel_segments(self) -> None:
        """Test that parallel segments never intersect."""
        a = LineSegment(Point(0, 0), Point(5, 0))
        b = LineSegment(Point(0, 1), Point(5, 1))
        assert intersection_parameter(a, b) is None

    def test_segments_that_miss(self) -> None:
        """Test lines that cross outside the segments."""
        a = LineSegment(Point(0, 0), Point(1, 1))
        b = LineSegment(Point(3, 0), Point(2, 1))
        assert intersection_parameter(a, b) is None

    def test_degenerate_segment(self) -> None:
        """Test that a zero-length segment has no intersection."""
        a = LineSegment(Point(1, 1), Point(1, 1))
        b = LineSegment(Point(0, 0), Point(2, 2))
        assert intersection_parameter(a, b) is None
        assert intersection_parameter(b, a) is None


class TestBoundingBox:
    """Tests for segment bounding boxes."""

    def test_bounding_box(self) -> None:
        """Test the box over all endpoints."""
        segments = [
            LineSegment(Point(1, 5), Point(3, -2)),
            LineSegment(Point(-4, 0), Point(2, 7)),
        ]
        assert bounding_box(segments) == (-4, -2, 3, 7)

    def test_empty(self) -> None:
        """Test that no segments gives no box."""
        assert bounding_box([]) is None
