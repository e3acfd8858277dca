"""Tests for rasterization."""

import math

import numpy as np
import pytest

from inkfit.config import RasterConfig
from inkfit.core.raster import (
    Rasterizer,
    bresenham,
    circle_offsets,
    clip_segment,
    draw_curve,
    draw_line,
    fill_polygon,
    rasterize,
    to_pixel,
)
from inkfit.domain import BezierCurve, Brush, LineSegment, PixelBuffer, Point, Polygon, PolygonMode, colors

RED = (65535, 0, 0, 65535)


def square(x0: float, y0: float, x1: float, y1: float, mode: PolygonMode = PolygonMode.OUTLINE) -> Polygon:
    corners = [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]
    return Polygon(
        [LineSegment(corners[i], corners[(i + 1) % 4]) for i in range(4)],
        mode,
    )


@pytest.fixture
def buffer() -> PixelBuffer:
    """Create an empty 20x20 buffer."""
    return PixelBuffer(20, 20)


@pytest.fixture
def thin() -> Brush:
    return Brush(colors.RED, 1)


class TestPrimitives:
    """Tests for the pixel-level helpers."""

    def test_to_pixel_rounds_halves_up(self) -> None:
        """Test rounding to the nearest pixel."""
        assert to_pixel(2.4) == 2
        assert to_pixel(2.5) == 3
        assert to_pixel(-0.5) == 0
        assert to_pixel(-0.6) == -1

    def test_bresenham_single_pixel(self) -> None:
        """Test a zero-length line."""
        assert list(bresenham(4, 4, 4, 4)) == [(4, 4)]

    @pytest.mark.parametrize("end", [(7, 2), (2, 7), (-5, 3), (3, -6), (-4, -4), (0, 9)])
    def test_bresenham_is_connected(self, end: tuple[int, int]) -> None:
        """Test that every step moves to an 8-connected neighbour."""
        pixels = list(bresenham(0, 0, *end))
        assert pixels[0] == (0, 0)
        assert pixels[-1] == end
        assert len(pixels) == max(abs(end[0]), abs(end[1])) + 1
        for (ax, ay), (bx, by) in zip(pixels, pixels[1:]):
            assert max(abs(ax - bx), abs(ay - by)) == 1

    def test_circle_offsets(self) -> None:
        """Test the first octant of a radius-3 circle."""
        assert list(circle_offsets(3)) == [(0, 3), (1, 3), (2, 2)]
        assert list(circle_offsets(0)) == [(0, 0)]

    def test_clip_segment_inside(self) -> None:
        """Test that a segment inside the box is returned unchanged."""
        seg = LineSegment(Point(1, 1), Point(5, 5))
        assert clip_segment(seg, 0, 0, 10, 10) is seg

    def test_clip_segment_crossing(self) -> None:
        """Test that a long segment is cut at the box edges."""
        seg = LineSegment(Point(-10, 5), Point(30, 5))
        clipped = clip_segment(seg, 0, 0, 10, 10)
        assert clipped == LineSegment(Point(0, 5), Point(10, 5))

    def test_clip_segment_outside(self) -> None:
        """Test that a segment missing the box is dropped."""
        assert clip_segment(LineSegment(Point(-5, -5), Point(-1, 20)), 0, 0, 10, 10) is None
        assert clip_segment(LineSegment(Point(0, 12), Point(10, 12)), 0, 0, 10, 10) is None


class TestDrawLine:
    """Tests for stroking line segments."""

    def test_horizontal_thin_line(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that a width-1 horizontal line sets exactly its pixels."""
        draw_line(buffer, LineSegment(Point(0, 0), Point(10, 0)), thin)
        mask = buffer.painted_mask()
        assert mask.sum() == 11
        assert mask[0, 0:11].all()
        assert buffer.pixel(5, 0) == RED

    def test_width_zero_is_thin(self, buffer: PixelBuffer) -> None:
        """Test that width 0 draws the same hairline as width 1."""
        draw_line(buffer, LineSegment(Point(0, 0), Point(10, 0)), Brush(colors.RED, 0))
        assert buffer.painted_mask().sum() == 11

    def test_endpoints_are_rounded(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that fractional endpoints snap to the nearest pixel."""
        draw_line(buffer, LineSegment(Point(1.4, 2.6), Point(4.5, 2.6)), thin)
        mask = buffer.painted_mask()
        assert mask[3, 1:6].all()
        assert mask.sum() == 5

    def test_line_is_clipped(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that a line running off the buffer keeps only visible pixels."""
        draw_line(buffer, LineSegment(Point(-10, -10), Point(30, 30)), thin)
        mask = buffer.painted_mask()
        assert mask.sum() == 20
        assert np.array_equal(mask, np.eye(20, dtype=bool))

    @pytest.mark.parametrize(
        "start, end",
        [
            ((-30, 0), (19, 7)),
            ((-7, -3), (25, 11)),
            ((5, -40), (12, 30)),
            ((-13.4, 18.6), (31.2, 2.3)),
        ],
    )
    def test_partly_visible_line_keeps_its_path(
        self, thin: Brush, start: tuple[float, float], end: tuple[float, float]
    ) -> None:
        """Test that the visible pixels do not depend on the buffer size."""
        shift = 40
        small = PixelBuffer(20, 20)
        draw_line(small, LineSegment(Point(*start), Point(*end)), thin)
        large = PixelBuffer(100, 100)
        shifted = LineSegment(
            Point(start[0] + shift, start[1] + shift), Point(end[0] + shift, end[1] + shift)
        )
        draw_line(large, shifted, thin)

        window = large.painted_mask()[shift : shift + 20, shift : shift + 20]
        assert small.painted_mask().any()
        assert np.array_equal(small.painted_mask(), window)

    def test_partly_visible_line_follows_bresenham(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that the drawn pixels are the in-bounds part of the full path."""
        draw_line(buffer, LineSegment(Point(-30, 0), Point(19, 7)), thin)
        expected = {(x, y) for x, y in bresenham(-30, 0, 19, 7) if 0 <= x < 20 and 0 <= y < 20}
        ys, xs = np.nonzero(buffer.painted_mask())
        assert set(zip(xs.tolist(), ys.tolist())) == expected

    def test_line_entirely_outside(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that nothing is drawn for invisible lines."""
        draw_line(buffer, LineSegment(Point(-50, 5), Point(-30, 8)), thin)
        assert not buffer.painted_mask().any()

    def test_wide_point_stamps_disc(self, buffer: PixelBuffer) -> None:
        """Test that a wide brush stamps a disc of radius equal to the width."""
        draw_line(buffer, LineSegment(Point(5, 5), Point(5, 5)), Brush(colors.RED, 3))
        mask = buffer.painted_mask()
        assert mask.sum() == 37
        assert mask[2, 5] and not mask[1, 5]
        assert mask[5, 8] and not mask[5, 9]

    def test_wide_line_thickness(self, buffer: PixelBuffer) -> None:
        """Test that a width-2 line covers two rows either side."""
        draw_line(buffer, LineSegment(Point(4, 10), Point(14, 10)), Brush(colors.RED, 2))
        mask = buffer.painted_mask()
        assert mask[8:13, 9].all()
        assert not mask[7, 9] and not mask[13, 9]

    def test_wide_line_near_edge(self, buffer: PixelBuffer) -> None:
        """Test that a disc partly outside the buffer is clipped, not dropped."""
        draw_line(buffer, LineSegment(Point(-2, 5), Point(-2, 5)), Brush(colors.RED, 3))
        mask = buffer.painted_mask()
        assert mask[5, 0] and mask[5, 1]
        assert not mask[5, 2]

    def test_non_finite_segment_is_skipped(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that NaN coordinates draw nothing instead of raising."""
        draw_line(buffer, LineSegment(Point(math.nan, 0), Point(5, 5)), thin)
        assert not buffer.painted_mask().any()

    def test_draw_marks_buffer_dirty(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that drawing sets the dirty flag."""
        buffer.take_dirty()
        draw_line(buffer, LineSegment(Point(0, 0), Point(1, 1)), thin)
        assert buffer.take_dirty()


class TestDrawCurve:
    """Tests for stroking Bezier curves."""

    def test_straight_curve(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that a straight curve paints a contiguous row."""
        curve = BezierCurve.from_points(Point(0, 5), Point(3, 5), Point(6, 5), Point(9, 5))
        draw_curve(buffer, curve, thin)
        mask = buffer.painted_mask()
        assert mask[5, 0:10].all()
        assert mask.sum() == 10

    def test_curve_passes_through_endpoints(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that the stroke starts and ends at the curve endpoints."""
        curve = BezierCurve.from_points(Point(2, 17), Point(2, 2), Point(17, 2), Point(17, 17))
        draw_curve(buffer, curve, thin)
        mask = buffer.painted_mask()
        assert mask[17, 2] and mask[17, 17]
        assert not mask[17, 10]


class TestFillPolygon:
    """Tests for scanline polygon fill."""

    def test_square_fill(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that rows and columns are both half-open on a square."""
        fill_polygon(buffer, square(2, 2, 8, 8), thin)
        mask = buffer.painted_mask()
        assert mask.sum() == 36
        assert mask[2:8, 2:8].all()
        assert not mask[8].any()
        assert not mask[:, 8].any()

    def test_triangle_fill(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test a right triangle."""
        triangle = Polygon([
            LineSegment(Point(0, 0), Point(10, 0)),
            LineSegment(Point(10, 0), Point(0, 10)),
            LineSegment(Point(0, 10), Point(0, 0)),
        ])
        fill_polygon(buffer, triangle, thin)
        mask = buffer.painted_mask()
        assert mask.sum() == 55
        assert mask[0, 0:10].all() and not mask[0, 10]
        assert mask[9, 0] and not mask[9, 1]

    def test_shared_edge_is_painted_once(self, buffer: PixelBuffer) -> None:
        """Test that neighbouring squares tile without overlap or gap."""
        fill_polygon(buffer, square(2, 2, 8, 8), Brush(colors.RED, 1))
        fill_polygon(buffer, square(8, 2, 14, 8), Brush(colors.BLUE, 1))
        mask = buffer.painted_mask()
        assert buffer.count_pixels(RED) == 36
        assert buffer.count_pixels(colors.BLUE.to_rgba16()) == 36
        assert mask[2:8, 2:14].all()
        assert mask.sum() == 72

    def test_fractional_crossings(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that spans start at the first column right of each crossing."""
        fill_polygon(buffer, square(1.5, 1, 5.2, 3), thin)
        mask = buffer.painted_mask()
        assert mask[1:3, 2:6].all()
        assert not mask[1:3, 1].any() and not mask[1:3, 6].any()
        assert mask.sum() == 8

    def test_even_odd_hole(self) -> None:
        """Test that a square inside a square is left unfilled."""
        buffer = PixelBuffer(30, 30)
        outer = square(0, 0, 20, 20).edges
        inner = square(5, 5, 15, 15).edges
        fill_polygon(buffer, Polygon(outer + inner), Brush(colors.RED, 1))
        mask = buffer.painted_mask()
        assert mask[2, 2]
        assert not mask[10, 10]
        assert mask[10, 2] and mask[10, 18]

    def test_single_open_edge_fills_nothing(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that an unmatched crossing is dropped."""
        fill_polygon(buffer, Polygon([LineSegment(Point(0, 0), Point(5, 5))]), thin)
        assert not buffer.painted_mask().any()

    def test_horizontal_only_polygon(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that a polygon of horizontal edges fills nothing."""
        poly = Polygon([LineSegment(Point(0, 3), Point(9, 3)), LineSegment(Point(9, 3), Point(0, 3))])
        fill_polygon(buffer, poly, thin)
        assert not buffer.painted_mask().any()

    def test_polygon_off_buffer(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that a polygon below the buffer is ignored."""
        fill_polygon(buffer, square(0, 40, 10, 50), thin)
        assert not buffer.painted_mask().any()

    def test_parallel_fill_matches_serial(self) -> None:
        """Test that threaded row filling gives identical pixels."""
        diamond = Polygon([
            LineSegment(Point(50, 2), Point(97, 50)),
            LineSegment(Point(97, 50), Point(50, 97)),
            LineSegment(Point(50, 97), Point(3, 50)),
            LineSegment(Point(3, 50), Point(50, 2)),
        ])
        brush = Brush(colors.RED, 1)

        serial = PixelBuffer(100, 100)
        Rasterizer(RasterConfig(parallel_min_rows=1000)).fill_polygon(serial, diamond, brush)
        parallel = PixelBuffer(100, 100)
        Rasterizer(RasterConfig(parallel_min_rows=1, max_workers=4)).fill_polygon(parallel, diamond, brush)

        assert serial.painted_mask().sum() > 0
        assert np.array_equal(serial.snapshot(), parallel.snapshot())

    def test_curved_edges_are_flattened(self) -> None:
        """Test filling a shape closed by a curve."""
        buffer = PixelBuffer(40, 40)
        arch = BezierCurve.from_points(Point(5, 30), Point(5, 0), Point(35, 0), Point(35, 30))
        poly = Polygon([arch, LineSegment(Point(35, 30), Point(5, 30))], PolygonMode.FILL)
        fill_polygon(buffer, poly, Brush(colors.RED, 1))
        mask = buffer.painted_mask()
        assert mask[25, 20]
        assert not mask[2, 2]

    def test_preflattened_polygon_fills_identically(self) -> None:
        """Test that flattening edges up front gives the same pixels."""
        arch = BezierCurve.from_points(Point(5, 30), Point(5, 0), Point(35, 0), Point(35, 30))
        closing = LineSegment(Point(35, 30), Point(5, 30))
        brush = Brush(colors.RED, 1)

        curved = PixelBuffer(40, 40)
        fill_polygon(curved, Polygon([arch, closing]), brush)
        straight = PixelBuffer(40, 40)
        fill_polygon(straight, Polygon([*arch.flatten(), closing]), brush)

        assert np.array_equal(curved.snapshot(), straight.snapshot())


class TestRasterize:
    """Tests for shape dispatch."""

    def test_polygon_outline(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that outline mode strokes only the edges."""
        rasterize(buffer, square(2, 2, 8, 8), thin)
        mask = buffer.painted_mask()
        assert mask.sum() == 24
        assert not mask[5, 5]

    def test_polygon_fill_mode(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that fill mode fills the interior."""
        rasterize(buffer, square(2, 2, 8, 8, PolygonMode.FILL), thin)
        assert buffer.painted_mask()[5, 5]

    def test_dispatch_line_and_curve(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that lines and curves go to their drawing routines."""
        rasterize(buffer, LineSegment(Point(0, 0), Point(3, 0)), thin)
        rasterize(buffer, BezierCurve.from_points(Point(0, 9), Point(1, 9), Point(2, 9), Point(3, 9)), thin)
        mask = buffer.painted_mask()
        assert mask[0, 0:4].all()
        assert mask[9, 0:4].all()

    def test_unsupported_shape(self, buffer: PixelBuffer, thin: Brush) -> None:
        """Test that unknown shapes are rejected."""
        with pytest.raises(TypeError):
            rasterize(buffer, Point(1, 1), thin)  # type: ignore[arg-type]

    def test_brush_color(self, buffer: PixelBuffer) -> None:
        """Test that pixels take the brush color."""
        rasterize(buffer, LineSegment(Point(0, 0), Point(0, 4)), Brush(colors.BLUE, 1))
        assert buffer.count_pixels(colors.BLUE.to_rgba16()) == 5
