"""Rasterization of lines, curves and polygons into a pixel buffer.

Thin strokes (brush width 0 or 1) follow the Bresenham path between the
rounded endpoints. Wider strokes stamp a midpoint-circle disc of radius
``width`` at every stepped pixel, giving round caps and joins. Curves are
flattened first. Filled polygons use an even-odd scanline fill.

Every public draw call holds the buffer's write lock for the whole shape.
Pixels outside the buffer are clipped silently.

Key components:
- bresenham: Integer pixel path between two pixels
- circle_offsets: Octant offsets of a midpoint circle
- Rasterizer: Configured rasterizer (flattening constants, fill threads)
- rasterize: Dispatch on shape type with default settings
"""

import logging
import math
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor

from inkfit.config import RasterConfig
from inkfit.core.geometry import intersection_parameter, sample
from inkfit.domain import BezierCurve, Brush, LineSegment, PixelBuffer, PixelCanvas, Point, Polygon
from inkfit.domain.buffer import Rgba16
from inkfit.domain.polygon import PolygonMode

logger = logging.getLogger(__name__)

Shape = LineSegment | BezierCurve | Polygon

SPAN_SNAP = 1e-9


def to_pixel(value: float) -> int:
    """Round a coordinate to the nearest pixel (halves round up)."""
    return math.floor(value + 0.5)


def span_start(value: float) -> int:
    """First pixel column at or right of a scanline crossing.

    Crossings within SPAN_SNAP of a whole number count as that number, so
    rounding noise in the intersection does not add or drop a column.

    Examples:
        >>> span_start(2.0), span_start(2.3), span_start(6.9999999999999)
        (2, 3, 7)
    """
    return math.ceil(value - SPAN_SNAP)


def bresenham(x0: int, y0: int, x1: int, y1: int) -> Iterator[tuple[int, int]]:
    """Yield the pixels of a line from (x0, y0) to (x1, y1), both inclusive.

    Examples:
        >>> list(bresenham(0, 0, 3, 1))
        [(0, 0), (1, 0), (2, 1), (3, 1)]
    """
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        yield x, y
        if x == x1 and y == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy


def circle_offsets(radius: int) -> Iterator[tuple[int, int]]:
    """Yield (x, y) offsets of one octant of a midpoint circle.

    Starts at (0, radius) and stops once x passes y. Mirroring each offset
    across the axes and diagonals gives the full circle.
    """
    x, y = 0, radius
    p = 1 - radius
    while x <= y:
        yield x, y
        x += 1
        if p < 0:
            p += 2 * x + 1
        else:
            y -= 1
            p += 2 * (x - y) + 1


def stamp_disc(canvas: PixelCanvas, cx: int, cy: int, radius: int, rgba: Rgba16) -> None:
    """Fill a disc by drawing the four spans of every octant step."""
    for x, y in circle_offsets(radius):
        canvas.hline(cy + y, cx - x, cx + x, rgba)
        canvas.hline(cy + x, cx - y, cx + y, rgba)
        canvas.hline(cy - y, cx - x, cx + x, rgba)
        canvas.hline(cy - x, cx - y, cx + y, rgba)


def clip_segment(
    segment: LineSegment,
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
) -> LineSegment | None:
    """Clip a segment to a rectangle (Liang-Barsky).

    Returns:
        The part of the segment inside the rectangle, or None if it misses
    """
    x0, y0 = segment.start.x, segment.start.y
    dx = segment.end.x - x0
    dy = segment.end.y - y0
    t0, t1 = 0.0, 1.0

    for p, q in ((-dx, x0 - min_x), (dx, max_x - x0), (-dy, y0 - min_y), (dy, max_y - y0)):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        r = q / p
        if p < 0.0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)

    if t0 == 0.0 and t1 == 1.0:
        return segment
    return LineSegment(
        Point(x0 + t0 * dx, y0 + t0 * dy),
        Point(x0 + t1 * dx, y0 + t1 * dy),
    )


class Rasterizer:
    """Draws shapes into a PixelBuffer.

    Example:
        rasterizer = Rasterizer(RasterConfig(parallel_min_rows=16))
        rasterizer.rasterize(buffer, polygon, Brush(colors.BLACK, 1))
    """

    def __init__(self, config: RasterConfig | None = None) -> None:
        self.config = config or RasterConfig()

    def draw_line(self, buffer: PixelBuffer, segment: LineSegment, brush: Brush) -> None:
        with buffer.write() as canvas:
            self._stroke(canvas, (segment,), brush)

    def draw_curve(self, buffer: PixelBuffer, curve: BezierCurve, brush: Brush) -> None:
        """Flatten a curve and stroke every resulting segment."""
        with buffer.write() as canvas:
            self._stroke(canvas, self._flatten(curve), brush)

    def draw_polygon(self, buffer: PixelBuffer, polygon: Polygon, brush: Brush) -> None:
        """Outline or fill a polygon according to its mode."""
        if polygon.mode is PolygonMode.FILL:
            self.fill_polygon(buffer, polygon, brush)
            return
        with buffer.write() as canvas:
            self._stroke(canvas, self._straight_edges(polygon), brush)

    def fill_polygon(self, buffer: PixelBuffer, polygon: Polygon, brush: Brush) -> None:
        """Fill a polygon with the even-odd rule, one scanline at a time.

        Pixel (x, y) is filled when the point (x, y) lies inside the shape,
        with both axes half-open: each edge covers the rows min_y <= y < max_y
        and a span between crossings x0 and x1 covers the columns
        x0 <= x < x1. A vertex shared by two edges is counted once and
        polygons sharing an edge never paint the same pixel. Horizontal
        edges are skipped. Spans are thin regardless of the brush width.
        A row with an odd number of crossings drops the last one.
        """
        edges = [
            seg for seg in self._straight_edges(polygon)
            if seg.start.y != seg.end.y
        ]
        if not edges:
            return

        xs = [c for seg in edges for c in (seg.start.x, seg.end.x)]
        ys = [c for seg in edges for c in (seg.start.y, seg.end.y)]
        box_min_x = float(math.floor(min(xs)))
        box_max_x = float(math.ceil(max(xs)))
        rgba = brush.color.to_rgba16()

        with buffer.write() as canvas:
            first_row = max(math.floor(min(ys)), 0)
            last_row = min(math.ceil(max(ys)), canvas.height - 1)
            if first_row > last_row:
                return
            rows = range(first_row, last_row + 1)

            def fill_row(y: int) -> None:
                probe = LineSegment(Point(box_min_x, y), Point(box_max_x, y))
                crossings = sorted(self._row_crossings(edges, probe, y))
                for i in range(0, len(crossings) - 1, 2):
                    first = span_start(crossings[i])
                    last = span_start(crossings[i + 1]) - 1
                    if first <= last:
                        canvas.hline(y, first, last, rgba)

            if len(rows) >= self.config.parallel_min_rows:
                # Rows are disjoint slices of the pixel array
                with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                    list(executor.map(fill_row, rows))
            else:
                for y in rows:
                    fill_row(y)

    def rasterize(self, buffer: PixelBuffer, shape: Shape, brush: Brush) -> None:
        """Draw any supported shape.

        Raises:
            TypeError: If shape is not a LineSegment, BezierCurve or Polygon
        """
        if isinstance(shape, LineSegment):
            self.draw_line(buffer, shape, brush)
        elif isinstance(shape, BezierCurve):
            self.draw_curve(buffer, shape, brush)
        elif isinstance(shape, Polygon):
            self.draw_polygon(buffer, shape, brush)
        else:
            raise TypeError(f"Cannot rasterize {type(shape).__name__}")

    def _flatten(self, curve: BezierCurve) -> Iterable[LineSegment]:
        return curve.flatten(bias=self.config.flatten_bias, divisor=self.config.flatten_divisor)

    def _straight_edges(self, polygon: Polygon) -> Iterator[LineSegment]:
        for seg in polygon.as_straight_edges(
            bias=self.config.flatten_bias, divisor=self.config.flatten_divisor
        ):
            if seg.start.is_finite() and seg.end.is_finite():
                yield seg
            else:
                logger.debug("Skipping polygon edge with non-finite coordinates: %s", seg)

    @staticmethod
    def _row_crossings(edges: list[LineSegment], probe: LineSegment, y: int) -> Iterator[float]:
        for edge in edges:
            low, high = sorted((edge.start.y, edge.end.y))
            if not low <= y < high:
                continue
            t = intersection_parameter(edge, probe)
            if t is not None:
                yield sample(edge, t).x

    def _stroke(self, canvas: PixelCanvas, segments: Iterable[LineSegment], brush: Brush) -> None:
        """Stroke segments onto an already locked canvas.

        The pixel path always runs between the segment's own rounded
        endpoints; the visible window only decides which of its pixels are
        drawn, so a line keeps its pixels when the buffer is resized.
        """
        rgba = brush.color.to_rgba16()
        radius = brush.width if brush.width > 1 else 0
        # Anything further out than the stamp radius cannot touch the buffer
        margin = radius + 1
        min_x, min_y = -margin, -margin
        max_x, max_y = canvas.width - 1 + margin, canvas.height - 1 + margin

        for segment in segments:
            if not (segment.start.is_finite() and segment.end.is_finite()):
                logger.debug("Skipping segment with non-finite coordinates: %s", segment)
                continue
            if clip_segment(segment, min_x, min_y, max_x, max_y) is None:
                continue

            path = bresenham(
                to_pixel(segment.start.x),
                to_pixel(segment.start.y),
                to_pixel(segment.end.x),
                to_pixel(segment.end.y),
            )
            entered = False
            for x, y in path:
                if not (min_x <= x <= max_x and min_y <= y <= max_y):
                    # x and y are monotonic along the path, so it never comes back
                    if entered:
                        break
                    continue
                entered = True
                if radius:
                    stamp_disc(canvas, x, y, radius, rgba)
                else:
                    canvas.set_pixel(x, y, rgba)


_default_rasterizer = Rasterizer()


def draw_line(buffer: PixelBuffer, segment: LineSegment, brush: Brush) -> None:
    """Stroke a line segment with default settings."""
    _default_rasterizer.draw_line(buffer, segment, brush)


def draw_curve(buffer: PixelBuffer, curve: BezierCurve, brush: Brush) -> None:
    """Stroke a Bezier curve with default settings."""
    _default_rasterizer.draw_curve(buffer, curve, brush)


def draw_polygon(buffer: PixelBuffer, polygon: Polygon, brush: Brush) -> None:
    """Outline or fill a polygon with default settings."""
    _default_rasterizer.draw_polygon(buffer, polygon, brush)


def fill_polygon(buffer: PixelBuffer, polygon: Polygon, brush: Brush) -> None:
    """Scanline-fill a polygon with default settings."""
    _default_rasterizer.fill_polygon(buffer, polygon, brush)


def rasterize(target: PixelBuffer, shape: Shape, brush: Brush) -> None:
    """Draw a line, curve or polygon onto target with default settings."""
    _default_rasterizer.rasterize(target, shape, brush)
