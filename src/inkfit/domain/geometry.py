"""Core geometric value types.

This module defines the two leaf value types used throughout inkfit:
- Point: A 2D point (also used as a free vector)
- LineSegment: A straight segment between two points
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable. Doubles as a 2D vector for tangents and
    control-point offsets, so it supports the usual vector arithmetic.

    Attributes:
        x: X coordinate in pixels
        y: Y coordinate in pixels
    """

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Point":
        return Point(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Point":
        return Point(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def is_finite(self) -> bool:
        """Check that neither coordinate is NaN or infinite."""
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True, slots=True)
class LineSegment:
    """A straight line segment.

    A segment whose endpoints coincide is degenerate; callers must check
    ``is_degenerate`` before dividing by its length.

    Attributes:
        start: First endpoint
        end: Second endpoint
    """

    start: Point
    end: Point

    @property
    def vector(self) -> Point:
        """Direction vector from start to end."""
        return self.end - self.start

    def is_degenerate(self) -> bool:
        return self.start == self.end

    def length(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    def slope(self) -> float | None:
        """Slope dy/dx of the supporting line.

        Returns:
            Slope, or None for vertical (and degenerate) segments
        """
        dx = self.end.x - self.start.x
        if dx == 0.0:
            return None
        return (self.end.y - self.start.y) / dx

    def y_intercept(self) -> float | None:
        """Y value where the supporting line crosses x = 0.

        Returns:
            Intercept, or None for vertical segments
        """
        m = self.slope()
        if m is None:
            return None
        # y = mx + b  =>  b = y - mx
        return self.end.y - m * self.end.x

    def reversed(self) -> "LineSegment":
        return LineSegment(self.end, self.start)

    def with_start(self, point: Point) -> "LineSegment":
        return LineSegment(point, self.end)

    def with_end(self, point: Point) -> "LineSegment":
        return LineSegment(self.start, point)

    def flatten(self) -> Iterator["LineSegment"]:
        """Yield the straight-segment view of this edge (itself)."""
        yield self

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with start and end points
        """
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineSegment":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with start and end points

        Returns:
            LineSegment instance
        """
        return cls(start=Point.from_dict(data["start"]), end=Point.from_dict(data["end"]))
