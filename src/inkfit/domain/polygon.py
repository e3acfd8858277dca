"""Polygon representation.

A polygon is an ordered, cyclic sequence of edges. Each edge is either a
straight LineSegment or a BezierCurve; both expose ``flatten()`` so the
polygon can offer a purely straight-edge view to the rasterizer.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from inkfit.domain.curve import FLATTEN_BIAS, FLATTEN_DIVISOR, BezierCurve
from inkfit.domain.geometry import LineSegment

PolygonEdge = LineSegment | BezierCurve


class PolygonMode(Enum):
    """How a polygon is rasterized."""

    OUTLINE = "outline"
    FILL = "fill"


def edge_to_dict(edge: PolygonEdge) -> dict[str, Any]:
    """Serialize a polygon edge with its variant tag."""
    if isinstance(edge, BezierCurve):
        return {"kind": "curved", **edge.to_dict()}
    return {"kind": "straight", **edge.to_dict()}


def edge_from_dict(data: dict[str, Any]) -> PolygonEdge:
    """Deserialize a polygon edge from its tagged dictionary."""
    if data["kind"] == "curved":
        return BezierCurve.from_dict(data)
    return LineSegment.from_dict(data)


@dataclass(frozen=True)
class Polygon:
    """A closed shape made of straight and curved edges.

    Attributes:
        edges: Edges in traversal order
        mode: Outline or fill
    """

    edges: tuple[PolygonEdge, ...]
    mode: PolygonMode = PolygonMode.OUTLINE

    def __init__(self, edges: Iterable[PolygonEdge], mode: PolygonMode = PolygonMode.OUTLINE) -> None:
        object.__setattr__(self, "edges", tuple(edges))
        object.__setattr__(self, "mode", mode)

    def as_straight_edges(
        self, bias: float = FLATTEN_BIAS, divisor: float = FLATTEN_DIVISOR
    ) -> Iterator[LineSegment]:
        """Yield every edge as straight segments, in edge order.

        Curved edges are flattened with the given tuning constants.
        """
        for edge in self.edges:
            if isinstance(edge, BezierCurve):
                yield from edge.flatten(bias=bias, divisor=divisor)
            else:
                yield edge

    def is_straight(self) -> bool:
        """True when no edge is curved."""
        return all(isinstance(edge, LineSegment) for edge in self.edges)

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Bounding box of the flattened edges.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y); zeros for an empty polygon
        """
        xs: list[float] = []
        ys: list[float] = []
        for seg in self.as_straight_edges():
            xs.extend((seg.start.x, seg.end.x))
            ys.extend((seg.start.y, seg.end.y))
        if not xs:
            return (0.0, 0.0, 0.0, 0.0)
        return (min(xs), min(ys), max(xs), max(ys))

    def with_mode(self, mode: PolygonMode) -> "Polygon":
        return replace(self, mode=mode)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the polygon
        """
        return {"edges": [edge_to_dict(e) for e in self.edges], "mode": self.mode.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Polygon":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a polygon

        Returns:
            Polygon instance
        """
        return cls([edge_from_dict(e) for e in data["edges"]], PolygonMode(data["mode"]))
