"""Joining loose lines and curves into closed polygons.

The editor turns a selection of strokes into a polygon by walking them in
order and connecting each edge's end to the next edge's start, wrapping
around from the last edge to the first. Nearby endpoints are snapped
together at their midpoint. Distant ones are either snapped the same way or
bridged with a new straight edge.
"""

import logging
from collections.abc import Iterable

from inkfit.core.geometry import distance
from inkfit.domain import LineSegment, Polygon, PolygonEdge, PolygonMode

logger = logging.getLogger(__name__)

# Endpoints closer than this (in pixels) are always snapped together
STITCH_TOLERANCE = 2.0


def stitch_edges(
    edges: Iterable[PolygonEdge],
    tolerance: float = STITCH_TOLERANCE,
    bridge_gaps: bool = False,
) -> list[PolygonEdge]:
    """Connect an ordered run of edges into a closed loop.

    Args:
        edges: Lines and curves in traversal order
        tolerance: Gap below which endpoints are snapped to their midpoint
        bridge_gaps: Insert a straight edge across wider gaps instead of
            snapping

    Returns:
        New edge list where every edge ends where the next one starts
    """
    items = list(edges)
    count = len(items)
    bridges: dict[int, LineSegment] = {}

    for i in range(count):
        j = (i + 1) % count
        tail = items[i].end
        head = items[j].start
        if bridge_gaps and distance(tail, head) >= tolerance:
            bridges[i] = LineSegment(tail, head)
            continue
        midpoint = (tail + head) / 2.0
        items[i] = items[i].with_end(midpoint)
        items[j] = items[j].with_start(midpoint)

    if bridges:
        logger.debug("Bridged %d gaps while closing %d edges", len(bridges), count)

    stitched: list[PolygonEdge] = []
    for i, edge in enumerate(items):
        stitched.append(edge)
        if i in bridges:
            stitched.append(bridges[i])
    return stitched


def polygonify(
    edges: Iterable[PolygonEdge],
    mode: PolygonMode = PolygonMode.OUTLINE,
    tolerance: float = STITCH_TOLERANCE,
    bridge_gaps: bool = False,
) -> Polygon:
    """Build a closed polygon from loose lines and curves.

    See ``stitch_edges`` for how endpoints are joined.
    """
    return Polygon(stitch_edges(edges, tolerance=tolerance, bridge_gaps=bridge_gaps), mode)
