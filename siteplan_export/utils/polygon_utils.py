"""
Polygon utilities for Site Plan Exporter.

Provides area, centroid, distance and midpoint calculations and the
point-in-triangle test used by ear clipping. All functions accept any
point type with x and y attributes (Point2D, scene Point, ...).
"""

from typing import List, Sequence
import logging

from ..errors import DegenerateGeometryError
from ..models.geometry import Point2D

logger = logging.getLogger(__name__)


def distance(p1: Point2D, p2: Point2D) -> float:
    """
    Euclidean distance between two points.

    Args:
        p1, p2: Points

    Returns:
        Distance in the points' units
    """
    return p1.distance_to(p2)


def midpoint(p1: Point2D, p2: Point2D) -> Point2D:
    """Arithmetic midpoint between two points."""
    return Point2D((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)


def polygon_signed_area(ring: Sequence[Point2D]) -> float:
    """
    Compute signed area using shoelace formula.

    The ring is implicitly closed (last vertex connects to the first).

    Args:
        ring: List of polygon vertices

    Returns:
        Signed area (positive = CCW in a Y-up frame, negative = CW)
    """
    n = len(ring)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += ring[i].x * ring[j].y
        area -= ring[j].x * ring[i].y

    return area / 2.0


def polygon_area(ring: Sequence[Point2D]) -> float:
    """
    Compute unsigned area of polygon.

    Args:
        ring: List of polygon vertices

    Returns:
        Absolute area, 0.0 for fewer than 3 vertices
    """
    return abs(polygon_signed_area(ring))


def polygon_centroid(ring: Sequence[Point2D]) -> Point2D:
    """
    Compute the area-weighted centroid of a polygon.

    Uses the standard formula normalised by the signed area, so the
    result does not depend on winding direction.

    Args:
        ring: List of polygon vertices

    Returns:
        Centroid point; (0, 0) for an empty ring

    Raises:
        DegenerateGeometryError: If the signed area is zero (collinear
            vertices, or fewer than 3 of them)
    """
    n = len(ring)
    if n == 0:
        return Point2D(0.0, 0.0)

    cx = 0.0
    cy = 0.0
    twice_area = 0.0

    for i in range(n):
        j = (i + 1) % n
        f = ring[i].x * ring[j].y - ring[j].x * ring[i].y
        cx += (ring[i].x + ring[j].x) * f
        cy += (ring[i].y + ring[j].y) * f
        twice_area += f

    divisor = twice_area * 3.0
    if divisor == 0.0:
        raise DegenerateGeometryError(
            f"Centroid undefined for polygon with zero area ({n} vertices)"
        )

    return Point2D(cx / divisor, cy / divisor)


def vertex_mean(ring: Sequence[Point2D]) -> Point2D:
    """Arithmetic mean of the vertices; (0, 0) for an empty ring."""
    n = len(ring)
    if n == 0:
        return Point2D(0.0, 0.0)

    return Point2D(
        sum(p.x for p in ring) / n,
        sum(p.y for p in ring) / n
    )


def polygon_label_point(ring: Sequence[Point2D]) -> Point2D:
    """
    Anchor point for a polygon's text label.

    The centroid when it is defined, otherwise the vertex mean.

    Args:
        ring: List of polygon vertices

    Returns:
        Label anchor point
    """
    try:
        return polygon_centroid(ring)
    except DegenerateGeometryError as e:
        logger.debug(f"{e}; using vertex mean for label placement")
        return vertex_mean(ring)


def point_in_triangle(p: Point2D, a: Point2D, b: Point2D, c: Point2D) -> bool:
    """
    Barycentric point-in-triangle test.

    Points on the edges a-b and a-c count as inside; points on the edge
    b-c do not (u + v < 1). A degenerate triangle contains no point.

    Args:
        p: Query point
        a, b, c: Triangle vertices

    Returns:
        True if p lies inside triangle abc
    """
    v0x, v0y = c.x - a.x, c.y - a.y
    v1x, v1y = b.x - a.x, b.y - a.y
    v2x, v2y = p.x - a.x, p.y - a.y

    dot00 = v0x * v0x + v0y * v0y
    dot01 = v0x * v1x + v0y * v1y
    dot02 = v0x * v2x + v0y * v2y
    dot11 = v1x * v1x + v1y * v1y
    dot12 = v1x * v2x + v1y * v2y

    denom = dot00 * dot11 - dot01 * dot01
    if denom == 0.0:
        return False

    inv_denom = 1.0 / denom
    u = (dot11 * dot02 - dot01 * dot12) * inv_denom
    v = (dot00 * dot12 - dot01 * dot02) * inv_denom

    return u >= 0 and v >= 0 and u + v < 1


def edge_lengths(ring: Sequence[Point2D]) -> List[float]:
    """
    Lengths of the closed ring's edges, edge i running from vertex i to i+1.

    Args:
        ring: List of polygon vertices

    Returns:
        One length per edge (empty for fewer than 2 vertices)
    """
    n = len(ring)
    if n < 2:
        return []

    if n == 2:
        return [distance(ring[0], ring[1])]

    return [distance(ring[i], ring[(i + 1) % n]) for i in range(n)]
