"""
Triangulation utilities for Site Plan Exporter.

Provides the ear clipping triangulation used for the ground plane and
zone surfaces. Orientation tolerant: an ear is any vertex whose triangle
with its neighbours contains no other remaining vertex, without a
convexity gate. Simple polygons are assumed, not verified.
"""

from typing import List, Optional, Sequence, Tuple

from ..models.geometry import Point2D
from .polygon_utils import point_in_triangle, polygon_area


Triangle = Tuple[int, int, int]


def triangulate_polygon(ring: Sequence[Point2D]) -> List[Triangle]:
    """
    Triangulate a simple polygon using ear clipping.

    The scan restarts from the start of the working list after every
    clipped ear. It stops after 3 * n iterations, or as soon as a full
    scan finds no ear; both only happen for non-simple input and leave
    the triangulation incomplete rather than raising.

    Args:
        ring: List of polygon vertices (either winding)

    Returns:
        List of triangle tuples (i, j, k) as indices into the input ring.
        Empty for fewer than 3 vertices. No vertices are introduced.
    """
    n = len(ring)
    if n < 3:
        return []

    # Make working copy of indices
    indices = list(range(n))
    triangles: List[Triangle] = []

    iterations = 0
    max_iterations = n * 3

    while len(indices) > 3 and iterations < max_iterations:
        iterations += 1

        ear = _find_ear(ring, indices)
        if ear is None:
            break

        count = len(indices)
        triangles.append((
            indices[(ear - 1) % count],
            indices[ear],
            indices[(ear + 1) % count],
        ))
        indices.pop(ear)

    # Add final triangle
    if len(indices) == 3:
        triangles.append((indices[0], indices[1], indices[2]))

    return triangles


def _find_ear(ring: Sequence[Point2D], indices: List[int]) -> Optional[int]:
    """
    Find the first position in the working list that forms an ear.

    Returns:
        Position in indices, or None if no vertex qualifies
    """
    count = len(indices)

    for i in range(count):
        prev_i = (i - 1) % count
        next_i = (i + 1) % count

        if _is_ear(ring, indices, prev_i, i, next_i):
            return i

    return None


def _is_ear(
    ring: Sequence[Point2D],
    indices: List[int],
    prev_i: int,
    curr_i: int,
    next_i: int
) -> bool:
    """
    Check if vertex at curr_i forms an ear.

    An ear's triangle contains no other vertex of the working list.
    """
    prev_p = ring[indices[prev_i]]
    curr_p = ring[indices[curr_i]]
    next_p = ring[indices[next_i]]

    for i, idx in enumerate(indices):
        if i in (prev_i, curr_i, next_i):
            continue

        if point_in_triangle(ring[idx], prev_p, curr_p, next_p):
            return False

    return True


def triangle_area(v0: Point2D, v1: Point2D, v2: Point2D) -> float:
    """Compute signed area of triangle."""
    return 0.5 * (
        (v1.x - v0.x) * (v2.y - v0.y) -
        (v2.x - v0.x) * (v1.y - v0.y)
    )


def triangles_area(ring: Sequence[Point2D], triangles: Sequence[Triangle]) -> float:
    """Sum of absolute triangle areas."""
    return sum(
        abs(triangle_area(ring[a], ring[b], ring[c]))
        for a, b, c in triangles
    )


def validate_triangulation(
    vertices: Sequence[Point2D],
    triangles: Sequence[Triangle],
    expected_area: Optional[float] = None
) -> List[str]:
    """
    Validate triangulation result.

    Args:
        vertices: List of vertices
        triangles: List of triangle index tuples
        expected_area: Expected polygon area (optional)

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if not triangles:
        errors.append("No triangles generated")
        return errors

    n = len(vertices)

    # Check index validity
    for i, tri in enumerate(triangles):
        if any(idx < 0 or idx >= n for idx in tri):
            errors.append(f"Triangle {i} has invalid index")
            return errors

    expected_count = n - 2
    if len(triangles) < expected_count:
        errors.append(
            f"Incomplete triangulation: {len(triangles)} of {expected_count} triangles"
        )

    # Check for degenerate triangles
    for i, (a, b, c) in enumerate(triangles):
        area = triangle_area(vertices[a], vertices[b], vertices[c])
        if abs(area) < 1e-10:
            errors.append(f"Triangle {i} is degenerate (zero area)")

    # Check total area
    if expected_area is None:
        expected_area = polygon_area(vertices)

    total_area = triangles_area(vertices, triangles)
    if abs(total_area - expected_area) > expected_area * 0.01:  # 1% tolerance
        errors.append(
            f"Total triangulated area {total_area:.2f} differs from "
            f"expected {expected_area:.2f}"
        )

    return errors
