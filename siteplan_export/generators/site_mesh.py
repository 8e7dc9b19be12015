"""
Site mesh generator for Site Plan Exporter.

Builds the 3D site model as a sequence of OBJ groups, all written into
one MeshData emission context:

1. Site_Ground: triangulated boundary at z = 0
2. One group per zone: flat surface, or for extruded types a bottom
   ring, top ring, roof and walls (Building_<i>)
3. Roads: centerline polylines slightly above the zone surfaces
4. Elevations: a small pyramid per elevation marker

The running vertex counter lives in the MeshData passed to each step,
so every step gets global 1-based indices back from add_vertex().
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import logging

from ..models.geometry import Point2D
from ..models.mesh import MeshData
from ..models.scene import SiteScene, Zone, Road, ElevationPoint
from ..projection import IProjector, create_projector
from ..processing.entity_filter import (
    filter_exportable,
    SkippedEntity,
    MIN_BOUNDARY_POINTS_MESH,
)
from ..utils.triangulation import triangulate_polygon
from ..config import (
    GROUND_Z,
    ROAD_Z,
    ELEVATION_MARKER_HALF_SIZE,
    ELEVATION_MARKER_DEPTH,
    OBJ_OBJECT_NAME,
    GROUND_GROUP,
    ROADS_GROUP,
    ELEVATIONS_GROUP,
    GROUND_MATERIAL,
    ROAD_MATERIAL,
    MARKER_MATERIAL,
)

logger = logging.getLogger(__name__)


@dataclass
class SiteMeshResult:
    """
    Result of site mesh generation.

    Attributes:
        mesh: Emission context holding all groups
        skipped: Entities left out for having too few points
        warnings: Non-fatal problems (e.g. incomplete triangulations)
    """
    mesh: MeshData
    skipped: List[SkippedEntity] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def generate_site_mesh(scene: SiteScene) -> SiteMeshResult:
    """
    Generate the complete site mesh for a scene.

    Args:
        scene: Scene snapshot (not modified)

    Returns:
        SiteMeshResult with the mesh and skip/warning records
    """
    projector = create_projector(scene)
    selection = filter_exportable(scene, min_boundary_points=MIN_BOUNDARY_POINTS_MESH)

    mesh = MeshData(object_name=OBJ_OBJECT_NAME)
    result = SiteMeshResult(mesh=mesh, skipped=list(selection.skipped))

    if selection.include_boundary:
        generate_ground(mesh, scene.boundary, projector, result.warnings)

    for idx, zone in selection.zones:
        generate_zone(mesh, idx, zone, projector, result.warnings)

    generate_roads(mesh, [road for _, road in selection.roads], projector)
    generate_elevation_markers(mesh, scene.elevations, projector)

    logger.debug(
        f"Site mesh: {mesh.vertex_count} vertices, {mesh.face_count()} faces, "
        f"{mesh.line_count()} lines, {len(result.skipped)} entities skipped"
    )

    return result


def generate_ground(
    mesh: MeshData,
    boundary: Sequence[Point2D],
    projector: IProjector,
    warnings: Optional[List[str]] = None
) -> None:
    """
    Emit the ground plane: boundary vertices at z = 0, one face per ear.

    Args:
        mesh: Emission context
        boundary: Site boundary (3 or more points)
        projector: Pixel-to-world projector
        warnings: Optional list receiving triangulation warnings
    """
    mesh.begin_group(GROUND_GROUP, GROUND_MATERIAL)

    ring_indices = _emit_ring(mesh, boundary, projector, GROUND_Z)
    _emit_cap(mesh, boundary, ring_indices, GROUND_GROUP, warnings)


def generate_zone(
    mesh: MeshData,
    index: int,
    zone: Zone,
    projector: IProjector,
    warnings: Optional[List[str]] = None
) -> None:
    """
    Emit one zone.

    Flat zones get a single ring at the type's base height and a
    triangulated surface. Extruded zones get a bottom ring, a top ring,
    a triangulated roof on the top ring and two triangles per wall edge.

    Args:
        mesh: Emission context
        index: Zone position in the scene (used in the group name)
        zone: Zone with 3 or more points
        projector: Pixel-to-world projector
        warnings: Optional list receiving triangulation warnings
    """
    info = zone.zone_type.info
    extruded = zone.zone_type.is_extruded

    if extruded:
        group_name = f"Building_{index}"
    else:
        group_name = f"Zone_{index}_{info.display_name}"

    mesh.begin_group(group_name, info.material)

    bottom = _emit_ring(mesh, zone.points, projector, info.base_height)

    if extruded:
        top = _emit_ring(mesh, zone.points, projector, info.top_height)
        _emit_cap(mesh, zone.points, top, group_name, warnings)
        _emit_walls(mesh, bottom, top)
    else:
        _emit_cap(mesh, zone.points, bottom, group_name, warnings)


def generate_roads(
    mesh: MeshData,
    roads: Sequence[Road],
    projector: IProjector
) -> None:
    """
    Emit road centerlines as open polylines at ROAD_Z.

    Roads with fewer than 2 points are ignored. The Roads group is only
    opened when at least one road is emitted.

    Args:
        mesh: Emission context
        roads: Roads to emit
        projector: Pixel-to-world projector
    """
    roads = [road for road in roads if road.is_exportable]
    if not roads:
        return

    mesh.begin_group(ROADS_GROUP, ROAD_MATERIAL)

    for road in roads:
        indices = _emit_ring(mesh, road.points, projector, ROAD_Z)
        mesh.add_polyline(indices)


def generate_elevation_markers(
    mesh: MeshData,
    elevations: Sequence[ElevationPoint],
    projector: IProjector,
    half_size: float = ELEVATION_MARKER_HALF_SIZE,
    depth: float = ELEVATION_MARKER_DEPTH
) -> None:
    """
    Emit a four-sided pyramid per elevation marker.

    The apex sits at the marker's real height; the square base is
    2 * half_size wide and depth below the apex.

    Args:
        mesh: Emission context
        elevations: Elevation markers
        projector: Pixel-to-world projector
        half_size: Base offset in X and Y from the apex (meters)
        depth: Vertical distance from apex to base (meters)
    """
    if not elevations:
        return

    mesh.begin_group(ELEVATIONS_GROUP, MARKER_MATERIAL)

    for marker in elevations:
        apex = projector.to_mesh(marker, marker.value)
        base_z = apex.z - depth

        t = mesh.add_vertex(apex.x, apex.y, apex.z)
        mesh.add_vertex(apex.x - half_size, apex.y - half_size, base_z)
        mesh.add_vertex(apex.x + half_size, apex.y - half_size, base_z)
        mesh.add_vertex(apex.x + half_size, apex.y + half_size, base_z)
        mesh.add_vertex(apex.x - half_size, apex.y + half_size, base_z)

        mesh.add_triangle(t, t + 1, t + 2)
        mesh.add_triangle(t, t + 2, t + 3)
        mesh.add_triangle(t, t + 3, t + 4)
        mesh.add_triangle(t, t + 4, t + 1)


def _emit_ring(
    mesh: MeshData,
    points: Sequence[Point2D],
    projector: IProjector,
    z: float
) -> List[int]:
    """
    Emit one vertex per point at height z.

    Returns:
        Global 1-based indices of the emitted vertices, in point order
    """
    indices = []
    for point in points:
        v = projector.to_mesh(point, z)
        indices.append(mesh.add_vertex(v.x, v.y, v.z))
    return indices


def _emit_cap(
    mesh: MeshData,
    points: Sequence[Point2D],
    ring_indices: List[int],
    label: str,
    warnings: Optional[List[str]]
) -> None:
    """
    Emit the triangulated surface of a ring.

    Triangulation runs on the pixel-space points; the vertical flip
    mirrors the polygon but leaves its ear decomposition unchanged.
    """
    triangles = triangulate_polygon(points)

    expected = len(points) - 2
    if len(triangles) < expected:
        message = (
            f"{label}: incomplete triangulation ({len(triangles)} of {expected} "
            f"triangles), polygon may be self-intersecting"
        )
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)

    for a, b, c in triangles:
        mesh.add_triangle(ring_indices[a], ring_indices[b], ring_indices[c])


def _emit_walls(mesh: MeshData, bottom: List[int], top: List[int]) -> None:
    """
    Emit one quad (two triangles) per polygon edge between two rings.

    The last edge wraps around to the first vertex.
    """
    n = len(bottom)
    for i in range(n):
        j = (i + 1) % n

        b1, b2 = bottom[i], bottom[j]
        t1, t2 = top[i], top[j]

        # (b1, b2, t2) and (b1, t2, t1)
        mesh.add_quad(b1, b2, t2, t1)
