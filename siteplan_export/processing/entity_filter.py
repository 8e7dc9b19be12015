"""
Degenerate entity filtering for Site Plan Exporter.

Export is best-effort: a boundary, zone or road with too few points is
skipped and everything else is still exported. This module makes that
policy explicit. Both exporters ask it which entities to emit, and the
skipped ones come back as SkippedEntity records for logging and the
CLI report.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple
import logging

from ..models.scene import SiteScene, Road, Zone

logger = logging.getLogger(__name__)


# Minimum point counts for an entity to be exported
MIN_ZONE_POINTS = 3
MIN_ROAD_POINTS = 2
MIN_BOUNDARY_POINTS_MESH = 3
MIN_BOUNDARY_POINTS_DRAWING = 1


class EntityKind(Enum):
    """Kind of scene entity."""
    BOUNDARY = "boundary"
    ZONE = "zone"
    ROAD = "road"


class SkipReason(Enum):
    """Reason for skipping an entity."""
    TOO_FEW_POINTS = "too_few_points"


@dataclass(frozen=True)
class SkippedEntity:
    """
    Record of an entity left out of an export.

    Attributes:
        kind: Entity kind
        index: Position in the scene's list (0 for the boundary)
        point_count: Number of points the entity had
        reason: Why it was skipped
    """
    kind: EntityKind
    index: int
    point_count: int
    reason: SkipReason = SkipReason.TOO_FEW_POINTS

    def describe(self) -> str:
        """Human-readable one-line description."""
        return f"{self.kind.value} {self.index}: {self.reason.value} ({self.point_count} points)"


@dataclass
class FilterResult:
    """
    Entities selected for export.

    zones and roads keep their scene index so group names and
    reports refer to the user's numbering.
    """
    include_boundary: bool
    zones: List[Tuple[int, Zone]] = field(default_factory=list)
    roads: List[Tuple[int, Road]] = field(default_factory=list)
    skipped: List[SkippedEntity] = field(default_factory=list)


def filter_exportable(
    scene: SiteScene,
    min_boundary_points: int = MIN_BOUNDARY_POINTS_MESH
) -> FilterResult:
    """
    Select the scene entities that have enough points to be exported.

    An empty boundary is not reported as skipped (there is nothing to
    skip); a non-empty one below min_boundary_points is.

    Args:
        scene: Scene snapshot
        min_boundary_points: Points the boundary needs (3 for the mesh
            ground plane, 1 for the drawing outline)

    Returns:
        FilterResult with kept zones/roads and skip records
    """
    boundary_count = len(scene.boundary)
    include_boundary = boundary_count >= min_boundary_points
    result = FilterResult(include_boundary=include_boundary)

    if boundary_count and not include_boundary:
        result.skipped.append(
            SkippedEntity(EntityKind.BOUNDARY, 0, boundary_count)
        )

    for idx, zone in enumerate(scene.zones):
        if len(zone.points) >= MIN_ZONE_POINTS:
            result.zones.append((idx, zone))
        else:
            result.skipped.append(
                SkippedEntity(EntityKind.ZONE, idx, len(zone.points))
            )

    for idx, road in enumerate(scene.roads):
        if len(road.points) >= MIN_ROAD_POINTS:
            result.roads.append((idx, road))
        else:
            result.skipped.append(
                SkippedEntity(EntityKind.ROAD, idx, len(road.points))
            )

    for skipped in result.skipped:
        logger.debug(f"Skipping {skipped.describe()}")

    return result
