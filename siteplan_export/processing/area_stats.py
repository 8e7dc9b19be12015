"""
Area statistics for Site Plan Exporter.

Breaks the site area down by zone type in square meters: greenery,
paving, water, structures, and 'other' for the part of the site no zone
covers.
"""

from dataclasses import dataclass, asdict
from typing import Dict

from ..models.scene import SiteScene
from ..utils.polygon_utils import polygon_area
from .entity_filter import MIN_ZONE_POINTS


@dataclass
class AreaStats:
    """Site area breakdown in square meters."""
    greenery: float = 0.0
    paving: float = 0.0
    water: float = 0.0
    structures: float = 0.0
    other: float = 0.0
    site_total: float = 0.0

    @property
    def zoned_total(self) -> float:
        """Area covered by zones."""
        return self.greenery + self.paving + self.water + self.structures

    def to_dict(self) -> Dict[str, float]:
        """Plain dict for JSON reports."""
        return asdict(self)


def compute_area_stats(scene: SiteScene) -> AreaStats:
    """
    Compute the zone area breakdown of a scene.

    Zones with fewer than 3 points contribute nothing. Overlapping zones
    are counted once each; 'other' is clamped at zero.

    Args:
        scene: Scene snapshot

    Returns:
        AreaStats in square meters
    """
    scale_sq = scene.pixel_to_meter_scale ** 2
    stats = AreaStats()

    for zone in scene.zones:
        if len(zone.points) < MIN_ZONE_POINTS:
            continue

        bucket = zone.zone_type.info.stats_bucket
        area = polygon_area(zone.points) * scale_sq
        setattr(stats, bucket, getattr(stats, bucket) + area)

    stats.site_total = polygon_area(scene.boundary) * scale_sq
    stats.other = max(0.0, stats.site_total - stats.zoned_total)

    return stats
