"""
Scene data model for Site Plan Exporter.

A SiteScene is the immutable snapshot the drawing surface hands over for
one export request: boundary, zones, roads, elevation markers, canvas
size in pixels and the pixel-to-meter scale. Exporters read it once and
never modify it.
"""

from dataclasses import dataclass, field
from typing import Sequence, Tuple

from .geometry import Point2D
from .zone_types import ZoneType
from ..config import DEFAULT_PIXEL_TO_METER_SCALE


@dataclass(frozen=True, slots=True)
class Point(Point2D):
    """
    Pixel-space point drawn on the canvas.

    The id is a stable identifier owned by the drawing surface. It is
    carried through untouched and plays no part in export.
    """
    id: str = field(default="", kw_only=True)


@dataclass(frozen=True, slots=True)
class ElevationPoint(Point):
    """
    Elevation marker: a point plus its height in meters above ground.

    Positional order is (x, y, value); id is keyword-only.
    """
    value: float = 0.0


@dataclass(frozen=True)
class Road:
    """
    Road centerline.

    Attributes:
        points: Ordered centerline points (at least 2 to be exported)
        width: Display width in pixels (not used for geometry)
        id: Identifier owned by the drawing surface
    """
    points: Tuple[Point, ...]
    width: float = 0.0
    id: str = ""

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))

    @property
    def is_exportable(self) -> bool:
        """Roads need at least two points to form a polyline."""
        return len(self.points) >= 2


@dataclass(frozen=True)
class Zone:
    """
    Function zone polygon.

    Attributes:
        points: Ordered polygon vertices, implicitly closed (at least 3)
        zone_type: Zone category
        id: Identifier owned by the drawing surface
    """
    points: Tuple[Point, ...]
    zone_type: ZoneType
    id: str = ""

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))

    @property
    def is_exportable(self) -> bool:
        """Zones need at least three points to form a polygon."""
        return len(self.points) >= 3


@dataclass(frozen=True)
class SiteScene:
    """
    Immutable scene snapshot passed as a whole to each exporter.

    Attributes:
        boundary: Site outline, implicitly closed
        zones: Function zones in drawing order
        roads: Road centerlines in drawing order
        elevations: Elevation markers
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels (used for the Y flip)
        pixel_to_meter_scale: Meters per pixel
    """
    boundary: Tuple[Point, ...] = field(default_factory=tuple)
    zones: Tuple[Zone, ...] = field(default_factory=tuple)
    roads: Tuple[Road, ...] = field(default_factory=tuple)
    elevations: Tuple[ElevationPoint, ...] = field(default_factory=tuple)
    canvas_width: float = 0.0
    canvas_height: float = 0.0
    pixel_to_meter_scale: float = DEFAULT_PIXEL_TO_METER_SCALE

    def __post_init__(self):
        # Freeze caller-owned lists so later edits cannot leak in
        for name in ('boundary', 'zones', 'roads', 'elevations'):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        if self.pixel_to_meter_scale <= 0:
            raise ValueError("pixel_to_meter_scale must be positive")

        if self.canvas_width < 0 or self.canvas_height < 0:
            raise ValueError("canvas dimensions must be non-negative")

    @classmethod
    def from_site_width(
        cls,
        site_width_meters: float,
        canvas_width: float,
        canvas_height: float,
        boundary: Sequence[Point] = (),
        zones: Sequence[Zone] = (),
        roads: Sequence[Road] = (),
        elevations: Sequence[ElevationPoint] = (),
    ) -> 'SiteScene':
        """
        Build a scene whose scale is derived from the real-world site width.

        Args:
            site_width_meters: Real-world width spanned by the canvas
            canvas_width: Canvas width in pixels
            canvas_height: Canvas height in pixels
            boundary, zones, roads, elevations: Scene content

        Returns:
            SiteScene with pixel_to_meter_scale = site width / canvas width
        """
        return cls(
            boundary=tuple(boundary),
            zones=tuple(zones),
            roads=tuple(roads),
            elevations=tuple(elevations),
            canvas_width=canvas_width,
            canvas_height=canvas_height,
            pixel_to_meter_scale=scale_from_site_width(site_width_meters, canvas_width),
        )

    @property
    def has_boundary(self) -> bool:
        """True if the boundary encloses an area (3 or more points)."""
        return len(self.boundary) >= 3

    @property
    def site_width_meters(self) -> float:
        """Real-world width spanned by the canvas."""
        return self.canvas_width * self.pixel_to_meter_scale


def scale_from_site_width(site_width_meters: float, canvas_width: float) -> float:
    """
    Derive the pixel-to-meter scale from a declared site width.

    Falls back to DEFAULT_PIXEL_TO_METER_SCALE while the canvas has no
    width yet.

    Args:
        site_width_meters: Real-world width spanned by the canvas (> 0)
        canvas_width: Canvas width in pixels

    Returns:
        Meters per pixel
    """
    if site_width_meters <= 0:
        raise ValueError("site_width_meters must be positive")

    if canvas_width <= 0:
        return DEFAULT_PIXEL_TO_METER_SCALE

    return site_width_meters / canvas_width
