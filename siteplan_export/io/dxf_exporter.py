"""
DXF drawing exporter for Site Plan Exporter.

Builds a 2D CAD drawing of the site with ezdxf and serialises it to DXF
text. Units are meters ($INSUNITS = 6). Every entity sits on one of a
fixed set of layers declared up front:

    SITE_BOUNDARY     closed outline of the site
    ROADS_CENTERLINE  open road centerlines (dash-dot)
    FUNCTION_ZONES    closed zone outlines
    ELEVATIONS        elevation marker points
    DIMENSIONS        optional boundary edge lengths
    ANNOTATIONS       site area
    TEXT              zone names and elevation values

Coordinates are converted with the CAD projection and rounded to
DXF_PRECISION decimals.
"""

import io
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import logging

import ezdxf
from ezdxf import units
from ezdxf.document import Drawing
from ezdxf.enums import TextEntityAlignment
from ezdxf.layouts import Modelspace

from ..models.geometry import Point2D, Point3D
from ..models.scene import SiteScene, ElevationPoint
from ..projection import IProjector, create_projector
from ..processing.entity_filter import (
    filter_exportable,
    SkippedEntity,
    MIN_BOUNDARY_POINTS_DRAWING,
)
from ..utils.polygon_utils import (
    polygon_area,
    polygon_label_point,
    edge_lengths,
    midpoint,
)
from ..config import (
    ExportConfig,
    DEFAULT_CONFIG,
    DXF_VERSION,
    DXF_PRECISION,
    ZONE_LABEL_HEIGHT,
    ELEVATION_LABEL_HEIGHT,
    AREA_LABEL_HEIGHT,
    DIMENSION_LABEL_HEIGHT,
    ELEVATION_LABEL_OFFSET,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerSpec:
    """DXF layer definition."""
    name: str
    color: int
    linetype: str


LAYER_BOUNDARY = LayerSpec("SITE_BOUNDARY", 7, "CONTINUOUS")       # White
LAYER_ROADS = LayerSpec("ROADS_CENTERLINE", 1, "DASHDOT")          # Red
LAYER_ZONES = LayerSpec("FUNCTION_ZONES", 5, "CONTINUOUS")         # Blue
LAYER_ELEVATIONS = LayerSpec("ELEVATIONS", 3, "CONTINUOUS")        # Green
LAYER_DIMENSIONS = LayerSpec("DIMENSIONS", 8, "CONTINUOUS")        # Gray
LAYER_ANNOTATIONS = LayerSpec("ANNOTATIONS", 4, "CONTINUOUS")      # Cyan
LAYER_TEXT = LayerSpec("TEXT", 2, "CONTINUOUS")                    # Yellow

LAYERS: Tuple[LayerSpec, ...] = (
    LAYER_BOUNDARY,
    LAYER_ROADS,
    LAYER_ZONES,
    LAYER_ELEVATIONS,
    LAYER_DIMENSIONS,
    LAYER_ANNOTATIONS,
    LAYER_TEXT,
)


@dataclass
class DxfDocument:
    """
    A complete DXF export.

    Attributes:
        text: DXF document
        skipped: Entities left out for having too few points
        entity_counts: Number of entities written per layer
    """
    text: str
    skipped: List[SkippedEntity] = field(default_factory=list)
    entity_counts: Dict[str, int] = field(default_factory=dict)


def build_drawing(
    scene: SiteScene,
    config: Optional[ExportConfig] = None
) -> Tuple[Drawing, List[SkippedEntity]]:
    """
    Build the site drawing as an ezdxf document.

    Order: boundary, roads, zones (outline + name), elevation markers
    (point + value), site area, optional edge lengths.

    Args:
        scene: Scene snapshot (not modified)
        config: Export configuration (defaults to DEFAULT_CONFIG)

    Returns:
        (drawing, skipped entities)
    """
    if config is None:
        config = DEFAULT_CONFIG

    projector = create_projector(scene)
    selection = filter_exportable(scene, min_boundary_points=MIN_BOUNDARY_POINTS_DRAWING)

    doc = _new_document()
    msp = doc.modelspace()

    if selection.include_boundary:
        _add_polyline(msp, scene.boundary, projector, LAYER_BOUNDARY, closed=True)

    for _, road in selection.roads:
        _add_polyline(msp, road.points, projector, LAYER_ROADS, closed=False)

    for _, zone in selection.zones:
        _add_polyline(msp, zone.points, projector, LAYER_ZONES, closed=True)
        anchor = projector.to_cad(polygon_label_point(zone.points))
        _add_centered_text(
            msp, zone.zone_type.info.display_name, anchor,
            ZONE_LABEL_HEIGHT, LAYER_TEXT
        )

    for marker in scene.elevations:
        _add_elevation_marker(msp, marker, projector)

    if scene.has_boundary:
        area_m2 = projector.area(polygon_area(scene.boundary))
        anchor = projector.to_cad(polygon_label_point(scene.boundary))
        _add_centered_text(
            msp, format_area_label(area_m2), anchor,
            AREA_LABEL_HEIGHT, LAYER_ANNOTATIONS
        )

        if config.dimension_labels:
            _add_edge_lengths(msp, scene.boundary, projector)

    return doc, selection.skipped


def build_dxf_document(
    scene: SiteScene,
    config: Optional[ExportConfig] = None
) -> DxfDocument:
    """
    Build the site drawing and serialise it to DXF text.

    Args:
        scene: Scene snapshot
        config: Export configuration (defaults to DEFAULT_CONFIG)

    Returns:
        DxfDocument with text, skipped entities and per-layer counts
    """
    doc, skipped = build_drawing(scene, config)

    counts: Dict[str, int] = {layer.name: 0 for layer in LAYERS}
    for entity in doc.modelspace():
        layer = entity.dxf.layer
        counts[layer] = counts.get(layer, 0) + 1

    stream = io.StringIO()
    _write_fixed_metadata(doc, stream)

    logger.info(
        f"Built DXF: {sum(counts.values())} entities on "
        f"{sum(1 for c in counts.values() if c)} layers"
    )

    return DxfDocument(text=stream.getvalue(), skipped=skipped, entity_counts=counts)


def export_dxf(scene: SiteScene, config: Optional[ExportConfig] = None) -> str:
    """
    Export a scene as DXF text.

    Args:
        scene: Scene snapshot
        config: Export configuration (defaults to DEFAULT_CONFIG)

    Returns:
        DXF document text
    """
    return build_dxf_document(scene, config).text


def format_area_label(area_m2: float) -> str:
    """Site area annotation text, e.g. 'AREA: 120.5 m^2'."""
    return f"AREA: {area_m2:.1f} m^2"


def format_elevation_label(value: float) -> str:
    """Elevation annotation text, e.g. 'EL: +1.50' or 'EL: -0.30'."""
    return f"EL: {value:+.2f}"


def _new_document() -> Drawing:
    """Create an empty metric drawing with the site layer table."""
    doc = ezdxf.new(DXF_VERSION, setup=True)
    doc.units = units.M
    doc.header['$MEASUREMENT'] = 1  # Metric

    for layer in LAYERS:
        doc.layers.add(layer.name, color=layer.color, linetype=layer.linetype)

    return doc


def _write_fixed_metadata(doc: Drawing, stream: io.StringIO) -> None:
    """
    Write a drawing with fixed header GUIDs and timestamps.

    ezdxf stamps fresh $VERSIONGUID, $FINGERPRINTGUID and save dates on
    every write; its fixed-metadata option replaces them with constants
    so the same scene always serialises to the same text. The previous
    option value is restored afterwards.
    """
    previous = ezdxf.options.write_fixed_meta_data_for_testing
    ezdxf.options.write_fixed_meta_data_for_testing = True
    try:
        doc.write(stream)
    finally:
        ezdxf.options.write_fixed_meta_data_for_testing = previous


def _round(value: float) -> float:
    return round(value, DXF_PRECISION)


def _add_polyline(
    msp: Modelspace,
    points: Sequence[Point2D],
    projector: IProjector,
    layer: LayerSpec,
    closed: bool
) -> None:
    """Add one LWPOLYLINE over the projected points."""
    cad_points = []
    for p in points:
        c = projector.to_cad(p)
        cad_points.append((_round(c.x), _round(c.y)))

    msp.add_lwpolyline(
        cad_points,
        format="xy",
        close=closed,
        dxfattribs={"layer": layer.name}
    )


def _add_centered_text(
    msp: Modelspace,
    content: str,
    anchor: Point3D,
    height: float,
    layer: LayerSpec
) -> None:
    """Add a horizontally centred TEXT at anchor."""
    text = msp.add_text(content, height=height, dxfattribs={"layer": layer.name})
    text.set_placement(
        (_round(anchor.x), _round(anchor.y)),
        align=TextEntityAlignment.CENTER
    )


def _add_elevation_marker(
    msp: Modelspace,
    marker: ElevationPoint,
    projector: IProjector
) -> None:
    """Add the POINT at the marker's 3D position and its value label."""
    c = projector.to_cad(marker, marker.value)
    position = (_round(c.x), _round(c.y), _round(c.z))

    msp.add_point(position, dxfattribs={"layer": LAYER_ELEVATIONS.name})

    label = msp.add_text(
        format_elevation_label(marker.value),
        height=ELEVATION_LABEL_HEIGHT,
        rotation=0,
        dxfattribs={"layer": LAYER_TEXT.name}
    )
    label.set_placement((
        _round(c.x + ELEVATION_LABEL_OFFSET),
        _round(c.y + ELEVATION_LABEL_OFFSET),
        _round(c.z),
    ))


def _add_edge_lengths(
    msp: Modelspace,
    boundary: Sequence[Point2D],
    projector: IProjector
) -> None:
    """Add one length label per boundary edge at the edge midpoint."""
    n = len(boundary)
    for i, length_px in enumerate(edge_lengths(boundary)):
        p1 = boundary[i]
        p2 = boundary[(i + 1) % n]

        length_m = projector.length(length_px)
        if length_m == 0.0:
            continue

        anchor = projector.to_cad(midpoint(p1, p2))
        _add_centered_text(
            msp, f"{length_m:.2f} m", anchor,
            DIMENSION_LABEL_HEIGHT, LAYER_DIMENSIONS
        )
