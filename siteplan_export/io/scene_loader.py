"""
Scene JSON loader for Site Plan Exporter.

Reads the scene document the drawing surface hands over and builds an
immutable SiteScene. Document layout:

    {
      "canvas": {"width": 800, "height": 600},
      "site_width_meters": 30,          (or "pixel_to_meter_scale": 0.0375)
      "boundary": [{"x": 0, "y": 0, "id": "b1"}, ...],
      "roads": [{"id": "r1", "points": [...], "width": 6}],
      "zones": [{"id": "z1", "points": [...], "type": "Water"}],
      "elevations": [{"x": 10, "y": 20, "value": 1.5, "id": "e1"}]
    }

Only "canvas" is required. Degenerate entities (too few points) load
fine; the exporters skip them.
"""

import json
from pathlib import Path
from typing import Any, Dict, List
import logging

from ..errors import SceneFormatError
from ..models.scene import (
    Point,
    ElevationPoint,
    Road,
    Zone,
    SiteScene,
    scale_from_site_width,
)
from ..models.zone_types import ZoneType
from ..config import DEFAULT_PIXEL_TO_METER_SCALE

logger = logging.getLogger(__name__)


def load_scene(filepath: str, site_width_meters: float = 0.0) -> SiteScene:
    """
    Load a scene from a JSON file.

    Args:
        filepath: Path to scene JSON
        site_width_meters: If > 0, overrides the document's scale

    Returns:
        SiteScene

    Raises:
        FileNotFoundError: If file doesn't exist
        SceneFormatError: If the document is not a valid scene
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {filepath}")

    logger.info(f"Loading scene from {filepath}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SceneFormatError(f"Invalid JSON in {filepath}: {e}") from e

    scene = scene_from_dict(data, site_width_meters=site_width_meters)

    logger.info(
        f"Loaded scene: {len(scene.boundary)} boundary points, "
        f"{len(scene.zones)} zones, {len(scene.roads)} roads, "
        f"{len(scene.elevations)} elevations, "
        f"scale {scene.pixel_to_meter_scale:.4f} m/px "
        f"(site width {scene.site_width_meters:.1f} m)"
    )

    return scene


def scene_from_dict(data: Dict[str, Any], site_width_meters: float = 0.0) -> SiteScene:
    """
    Build a SiteScene from a parsed scene document.

    Scale resolution order: site_width_meters argument, document
    "pixel_to_meter_scale", document "site_width_meters", default scale.

    Args:
        data: Parsed JSON document
        site_width_meters: If > 0, overrides the document's scale

    Returns:
        SiteScene

    Raises:
        SceneFormatError: If the document is not a valid scene
    """
    if not isinstance(data, dict):
        raise SceneFormatError("Scene document must be a JSON object")

    canvas = data.get('canvas')
    if not isinstance(canvas, dict):
        raise SceneFormatError("Scene document requires a 'canvas' object")

    width = _number(canvas.get('width'), 'canvas.width')
    height = _number(canvas.get('height'), 'canvas.height')
    if width < 0 or height < 0:
        raise SceneFormatError("canvas dimensions must be non-negative")

    scale = _resolve_scale(data, width, site_width_meters)

    boundary = _points(data.get('boundary', []), 'boundary')
    roads = [
        _road(item, f"roads[{i}]")
        for i, item in enumerate(_list(data.get('roads', []), 'roads'))
    ]
    zones = [
        _zone(item, f"zones[{i}]")
        for i, item in enumerate(_list(data.get('zones', []), 'zones'))
    ]
    elevations = [
        _elevation(item, f"elevations[{i}]")
        for i, item in enumerate(_list(data.get('elevations', []), 'elevations'))
    ]

    return SiteScene(
        boundary=tuple(boundary),
        zones=tuple(zones),
        roads=tuple(roads),
        elevations=tuple(elevations),
        canvas_width=width,
        canvas_height=height,
        pixel_to_meter_scale=scale,
    )


def scene_to_dict(scene: SiteScene) -> Dict[str, Any]:
    """
    Convert a SiteScene back into a scene document.

    Args:
        scene: Scene snapshot

    Returns:
        JSON-serialisable dict accepted by scene_from_dict()
    """
    def point(p: Point) -> Dict[str, Any]:
        return {'x': p.x, 'y': p.y, 'id': p.id}

    return {
        'canvas': {'width': scene.canvas_width, 'height': scene.canvas_height},
        'pixel_to_meter_scale': scene.pixel_to_meter_scale,
        'boundary': [point(p) for p in scene.boundary],
        'roads': [
            {'id': r.id, 'width': r.width, 'points': [point(p) for p in r.points]}
            for r in scene.roads
        ],
        'zones': [
            {'id': z.id, 'type': z.zone_type.value, 'points': [point(p) for p in z.points]}
            for z in scene.zones
        ],
        'elevations': [
            {'x': e.x, 'y': e.y, 'value': e.value, 'id': e.id}
            for e in scene.elevations
        ],
    }


def _resolve_scale(data: Dict[str, Any], canvas_width: float, override: float) -> float:
    """Pick the pixel-to-meter scale for a document."""
    try:
        if override > 0:
            return scale_from_site_width(override, canvas_width)

        if 'pixel_to_meter_scale' in data:
            scale = _number(data['pixel_to_meter_scale'], 'pixel_to_meter_scale')
            if scale <= 0:
                raise SceneFormatError("pixel_to_meter_scale must be positive")
            return scale

        if 'site_width_meters' in data:
            return scale_from_site_width(
                _number(data['site_width_meters'], 'site_width_meters'),
                canvas_width
            )
    except ValueError as e:
        raise SceneFormatError(str(e)) from e

    return DEFAULT_PIXEL_TO_METER_SCALE


def _number(value: Any, where: str) -> float:
    """Coerce a JSON number, rejecting booleans and strings."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneFormatError(f"{where}: expected a number, got {value!r}")
    return float(value)


def _list(value: Any, where: str) -> List[Any]:
    if not isinstance(value, list):
        raise SceneFormatError(f"{where}: expected a list")
    return value


def _object(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise SceneFormatError(f"{where}: expected an object")
    return value


def _point(value: Any, where: str) -> Point:
    obj = _object(value, where)
    return Point(
        x=_number(obj.get('x'), f"{where}.x"),
        y=_number(obj.get('y'), f"{where}.y"),
        id=str(obj.get('id', '')),
    )


def _points(value: Any, where: str) -> List[Point]:
    return [_point(p, f"{where}[{i}]") for i, p in enumerate(_list(value, where))]


def _road(value: Any, where: str) -> Road:
    obj = _object(value, where)
    width = obj.get('width', 0.0)
    return Road(
        points=tuple(_points(obj.get('points', []), f"{where}.points")),
        width=_number(width, f"{where}.width"),
        id=str(obj.get('id', '')),
    )


def _zone(value: Any, where: str) -> Zone:
    obj = _object(value, where)
    if 'type' not in obj:
        raise SceneFormatError(f"{where}: missing 'type'")

    try:
        zone_type = ZoneType.from_label(obj['type'])
    except SceneFormatError as e:
        raise SceneFormatError(f"{where}: {e}") from e

    return Zone(
        points=tuple(_points(obj.get('points', []), f"{where}.points")),
        zone_type=zone_type,
        id=str(obj.get('id', '')),
    )


def _elevation(value: Any, where: str) -> ElevationPoint:
    obj = _object(value, where)
    return ElevationPoint(
        x=_number(obj.get('x'), f"{where}.x"),
        y=_number(obj.get('y'), f"{where}.y"),
        id=str(obj.get('id', '')),
        value=_number(obj.get('value'), f"{where}.value"),
    )
