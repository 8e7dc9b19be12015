"""Shared fixtures for Site Plan Exporter tests."""

import json

import pytest

from siteplan_export.models.scene import (
    Point,
    ElevationPoint,
    Road,
    Zone,
    SiteScene,
)
from siteplan_export.models.zone_types import ZoneType


def make_points(*coords):
    """Build scene points from (x, y) pairs."""
    return tuple(Point(x, y, id=f"p{i}") for i, (x, y) in enumerate(coords))


@pytest.fixture
def square_scene():
    """10 x 10 px boundary covered by one structure zone, scale 0.1 m/px."""
    square = make_points((0, 0), (10, 0), (10, 10), (0, 10))
    return SiteScene(
        boundary=square,
        zones=(Zone(square, ZoneType.STRUCTURE, id="z0"),),
        canvas_width=10,
        canvas_height=10,
        pixel_to_meter_scale=0.1,
    )


@pytest.fixture
def mixed_scene():
    """Site with every entity kind, including degenerate ones."""
    boundary = make_points((0, 0), (200, 0), (200, 100), (0, 100))
    zones = (
        Zone(make_points((10, 10), (60, 10), (60, 50), (10, 50)), ZoneType.WATER, id="water"),
        Zone(make_points((70, 10), (120, 10), (120, 60)), ZoneType.GREENERY, id="green"),
        Zone(make_points((130, 10), (190, 10)), ZoneType.PAVING, id="broken"),
        Zone(make_points((130, 40), (180, 40), (180, 90), (130, 90)), ZoneType.STRUCTURE, id="house"),
    )
    roads = (
        Road(make_points((0, 95), (100, 95), (200, 95)), width=6, id="main"),
        Road(make_points((50, 50),), id="stub"),
    )
    elevations = (
        ElevationPoint(20, 80, id="e0", value=1.5),
        ElevationPoint(150, 20, id="e1", value=-0.3),
    )
    return SiteScene(
        boundary=boundary,
        zones=zones,
        roads=roads,
        elevations=elevations,
        canvas_width=200,
        canvas_height=100,
        pixel_to_meter_scale=0.5,
    )


@pytest.fixture
def scene_document():
    """Scene JSON document as produced by the drawing surface."""
    return {
        "canvas": {"width": 400, "height": 300},
        "site_width_meters": 40,
        "boundary": [
            {"x": 0, "y": 0, "id": "b0"},
            {"x": 400, "y": 0, "id": "b1"},
            {"x": 400, "y": 300, "id": "b2"},
            {"x": 0, "y": 300, "id": "b3"},
        ],
        "roads": [
            {"id": "r0", "width": 6, "points": [{"x": 0, "y": 150}, {"x": 400, "y": 150}]},
        ],
        "zones": [
            {
                "id": "z0",
                "type": "水体 (Water)",
                "points": [{"x": 20, "y": 20}, {"x": 120, "y": 20}, {"x": 120, "y": 120}],
            },
            {
                "id": "z1",
                "type": "Structure",
                "points": [
                    {"x": 200, "y": 20}, {"x": 300, "y": 20},
                    {"x": 300, "y": 100}, {"x": 200, "y": 100},
                ],
            },
        ],
        "elevations": [{"id": "e0", "x": 50, "y": 250, "value": 2.25}],
    }


@pytest.fixture
def scene_file(tmp_path, scene_document):
    """scene_document written to disk."""
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(scene_document, ensure_ascii=False), encoding="utf-8")
    return path
