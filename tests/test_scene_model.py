"""Tests for the scene data model."""

import pytest

from siteplan_export.io.obj_exporter import export_obj
from siteplan_export.models.scene import Point, ElevationPoint, SiteScene


class TestPoints:

    def test_point_id_is_keyword_only(self):
        with pytest.raises(TypeError):
            Point(1, 2, "p0")
        assert Point(1, 2, id="p0").id == "p0"

    def test_elevation_value_is_positional(self):
        marker = ElevationPoint(10, 20, 1.5)
        assert marker.value == 1.5
        assert marker.id == ""

    def test_elevation_with_id(self):
        marker = ElevationPoint(10, 20, -0.3, id="e1")
        assert (marker.x, marker.y, marker.value, marker.id) == (10, 20, -0.3, "e1")

    def test_positional_marker_exports_at_its_height(self):
        scene = SiteScene(
            canvas_width=100,
            canvas_height=100,
            pixel_to_meter_scale=1.0,
            elevations=(ElevationPoint(10, 20, 1.5),),
        )
        vertices = [line for line in export_obj(scene).splitlines() if line.startswith("v ")]
        assert vertices[0] == "v 10.000 80.000 1.500"
