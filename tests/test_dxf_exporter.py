"""Tests for the DXF drawing exporter."""

import io

import ezdxf
import pytest

from siteplan_export.config import ExportConfig
from siteplan_export.io.dxf_exporter import (
    LAYERS,
    build_drawing,
    build_dxf_document,
    export_dxf,
    format_area_label,
    format_elevation_label,
)
from siteplan_export.models.scene import SiteScene, Zone, Road, ElevationPoint
from siteplan_export.models.zone_types import ZoneType
from siteplan_export.processing.entity_filter import EntityKind

from tests.conftest import make_points


def read_back(text):
    return ezdxf.read(io.StringIO(text))


def tag_pairs(text):
    lines = text.splitlines()
    return [
        (int(lines[i].strip()), lines[i + 1].strip())
        for i in range(0, len(lines) - 1, 2)
    ]


def lwpolyline_tags(text):
    """Group codes of every LWPOLYLINE entity in raw DXF text."""
    entities = []
    current = None
    for code, value in tag_pairs(text):
        if code == 0:
            current = [] if value == "LWPOLYLINE" else None
            if current is not None:
                entities.append(current)
        elif current is not None:
            current.append((code, value))
    return entities


def texts_on(msp, layer):
    return [t.dxf.text for t in msp.query(f'TEXT[layer=="{layer}"]')]


def entity_summary(doc):
    summary = []
    for e in doc.modelspace():
        if e.dxftype() == "LWPOLYLINE":
            detail = (tuple(e.get_points("xy")), e.closed)
        elif e.dxftype() == "TEXT":
            detail = (e.dxf.text, tuple(e.dxf.insert), tuple(e.dxf.align_point))
        else:
            detail = tuple(e.dxf.location)
        summary.append((e.dxftype(), e.dxf.layer, detail))
    return summary


class TestLayersAndHeader:

    def test_units_are_meters(self, mixed_scene):
        doc = read_back(export_dxf(mixed_scene))
        assert doc.header["$INSUNITS"] == 6
        assert doc.header["$MEASUREMENT"] == 1

    @pytest.mark.parametrize("layer_spec", LAYERS, ids=lambda s: s.name)
    def test_layer_table(self, mixed_scene, layer_spec):
        doc = read_back(export_dxf(mixed_scene))
        layer = doc.layers.get(layer_spec.name)
        assert layer.dxf.color == layer_spec.color
        assert layer.dxf.linetype.upper() == layer_spec.linetype

    def test_road_layer_is_dashdot(self):
        doc = read_back(export_dxf(SiteScene()))
        assert doc.layers.get("ROADS_CENTERLINE").dxf.linetype.upper() == "DASHDOT"

    def test_empty_scene_is_a_valid_document(self):
        text = export_dxf(SiteScene())
        doc = read_back(text)
        assert len(doc.modelspace()) == 0
        assert text.rstrip().endswith("EOF")


class TestEntities:

    def test_boundary(self, mixed_scene):
        msp = read_back(export_dxf(mixed_scene)).modelspace()
        outlines = msp.query('LWPOLYLINE[layer=="SITE_BOUNDARY"]')
        assert len(outlines) == 1
        assert outlines[0].closed
        assert [tuple(p) for p in outlines[0].get_points("xy")] == [
            (0.0, 50.0), (100.0, 50.0), (100.0, 0.0), (0.0, 0.0),
        ]

    def test_roads_are_open(self, mixed_scene):
        msp = read_back(export_dxf(mixed_scene)).modelspace()
        roads = msp.query('LWPOLYLINE[layer=="ROADS_CENTERLINE"]')
        assert len(roads) == 1
        assert not roads[0].closed
        assert len(roads[0]) == 3

    def test_zones_with_labels(self, mixed_scene):
        msp = read_back(export_dxf(mixed_scene)).modelspace()
        zones = msp.query('LWPOLYLINE[layer=="FUNCTION_ZONES"]')
        assert len(zones) == 3
        assert all(z.closed for z in zones)

        labels = msp.query('TEXT[layer=="TEXT"]')
        names = [t.dxf.text for t in labels if not t.dxf.text.startswith("EL:")]
        assert names == ["Water", "Greenery", "Structure"]

    def test_zone_label_is_centred_on_centroid(self, mixed_scene):
        msp = read_back(export_dxf(mixed_scene)).modelspace()
        water = [t for t in msp.query('TEXT[layer=="TEXT"]') if t.dxf.text == "Water"][0]
        assert water.dxf.height == pytest.approx(0.8)
        assert water.dxf.halign == 1
        # Zone 10..60 x 10..50 px at 0.5 m/px, canvas height 100
        assert tuple(water.dxf.align_point)[:2] == pytest.approx((17.5, 35.0))

    def test_elevation_markers(self, mixed_scene):
        msp = read_back(export_dxf(mixed_scene)).modelspace()
        points = msp.query('POINT[layer=="ELEVATIONS"]')
        assert [tuple(p.dxf.location) for p in points] == [
            (10.0, 10.0, 1.5), (75.0, 40.0, -0.3),
        ]

        labels = [t for t in msp.query('TEXT[layer=="TEXT"]') if t.dxf.text.startswith("EL:")]
        assert [t.dxf.text for t in labels] == ["EL: +1.50", "EL: -0.30"]
        assert tuple(labels[0].dxf.insert) == pytest.approx((10.2, 10.2, 1.5))
        assert labels[0].dxf.height == pytest.approx(0.3)

    def test_area_label(self, mixed_scene):
        msp = read_back(export_dxf(mixed_scene)).modelspace()
        labels = msp.query('TEXT[layer=="ANNOTATIONS"]')
        assert len(labels) == 1
        # 200 x 100 px at 0.5 m/px
        assert labels[0].dxf.text == "AREA: 5000.0 m^2"
        assert labels[0].dxf.height == pytest.approx(1.2)
        assert tuple(labels[0].dxf.align_point)[:2] == pytest.approx((50.0, 25.0))

    def test_area_label_matches_scaled_polygon_area(self):
        boundary = make_points((0, 0), (37, 0), (37, 21), (12, 33))
        scene = SiteScene(boundary=boundary, canvas_width=40, canvas_height=40,
                          pixel_to_meter_scale=0.0375)
        msp = read_back(export_dxf(scene)).modelspace()
        area_px = abs(sum(
            boundary[i].x * boundary[(i + 1) % 4].y - boundary[(i + 1) % 4].x * boundary[i].y
            for i in range(4)
        )) / 2
        expected = format_area_label(area_px * 0.0375 ** 2)
        assert texts_on(msp, "ANNOTATIONS") == [expected]

    def test_no_dimension_labels_by_default(self, mixed_scene):
        msp = read_back(export_dxf(mixed_scene)).modelspace()
        assert texts_on(msp, "DIMENSIONS") == []

    def test_dimension_labels(self, mixed_scene):
        config = ExportConfig(dimension_labels=True)
        msp = read_back(export_dxf(mixed_scene, config)).modelspace()
        assert texts_on(msp, "DIMENSIONS") == ["100.00 m", "50.00 m", "100.00 m", "50.00 m"]

    def test_coordinates_rounded(self):
        boundary = make_points((1, 1), (7, 2), (5, 9))
        scene = SiteScene(boundary=boundary, canvas_width=10, canvas_height=10,
                          pixel_to_meter_scale=0.0375)
        msp = read_back(export_dxf(scene)).modelspace()
        for x, y in msp.query("LWPOLYLINE")[0].get_points("xy"):
            assert round(x, 3) == x
            assert round(y, 3) == y


class TestRawTags:

    def test_vertex_count_matches_coordinate_pairs(self, mixed_scene):
        entities = lwpolyline_tags(export_dxf(mixed_scene))
        assert len(entities) == 5
        for tags in entities:
            declared = [int(v) for code, v in tags if code == 90]
            xs = [v for code, v in tags if code == 10]
            ys = [v for code, v in tags if code == 20]
            assert declared == [len(xs)]
            assert len(xs) == len(ys)

    def test_closed_flag(self, square_scene):
        entities = lwpolyline_tags(export_dxf(square_scene))
        flags = [int(v) for tags in entities for code, v in tags if code == 70]
        assert flags and all(f & 1 for f in flags)


class TestSkipping:

    def test_degenerate_entities_are_skipped(self, mixed_scene):
        document = build_dxf_document(mixed_scene)
        assert {(s.kind, s.index) for s in document.skipped} == {
            (EntityKind.ZONE, 2),
            (EntityKind.ROAD, 1),
        }

    def test_short_boundary_is_drawn_without_area(self):
        scene = SiteScene(boundary=make_points((0, 0), (10, 0)), canvas_width=10, canvas_height=10)
        doc, skipped = build_drawing(scene)
        msp = doc.modelspace()
        assert len(msp.query('LWPOLYLINE[layer=="SITE_BOUNDARY"]')) == 1
        assert texts_on(msp, "ANNOTATIONS") == []
        assert skipped == []

    def test_one_bad_entity_does_not_stop_the_rest(self):
        scene = SiteScene(
            zones=(
                Zone(make_points((0, 0)), ZoneType.WATER),
                Zone(make_points((0, 0), (5, 0), (5, 5)), ZoneType.PAVING),
            ),
            roads=(Road(()),),
            elevations=(ElevationPoint(1, 1, value=0.0),),
            canvas_width=10,
            canvas_height=10,
        )
        document = build_dxf_document(scene)
        assert document.entity_counts["FUNCTION_ZONES"] == 1
        assert document.entity_counts["ROADS_CENTERLINE"] == 0
        assert document.entity_counts["ELEVATIONS"] == 1
        assert len(document.skipped) == 2


class TestDeterminism:

    def test_identical_text_every_time(self, mixed_scene):
        assert export_dxf(mixed_scene) == export_dxf(mixed_scene)

    def test_global_ezdxf_options_are_restored(self, mixed_scene):
        before = ezdxf.options.write_fixed_meta_data_for_testing
        export_dxf(mixed_scene)
        assert ezdxf.options.write_fixed_meta_data_for_testing == before

    def test_same_entities_every_time(self, mixed_scene):
        first = entity_summary(read_back(export_dxf(mixed_scene)))
        second = entity_summary(read_back(export_dxf(mixed_scene)))
        assert first == second

    def test_entity_counts(self, mixed_scene):
        counts = build_dxf_document(mixed_scene).entity_counts
        assert counts == {
            "SITE_BOUNDARY": 1,
            "ROADS_CENTERLINE": 1,
            "FUNCTION_ZONES": 3,
            "ELEVATIONS": 2,
            "DIMENSIONS": 0,
            "ANNOTATIONS": 1,
            "TEXT": 5,
        }


class TestLabels:

    @pytest.mark.parametrize("value, expected", [
        (1.5, "EL: +1.50"),
        (-0.3, "EL: -0.30"),
        (0.0, "EL: +0.00"),
        (12.345, "EL: +12.35"),
    ])
    def test_elevation(self, value, expected):
        assert format_elevation_label(value) == expected

    def test_area(self):
        assert format_area_label(120.54) == "AREA: 120.5 m^2"
