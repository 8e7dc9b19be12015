"""Tests for the command line pipeline."""

import json
import logging

import ezdxf
import pytest

from siteplan_export import __version__
from siteplan_export.config import ExportConfig
from siteplan_export.errors import SceneFormatError
from siteplan_export.main import main, run_export


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestRunExport:

    def test_writes_all_outputs(self, tmp_path, scene_file):
        out = tmp_path / "out"
        config = ExportConfig(name="plot", output_dir=str(out), material_library="plot.mtl")
        result = run_export(str(scene_file), config)

        assert result.success
        for name in ("plot.obj", "plot.mtl", "plot.dxf", "plot_report.json"):
            assert (out / name).exists()

        obj_text = (out / "plot.obj").read_text(encoding="utf-8")
        assert "mtllib plot.mtl" in obj_text
        assert ezdxf.readfile(str(out / "plot.dxf")).header["$INSUNITS"] == 6

    def test_report(self, tmp_path, scene_file):
        config = ExportConfig(output_dir=str(tmp_path))
        run_export(str(scene_file), config)

        report = json.loads((tmp_path / "landscape_report.json").read_text(encoding="utf-8"))
        assert report["success"] is True
        assert report["version"] == __version__
        assert report["stats"]["zones"] == 2
        # 4 ground + 3 water + 8 structure + 2 road + 5 marker
        assert report["stats"]["obj_vertices"] == 22
        assert report["area_stats"]["site_total"] == pytest.approx(1200.0)
        assert report["config_used"]["pixel_to_meter_scale"] == pytest.approx(0.1)
        assert report["dxf_layer_counts"]["FUNCTION_ZONES"] == 2
        # 400 x 300 px at 0.1 m/px; structure roof at 6.05 m
        low, high = report["mesh_bounds"]
        assert low == pytest.approx([0.0, 0.0, -0.5])
        assert high == pytest.approx([40.0, 30.0, 6.05])

    def test_skipped_entities_in_report(self, tmp_path, scene_document):
        scene_document["zones"].append({"type": "Water", "points": [{"x": 1, "y": 1}]})
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(scene_document), encoding="utf-8")

        result = run_export(str(path), ExportConfig(output_dir=str(tmp_path / "out")))
        assert result.success
        assert result.report.skipped == [
            {"kind": "zone", "index": 2, "point_count": 1, "reason": "too_few_points"}
        ]

    def test_single_format(self, tmp_path, scene_file):
        config = ExportConfig(output_dir=str(tmp_path), formats=("dxf",))
        result = run_export(str(scene_file), config)
        assert result.obj_path is None
        assert not (tmp_path / "landscape.obj").exists()
        assert (tmp_path / "landscape.dxf").exists()

    def test_bad_scene_raises(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps({"boundary": []}), encoding="utf-8")
        with pytest.raises(SceneFormatError):
            run_export(str(path), ExportConfig(output_dir=str(tmp_path)))


class TestMain:

    def test_success(self, tmp_path, scene_file):
        out = tmp_path / "out"
        code = main([
            "--scene", str(scene_file),
            "--output-dir", str(out),
            "--name", "site",
            "--no-log-file",
        ])
        assert code == 0
        assert (out / "site.obj").exists()
        assert (out / "site.mtl").exists()
        assert (out / "site.dxf").exists()
        assert not (out / "site.log").exists()

    def test_log_file(self, tmp_path, scene_file):
        code = main(["--scene", str(scene_file), "--output-dir", str(tmp_path)])
        assert code == 0
        assert (tmp_path / "landscape.log").exists()

    def test_format_and_options(self, tmp_path, scene_file):
        code = main([
            "--scene", str(scene_file),
            "--output-dir", str(tmp_path),
            "--format", "dxf",
            "--site-width", "80",
            "--dimension-labels",
            "--no-log-file",
        ])
        assert code == 0
        assert not (tmp_path / "landscape.obj").exists()

        msp = ezdxf.readfile(str(tmp_path / "landscape.dxf")).modelspace()
        labels = [t.dxf.text for t in msp.query('TEXT[layer=="DIMENSIONS"]')]
        assert labels == ["80.00 m", "60.00 m", "80.00 m", "60.00 m"]

    def test_missing_scene_file(self, tmp_path):
        code = main(["--scene", str(tmp_path / "nope.json"), "--output-dir", str(tmp_path),
                     "--no-log-file"])
        assert code == 1

    def test_malformed_scene(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text('{"canvas": {"width": "wide", "height": 10}}', encoding="utf-8")
        code = main(["--scene", str(path), "--output-dir", str(tmp_path), "--no-log-file"])
        assert code == 1

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out
