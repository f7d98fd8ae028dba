from __future__ import annotations

from pathlib import Path

import pytest

from slide_roi import __version__
from slide_roi.cli import main
from slide_roi.geom import Point2
from slide_roi.io import read_rois, write_rois
from slide_roi.roi import ImagePlane, PointsROI

pytestmark = pytest.mark.smoke


def _collection(tmp_path: Path) -> Path:
    rois = [
        PointsROI([(0, 0), (4, 0), (4, 3), (0, 3), (2, 1.5)], c=0, z=0, t=0),
        PointsROI([], c=1, z=0, t=0),
    ]
    return write_rois(rois, tmp_path / "rois.json")


def test_version(capsys):
    assert main(["version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_inspect(tmp_path: Path, capsys):
    p = _collection(tmp_path)
    assert main(["inspect", str(p), "--pixel-width", "0.5", "--pixel-height", "0.5"]) == 0
    out = capsys.readouterr().out
    assert "12.00" in out
    assert "3.00" in out


def test_nearest(tmp_path: Path, capsys):
    p = _collection(tmp_path)
    assert main(["nearest", str(p), "2", "2", "--max-dist", "1"]) == 0
    assert "(2, 1.5)" in capsys.readouterr().out


def test_nearest_uses_config_distance(tmp_path: Path, capsys):
    p = _collection(tmp_path)
    cfg = tmp_path / "slide_roi.yaml"
    cfg.write_text("nearest:\n  max_distance: 0.25\n", encoding="utf-8")
    assert main(["--config", str(cfg), "nearest", str(p), "2", "2"]) == 1
    assert "No point within" in capsys.readouterr().out


def test_missing_file_exit_code(tmp_path: Path):
    assert main(["inspect", str(tmp_path / "nope.json")]) == 2


def test_inspect_requires_both_pixel_sizes(tmp_path: Path):
    p = _collection(tmp_path)
    with pytest.raises(SystemExit) as exc:
        main(["inspect", str(p), "--pixel-width", "0.5"])
    assert exc.value.code == 2


def test_malformed_file_exit_code(tmp_path: Path, capsys):
    p = tmp_path / "bad.json"
    p.write_text('{"rois": [{"x": {"a": 1}, "y": [1.0]}]}', encoding="utf-8")
    assert main(["inspect", str(p)]) == 2
    assert "invalid" in capsys.readouterr().out


def test_convert_uses_config_io(tmp_path: Path):
    src = _collection(tmp_path)
    cfg = tmp_path / "slide_roi.yaml"
    cfg.write_text("io:\n  format: yaml\n  indent: 4\n", encoding="utf-8")
    out = tmp_path / "rois.out"
    assert main(["--config", str(cfg), "convert", str(src), str(out)]) == 0

    assert read_rois(out, fmt="yaml") == read_rois(src)
    assert "\n    " in out.read_text(encoding="utf-8")


def test_convert_format_flag_overrides_config(tmp_path: Path):
    src = _collection(tmp_path)
    cfg = tmp_path / "slide_roi.yaml"
    cfg.write_text("io:\n  format: yaml\n", encoding="utf-8")
    out = tmp_path / "rois.out"
    assert main(["--config", str(cfg), "convert", str(src), str(out), "--format", "json"]) == 0
    assert read_rois(out, fmt="json") == read_rois(src)


def test_create_uses_config_plane(tmp_path: Path):
    cfg = tmp_path / "slide_roi.yaml"
    cfg.write_text("default_plane: {c: 2, z: 5, t: 1}\n", encoding="utf-8")
    out = tmp_path / "new.json"
    argv = ["--config", str(cfg), "create", str(out), "--point", "1", "2", "--point", "3", "4"]
    assert main(argv) == 0

    (roi,) = read_rois(out)
    assert roi.plane == ImagePlane(2, 5, 1)
    assert [p.as_tuple() for p in roi.point_list] == [(1.0, 2.0), (3.0, 4.0)]


def test_create_plane_flag_and_append(tmp_path: Path):
    out = _collection(tmp_path)
    assert main(["create", str(out), "--point", "7", "8", "--plane", "0", "1", "2", "--append"]) == 0

    rois = read_rois(out)
    assert len(rois) == 3
    assert rois[-1].plane == ImagePlane(0, 1, 2)
    assert rois[-1].point_list == (Point2(7.0, 8.0),)
