from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from slide_roi.io import COLLECTION_SCHEMA_ID, RoiCollection, read_rois, write_rois
from slide_roi.roi import PointsROI, SnapshotSchemaError


def _rois() -> list[PointsROI]:
    return [
        PointsROI([(0, 0), (4, 0), (4, 3), (0, 3), (2, 1.5)], c=0, z=0, t=0),
        PointsROI([], c=1, z=2, t=0),
        PointsROI([(10.5, 20.25)], c=-1, z=0, t=4),
    ]


def test_json_round_trip(tmp_path: Path):
    p = write_rois(_rois(), tmp_path / "rois.json")
    js = json.loads(p.read_text(encoding="utf-8"))
    assert js["schema"] == COLLECTION_SCHEMA_ID
    assert len(js["rois"]) == 3
    for entry in js["rois"]:
        assert len(entry["x"]) == len(entry["y"])

    back = read_rois(p)
    assert back == _rois()
    assert back[0].convex_area() == pytest.approx(12.0)
    assert back[1].is_empty()


def test_yaml_round_trip(tmp_path: Path):
    p = write_rois(_rois(), tmp_path / "nested" / "rois.yaml")
    assert isinstance(yaml.safe_load(p.read_text(encoding="utf-8")), dict)
    assert read_rois(p) == _rois()


def test_format_fallback_for_unknown_suffix(tmp_path: Path):
    p = write_rois(_rois(), tmp_path / "rois.txt", fmt="yaml")
    assert read_rois(p, fmt="yaml") == _rois()
    with pytest.raises(SnapshotSchemaError):
        read_rois(p, fmt="json")


def test_collection_schema_checked(tmp_path: Path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"schema": "something-else", "rois": []}), encoding="utf-8")
    with pytest.raises(SnapshotSchemaError, match="invalid ROI collection"):
        read_rois(p)


def test_mismatched_arrays_in_file(tmp_path: Path):
    payload = RoiCollection.from_rois(_rois()).to_dict()
    payload["rois"][0]["y"] = payload["rois"][0]["y"][:-1]
    p = tmp_path / "bad.json"
    p.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(SnapshotSchemaError):
        read_rois(p)


def test_unparseable_file(tmp_path: Path):
    p = tmp_path / "broken.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotSchemaError, match="cannot parse"):
        read_rois(p)


@pytest.mark.parametrize("x", [{"a": 1}, None, 3.0])
def test_malformed_coordinates_in_file(tmp_path: Path, x):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"rois": [{"x": x, "y": [1.0]}]}), encoding="utf-8")
    with pytest.raises(SnapshotSchemaError):
        read_rois(p)
