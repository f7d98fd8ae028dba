from __future__ import annotations

import copyreg
import json
import pickle

import numpy as np
import pytest

from slide_roi.roi import (
    PointsROI,
    PointsSnapshot,
    ReconstructionForbidden,
    SnapshotSchemaError,
)
from slide_roi.roi.snapshot import SCHEMA_ID, SCHEMA_VERSION


def _f32(v: float) -> float:
    return float(np.float32(v))


def test_snapshot_layout():
    roi = PointsROI([(1.5, 2.5), (3.0, 4.0)], c=1, z=2, t=3)
    d = roi.to_snapshot().to_dict()
    assert d["schema"] == SCHEMA_ID
    assert d["schema_version"] == SCHEMA_VERSION
    assert d["x"] == [1.5, 3.0]
    assert d["y"] == [2.5, 4.0]
    assert d["name"] is None
    assert (d["c"], d["z"], d["t"]) == (1, 2, 3)


def test_snapshot_has_no_caches():
    roi = PointsROI([(0, 0), (1, 0), (0, 1)])
    roi.convex_hull()
    d = roi.to_snapshot().to_dict()
    assert set(d) == {"schema", "schema_version", "x", "y", "name", "c", "z", "t"}


def test_round_trip_is_single_precision():
    roi = PointsROI([(0.1, 0.2), (1 / 3, 2 / 3), (1234.5678, -9.87654321)], c=0, z=1, t=2)
    back = PointsSnapshot.parse(json.loads(roi.to_snapshot().to_json_text())).to_roi()
    assert back.n_points == roi.n_points
    for p, q in zip(roi.point_list, back.point_list):
        assert q.x == _f32(p.x)
        assert q.y == _f32(p.y)
    assert (back.c, back.z, back.t) == (0, 1, 2)


def test_from_snapshot_classmethod():
    snap = PointsSnapshot(x=[1.0, 2.0], y=[3.0, 4.0], c=5)
    roi = PointsROI.from_snapshot(snap)
    assert roi.n_points == 2
    assert roi.c == 5


def test_reload_filters_nan():
    snap = PointsSnapshot(x=[1.0, float("nan"), 2.0], y=[1.0, 1.0, float("nan")])
    roi = snap.to_roi()
    assert roi.n_points == 1


def test_name_is_ignored():
    snap = PointsSnapshot.parse({"x": [1.0], "y": [2.0], "name": "legacy"})
    assert snap.name is None


def test_length_mismatch_rejected():
    with pytest.raises(SnapshotSchemaError):
        PointsSnapshot.parse({"x": [1.0, 2.0], "y": [1.0]})


@pytest.mark.parametrize(
    "x, y",
    [
        ({"a": 1}, [1.0]),
        (None, None),
        (1.5, 2.5),
        ("12", "34"),
        ([[1.0, 2.0]], [[3.0, 4.0]]),
        ([{"a": 1}], [1.0]),
        (["one"], [1.0]),
    ],
)
def test_malformed_coordinates_rejected(x, y):
    with pytest.raises(SnapshotSchemaError):
        PointsSnapshot.parse({"x": x, "y": y})


def test_unknown_schema_rejected():
    with pytest.raises(SnapshotSchemaError, match="Unsupported"):
        PointsSnapshot.parse({"schema": SCHEMA_ID, "schema_version": 99, "x": [], "y": []})
    with pytest.raises(SnapshotSchemaError):
        PointsSnapshot.parse({"schema": "other", "x": [], "y": []})


def test_pickle_goes_through_snapshot():
    roi = PointsROI([(1.5, 2.25), (-4.0, 8.0)], c=0, z=3, t=1)
    back = pickle.loads(pickle.dumps(roi))
    assert back == roi
    assert back is not roi


def test_pickle_rounds_to_single_precision():
    roi = PointsROI([(0.1, 0.2)])
    back = pickle.loads(pickle.dumps(roi))
    assert back.point_list[0].x == _f32(0.1)


class _RawState:
    """Pickles as a PointsROI rebuilt from raw attribute state."""

    def __reduce__(self):
        return (copyreg._reconstructor, (PointsROI, object, None), {"_points": []})


def test_direct_reconstruction_forbidden():
    data = pickle.dumps(_RawState())
    with pytest.raises(ReconstructionForbidden):
        pickle.loads(data)


def test_bare_allocation_stream_is_detected():
    # protocol 2: GLOBAL PointsROI, empty args, NEWOBJ, no BUILD
    data = b"\x80\x02cslide_roi.roi.points\nPointsROI\n)\x81."
    obj = pickle.loads(data)
    with pytest.raises(ReconstructionForbidden):
        obj.n_points
    with pytest.raises(ReconstructionForbidden):
        obj.convex_hull()


def test_missing_attribute_on_live_roi_is_attribute_error():
    roi = PointsROI([(1, 1)])
    with pytest.raises(AttributeError):
        roi.no_such_attribute
    assert not hasattr(roi, "add_point")


def test_setstate_forbidden():
    roi = PointsROI.__new__(PointsROI)
    with pytest.raises(pickle.UnpicklingError):
        roi.__setstate__({"_points": []})
