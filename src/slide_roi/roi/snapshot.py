"""Persisted snapshot of a :class:`~slide_roi.roi.points.PointsROI`.

The snapshot is the only supported on-disk / pickled form of a points ROI:

- ``x``, ``y``: equal-length coordinate arrays stored at single precision,
- ``c``, ``z``, ``t``: the image plane,
- ``name``: historical field, always empty and ignored on load.

Caches (bounds, convex hull) are never persisted. Loading replays normal point
ingestion, so NaN filtering applies to reloaded ROIs exactly as to new ones.

Schema
------
Current schema is **v1**: ``slide-roi.points-snapshot.v1``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from slide_roi.roi.errors import SnapshotSchemaError

if TYPE_CHECKING:
    from slide_roi.roi.points import PointsROI


log = logging.getLogger(__name__)

SCHEMA_ID = "slide-roi.points-snapshot.v1"
SCHEMA_VERSION = 1


def _to_float32(values: Any) -> list[float]:
    """Coordinate array at single precision.

    Raises ValueError (reported by pydantic as a validation error) for anything
    that is not a flat sequence of numbers.
    """
    if not isinstance(values, (list, tuple, np.ndarray)):
        raise ValueError(f"coordinates must be a list of numbers, got {type(values).__name__}")
    try:
        arr = np.asarray(values, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise ValueError(f"coordinates must be a list of numbers: {e}") from e
    if arr.ndim != 1:
        raise ValueError(f"coordinates must be a flat list, got shape {arr.shape}")
    return [float(v) for v in arr]


class PointsSnapshot(BaseModel):
    """Minimal primitive record of a points ROI."""

    # "schema" clashes with BaseModel helpers, so the JSON key is an alias.
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    schema_id: str = Field(default=SCHEMA_ID, alias="schema")
    schema_version: int = Field(default=SCHEMA_VERSION)

    x: List[float] = Field(default_factory=list)
    y: List[float] = Field(default_factory=list)
    name: Optional[str] = None
    c: int = -1
    z: int = 0
    t: int = 0

    @field_validator("x", "y", mode="before")
    @classmethod
    def _single_precision(cls, v: Any) -> list[float]:
        return _to_float32(v)

    @field_validator("name", mode="before")
    @classmethod
    def _drop_name(cls, v: Any) -> None:
        return None

    @model_validator(mode="after")
    def _check(self) -> "PointsSnapshot":
        if self.schema_id != SCHEMA_ID or self.schema_version != SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported points snapshot schema: schema={self.schema_id!r}, "
                f"schema_version={self.schema_version}. Expected {SCHEMA_ID!r} (v{SCHEMA_VERSION})."
            )
        if len(self.x) != len(self.y):
            raise ValueError(f"x/y length mismatch: {len(self.x)} != {len(self.y)}")
        return self

    @classmethod
    def from_roi(cls, roi: "PointsROI") -> "PointsSnapshot":
        pts = roi.point_list
        return cls(
            x=[p.x for p in pts],
            y=[p.y for p in pts],
            c=roi.c,
            z=roi.z,
            t=roi.t,
        )

    @classmethod
    def parse(cls, payload: Any) -> "PointsSnapshot":
        """Validate a parsed JSON/YAML object.

        Raises
        ------
        SnapshotSchemaError
            If the payload does not describe a v1 points snapshot.
        """
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise SnapshotSchemaError(f"Invalid points snapshot: {e}") from e

    def to_roi(self) -> "PointsROI":
        from slide_roi.roi.points import PointsROI

        roi = PointsROI.from_arrays(self.x, self.y, self.c, self.z, self.t)
        if roi.n_points != len(self.x):
            log.debug("Snapshot reload dropped %d NaN point(s)", len(self.x) - roi.n_points)
        return roi

    @property
    def n_points(self) -> int:
        return len(self.x)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)

    def to_json_text(self, *, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


def restore_points_roi(payload: dict) -> "PointsROI":
    """Unpickling hook: rebuild a ROI from its snapshot payload."""
    return PointsSnapshot.parse(payload).to_roi()
