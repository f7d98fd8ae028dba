"""Reading and writing ROI collection files.

A collection file holds a list of point snapshots::

    {"schema": "slide-roi.roi-collection.v1", "schema_version": 1,
     "rois": [{"schema": "slide-roi.points-snapshot.v1", "x": [...], "y": [...], ...}]}

JSON and YAML carry the same structure. ROIs are always rebuilt through
:meth:`PointsSnapshot.to_roi`, never from raw state.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from slide_roi.roi.errors import SnapshotSchemaError
from slide_roi.roi.points import PointsROI
from slide_roi.roi.snapshot import PointsSnapshot


log = logging.getLogger(__name__)

COLLECTION_SCHEMA_ID = "slide-roi.roi-collection.v1"
COLLECTION_SCHEMA_VERSION = 1

Format = Literal["json", "yaml"]


class RoiCollection(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    schema_id: str = Field(default=COLLECTION_SCHEMA_ID, alias="schema")
    schema_version: int = Field(default=COLLECTION_SCHEMA_VERSION)
    rois: List[PointsSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_schema(self) -> "RoiCollection":
        if self.schema_id != COLLECTION_SCHEMA_ID or self.schema_version != COLLECTION_SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported ROI collection schema: schema={self.schema_id!r}, "
                f"schema_version={self.schema_version}. "
                f"Expected {COLLECTION_SCHEMA_ID!r} (v{COLLECTION_SCHEMA_VERSION})."
            )
        return self

    @classmethod
    def from_rois(cls, rois: Iterable[PointsROI]) -> "RoiCollection":
        return cls(rois=[r.to_snapshot() for r in rois])

    def to_rois(self) -> list[PointsROI]:
        return [s.to_roi() for s in self.rois]

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


def _resolve_format(path: Path, fmt: Optional[str]) -> Format:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in {".yaml", ".yml"}:
        return "yaml"
    if fmt in {"json", "yaml"}:
        return fmt  # type: ignore[return-value]
    return "json"


def write_rois(
    rois: Iterable[PointsROI],
    path: str | Path,
    *,
    fmt: Optional[str] = None,
    indent: int = 2,
) -> Path:
    """Write ROIs to a JSON or YAML collection file and return its path."""
    p = Path(path)
    coll = RoiCollection.from_rois(rois)
    kind = _resolve_format(p, fmt)
    if kind == "json":
        text = coll.model_dump_json(by_alias=True, indent=indent)
    else:
        text = yaml.safe_dump(coll.to_dict(), sort_keys=False, indent=indent or None)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    log.info("Wrote %d ROI(s) to %s", len(coll.rois), p)
    return p


def _parse_text(text: str, kind: Format, path: Path) -> Any:
    try:
        if kind == "json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotSchemaError(f"{path}: cannot parse {kind}: {e}") from e


def read_rois(path: str | Path, *, fmt: Optional[str] = None) -> list[PointsROI]:
    """Read a collection file and rebuild its ROIs.

    Raises
    ------
    SnapshotSchemaError
        If the file is not a valid v1 ROI collection.
    """
    p = Path(path)
    payload = _parse_text(p.read_text(encoding="utf-8"), _resolve_format(p, fmt), p)
    try:
        coll = RoiCollection.model_validate(payload)
    except ValidationError as e:
        raise SnapshotSchemaError(f"{p}: invalid ROI collection: {e}") from e
    rois = coll.to_rois()
    log.info("Read %d ROI(s) from %s", len(rois), p)
    return rois
