"""YAML configuration for the ``slide-roi`` command.

Example ``slide_roi.yaml``::

    log_level: INFO
    default_plane: {c: -1, z: 0, t: 0}
    io:
      format: json
      indent: 2
    nearest:
      max_distance: 5.0

Notes
-----
- Extra keys are allowed (forward compatibility); :func:`find_unknown_keys`
  reports them so typos can be surfaced as warnings.
- A missing config file means "all defaults".
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from slide_roi.roi.base import ImagePlane


log = logging.getLogger(__name__)


class PlaneBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    c: int = -1
    z: int = 0
    t: int = 0


class IOBlock(BaseModel):
    """Collection file settings.

    format: used when the output suffix is neither .json nor .yaml/.yml.
    """

    model_config = ConfigDict(extra="allow")

    format: Literal["json", "yaml"] = "json"
    indent: int = Field(default=2, ge=0)


class NearestBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    max_distance: float = Field(default=5.0, ge=0.0)


class RoiConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    log_level: Optional[str] = None
    default_plane: PlaneBlock = Field(default_factory=PlaneBlock)
    io: IOBlock = Field(default_factory=IOBlock)
    nearest: NearestBlock = Field(default_factory=NearestBlock)

    def plane(self) -> ImagePlane:
        p = self.default_plane
        return ImagePlane(p.c, p.z, p.t)


_SECTIONS: Dict[str, type[BaseModel]] = {
    "default_plane": PlaneBlock,
    "io": IOBlock,
    "nearest": NearestBlock,
}


def find_unknown_keys(cfg: Dict[str, Any]) -> Dict[str, List[str]]:
    """Return unknown keys grouped by section (``"top"`` for the root)."""

    unknown: Dict[str, List[str]] = {}

    top_unknown = sorted(str(k) for k in cfg.keys() if str(k) not in RoiConfig.model_fields)
    if top_unknown:
        unknown["top"] = top_unknown

    for sec, model in _SECTIONS.items():
        block = cfg.get(sec)
        if isinstance(block, dict):
            u = sorted(str(k) for k in block.keys() if str(k) not in model.model_fields)
            if u:
                unknown[sec] = u

    return unknown


def load_config(cfg_path: str | Path | None = None) -> RoiConfig:
    """Load and validate a YAML config.

    Raises pydantic's ``ValidationError`` on bad values; unknown keys are only
    logged.
    """
    if cfg_path is None:
        return RoiConfig()

    p = Path(cfg_path).expanduser()
    if not p.is_file():
        log.warning("Config %s not found, using defaults", p)
        return RoiConfig()

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p}: top level of the config must be a mapping")

    for sec, keys in find_unknown_keys(raw).items():
        log.warning("Unknown config keys in %s: %s", sec, ", ".join(keys))

    return RoiConfig.model_validate(raw)
