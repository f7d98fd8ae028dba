"""The ROI family: capability contracts, base identity and concrete kinds."""

from .base import AbstractPathROI, ImagePlane, group_by_plane, rois_for_channel
from .errors import (
    InvalidROIArgument,
    ReconstructionForbidden,
    SnapshotSchemaError,
    UnsupportedROIOperation,
)
from .factory import create_point_roi, create_points_roi
from .hull import HullPolygon
from .interfaces import (
    Capability,
    PathArea,
    PathPoints,
    ROIWithHull,
    RoiType,
    capabilities_of,
    has_capability,
)
from .points import PointsROI
from .snapshot import PointsSnapshot

__all__ = [
    "AbstractPathROI",
    "Capability",
    "HullPolygon",
    "ImagePlane",
    "InvalidROIArgument",
    "PathArea",
    "PathPoints",
    "PointsROI",
    "PointsSnapshot",
    "ROIWithHull",
    "ReconstructionForbidden",
    "RoiType",
    "SnapshotSchemaError",
    "UnsupportedROIOperation",
    "capabilities_of",
    "create_point_roi",
    "create_points_roi",
    "group_by_plane",
    "has_capability",
    "rois_for_channel",
]
