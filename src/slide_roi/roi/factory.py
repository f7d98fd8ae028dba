"""Convenience constructors taking an :class:`ImagePlane` instead of ``c, z, t``."""

from __future__ import annotations

from typing import Iterable, Optional

from slide_roi.roi.base import ImagePlane
from slide_roi.roi.points import PointLike, PointsROI


def create_point_roi(x: float, y: float, plane: Optional[ImagePlane] = None) -> PointsROI:
    plane = plane or ImagePlane.default()
    return PointsROI.from_point(x, y, plane.c, plane.z, plane.t)


def create_points_roi(points: Iterable[PointLike] = (), plane: Optional[ImagePlane] = None) -> PointsROI:
    plane = plane or ImagePlane.default()
    return PointsROI(points, plane.c, plane.z, plane.t)
