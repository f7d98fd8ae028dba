"""ROI made of discrete 2D points.

A :class:`PointsROI` is filled once, at construction, and never changes
afterwards. Points with a NaN coordinate are dropped on ingestion, so the
stored sequence only ever holds real coordinates. Bounds are computed once
after ingestion; the convex hull is computed on first request and cached.

The ROI has no area of its own. It can report the area of its convex hull,
but refuses conversion to a filled shape or a polygonal geometry.

Persistence goes through :class:`~slide_roi.roi.snapshot.PointsSnapshot`; see
:meth:`PointsROI.to_snapshot`. Pickling uses the snapshot too, and rebuilding
an instance from raw pickled state is rejected.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, ClassVar, Iterable, Optional, Sequence, Union

from slide_roi.convex_hull import convex_hull as _compute_hull
from slide_roi.geom import Point2
from slide_roi.roi.base import AbstractPathROI
from slide_roi.roi.errors import InvalidROIArgument, ReconstructionForbidden, UnsupportedROIOperation
from slide_roi.roi.hull import HullPolygon
from slide_roi.roi.interfaces import Capability, RoiType

if TYPE_CHECKING:
    from slide_roi.roi.snapshot import PointsSnapshot


log = logging.getLogger(__name__)

_NAN = float("nan")

PointLike = Union[Point2, Sequence[float]]


class PointsROI(AbstractPathROI):
    """Ordered collection of points on one image plane.

    Parameters
    ----------
    points:
        :class:`Point2` values or ``(x, y)`` pairs. Order is kept and duplicates
        are allowed.
    c, z, t:
        Image plane (channel ``-1`` means all channels).
    """

    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.POINTS, Capability.HULL})

    def __init__(self, points: Iterable[PointLike] = (), c: int = -1, z: int = 0, t: int = 0) -> None:
        super().__init__(c, z, t)
        self._points: list[Point2] = []
        self._x_min = self._y_min = self._x_max = self._y_max = _NAN
        self._convex_hull: Optional[HullPolygon] = None

        n_offered = 0
        for p in points:
            n_offered += 1
            if isinstance(p, Point2):
                self._add_point(p.x, p.y)
            else:
                x, y = p
                self._add_point(x, y)
        self._recompute_bounds()

        if len(self._points) != n_offered:
            log.debug("Dropped %d NaN point(s) of %d", n_offered - len(self._points), n_offered)

    @classmethod
    def from_point(cls, x: float, y: float, c: int = -1, z: int = 0, t: int = 0) -> "PointsROI":
        """Single-point ROI (empty if either coordinate is NaN)."""
        return cls([(x, y)], c, z, t)

    @classmethod
    def from_arrays(
        cls,
        x: Sequence[float],
        y: Sequence[float],
        c: int = -1,
        z: int = 0,
        t: int = 0,
    ) -> "PointsROI":
        """ROI from parallel coordinate arrays.

        Raises
        ------
        InvalidROIArgument
            If ``x`` and ``y`` differ in length.
        """
        if len(x) != len(y):
            raise InvalidROIArgument(
                f"Lengths of x and y arrays are not the same! {len(x)} and {len(y)}"
            )
        return cls(zip(x, y), c, z, t)

    @classmethod
    def from_snapshot(cls, snapshot: "PointsSnapshot") -> "PointsROI":
        return snapshot.to_roi()

    # ------------------------------------------------------------ ingestion

    def _add_point(self, x: float, y: float) -> None:
        x = float(x)
        y = float(y)
        if math.isnan(x) or math.isnan(y):
            return
        self._points.append(Point2(x, y))

    def _recompute_bounds(self) -> None:
        if not self._points:
            self._x_min = self._y_min = self._x_max = self._y_max = _NAN
            return
        x_min = y_min = math.inf
        x_max = y_max = -math.inf
        for p in self._points:
            if p.x < x_min:
                x_min = p.x
            if p.x > x_max:
                x_max = p.x
            if p.y < y_min:
                y_min = p.y
            if p.y > y_max:
                y_max = p.y
        self._x_min, self._y_min, self._x_max, self._y_max = x_min, y_min, x_max, y_max

    # ------------------------------------------------------------ description

    @property
    def roi_type(self) -> RoiType:
        return RoiType.POINT

    @property
    def roi_name(self) -> str:
        return "Points"

    def is_empty(self) -> bool:
        """True if there are no points (a single point has zero-size bounds but is not empty)."""
        return not self._points

    def __str__(self) -> str:
        return f"{self.roi_name} ({len(self._points)} points)"

    def __repr__(self) -> str:
        return f"PointsROI(n_points={len(self._points)}, c={self.c}, z={self.z}, t={self.t})"

    # ------------------------------------------------------------ points

    @property
    def n_points(self) -> int:
        return len(self._points)

    @property
    def point_list(self) -> tuple[Point2, ...]:
        return tuple(self._points)

    @property
    def polygon_points(self) -> tuple[Point2, ...]:
        return self.point_list

    def _geometry_key(self) -> tuple[Point2, ...]:
        return tuple(self._points)

    def get_nearest(self, x: float, y: float, max_dist: float) -> Optional[Point2]:
        """Closest point within ``max_dist`` of ``(x, y)``, or None.

        The boundary is inclusive. On exact ties the earliest point wins.
        """
        max_dist_sq = max_dist * max_dist
        closest = None
        closest_sq = math.inf
        for p in self._points:
            d_sq = p.distance_sq(x, y)
            if d_sq <= max_dist_sq and d_sq < closest_sq:
                closest = p
                closest_sq = d_sq
        return closest

    def contains_point(self, x: float, y: float) -> bool:
        """True if a stored point has exactly these coordinates."""
        for p in self._points:
            if p.x == x and p.y == y:
                return True
        return False

    # ------------------------------------------------------------ bounds

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (self._x_min, self._y_min, self._x_max, self._y_max)

    @property
    def bounds_x(self) -> float:
        return self._x_min

    @property
    def bounds_y(self) -> float:
        return self._y_min

    @property
    def bounds_width(self) -> float:
        return self._x_max - self._x_min

    @property
    def bounds_height(self) -> float:
        return self._y_max - self._y_min

    @property
    def centroid_x(self) -> float:
        if not self._points:
            return _NAN
        return sum(p.x for p in self._points) / len(self._points)

    @property
    def centroid_y(self) -> float:
        if not self._points:
            return _NAN
        return sum(p.y for p in self._points) / len(self._points)

    # ------------------------------------------------------------ hull

    def convex_hull(self) -> Optional[HullPolygon]:
        """Convex hull of all points, or None for an empty ROI. Cached."""
        hull = self._convex_hull
        if hull is None:
            if not self._points:
                return None
            hull = HullPolygon(_compute_hull(self._points))
            log.debug("Convex hull of %d points: %d vertices", len(self._points), hull.n_points)
            self._convex_hull = hull
        return hull

    def convex_area(self) -> float:
        hull = self.convex_hull()
        if hull is not None:
            return hull.area()
        return _NAN

    def scaled_convex_area(self, pixel_width: float, pixel_height: float) -> float:
        hull = self.convex_hull()
        if hull is not None:
            return hull.scaled_area(pixel_width, pixel_height)
        return _NAN

    # ------------------------------------------------------------ conversion

    def shape(self) -> Any:
        raise UnsupportedROIOperation("PointsROI does not support shape()")

    def geometry(self) -> Any:
        raise UnsupportedROIOperation("PointsROI does not support geometry()")

    def duplicate(self) -> "PointsROI":
        """Independent copy with the same points and plane; caches start empty."""
        return PointsROI(self._points, self.c, self.z, self.t)

    def __copy__(self) -> "PointsROI":
        return self.duplicate()

    def __deepcopy__(self, memo: dict) -> "PointsROI":
        return self.duplicate()

    # ------------------------------------------------------------ persistence

    def to_snapshot(self) -> "PointsSnapshot":
        from slide_roi.roi.snapshot import PointsSnapshot

        return PointsSnapshot.from_roi(self)

    def __reduce__(self):
        from slide_roi.roi.snapshot import restore_points_roi

        return (restore_points_roi, (self.to_snapshot().to_dict(),))

    def __setstate__(self, state: Any) -> None:
        raise ReconstructionForbidden("PointsROI can only be restored from its snapshot")

    def __getattr__(self, name: str) -> Any:
        # Only reached for missing attributes. An instance without point storage
        # was allocated by an unpickler without running the constructor.
        if "_points" not in self.__dict__:
            raise ReconstructionForbidden("PointsROI can only be restored from its snapshot")
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
