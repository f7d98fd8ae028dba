"""Identity and shared behaviour of every ROI kind.

A ROI lives on one image plane, identified by channel ``c``, z-slice ``z`` and
time point ``t``. The plane is fixed at construction and takes part in equality
and grouping, never in geometry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Hashable, Iterable, Sequence, TypeVar

from slide_roi.geom import Point2
from slide_roi.roi.interfaces import Capability, RoiType


@dataclass(frozen=True)
class ImagePlane:
    """Channel / z-slice / time-point coordinates.

    ``c == -1`` means the ROI applies to all channels.
    """

    c: int = -1
    z: int = 0
    t: int = 0

    @classmethod
    def default(cls) -> "ImagePlane":
        return cls(-1, 0, 0)

    def includes_channel(self, c: int) -> bool:
        return self.c == -1 or self.c == int(c)


class AbstractPathROI(ABC):
    """Base class of the ROI family.

    Subclasses provide geometry; this class owns the plane and the equality
    contract: two ROIs are equal when they have the same concrete type, the same
    plane and the same geometry key.
    """

    capabilities: ClassVar[frozenset[Capability]] = frozenset()

    def __init__(self, c: int = -1, z: int = 0, t: int = 0) -> None:
        self._plane = ImagePlane(int(c), int(z), int(t))

    # ------------------------------------------------------------ identity

    @property
    def plane(self) -> ImagePlane:
        return self._plane

    @property
    def c(self) -> int:
        return self._plane.c

    @property
    def z(self) -> int:
        return self._plane.z

    @property
    def t(self) -> int:
        return self._plane.t

    # ------------------------------------------------------------ geometry

    @property
    @abstractmethod
    def roi_type(self) -> RoiType: ...

    @property
    @abstractmethod
    def roi_name(self) -> str: ...

    @abstractmethod
    def is_empty(self) -> bool: ...

    @property
    @abstractmethod
    def bounds_x(self) -> float: ...

    @property
    @abstractmethod
    def bounds_y(self) -> float: ...

    @property
    @abstractmethod
    def bounds_width(self) -> float: ...

    @property
    @abstractmethod
    def bounds_height(self) -> float: ...

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """``(x_min, y_min, x_max, y_max)``; all NaN for an empty ROI."""
        x0 = self.bounds_x
        y0 = self.bounds_y
        return (x0, y0, x0 + self.bounds_width, y0 + self.bounds_height)

    @property
    @abstractmethod
    def centroid_x(self) -> float: ...

    @property
    @abstractmethod
    def centroid_y(self) -> float: ...

    @property
    @abstractmethod
    def n_points(self) -> int: ...

    @property
    @abstractmethod
    def point_list(self) -> Sequence[Point2]: ...

    @property
    @abstractmethod
    def polygon_points(self) -> Sequence[Point2]: ...

    @abstractmethod
    def duplicate(self) -> "AbstractPathROI": ...

    @abstractmethod
    def shape(self) -> Any:
        """Filled-region representation of this ROI."""

    @abstractmethod
    def geometry(self) -> Any:
        """General polygonal geometry of this ROI."""

    @abstractmethod
    def _geometry_key(self) -> Hashable: ...

    # ------------------------------------------------------------ equality

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._plane == other._plane and self._geometry_key() == other._geometry_key()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._plane, self._geometry_key()))


R = TypeVar("R", bound=AbstractPathROI)


def group_by_plane(rois: Iterable[R]) -> dict[ImagePlane, list[R]]:
    """Group ROIs by image plane, keeping input order inside each group."""
    out: dict[ImagePlane, list[R]] = {}
    for roi in rois:
        out.setdefault(roi.plane, []).append(roi)
    return out


def rois_for_channel(rois: Iterable[R], c: int) -> list[R]:
    """Return ROIs visible on channel ``c`` (channel ``-1`` ROIs always match)."""
    return [r for r in rois if r.plane.includes_channel(c)]
