"""Capability contracts of the ROI family.

Every concrete ROI class declares which capabilities it satisfies through the
``capabilities`` class attribute, and downstream code asks
:func:`has_capability` rather than testing class identity. The protocols below
describe the operations each capability guarantees and are meant for static
typing.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from slide_roi.geom import Point2


class RoiType(str, Enum):
    """Coarse kind of a ROI."""

    POINT = "point"
    LINE = "line"
    AREA = "area"


class Capability(str, Enum):
    POINTS = "points"  # ordered point collection
    AREA = "area"  # area-bearing shape
    HULL = "hull"  # exposes a derived convex hull


@runtime_checkable
class PathPoints(Protocol):
    @property
    def n_points(self) -> int: ...

    @property
    def point_list(self) -> Sequence["Point2"]: ...

    @property
    def polygon_points(self) -> Sequence["Point2"]: ...


@runtime_checkable
class PathArea(Protocol):
    def area(self) -> float: ...

    def scaled_area(self, pixel_width: float, pixel_height: float) -> float: ...


@runtime_checkable
class ROIWithHull(Protocol):
    def convex_hull(self) -> Optional[PathArea]: ...

    def convex_area(self) -> float: ...

    def scaled_convex_area(self, pixel_width: float, pixel_height: float) -> float: ...


def capabilities_of(obj: Any) -> frozenset[Capability]:
    caps = getattr(type(obj), "capabilities", None)
    if caps is None:
        return frozenset()
    return frozenset(caps)


def has_capability(obj: Any, capability: Capability | str) -> bool:
    """Return True if ``obj`` declares ``capability``."""
    return Capability(capability) in capabilities_of(obj)
