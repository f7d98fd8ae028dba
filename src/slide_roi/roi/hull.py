"""Convex-hull polygon produced by hull-bearing ROIs."""

from __future__ import annotations

from typing import ClassVar, Sequence

import numpy as np

from slide_roi.geom import Point2
from slide_roi.roi.interfaces import Capability


class HullPolygon:
    """Immutable polygon over convex-hull vertices.

    The polygon is closed implicitly (the last vertex connects to the first).
    One or two vertices describe a degenerate, zero-area hull.
    """

    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.POINTS, Capability.AREA})

    def __init__(self, vertices: Sequence[Point2]) -> None:
        self._vertices = tuple(vertices)
        self._xy = np.array([(p.x, p.y) for p in self._vertices], dtype=float).reshape(-1, 2)

    @property
    def vertices(self) -> tuple[Point2, ...]:
        return self._vertices

    @property
    def n_points(self) -> int:
        return len(self._vertices)

    @property
    def point_list(self) -> tuple[Point2, ...]:
        return self._vertices

    @property
    def polygon_points(self) -> tuple[Point2, ...]:
        return self._vertices

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        if len(self._xy) == 0:
            return (float("nan"),) * 4
        lo = self._xy.min(axis=0)
        hi = self._xy.max(axis=0)
        return (float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))

    def _scaled(self, pixel_width: float, pixel_height: float) -> np.ndarray:
        return self._xy * np.array([pixel_width, pixel_height], dtype=float)

    @staticmethod
    def _shoelace(xy: np.ndarray) -> float:
        if len(xy) < 3:
            return 0.0
        x = xy[:, 0]
        y = xy[:, 1]
        return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0)

    @staticmethod
    def _perimeter(xy: np.ndarray) -> float:
        if len(xy) < 2:
            return 0.0
        if len(xy) == 2:
            # A segment is traversed out and back.
            return float(2.0 * np.hypot(*(xy[1] - xy[0])))
        d = np.roll(xy, -1, axis=0) - xy
        return float(np.hypot(d[:, 0], d[:, 1]).sum())

    def area(self) -> float:
        return self._shoelace(self._xy)

    def scaled_area(self, pixel_width: float, pixel_height: float) -> float:
        return self.area() * pixel_width * pixel_height

    def length(self) -> float:
        """Perimeter in pixels."""
        return self._perimeter(self._xy)

    def scaled_length(self, pixel_width: float, pixel_height: float) -> float:
        return self._perimeter(self._scaled(pixel_width, pixel_height))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HullPolygon):
            return NotImplemented
        return self._vertices == other._vertices

    def __hash__(self) -> int:
        return hash(self._vertices)

    def __repr__(self) -> str:
        return f"HullPolygon({len(self._vertices)} vertices, area={self.area():g})"
