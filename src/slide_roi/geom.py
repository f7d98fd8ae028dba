"""Primitive 2D geometry values."""

from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Point2:
    """Immutable 2D coordinate in image pixel space."""

    x: float
    y: float

    def distance_sq(self, x: float, y: float) -> float:
        """Squared Euclidean distance to ``(x, y)``."""
        dx = self.x - x
        dy = self.y - y
        return dx * dx + dy * dy

    def distance(self, x: float, y: float) -> float:
        return math.sqrt(self.distance_sq(x, y))

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)
