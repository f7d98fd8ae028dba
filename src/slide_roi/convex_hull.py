"""Convex hull of a point sequence.

The general case is delegated to Qhull via :class:`scipy.spatial.ConvexHull`.
Qhull refuses inputs that do not span two dimensions, but ROIs routinely hold a
single point or a line of points, so those cases are resolved here directly and
still yield a valid (zero-area) polygon.

Vertices are returned counter-clockwise without repeating the first vertex.

Infinite coordinates cannot be placed on a polygon, so points holding one are
left out: the hull covers the finite points only, and is empty (no vertices,
zero area) when no point is finite.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from slide_roi.geom import Point2


log = logging.getLogger(__name__)


def _as_xy(points: Sequence[Point2]) -> np.ndarray:
    return np.array([(p.x, p.y) for p in points], dtype=float).reshape(-1, 2)


def _is_collinear(xy: np.ndarray) -> bool:
    if len(xy) < 3:
        return True
    d = xy[1:] - xy[0]
    # Near-collinear input is left to Qhull (see the QhullError fallback).
    cross = d[:, 0] * d[0, 1] - d[:, 1] * d[0, 0]
    return bool(np.all(cross == 0.0))


def _degenerate_hull(xy: np.ndarray) -> list[Point2]:
    """Hull of points that span fewer than two dimensions.

    For collinear points the lexicographic extremes are the segment endpoints.
    """
    order = np.lexsort((xy[:, 1], xy[:, 0]))
    first = xy[order[0]]
    last = xy[order[-1]]
    if np.array_equal(first, last):
        return [Point2(float(first[0]), float(first[1]))]
    return [Point2(float(first[0]), float(first[1])), Point2(float(last[0]), float(last[1]))]


def convex_hull(points: Sequence[Point2]) -> list[Point2]:
    """Return the vertices of the convex hull of ``points``.

    Parameters
    ----------
    points:
        Non-empty sequence of :class:`~slide_roi.geom.Point2`. Duplicates are
        allowed.

    Raises
    ------
    ValueError
        If ``points`` is empty.
    """

    if len(points) == 0:
        raise ValueError("Convex hull requires at least one point")

    xy = _as_xy(points)
    finite = np.isfinite(xy).all(axis=1)
    if not finite.all():
        log.debug("Convex hull ignores %d point(s) with infinite coordinates", int((~finite).sum()))
        xy = xy[finite]
        if len(xy) == 0:
            return []

    xy = np.unique(xy, axis=0)
    if _is_collinear(xy):
        return _degenerate_hull(xy)

    try:
        hull = ConvexHull(xy)
    except QhullError as e:
        log.debug("Qhull rejected %d points, treating as degenerate: %s", len(xy), e)
        return _degenerate_hull(xy)

    return [Point2(float(x), float(y)) for x, y in xy[hull.vertices]]
