"""slide-roi package.

Point-set regions of interest for whole-slide images: capability contracts,
the :class:`~slide_roi.roi.points.PointsROI` model and its persisted snapshot.
"""

from .version import __version__
from .geom import Point2
from .roi import ImagePlane, PointsROI, PointsSnapshot

__all__ = ["__version__", "Point2", "ImagePlane", "PointsROI", "PointsSnapshot"]
