"""Console logging for the ``slide-roi`` command.

The library never configures logging itself; it only emits records on module
loggers. Two groups matter here:

- command loggers (``slide_roi``, ``slide_roi.io``, ``slide_roi.config``):
  one record per file read or written,
- geometry loggers (``slide_roi.roi``, ``slide_roi.convex_hull``): DEBUG records
  per ROI (dropped NaN points, hull sizes). On a large collection these flood
  the console, so they stay at INFO even under ``--log-level DEBUG`` unless
  ``core_debug`` is requested.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Iterable, Optional

from rich.logging import RichHandler

from slide_roi.roi.base import AbstractPathROI


ENV_LEVEL = "SLIDE_ROI_LOG_LEVEL"
GEOMETRY_LOGGERS = ("slide_roi.roi", "slide_roi.convex_hull")
_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def resolve_level(level: Optional[str] = None, config_level: Optional[str] = None) -> str:
    """Pick the console level.

    First non-empty source wins: ``level`` (command line), env var
    ``SLIDE_ROI_LOG_LEVEL``, ``config_level`` (``log_level`` in the YAML
    config), then ``"INFO"``. Unknown names resolve to ``"INFO"``.
    """
    for cand in (level, os.environ.get(ENV_LEVEL), config_level):
        if cand is not None and str(cand).strip():
            name = str(cand).upper().strip()
            return name if name in _LEVELS else "INFO"
    return "INFO"


def setup_logging(
    level: Optional[str] = None,
    *,
    config_level: Optional[str] = None,
    core_debug: bool = False,
) -> str:
    """Install a Rich console handler on the root logger; return the level used.

    Safe to call repeatedly: previous root handlers are replaced.
    """
    name = resolve_level(level, config_level)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    logging.basicConfig(
        level=name,
        format="%(message)s",
        datefmt="[%H:%M:%S]",
        handlers=[
            RichHandler(
                rich_tracebacks=True,
                tracebacks_show_locals=False,
                show_path=False,
                markup=False,
            )
        ],
    )

    root_level = logging.getLevelName(name)
    geometry_level = logging.DEBUG if core_debug else max(root_level, logging.INFO)
    for logger_name in GEOMETRY_LOGGERS:
        logging.getLogger(logger_name).setLevel(geometry_level)

    return name


class RoiTimer:
    """Time one command step over a ROI collection and log what it handled.

    Example:
        with RoiTimer("read", path) as t:
            t.record(read_rois(path))
        # ✓ read rois.json: 3 ROI(s), 41 point(s), 1 empty (0.004 s)
    """

    def __init__(self, action: str, target: object, logger: logging.Logger | None = None):
        self.action = action
        self.target = str(target)
        self.logger = logger or logging.getLogger("slide_roi")
        self.n_rois = 0
        self.n_points = 0
        self.n_empty = 0
        self.elapsed = 0.0
        self._t0 = 0.0

    def record(self, rois: Iterable[AbstractPathROI]) -> None:
        for roi in rois:
            self.n_rois += 1
            self.n_points += roi.n_points
            if roi.is_empty():
                self.n_empty += 1

    def __enter__(self) -> "RoiTimer":
        self._t0 = time.perf_counter()
        self.logger.debug("%s %s…", self.action, self.target)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self._t0
        if exc is None:
            self.logger.info(
                "✓ %s %s: %d ROI(s), %d point(s), %d empty (%.3f s)",
                self.action,
                self.target,
                self.n_rois,
                self.n_points,
                self.n_empty,
                self.elapsed,
            )
            return False
        self.logger.error("✗ %s %s FAILED (%.3f s): %s", self.action, self.target, self.elapsed, exc)
        return False
