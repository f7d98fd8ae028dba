"""Error taxonomy for ROI construction, conversion and persistence.

NaN coordinates are not an error: ingestion drops them silently.
"""

from __future__ import annotations

import pickle


class InvalidROIArgument(ValueError):
    """Raised when ROI constructor arguments are inconsistent (e.g. x/y lengths differ)."""


class UnsupportedROIOperation(RuntimeError):
    """Raised when an operation is not defined for a given kind of ROI."""


class ReconstructionForbidden(pickle.UnpicklingError):
    """Raised when a live ROI is rebuilt from raw state instead of its snapshot."""


class SnapshotSchemaError(ValueError):
    """Raised when a persisted snapshot or collection violates its schema."""
