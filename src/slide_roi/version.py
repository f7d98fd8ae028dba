"""Version helpers.

``__version__`` is the Python package version (PEP 440). Persisted files carry
their own schema identifiers (see :mod:`slide_roi.roi.snapshot`), so bumping
the package version never changes the on-disk format.
"""

from __future__ import annotations

from dataclasses import dataclass
import platform
import sys


__version__ = "0.4.1"


@dataclass(frozen=True)
class VersionInfo:
    package_version: str
    snapshot_schema: str
    python: str
    platform: str


def get_version_info() -> VersionInfo:
    from slide_roi.roi.snapshot import SCHEMA_ID

    return VersionInfo(
        package_version=__version__,
        snapshot_schema=SCHEMA_ID,
        python=sys.version.split()[0],
        platform=f"{platform.system()} {platform.release()} ({platform.machine()})",
    )
