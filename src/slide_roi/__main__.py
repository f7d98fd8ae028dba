"""Module entry-point.

    python -m slide_roi

The canonical CLI entry-point is the console script ``slide-roi``. When invoked
without arguments, print the version and exit successfully.
"""

from __future__ import annotations

import sys

from slide_roi.cli import main


def _run() -> int:
    argv = sys.argv[1:] or ["version"]
    return main(argv)


if __name__ == "__main__":
    sys.exit(_run())
