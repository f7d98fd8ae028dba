from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path

from rich import print
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from slide_roi.config import RoiConfig, load_config
from slide_roi.io import read_rois, write_rois
from slide_roi.log import RoiTimer, setup_logging
from slide_roi.roi.base import ImagePlane
from slide_roi.roi.errors import InvalidROIArgument, SnapshotSchemaError
from slide_roi.roi.points import PointsROI
from slide_roi.version import get_version_info


def _fmt(v: float) -> str:
    return "-" if math.isnan(v) else f"{v:.2f}"


def _read(path: str) -> list[PointsROI]:
    with RoiTimer("read", path) as t:
        rois = read_rois(path)
        t.record(rois)
    return rois


def _write(rois: list[PointsROI], args: argparse.Namespace, cfg: RoiConfig) -> Path:
    fmt = args.format or cfg.io.format
    indent = args.indent if args.indent is not None else cfg.io.indent
    with RoiTimer("write", args.out) as t:
        p = write_rois(rois, args.out, fmt=fmt, indent=indent)
        t.record(rois)
    return p


def _cmd_version() -> int:
    v = get_version_info()
    print(f"slide-roi {v.package_version} (snapshot {v.snapshot_schema})")
    print(f"Python {v.python} on {v.platform}")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    rois = _read(args.file)

    scaled = args.pixel_width is not None

    table = Table(title=f"{args.file} ({len(rois)} ROIs)")
    table.add_column("#", justify="right")
    table.add_column("c,z,t")
    table.add_column("points", justify="right")
    table.add_column("bounds (x0, y0, x1, y1)")
    table.add_column("convex area", justify="right")
    if scaled:
        table.add_column("scaled area", justify="right")

    for i, roi in enumerate(rois):
        row = [
            str(i),
            f"{roi.c},{roi.z},{roi.t}",
            str(roi.n_points),
            ", ".join(_fmt(b) for b in roi.bounds),
            _fmt(roi.convex_area()),
        ]
        if scaled:
            row.append(_fmt(roi.scaled_convex_area(args.pixel_width, args.pixel_height)))
        table.add_row(*row)

    Console().print(table)
    return 0


def _cmd_nearest(args: argparse.Namespace, cfg: RoiConfig) -> int:
    max_dist = args.max_dist if args.max_dist is not None else cfg.nearest.max_distance
    rois = _read(args.file)
    found = False
    for i, roi in enumerate(rois):
        p = roi.get_nearest(args.x, args.y, max_dist)
        if p is None:
            continue
        found = True
        print(f"ROI {i} ({roi}): ({p.x:g}, {p.y:g}) at distance {p.distance(args.x, args.y):.3f}")
    if not found:
        print(f"[yellow]No point within {max_dist:g} of ({args.x:g}, {args.y:g})[/yellow]")
        return 1
    return 0


def _cmd_convert(args: argparse.Namespace, cfg: RoiConfig) -> int:
    rois = _read(args.file)
    p = _write(rois, args, cfg)
    print(f"Wrote {len(rois)} ROI(s) to {p}")
    return 0


def _cmd_create(args: argparse.Namespace, cfg: RoiConfig) -> int:
    plane = ImagePlane(*args.plane) if args.plane is not None else cfg.plane()
    roi = PointsROI(args.point or [], plane.c, plane.z, plane.t)

    rois: list[PointsROI] = []
    if args.append and Path(args.out).is_file():
        rois = _read(args.out)
    rois.append(roi)

    p = _write(rois, args, cfg)
    print(f"Added {roi} on c={plane.c}, z={plane.z}, t={plane.t} to {p}")
    return 0


def _add_write_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--format", choices=["json", "yaml"], default=None, help="Used when OUT has no .json/.yaml suffix (default: io.format)")
    p.add_argument("--indent", type=int, default=None, help="Indentation (default: io.indent)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="slide-roi")
    p.add_argument(
        "--log-level",
        default=None,
        help="CRITICAL|ERROR|WARNING|INFO|DEBUG (or env SLIDE_ROI_LOG_LEVEL, or log_level in config)",
    )
    p.add_argument("--debug-geometry", action="store_true", help="Show per-ROI geometry debug records")
    p.add_argument("--config", default=None, help="YAML config file")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print version information")

    p_ins = sub.add_parser("inspect", help="Summarise the ROIs of a collection file")
    p_ins.add_argument("file")
    p_ins.add_argument("--pixel-width", type=float, default=None, help="Physical pixel width")
    p_ins.add_argument("--pixel-height", type=float, default=None, help="Physical pixel height")

    p_near = sub.add_parser("nearest", help="Find the closest point to x,y in each ROI")
    p_near.add_argument("file")
    p_near.add_argument("x", type=float)
    p_near.add_argument("y", type=float)
    p_near.add_argument("--max-dist", type=float, default=None)

    p_conv = sub.add_parser("convert", help="Rewrite a collection file (e.g. JSON -> YAML)")
    p_conv.add_argument("file")
    p_conv.add_argument("out")
    _add_write_options(p_conv)

    p_new = sub.add_parser("create", help="Write a points ROI to a collection file")
    p_new.add_argument("out")
    p_new.add_argument("--point", nargs=2, type=float, action="append", metavar=("X", "Y"))
    p_new.add_argument("--plane", nargs=3, type=int, default=None, metavar=("C", "Z", "T"), help="Default: default_plane from config")
    p_new.add_argument("--append", action="store_true", help="Keep the ROIs already in OUT")
    _add_write_options(p_new)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cmd == "inspect" and (args.pixel_width is None) != (args.pixel_height is None):
        parser.error("--pixel-width and --pixel-height must be given together")

    cfg = load_config(args.config)

    setup_logging(args.log_level, config_level=cfg.log_level, core_debug=args.debug_geometry)
    log = logging.getLogger("slide_roi")

    try:
        if args.cmd == "version":
            return _cmd_version()
        if args.cmd == "inspect":
            return _cmd_inspect(args)
        if args.cmd == "nearest":
            return _cmd_nearest(args, cfg)
        if args.cmd == "convert":
            return _cmd_convert(args, cfg)
        if args.cmd == "create":
            return _cmd_create(args, cfg)
    except (FileNotFoundError, SnapshotSchemaError, InvalidROIArgument) as e:
        log.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"[red]{escape(str(e))}[/red]")
        return 2

    raise AssertionError(f"unhandled command {args.cmd!r}")


if __name__ == "__main__":
    sys.exit(main())
