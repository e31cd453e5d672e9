"""Generate a printable prism net from an SVG file or raw path data.

Usage:
    python gen_net.py -i shape.svg -d 30 -o assets/net.svg
    python gen_net.py -p "M 0,0 L 100,0 L 100,50 L 0,50 Z" -d 30
"""
import argparse
import sys

from shared.geometry import ShapeError
from pathdata.measure import DEFAULT_MEASURER, MEASURERS
from net.generate import NetOptions, generate_net, write_svg
from net.render import scene_to_svg
from net.constants import (
    DEFAULT_DEPTH, DEFAULT_SCALE, DEFAULT_TOLERANCE, DEFAULT_MIN_SEGMENT,
    DEFAULT_MARGIN, DEFAULT_UNIT, PAGE_A4,
)

DEFAULT_OUTPUT = "assets/net.svg"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate a prism net (base, mirror, side panels, glue tabs) as SVG.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", "-i", help="SVG file holding the shape")
    src.add_argument("--path", "-p", help="SVG path data of the shape")
    ap.add_argument("--depth", "-d", type=float, default=None, help=f"Extrusion depth (default {DEFAULT_DEPTH:g})")
    ap.add_argument("--height", type=float, default=None, help=argparse.SUPPRESS)
    ap.add_argument("--scale", "-s", type=float, default=DEFAULT_SCALE)
    ap.add_argument("--tolerance", "-t", type=float, default=DEFAULT_TOLERANCE, help="Curve flattening tolerance")
    ap.add_argument("--min-segment", type=float, default=DEFAULT_MIN_SEGMENT,
                    help="Panels shorter than this merge into the previous one")
    ap.add_argument("--margin", "-m", type=float, default=DEFAULT_MARGIN)
    ap.add_argument("--unit", "-u", default=DEFAULT_UNIT, help="Unit suffix for document width/height")
    ap.add_argument("--output", "-o", default=DEFAULT_OUTPUT)
    ap.add_argument("--measurer", choices=sorted(MEASURERS), default=DEFAULT_MEASURER,
                    help="Curve length backend")
    ap.add_argument("--fit-page", action="store_true", help="Size the page to the net instead of A4")
    return ap


def options_from_args(args: argparse.Namespace, svg_content: str | None = None) -> NetOptions:
    depth = args.depth
    if depth is None and args.height is not None:
        print("Warning: --height is deprecated, use --depth", file=sys.stderr)
        depth = args.height
    return NetOptions(
        svg_content=svg_content,
        path_data=None if svg_content is not None else args.path,
        depth=DEFAULT_DEPTH if depth is None else depth,
        scale=args.scale, tolerance=args.tolerance, min_segment=args.min_segment,
        margin=args.margin, unit=args.unit,
        page=None if args.fit_page else PAGE_A4,
        measurer=args.measurer,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        svg_content = None
        if args.input:
            with open(args.input, encoding="utf-8") as f:
                svg_content = f.read()
        result = generate_net(options_from_args(args, svg_content))
        write_svg(args.output, scene_to_svg(result.scene))
    except (ShapeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    m = result.meta
    print(f"Net generated: {args.output}")
    print(f"Stats: faces={m.faces}, perimeter={m.perimeter:.2f}{m.unit}, area={m.area:.2f}{m.unit}^2")
    return 0


if __name__ == "__main__":
    sys.exit(main())
