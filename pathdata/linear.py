"""Exact polygon extraction for paths made only of straight commands."""
from shared.types import Point, CommandKind
from shared.geometry import dist
from .parser import parse_path

_LINEAR_KINDS = frozenset({CommandKind.LINE_TO, CommandKind.HORIZONTAL_TO, CommandKind.VERTICAL_TO})
DUP_TOL = 1e-9


def extract_linear_polygon(d: str) -> list[Point] | None:
    """Vertices of a single-subpath M/L/H/V/Z path, or None.

    None means "not linear": a curve or arc appears, a second subpath starts,
    or fewer than 3 distinct vertices remain. Coordinates are returned
    exactly as written (no sampling). Grammar errors propagate as
    UnparseablePathError.
    """
    pts: list[Point] = []
    closed = False
    for cmd in parse_path(d):
        if cmd.kind is CommandKind.MOVE_TO:
            if pts:
                return None
            pts.append(cmd.end)
        elif cmd.kind in _LINEAR_KINDS:
            if closed:
                return None
            pts.append(cmd.end)
        elif cmd.kind is CommandKind.CLOSE_PATH:
            closed = True
        else:
            return None
    out: list[Point] = []
    for p in pts:
        if not out or dist(p, out[-1]) > DUP_TOL:
            out.append(p)
    if len(out) > 1 and dist(out[-1], out[0]) <= DUP_TOL:
        out.pop()
    return out if len(out) >= 3 else None
