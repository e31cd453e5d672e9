"""Classify path commands into typed outline edges (line / arc / curve)."""
import math

from shared.types import Point, CommandKind, PathCommand, \
    LineEdge, ArcEdge, CurveEdge, Edge, QUADRATIC_KINDS
from shared.geometry import UnparseablePathError, dist
from .parser import parse_path, is_closing_edge
from .measure import PathMeasurer, get_measurer, command_length, is_straight


def _line(cmd: PathCommand) -> LineEdge:
    (x0, y0), (x1, y1) = cmd.start, cmd.end
    match cmd.kind:
        case CommandKind.HORIZONTAL_TO:
            angle = 0.0 if x1 >= x0 else math.pi
        case CommandKind.VERTICAL_TO:
            angle = math.pi/2 if y1 >= y0 else -math.pi/2
        case _:
            angle = math.atan2(y1-y0, x1-x0)
    return LineEdge(cmd.start, cmd.end, dist(cmd.start, cmd.end), angle)


def classify_commands(cmds: list[PathCommand], measurer: PathMeasurer | None = None) -> list[Edge]:
    """One edge per drawn segment, in traversal order."""
    measurer = measurer or get_measurer()
    edges: list[Edge] = []
    for cmd in cmds:
        match cmd.kind:
            case CommandKind.MOVE_TO:
                continue
            case CommandKind.LINE_TO | CommandKind.HORIZONTAL_TO | CommandKind.VERTICAL_TO:
                edges.append(_line(cmd))
            case CommandKind.CLOSE_PATH:
                if is_closing_edge(cmd):
                    edges.append(_line(cmd))
            case CommandKind.ARC_TO:
                if is_straight(cmd):
                    # Zero radius draws a straight line
                    edges.append(_line(cmd._replace(kind=CommandKind.LINE_TO)))
                else:
                    edges.append(ArcEdge(cmd.start, cmd.end, command_length(cmd, measurer), cmd.arc))
            case _:
                edges.append(CurveEdge(cmd.start, cmd.end, command_length(cmd, measurer),
                                       cmd.controls, cmd.kind in QUADRATIC_KINDS))
    return edges


def classify_edges(d: str, measurer: PathMeasurer | None = None) -> list[Edge] | None:
    """Classified edges of *d*, or None when the path cannot be interpreted."""
    try:
        cmds = parse_path(d)
    except UnparseablePathError:
        return None
    return classify_commands(cmds, measurer)


# ============================================================
# Edge transforms
# ============================================================

def _sp(p: Point, s: float) -> Point:
    return (p[0]*s, p[1]*s)


def scale_edge(e: Edge, s: float) -> Edge:
    """Uniformly scale an edge about the origin."""
    if isinstance(e, LineEdge):
        return e._replace(start=_sp(e.start, s), end=_sp(e.end, s), length=e.length*s)
    if isinstance(e, ArcEdge):
        arc = e.arc._replace(rx=e.arc.rx*s, ry=e.arc.ry*s) if e.arc else None
        return e._replace(start=_sp(e.start, s), end=_sp(e.end, s), length=e.length*s, arc=arc)
    return e._replace(start=_sp(e.start, s), end=_sp(e.end, s), length=e.length*s,
                      controls=tuple(_sp(c, s) for c in e.controls))


def reverse_edge(e: Edge) -> Edge:
    """Same trace, opposite direction."""
    if isinstance(e, LineEdge):
        a = e.angle+math.pi
        return e._replace(start=e.end, end=e.start, angle=a-2*math.pi if a > math.pi else a)
    if isinstance(e, ArcEdge):
        arc = e.arc._replace(sweep=not e.arc.sweep) if e.arc else None
        return e._replace(start=e.end, end=e.start, arc=arc)
    return e._replace(start=e.end, end=e.start, controls=tuple(reversed(e.controls)))


def reverse_edges(edges: list[Edge]) -> list[Edge]:
    return [reverse_edge(e) for e in reversed(edges)]


def is_curved(e: Edge) -> bool:
    return e.type != "line"
