"""Shared type definitions for the shape2flat project."""
from enum import Enum
from typing import Literal, NamedTuple

Point = tuple[float, float]
BBox = tuple[float, float, float, float]   # min_x, min_y, max_x, max_y

EdgeType = Literal["line", "arc", "curve"]
ShapeKind = Literal["path", "rect", "circle", "ellipse", "polygon", "polyline"]


# ============================================================
# Path commands
# ============================================================

class CommandKind(Enum):
    """SVG path command, keyed by its uppercase letter."""
    MOVE_TO = "M"
    LINE_TO = "L"
    HORIZONTAL_TO = "H"
    VERTICAL_TO = "V"
    ARC_TO = "A"
    CUBIC_TO = "C"
    SMOOTH_CUBIC_TO = "S"
    QUADRATIC_TO = "Q"
    SMOOTH_QUADRATIC_TO = "T"
    CLOSE_PATH = "Z"

CURVE_KINDS = frozenset({CommandKind.CUBIC_TO, CommandKind.SMOOTH_CUBIC_TO,
                         CommandKind.QUADRATIC_TO, CommandKind.SMOOTH_QUADRATIC_TO})
QUADRATIC_KINDS = frozenset({CommandKind.QUADRATIC_TO, CommandKind.SMOOTH_QUADRATIC_TO})

class ArcParams(NamedTuple):
    rx: float; ry: float; rotation: float   # rotation in degrees
    large_arc: bool; sweep: bool

class PathCommand(NamedTuple):
    """One interpreted command with absolute coordinates.

    Smooth variants carry their reflected control point, so *controls* always
    holds the full control polygon (2 points for cubics, 1 for quadratics).
    """
    kind: CommandKind
    start: Point
    end: Point
    controls: tuple[Point, ...] = ()
    arc: ArcParams | None = None


# ============================================================
# Classified edges
# ============================================================

class LineEdge(NamedTuple):
    start: Point; end: Point; length: float
    angle: float                 # radians, atan2 convention
    type: EdgeType = "line"

class ArcEdge(NamedTuple):
    start: Point; end: Point; length: float
    arc: ArcParams | None        # None for a collapsed full-circumference edge
    type: EdgeType = "arc"

class CurveEdge(NamedTuple):
    start: Point; end: Point; length: float
    controls: tuple[Point, ...]
    quadratic: bool
    type: EdgeType = "curve"

Edge = LineEdge | ArcEdge | CurveEdge


# ============================================================
# Net layout
# ============================================================

class SidePanel(NamedTuple):
    """One rectangular face of the side strip."""
    height: float
    width: float
    type: EdgeType = "line"
    edge: Edge | None = None     # source edge payload, kept for tab generation

class Anchor(NamedTuple):
    """Reference-edge alignment data: edge midpoint x and its y extent."""
    x_edge: float; y_min: float; y_max: float

class NetLayout(NamedTuple):
    polygon: list[Point]         # input polygon, winding normalized
    base: list[Point]
    mirror: list[Point]
    panels: list[SidePanel]
    depth: float
    perimeter: float
    area: float
    rotation: float              # radians applied about centroid_original
    centroid_original: Point
    centroid_base: Point
    ref_index: int
    anchor: Anchor
    mirror_anchor: Anchor
    edges: list[Edge] | None     # classified edges, winding normalized, reordered
    base_right: bool = False     # reference edge runs upward; base sits right of the stack


# ============================================================
# Shape description and output metadata
# ============================================================

class OriginalShapeInfo(NamedTuple):
    kind: ShapeKind
    d: str
    params: dict[str, float] | None = None
    edges: list[Edge] | None = None
    has_arcs: bool = False

class NetMeta(NamedTuple):
    faces: int
    perimeter: float
    area: float
    panels: int
    width: float
    height: float
    unit: str
