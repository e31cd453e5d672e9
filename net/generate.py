"""Net generation pipeline: shape source -> polygon -> layout -> scene.

The polygon used for layout comes from the first of these that yields at
least 3 usable vertices: exact linear extraction, flattening at the requested
tolerance, one retry at half that tolerance. Flattened outlines are then
colinear-simplified, keeping the raw samples if simplification collapses them.
"""
import os
from typing import NamedTuple

from shared.types import Point, ArcEdge, NetLayout, OriginalShapeInfo, NetMeta
from shared.geometry import InvalidInputError, DegeneratePolygonError, is_right_rect, poly_area
from shared.svg_input import extract_shape_info
from pathdata.parser import parse_path
from pathdata.measure import DEFAULT_MEASURER, MEASURERS, get_measurer
from pathdata.linear import extract_linear_polygon
from pathdata.flatten import flatten_path, simplify_colinear
from pathdata.segments import classify_edges, scale_edge, is_curved
from net.layout import build_net
from net.render import Scene, render_net
from net.constants import (
    DEFAULT_DEPTH, DEFAULT_SCALE, DEFAULT_TOLERANCE, MIN_RETRY_TOLERANCE,
    DEFAULT_MIN_SEGMENT, DEFAULT_MARGIN, DEFAULT_UNIT, PAGE_A4, TAB_DEPTH, STAR_SPIKE_PITCH,
)

MIN_AREA = 1e-9


class NetOptions(NamedTuple):
    svg_content: str | None = None
    path_data: str | None = None
    depth: float = DEFAULT_DEPTH
    scale: float = DEFAULT_SCALE
    tolerance: float = DEFAULT_TOLERANCE
    min_segment: float = DEFAULT_MIN_SEGMENT
    margin: float = DEFAULT_MARGIN
    unit: str = DEFAULT_UNIT
    page: tuple[float, float] | None = PAGE_A4     # None: size the page to the content
    measurer: str = DEFAULT_MEASURER
    tab_depth: float = TAB_DEPTH
    spike_pitch: float = STAR_SPIKE_PITCH


class NetResult(NamedTuple):
    scene: Scene
    meta: NetMeta
    layout: NetLayout
    shape: OriginalShapeInfo


# ============================================================
# Validation and shape resolution
# ============================================================

def _validate(o: NetOptions):
    if (o.svg_content is None) == (o.path_data is None):
        raise InvalidInputError("Provide exactly one of svg_content or path_data")
    for name in ("depth", "scale", "tolerance", "tab_depth", "spike_pitch"):
        if not getattr(o, name) > 0:
            raise InvalidInputError(f"{name} must be positive, got {getattr(o, name)}")
    for name in ("min_segment", "margin"):
        if not getattr(o, name) >= 0:
            raise InvalidInputError(f"{name} must not be negative, got {getattr(o, name)}")
    if o.measurer not in MEASURERS:
        raise InvalidInputError(f"Unknown measurer {o.measurer!r}; choose from {sorted(MEASURERS)}")


def resolve_shape(o: NetOptions) -> OriginalShapeInfo:
    """Shape description from SVG content or raw path data."""
    if o.svg_content is not None:
        shape = extract_shape_info(o.svg_content)
    else:
        shape = OriginalShapeInfo("path", o.path_data.strip())
    if not shape.d:
        raise InvalidInputError("No path data could be resolved from the input")
    return shape


# ============================================================
# Polygon
# ============================================================

def layout_polygon(d: str, scale: float, tolerance: float, measurer=None) -> tuple[list[Point], bool]:
    """(scaled polygon, is_linear) for path data *d*.

    Raises DegeneratePolygonError when fewer than 3 vertices, or no area,
    survive every fallback.
    """
    linear = extract_linear_polygon(d)
    if linear is not None:
        poly = [(x*scale, y*scale) for x, y in linear]
    else:
        pts = flatten_path(d, tolerance, scale, measurer)
        if len(pts) < 3:
            pts = flatten_path(d, max(tolerance/2, MIN_RETRY_TOLERANCE), scale, measurer)
        simp = simplify_colinear(pts)
        poly = simp if len(simp) >= 3 else pts
    if len(poly) < 3:
        raise DegeneratePolygonError(f"Polygon needs at least 3 points, got {len(poly)}")
    if poly_area(poly) < MIN_AREA:
        raise DegeneratePolygonError(f"Polygon of {len(poly)} points encloses no area")
    return poly, linear is not None


def shape_edges(shape: OriginalShapeInfo, scale: float, measurer=None):
    """Scaled classified edges, or None when classification is not possible.

    Circles and ellipses collapse to a single arc edge around the whole outline.
    """
    edges = classify_edges(shape.d, measurer)
    if not edges:
        return None
    edges = [scale_edge(e, scale) for e in edges]
    if shape.kind in ("circle", "ellipse"):
        total = sum(e.length for e in edges)
        return [ArcEdge(edges[0].start, edges[0].start, total, None)]
    return edges


# ============================================================
# Pipeline
# ============================================================

def generate_net(options: NetOptions | None = None, **overrides) -> NetResult:
    """Build the net for one shape.

    Keyword arguments override fields of *options* (or of the defaults).
    """
    o = (options or NetOptions())._replace(**overrides)
    _validate(o)
    measurer = get_measurer(o.measurer)
    shape = resolve_shape(o)
    parse_path(shape.d)

    polygon, linear = layout_polygon(shape.d, o.scale, o.tolerance, measurer)
    if linear and shape.kind == "path" and is_right_rect(polygon):
        shape = shape._replace(kind="rect")
    edges = shape_edges(shape, o.scale, measurer)
    curvy = shape.kind in ("circle", "ellipse") or any(is_curved(e) for e in edges or [])
    shape = shape._replace(edges=edges, has_arcs=curvy)

    layout = build_net(polygon, o.depth, o.min_segment, edges)
    scene, meta = render_net(layout, shape, o.margin, o.unit, o.page, o.scale,
                             o.tab_depth, o.spike_pitch)
    return NetResult(scene, meta, layout, shape)


def write_svg(path: str, text: str):
    """Write *text* to *path*, creating parent directories."""
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
