"""Net rendering: page placement, shape outlines, glue tabs, fold lines, info.

Everything is first laid out in an assembly frame with the side-panel stack at
(margin, margin): the base butts against the stack's left side, the mirror
against its right side (swapped when the reference edge runs upward). The
assembly's bounding box is then centered on the page (or the page is sized to
the content) and every element is emitted with that final shift applied.
"""
import math
from typing import NamedTuple
from xml.sax.saxutils import escape

from shared.types import Point, Edge, LineEdge, ArcEdge, SidePanel, NetLayout, OriginalShapeInfo, NetMeta
from shared.geometry import GeometryError, bbox, ellipse_perimeter, poly_edges, dist
from shared.svg import Transform, fmt, points_d, style
from pathdata.measure import arc_center_params, fit_circle_to_curve, bezier_mid
from net.tabs import (
    trapezoid_tab, tab_pair, saw_tooth_tabs, spike_count,
    Star, star_vertices, star_outline, star_spikes,
)
from net.constants import (
    DEFAULT_MARGIN, DEFAULT_UNIT, DEFAULT_SCALE, PAGE_A4, TAB_DEPTH, TOOTH_PITCH, STAR_SPIKE_PITCH,
    BASE_FILL, MIRROR_FILL, PANEL_FILL, TAB_FILL, STROKE, STROKE_WIDTH,
    FOLD_STROKE, FOLD_WIDTH, FOLD_DASH,
    INFO_X, INFO_Y0, INFO_LINE_H, INFO_FONT_SIZE,
)

GROUP_IDS = ("BG", "GLUE_SIDE", "GLUE_SHAPE", "SHAPE", "FOLDING_SIDE",
             "FOLDING_SHAPE", "CUT_LINES", "DESIGN", "INFO")

BASE_STYLE = style(BASE_FILL, STROKE, STROKE_WIDTH)
MIRROR_STYLE = style(MIRROR_FILL, STROKE, STROKE_WIDTH)
PANEL_STYLE = style(PANEL_FILL, STROKE, STROKE_WIDTH)
TAB_STYLE = style(TAB_FILL)
FOLD_STYLE = style("none", FOLD_STROKE, FOLD_WIDTH, FOLD_DASH)


class Scene(NamedTuple):
    """Renderable net: page size plus SVG elements per top-level group."""
    width: float
    height: float
    unit: str
    groups: dict[str, list[str]]


# ============================================================
# Drawable pieces (assembly frame)
# ============================================================

class _Poly(NamedTuple):
    pts: list[Point]; closed: bool; style: str

class _Rect(NamedTuple):
    x: float; y: float; w: float; h: float; style: str

class _Ellipse(NamedTuple):
    c: Point; rx: float; ry: float; style: str

class _Path(NamedTuple):
    d: str; xf: Transform; outline: list[Point]; style: str

Piece = _Poly | _Rect | _Ellipse | _Path


def _piece_points(p: Piece) -> list[Point]:
    if isinstance(p, _Poly):
        return p.pts
    if isinstance(p, _Rect):
        return [(p.x, p.y), (p.x+p.w, p.y+p.h)]
    if isinstance(p, _Ellipse):
        return [(p.c[0]-p.rx, p.c[1]-p.ry), (p.c[0]+p.rx, p.c[1]+p.ry)]
    return p.outline


def _emit(p: Piece, dx: float, dy: float) -> str:
    if isinstance(p, _Poly):
        pts = [(x+dx, y+dy) for x, y in p.pts]
        return f'<path d="{points_d(pts, p.closed)}" {p.style}/>'
    if isinstance(p, _Rect):
        return (f'<rect x="{fmt(p.x+dx)}" y="{fmt(p.y+dy)}" width="{fmt(p.w)}"'
                f' height="{fmt(p.h)}" {p.style}/>')
    if isinstance(p, _Ellipse):
        cx = fmt(p.c[0]+dx); cy = fmt(p.c[1]+dy)
        if abs(p.rx-p.ry) < 1e-9:
            return f'<circle cx="{cx}" cy="{cy}" r="{fmt(p.rx)}" {p.style}/>'
        return f'<ellipse cx="{cx}" cy="{cy}" rx="{fmt(p.rx)}" ry="{fmt(p.ry)}" {p.style}/>'
    xf = Transform().translate(dx, dy) @ p.xf
    return f'<path d="{p.d}" transform="{xf.svg()}" {p.style}/>'


# ============================================================
# Placement
# ============================================================

class PanelRect(NamedTuple):
    x: float; y: float; w: float; h: float
    panel: SidePanel

class Placement(NamedTuple):
    stack: list[PanelRect]
    base_xf: Transform            # layout-frame base -> assembly
    mirror_xf: Transform          # layout-frame mirror -> assembly
    src_base_xf: Transform        # scaled input coordinates -> assembly (base)
    src_mirror_xf: Transform      # scaled input coordinates -> assembly (mirror)


def place_net(layout: NetLayout, margin: float = DEFAULT_MARGIN) -> Placement:
    """Stack panels at (margin, margin) and butt base/mirror against it.

    The base goes on the left of the stack unless the layout says otherwise.
    """
    sx = sy = margin
    stack = []; y = sy
    for p in layout.panels:
        stack.append(PanelRect(sx, y, p.width, p.height, p)); y += p.height
    bx, mx = (sx+layout.depth, sx) if layout.base_right else (sx, sx+layout.depth)
    base_xf = Transform().translate(bx-layout.anchor.x_edge, sy-layout.anchor.y_min)
    mirror_xf = Transform().translate(mx-layout.mirror_anchor.x_edge, sy-layout.mirror_anchor.y_min)
    c0 = layout.centroid_original; cb = layout.centroid_base
    rot = Transform().rotate(math.degrees(layout.rotation), c0[0], c0[1])
    flip = Transform().translate(cb[0], cb[1]).scale(-1, 1).translate(-cb[0], -cb[1])
    return Placement(stack, base_xf, mirror_xf, base_xf @ rot, mirror_xf @ flip @ rot)


# ============================================================
# Shape outlines
# ============================================================

def _primitive_radii(shape: OriginalShapeInfo, scale: float) -> tuple[float, float]:
    p = shape.params
    return p.get("rx", p.get("r"))*scale, p.get("ry", p.get("r"))*scale


def _ellipse_faces(layout: NetLayout, shape: OriginalShapeInfo, pl: Placement,
                   scale: float) -> tuple[_Ellipse, _Ellipse]:
    """Axis-aligned circle/ellipse primitives tangent to the stack at its mid height.

    The sampled outline's rotation is not applied, so the drawn faces do not
    depend on the flattening tolerance.
    """
    rx, ry = _primitive_radii(shape, scale)
    top = pl.stack[0]
    mid_y = top.y+sum(r.h for r in pl.stack)/2
    left = (top.x-rx, mid_y); right = (top.x+top.w+rx, mid_y)
    if layout.base_right:
        left, right = right, left
    return _Ellipse(left, rx, ry, BASE_STYLE), _Ellipse(right, rx, ry, MIRROR_STYLE)


def shape_pieces(layout: NetLayout, shape: OriginalShapeInfo, pl: Placement,
                 scale: float) -> list[Piece]:
    """Base and mirror outlines plus the side-panel rectangles."""
    base_pts = pl.base_xf.apply_all(layout.base)
    mirror_pts = pl.mirror_xf.apply_all(layout.mirror)
    pieces: list[Piece] = []
    if shape.kind in ("circle", "ellipse") and shape.params:
        pieces.extend(_ellipse_faces(layout, shape, pl, scale))
    elif shape.kind == "rect":
        for pts, st in ((base_pts, BASE_STYLE), (mirror_pts, MIRROR_STYLE)):
            x0, y0, x1, y1 = bbox(pts)
            pieces.append(_Rect(x0, y0, x1-x0, y1-y0, st))
    elif shape.d:
        sc = Transform().scale(scale)
        pieces.append(_Path(shape.d, pl.src_base_xf @ sc, base_pts, BASE_STYLE))
        pieces.append(_Path(shape.d, pl.src_mirror_xf @ sc, mirror_pts, MIRROR_STYLE))
    else:
        pieces.append(_Poly(base_pts, True, BASE_STYLE))
        pieces.append(_Poly(mirror_pts, True, MIRROR_STYLE))
    for r in pl.stack:
        pieces.append(_Rect(r.x, r.y, r.w, r.h, PANEL_STYLE))
    return pieces


# ============================================================
# Tabs and fold lines
# ============================================================

def side_tabs(pl: Placement, curvy: bool, tab_depth: float = TAB_DEPTH,
              pitch: float = TOOTH_PITCH) -> tuple[list[Piece], list[Piece]]:
    """(glue, fold) pieces for every panel: left, right, top, and bottom seams.

    Left/right seams of arc/curve panels use saw-teeth when the shape is curvy.
    """
    glue: list[Piece] = []; fold: list[Piece] = []
    for r in pl.stack:
        toothed = curvy and r.panel.type in ("arc", "curve")
        if r.h > 1e-9:
            for x, nx in ((r.x, -1.0), (r.x+r.w, 1.0)):
                p1 = (x, r.y); p2 = (x, r.y+r.h)
                if toothed:
                    glue.extend(_Poly(t, True, TAB_STYLE) for t in saw_tooth_tabs(p1, p2, (nx, 0.0), tab_depth, pitch))
                else:
                    glue.append(_Poly(trapezoid_tab(p1, p2, (nx, 0.0), tab_depth), True, TAB_STYLE))
                fold.append(_Poly([p1, p2], False, FOLD_STYLE))
        for y, ny in ((r.y, -1.0), (r.y+r.h, 1.0)):
            p1 = (r.x, y); p2 = (r.x+r.w, y)
            glue.append(_Poly(trapezoid_tab(p1, p2, (0.0, ny), tab_depth), True, TAB_STYLE))
            fold.append(_Poly([p1, p2], False, FOLD_STYLE))
    return glue, fold


def _straight_tabs(p1: Point, p2: Point, tab_depth: float,
                   glue: list[Piece], fold: list[Piece]):
    if dist(p1, p2) < 1e-9:
        return
    for t in tab_pair(p1, p2, tab_depth):
        glue.append(_Poly(t, True, TAB_STYLE))
    fold.append(_Poly([p1, p2], False, FOLD_STYLE))


def _sweep_spikes(n_full: int, sweep: float) -> int:
    return max(2, round(n_full*abs(sweep)/(2*math.pi)))


def _curve_star(e: Edge, tab_depth: float, pitch: float):
    """Star spanning a curved edge's sweep, or None when it is effectively straight."""
    if isinstance(e, ArcEdge):
        if e.arc is None:
            return None
        try:
            ac = arc_center_params(e.start, e.end, *e.arc)
        except GeometryError:
            return None
        n = _sweep_spikes(spike_count(ellipse_perimeter(ac.rx, ac.ry), pitch), ac.dtheta)
        return star_vertices(ac.center, ac.rx, ac.ry, n, tab_depth, ac.phi, ac.theta1, ac.dtheta)
    c, r = fit_circle_to_curve(e.start, e.controls, e.end, e.quadratic)
    mid = bezier_mid(e.start, e.controls, e.end, e.quadratic)
    (sx, sy), (ex, ey) = e.start, e.end
    bulge = abs((ex-sx)*(mid[1]-sy)-(ey-sy)*(mid[0]-sx))
    if r < 1e-9 or bulge < 1e-6*max(1.0, dist(e.start, e.end))**2:
        return None
    a_s = math.atan2(sy-c[1], sx-c[0])
    a_e = math.atan2(ey-c[1], ex-c[0])
    a_m = math.atan2(mid[1]-c[1], mid[0]-c[0])
    ccw = (a_e-a_s)%(2*math.pi)
    sweep = ccw if (a_m-a_s)%(2*math.pi) <= ccw else ccw-2*math.pi
    n = _sweep_spikes(spike_count(2*math.pi*r, pitch), sweep)
    return star_vertices(c, r, r, n, tab_depth, 0.0, a_s, sweep)


def shape_tabs(layout: NetLayout, shape: OriginalShapeInfo, pl: Placement, scale: float,
               tab_depth: float = TAB_DEPTH, pitch: float = STAR_SPIKE_PITCH
               ) -> tuple[list[Piece], list[Piece]]:
    """(glue, fold) pieces around the base and mirror outlines.

    Straight edges get a trapezoid on each side and a fold along the edge.
    Curved edges get a star spanning their sweep, folded through its inner
    vertices. Circles and ellipses get one full star each.
    """
    glue: list[Piece] = []; fold: list[Piece] = []
    if shape.kind in ("circle", "ellipse") and shape.params:
        rx, ry = _primitive_radii(shape, scale)
        n = spike_count(ellipse_perimeter(rx, ry), pitch)
        for face in _ellipse_faces(layout, shape, pl, scale):
            star = star_vertices(face.c, rx, ry, n, tab_depth)
            glue.append(_Poly(star_outline(star), True, TAB_STYLE))
            fold.append(_Poly(star.inner, True, FOLD_STYLE))
        return glue, fold
    curved = layout.edges is not None and any(e.type != "line" for e in layout.edges)
    if not curved or shape.kind == "rect":
        for poly, xf in ((layout.base, pl.base_xf), (layout.mirror, pl.mirror_xf)):
            for a, b, _ in poly_edges(xf.apply_all(poly)):
                _straight_tabs(a, b, tab_depth, glue, fold)
        return glue, fold
    for xf in (pl.src_base_xf, pl.src_mirror_xf):
        for e in layout.edges:
            star = None if isinstance(e, LineEdge) else _curve_star(e, tab_depth, pitch)
            if star is None:
                _straight_tabs(xf.apply(e.start), xf.apply(e.end), tab_depth, glue, fold)
                continue
            star = Star(xf.apply_all(star.inner), xf.apply_all(star.outer), star.closed)
            glue.extend(_Poly(t, True, TAB_STYLE) for t in star_spikes(star))
            fold.append(_Poly(star.inner, False, FOLD_STYLE))
    return glue, fold


# ============================================================
# Info layer
# ============================================================

def info_lines(layout: NetLayout, shape: OriginalShapeInfo, scale: float,
               margin: float, unit: str) -> list[str]:
    strip = sum(p.height for p in layout.panels)
    x0, y0, x1, y1 = bbox(layout.base)
    lines = [f"Perimeter (strip length): {strip:.2f} {unit}",
             f"Base footprint: {x1-x0:.2f} × {y1-y0:.2f} {unit}",
             f"Depth: {layout.depth:.2f} {unit} (panels={len(layout.panels)})",
             f"Scale: {scale:g}×, Margin: {margin:g}{unit}"]
    detail = f"Input: {shape.kind}"
    if shape.edges is not None:
        detail += f" edges={len(shape.edges)}"
        if len(shape.edges) != len(layout.panels):
            detail += f" → panels={len(layout.panels)}"
    lines.append(detail)
    for i, p in enumerate(layout.panels):
        lines.append(f"Panel {i}: type={p.type}, height={p.height:.2f}{unit}, width={p.width:.2f}{unit}")
    for i, e in enumerate(shape.edges or []):
        angle = f"{math.degrees(e.angle):.1f}°" if isinstance(e, LineEdge) else "N/A"
        lines.append(f"Edge {i}: type={e.type}, length={e.length:.2f}{unit}, angle={angle}")
    return lines


# ============================================================
# Render
# ============================================================

def render_net(layout: NetLayout, shape: OriginalShapeInfo, margin: float = DEFAULT_MARGIN,
               unit: str = DEFAULT_UNIT, page: tuple[float, float] | None = PAGE_A4,
               scale: float = DEFAULT_SCALE, tab_depth: float = TAB_DEPTH,
               spike_pitch: float = STAR_SPIKE_PITCH) -> tuple[Scene, NetMeta]:
    """Lay out the net on a page and build its scene and metadata.

    *page* is (width, height); None sizes the page to the content plus
    *margin* on every side.
    """
    pl = place_net(layout, margin)
    curvy = shape.kind in ("circle", "ellipse") or shape.has_arcs
    pieces: dict[str, list[Piece]] = {gid: [] for gid in GROUP_IDS}
    pieces["SHAPE"] = shape_pieces(layout, shape, pl, scale)
    pieces["GLUE_SIDE"], pieces["FOLDING_SIDE"] = side_tabs(pl, curvy, tab_depth)
    pieces["GLUE_SHAPE"], pieces["FOLDING_SHAPE"] = shape_tabs(layout, shape, pl, scale, tab_depth, spike_pitch)

    min_x, min_y, max_x, max_y = bbox([q for ps in pieces.values() for p in ps for q in _piece_points(p)])
    if page is not None:
        width, height = page
        dx = (width-(max_x-min_x))/2-min_x; dy = (height-(max_y-min_y))/2-min_y
    else:
        width = max_x-min_x+2*margin; height = max_y-min_y+2*margin
        dx = margin-min_x; dy = margin-min_y

    groups = {gid: [_emit(p, dx, dy) for p in ps] for gid, ps in pieces.items()}
    groups["BG"] = [f'<rect x="0" y="0" width="{fmt(width)}" height="{fmt(height)}" fill="white"/>']
    groups["INFO"] = [
        f'<text x="{fmt(INFO_X)}" y="{fmt(INFO_Y0+i*INFO_LINE_H)}" font-family="Arial, Helvetica, sans-serif"'
        f' font-size="{INFO_FONT_SIZE}" fill="#000">{escape(line)}</text>'
        for i, line in enumerate(info_lines(layout, shape, scale, margin, unit))
    ]
    meta = NetMeta(faces=2, perimeter=layout.perimeter, area=layout.area,
                   panels=len(layout.panels), width=width, height=height, unit=unit)
    return Scene(width, height, unit, groups), meta


def scene_to_svg(scene: Scene) -> str:
    """Serialize a scene as a standalone SVG document."""
    w = fmt(scene.width); h = fmt(scene.height); u = escape(scene.unit, {'"': "&quot;"})
    out = ['<?xml version="1.0" encoding="UTF-8"?>',
           f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}{u}" height="{h}{u}"'
           f' viewBox="0 0 {w} {h}">']
    for gid in GROUP_IDS:
        out.append(f'<g id="{gid}">')
        out.extend(scene.groups.get(gid, []))
        out.append('</g>')
    out.append('</svg>')
    return "\n".join(out)+"\n"
