"""Net layout computation: orientation, side panels, mirror, and anchors.

The base outline is rotated about its centroid so the reference edge runs
vertically downward; it is later butted against the left side of the panel
stack, and its horizontal mirror against the right side. Mixed outlines whose
reference edge points left are turned to run upward instead, and then the
base goes on the right of the stack and the mirror on the left. Side panels
follow the outline's traversal order starting at the reference edge.
"""
import math

from shared.types import Point, Edge, LineEdge, SidePanel, Anchor, NetLayout
from shared.geometry import (
    DegeneratePolygonError,
    signed_area, poly_area, poly_perimeter, poly_edges, centroid,
    rotate_polygon, mirror_polygon_horiz, normalize_angle, dist, lerp,
)
from pathdata.segments import reverse_edges
from net.constants import DEFAULT_MIN_SEGMENT

NEAR_HORIZONTAL = math.pi/4       # within 45 deg of 0 or 180 deg


# ============================================================
# Orientation
# ============================================================

def normalize_winding(polygon: list[Point], edges: list[Edge] | None
                      ) -> tuple[list[Point], list[Edge] | None]:
    """Traverse clockwise on the page (positive shoelace area in y-down coords).

    With this winding the interior of a downward edge lies at smaller x, and
    that of an upward edge at larger x.
    """
    if signed_area(polygon) >= 0:
        return list(polygon), edges
    return list(reversed(polygon)), reverse_edges(edges) if edges else edges


def reference_edge(polygon: list[Point], edges: list[Edge] | None) -> tuple[int, float]:
    """(polygon edge index, direction angle) of the reference edge.

    With classified edges that include straight lines, the longest line is the
    reference and its recorded angle is used; the polygon edge whose midpoint
    lies nearest that line's midpoint becomes the anchor edge. Otherwise the
    polygon's own longest edge is used (first one on ties).
    """
    pe = poly_edges(polygon)
    lines = [e for e in edges or [] if isinstance(e, LineEdge) and e.length > 0]
    if lines:
        ref = max(lines, key=lambda e: e.length)
        m = lerp(ref.start, ref.end, 0.5)
        idx = min(range(len(pe)), key=lambda i: dist(lerp(pe[i][0], pe[i][1], 0.5), m))
        return idx, ref.angle
    idx = max(range(len(pe)), key=lambda i: pe[i][2])
    a, b, _ = pe[idx]
    return idx, math.atan2(b[1]-a[1], b[0]-a[0])


def target_rotation(angle: float, edges: list[Edge] | None) -> float:
    """Rotation that brings a reference edge at *angle* to vertical.

    Mixed straight/curved outlines: a near-horizontal reference pointing
    left (|angle| > 90 deg) lands at -90 deg, anything else at +90 deg.
    Purely straight or purely curved outlines always land at +90 deg.
    """
    a = normalize_angle(angle)
    types = {e.type for e in edges or []}
    if "line" in types and types & {"arc", "curve"}:
        near_h = abs(a) <= NEAR_HORIZONTAL or abs(a) >= math.pi-NEAR_HORIZONTAL
        if near_h and abs(a) > math.pi/2:
            return -math.pi/2-a
    return math.pi/2-a


# ============================================================
# Panels
# ============================================================

def panel_segments(ordered_lengths: list[float], depth: float,
                   edges: list[Edge] | None) -> tuple[list[SidePanel], list[Edge] | None]:
    """Unmerged panels, plus the classified edges in panel order.

    Classified edges are rotated to start at the line edge whose length is
    nearest the reference edge length (first occurrence on ties).
    """
    if not edges:
        return [SidePanel(h, depth) for h in ordered_lengths], None
    target = ordered_lengths[0]
    start = 0; best = math.inf
    for i, e in enumerate(edges):
        diff = abs(e.length-target)
        if e.type == "line" and diff < best:
            best = diff; start = i
    seq = edges[start:]+edges[:start]
    return [SidePanel(e.length, depth, e.type, e) for e in seq], seq


def merge_panels(panels: list[SidePanel], min_segment: float) -> list[SidePanel]:
    """Fold panels shorter than *min_segment* into the previous panel.

    The previous panel keeps its type and payload; the first panel is never
    merged away.
    """
    out: list[SidePanel] = []
    for p in panels:
        if out and p.height < min_segment:
            out[-1] = out[-1]._replace(height=out[-1].height+p.height)
        else:
            out.append(p)
    return out


def edge_anchor(poly: list[Point], idx: int) -> Anchor:
    a = poly[idx]; b = poly[(idx+1)%len(poly)]
    return Anchor((a[0]+b[0])/2, min(a[1], b[1]), max(a[1], b[1]))


# ============================================================
# Layout
# ============================================================

def build_net(polygon: list[Point], depth: float, min_segment: float = DEFAULT_MIN_SEGMENT,
              edges: list[Edge] | None = None) -> NetLayout:
    """Compute the complete net layout for *polygon* extruded by *depth*."""
    if len(polygon) < 3:
        raise DegeneratePolygonError(f"Polygon needs at least 3 points, got {len(polygon)}")
    poly, edges = normalize_winding(polygon, edges or None)
    n = len(poly)
    idx, theta = reference_edge(poly, edges)
    rot = target_rotation(theta, edges)
    c0 = centroid(poly)
    base = rotate_polygon(poly, rot, c0)
    down = normalize_angle(theta+rot) > 0
    if (base[(idx+1)%n][1] < base[idx][1]) == down:
        # Anchor edge must run the way the reference direction landed
        rot += math.pi
        base = rotate_polygon(poly, rot, c0)
    rot = normalize_angle(rot)
    ordered = [dist(base[(idx+k)%n], base[(idx+k+1)%n]) for k in range(n)]
    segments, seq = panel_segments(ordered, depth, edges)
    panels = merge_panels(segments, min_segment)
    mirror = mirror_polygon_horiz(base)
    return NetLayout(
        polygon=poly, base=base, mirror=mirror, panels=panels, depth=depth,
        perimeter=poly_perimeter(base), area=poly_area(base),
        rotation=rot, centroid_original=c0, centroid_base=centroid(base),
        ref_index=idx, anchor=edge_anchor(base, idx), mirror_anchor=edge_anchor(mirror, idx),
        edges=seq, base_right=not down,
    )
