"""Glue-tab geometry: trapezoids, saw-teeth, and star spikes."""
import math
from typing import NamedTuple

from shared.types import Point
from shared.geometry import dist, lerp, left_norm, off_pt
from net.constants import TAB_DEPTH, TOOTH_PITCH, STAR_SPIKE_PITCH, MIN_SPIKES, MAX_SPIKES


def trapezoid_tab(p1: Point, p2: Point, normal: Point, depth: float = TAB_DEPTH) -> list[Point]:
    """Tab on the *normal* side of seam p1-p2.

    Both ends taper inward by min(depth, seam/2), so short seams give a
    triangle instead of a self-overlapping shape.
    """
    L = dist(p1, p2)
    u = ((p2[0]-p1[0])/L, (p2[1]-p1[1])/L)
    inset = min(depth, L/2)
    return [p1, off_pt(off_pt(p1, normal, depth), u, inset),
            off_pt(off_pt(p2, normal, depth), u, -inset), p2]


def tab_pair(p1: Point, p2: Point, depth: float = TAB_DEPTH) -> tuple[list[Point], list[Point]]:
    """Trapezoid tabs on both sides of a seam."""
    n = left_norm(p1, p2)
    return trapezoid_tab(p1, p2, n, depth), trapezoid_tab(p1, p2, (-n[0], -n[1]), depth)


def saw_tooth_tabs(p1: Point, p2: Point, normal: Point, depth: float = TAB_DEPTH,
                   pitch: float = TOOTH_PITCH) -> list[list[Point]]:
    """Triangles along seam p1-p2, one per *pitch*, apex *depth* out along *normal*.

    The last tooth is shortened to end exactly at p2.
    """
    L = dist(p1, p2); teeth = []
    s0 = 0.0
    while s0 < L-1e-6:
        s1 = min(s0+pitch, L)
        a = lerp(p1, p2, s0/L); b = lerp(p1, p2, s1/L)
        teeth.append([a, off_pt(lerp(a, b, 0.5), normal, depth), b])
        s0 = s1
    return teeth


def spike_count(perimeter: float, pitch: float = STAR_SPIKE_PITCH,
                lo: int = MIN_SPIKES, hi: int = MAX_SPIKES) -> int:
    """clamp(round(perimeter / pitch), lo, hi)"""
    return max(lo, min(hi, round(perimeter/pitch)))


class Star(NamedTuple):
    """Star tab around an ellipse: inner vertices on the outline, tips outside."""
    inner: list[Point]
    outer: list[Point]
    closed: bool                  # full turn; inner has no repeated endpoint


def _ellipse_pt(c: Point, rx: float, ry: float, phi: float, th: float) -> Point:
    x = rx*math.cos(th); y = ry*math.sin(th)
    cp = math.cos(phi); sp = math.sin(phi)
    return (c[0]+cp*x-sp*y, c[1]+sp*x+cp*y)


def star_vertices(center: Point, rx: float, ry: float, n: int, depth: float = TAB_DEPTH,
                  rotation: float = 0.0, start: float = 0.0, sweep: float = 2*math.pi) -> Star:
    """Alternate *n* spikes between the ellipse (rx, ry) and (rx+depth, ry+depth).

    *rotation*, *start*, and *sweep* are radians. A full sweep yields a closed
    star with n inner and n outer vertices; a partial sweep yields n+1 inner
    vertices spanning the sweep with the n tips between them.
    """
    closed = abs(abs(sweep)-2*math.pi) < 1e-9
    k_inner = n if closed else n+1
    inner = [_ellipse_pt(center, rx, ry, rotation, start+sweep*k/n) for k in range(k_inner)]
    outer = [_ellipse_pt(center, rx+depth, ry+depth, rotation, start+sweep*(k+0.5)/n) for k in range(n)]
    return Star(inner, outer, closed)


def star_outline(star: Star) -> list[Point]:
    """Closed zig-zag polygon of a full star."""
    pts = []
    for i, o in zip(star.inner, star.outer):
        pts.append(i); pts.append(o)
    return pts


def star_spikes(star: Star) -> list[list[Point]]:
    """Individual spike triangles (inner k, tip k, inner k+1)."""
    m = len(star.inner)
    return [[star.inner[k], star.outer[k], star.inner[(k+1)%m]] for k in range(len(star.outer))]
