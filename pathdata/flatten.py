"""Polyline approximation of arbitrary path data, and colinear cleanup."""
import math

import numpy as np

from shared.types import Point
from shared.geometry import dist
from .parser import parse_path
from .measure import PathMeasurer, SampledPath

MIN_STEP = 0.01
SIMPLIFY_EPS = 0.01


def flatten_path(d: str, tolerance: float = 0.5, scale: float = 1.0,
                 measurer: PathMeasurer | None = None) -> list[Point]:
    """Sample *d* at even arc-length steps of max(tolerance, 0.01).

    At least 3 steps are taken. A sample within a quarter step of the last
    kept point is dropped, as is a final point within one step of the first.
    Coordinates are multiplied by *scale*. Retrying at a finer tolerance when
    fewer than 3 points come back is the caller's job.
    """
    path = SampledPath(parse_path(d), measurer)
    if not path.cmds or path.total <= 0:
        return []
    step = max(tolerance, MIN_STEP)
    n = max(3, math.ceil(path.total/step))
    pts: list[Point] = []
    for s in np.linspace(0.0, path.total, n+1):
        x, y = path.point_at(float(s))
        p = (x*scale, y*scale)
        if not pts or dist(p, pts[-1]) > step*0.25:
            pts.append(p)
    if len(pts) > 1 and dist(pts[-1], pts[0]) < step:
        pts.pop()
    return pts


def _simplify_pass(pts: list[Point], eps: float) -> list[Point]:
    n = len(pts); out: list[Point] = []
    for i in range(n):
        cur = pts[i]; nxt = pts[(i+1)%n]
        prev = out[-1] if out else pts[-1]
        l1 = dist(prev, cur); l2 = dist(cur, nxt)
        if l1 < eps:
            continue
        cross = abs((cur[0]-prev[0])*(nxt[1]-cur[1])-(cur[1]-prev[1])*(nxt[0]-cur[0]))
        if cross/(l1+l2) < eps:
            continue
        out.append(cur)
    if len(out) > 1 and dist(out[-1], out[0]) < eps:
        out.pop()
    return out


def simplify_colinear(points: list[Point], eps: float = SIMPLIFY_EPS) -> list[Point]:
    """Drop near-duplicate and near-colinear points until nothing changes.

    A point goes when it lies within *eps* of its predecessor, or when
    |cross(prev→cur, cur→next)| / (|prev→cur| + |cur→next|) < eps. The
    predecessor is the last kept point. May return fewer than 3 points;
    callers fall back to the unsimplified list in that case.
    """
    pts = list(points)
    while len(pts) >= 3:
        out = _simplify_pass(pts, eps)
        if len(out) == len(pts):
            return out
        pts = out
    return pts
