"""SVG transform composition, number formatting, and element helpers."""
import math

import numpy as np

from .types import Point


def fmt(v: float) -> str:
    """Compact number: up to 3 decimals, no trailing zeros, no '-0'."""
    s = f"{v:.3f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


class Transform:
    """Affine transform built like an SVG transform list.

    Each call appends an operation on the right, so
    Transform().translate(...).rotate(...) maps a point through the rotation
    first, exactly as transform="translate(...) rotate(...)" does.
    """

    def __init__(self, matrix: np.ndarray | None = None, ops: tuple[str, ...] = ()):
        self.m = np.eye(3) if matrix is None else matrix
        self.ops = ops

    def _then(self, m: np.ndarray, op: str) -> "Transform":
        return Transform(self.m @ m, self.ops+(op,))

    def translate(self, dx: float, dy: float) -> "Transform":
        m = np.array([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]])
        return self._then(m, f"translate({fmt(dx)},{fmt(dy)})")

    def rotate(self, deg: float, cx: float = 0.0, cy: float = 0.0) -> "Transform":
        a = math.radians(deg); c = math.cos(a); s = math.sin(a)
        r = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
        t = np.array([[1.0, 0.0, cx], [0.0, 1.0, cy], [0.0, 0.0, 1.0]])
        ti = np.array([[1.0, 0.0, -cx], [0.0, 1.0, -cy], [0.0, 0.0, 1.0]])
        op = f"rotate({fmt(deg)})" if cx == 0 and cy == 0 else f"rotate({fmt(deg)} {fmt(cx)} {fmt(cy)})"
        return self._then(t @ r @ ti, op)

    def scale(self, sx: float, sy: float | None = None) -> "Transform":
        sy = sx if sy is None else sy
        m = np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])
        return self._then(m, f"scale({fmt(sx)} {fmt(sy)})")

    def __matmul__(self, other: "Transform") -> "Transform":
        return Transform(self.m @ other.m, self.ops+other.ops)

    def apply(self, p: Point) -> Point:
        x, y, _ = self.m @ np.array([p[0], p[1], 1.0])
        return (float(x), float(y))

    def apply_all(self, pts: list[Point]) -> list[Point]:
        if not pts:
            return []
        P = np.column_stack([np.asarray(pts, dtype=float), np.ones(len(pts))])
        Q = P @ self.m.T
        return [(float(x), float(y)) for x, y in Q[:, :2]]

    def svg(self) -> str:
        return " ".join(self.ops)


def points_d(pts: list[Point], closed: bool = True) -> str:
    """Path data 'M x,y L x,y ... [Z]' for a polyline."""
    body = " L ".join(f"{fmt(x)},{fmt(y)}" for x, y in pts)
    return f"M {body} Z" if closed else f"M {body}"


def style(fill: str, stroke: str | None = None, width: float | None = None,
          dash: str | None = None) -> str:
    s = f'fill="{fill}"'
    if stroke is not None:
        s += f' stroke="{stroke}"'
    if width is not None:
        s += f' stroke-width="{fmt(width)}"'
    if dash is not None:
        s += f' stroke-dasharray="{dash}"'
    return s
