"""Curve measurement: arc length, elliptical-arc centers, Bézier circle fits.

Length measurement goes through a PathMeasurer backend chosen by name and
passed in by the caller:

  svgpathtools  segment objects from svgpathtools (default)
  quadrature    adaptive quadrature of the segment speed with scipy

Backends raise MeasurementUnavailable when they cannot measure a segment.
The module-level helpers (arc_length, curve_length, SampledPath) turn that
into a chord-length fallback.
"""
import bisect, math
from typing import NamedTuple, Protocol

import numpy as np
from scipy import integrate, optimize
import svgpathtools

from shared.types import Point, CommandKind, ArcParams, PathCommand, CURVE_KINDS
from shared.geometry import MeasurementUnavailable, GeometryError, dist, lerp, vec_angle

# ============================================================
# Elliptical arc geometry
# ============================================================

class ArcCenter(NamedTuple):
    """Center parameterization of an SVG elliptical arc."""
    center: Point
    rx: float; ry: float         # radii after out-of-range correction
    phi: float                   # x-axis rotation, radians
    theta1: float                # start angle, radians
    dtheta: float                # signed sweep, radians


def arc_center_params(start: Point, end: Point, rx: float, ry: float,
                      rotation: float, large_arc: bool, sweep: bool) -> ArcCenter:
    """Endpoint-to-center conversion for an SVG arc.

    Follows the SVG implementation notes: work in the ellipse's rotated frame,
    scale the radii up when the chord does not fit, pick the center with the
    large-arc/sweep sign rule, rotate back. Raises GeometryError for a
    zero radius or coincident endpoints (the arc is not drawn).
    """
    rx = abs(rx); ry = abs(ry)
    if rx < 1e-12 or ry < 1e-12:
        raise GeometryError(f"Zero arc radius: rx={rx}, ry={ry}")
    if dist(start, end) < 1e-12:
        raise GeometryError("Arc endpoints coincide")
    phi = math.radians(rotation); cp = math.cos(phi); sp = math.sin(phi)
    dx = (start[0]-end[0])/2; dy = (start[1]-end[1])/2
    x1p = cp*dx+sp*dy; y1p = -sp*dx+cp*dy
    lam = x1p**2/rx**2+y1p**2/ry**2
    if lam > 1:
        s = math.sqrt(lam); rx *= s; ry *= s
    sign = 1 if bool(large_arc) != bool(sweep) else -1
    num = rx**2*ry**2-rx**2*y1p**2-ry**2*x1p**2
    den = rx**2*y1p**2+ry**2*x1p**2
    coef = sign*math.sqrt(max(0.0, num/den))
    cxp = coef*rx*y1p/ry; cyp = -coef*ry*x1p/rx
    cx = cp*cxp-sp*cyp+(start[0]+end[0])/2
    cy = sp*cxp+cp*cyp+(start[1]+end[1])/2
    u = ((x1p-cxp)/rx, (y1p-cyp)/ry); v = ((-x1p-cxp)/rx, (-y1p-cyp)/ry)
    theta1 = vec_angle((1.0, 0.0), u)
    dtheta = vec_angle(u, v)
    if not sweep and dtheta > 0:
        dtheta -= 2*math.pi
    elif sweep and dtheta < 0:
        dtheta += 2*math.pi
    return ArcCenter((cx, cy), rx, ry, phi, theta1, dtheta)


def arc_center(start: Point, end: Point, rx: float, ry: float,
               rotation: float, large_arc: bool, sweep: bool) -> Point:
    return arc_center_params(start, end, rx, ry, rotation, large_arc, sweep).center


def arc_point(ac: ArcCenter, theta: float) -> Point:
    """Point on the (rotated) ellipse at parametric angle theta."""
    x = ac.rx*math.cos(theta); y = ac.ry*math.sin(theta)
    c = math.cos(ac.phi); s = math.sin(ac.phi)
    return (ac.center[0]+c*x-s*y, ac.center[1]+s*x+c*y)


def bezier_mid(start: Point, controls: tuple[Point, ...], end: Point,
               quadratic: bool = False) -> Point:
    """Bézier point at t=0.5 (the chord midpoint without controls)."""
    if quadratic and len(controls) >= 1:
        c = controls[0]
        return (0.25*start[0]+0.5*c[0]+0.25*end[0], 0.25*start[1]+0.5*c[1]+0.25*end[1])
    if len(controls) >= 2:
        c1, c2 = controls[0], controls[1]
        return (0.125*start[0]+0.375*c1[0]+0.375*c2[0]+0.125*end[0],
                0.125*start[1]+0.375*c1[1]+0.375*c2[1]+0.125*end[1])
    return lerp(start, end, 0.5)


def fit_circle_to_curve(start: Point, controls: tuple[Point, ...], end: Point,
                        quadratic: bool = False) -> tuple[Point, float]:
    """Circle through start, a weighted curve midpoint, and end.

    The midpoint is the Bézier point at t=0.5 (0.25/0.5/0.25 for quadratics,
    0.125/0.375/0.375/0.125 for cubics). Near-collinear triples fall back to
    the chord midpoint with half the chord as radius.
    """
    mid = bezier_mid(start, controls, end, quadratic)
    (x1, y1), (x2, y2), (x3, y3) = start, mid, end
    d = 2*(x1*(y2-y3)+x2*(y3-y1)+x3*(y1-y2))
    if abs(d) < 1e-6:
        return lerp(start, end, 0.5), dist(start, end)/2
    s1 = x1**2+y1**2; s2 = x2**2+y2**2; s3 = x3**2+y3**2
    cx = (s1*(y2-y3)+s2*(y3-y1)+s3*(y1-y2))/d
    cy = (s1*(x3-x2)+s2*(x1-x3)+s3*(x2-x1))/d
    return (cx, cy), math.hypot(cx-x1, cy-y1)


def is_straight(cmd: PathCommand) -> bool:
    """Commands whose trace is the chord from start to end."""
    if cmd.kind is CommandKind.ARC_TO:
        a = cmd.arc
        return a.rx < 1e-12 or a.ry < 1e-12 or dist(cmd.start, cmd.end) < 1e-12
    return cmd.kind not in CURVE_KINDS


# ============================================================
# Measurement backends
# ============================================================

class PathMeasurer(Protocol):
    name: str
    def segment_length(self, cmd: PathCommand) -> float: ...
    def point_at_length(self, cmd: PathCommand, s: float) -> Point: ...


class SvgPathToolsMeasurer:
    """Measures curved segments with svgpathtools segment objects."""
    name = "svgpathtools"

    def __init__(self, error: float = 1e-9, min_depth: int = 5):
        self.error = error; self.min_depth = min_depth

    @staticmethod
    def to_segment(cmd: PathCommand):
        """Single svgpathtools segment equivalent to a drawing command."""
        s = complex(*cmd.start); e = complex(*cmd.end)
        if cmd.kind is CommandKind.ARC_TO and not is_straight(cmd):
            a = cmd.arc
            return svgpathtools.Arc(s, complex(a.rx, a.ry), a.rotation, bool(a.large_arc), bool(a.sweep), e)
        if cmd.kind in CURVE_KINDS:
            ctrl = [complex(*c) for c in cmd.controls]
            if len(ctrl) == 1:
                return svgpathtools.QuadraticBezier(s, ctrl[0], e)
            return svgpathtools.CubicBezier(s, ctrl[0], ctrl[1], e)
        return svgpathtools.Line(s, e)

    def segment_length(self, cmd: PathCommand) -> float:
        try:
            seg = self.to_segment(cmd)
            length = seg.length(error=self.error, min_depth=self.min_depth)
        except (ValueError, ArithmeticError, AssertionError) as e:
            raise MeasurementUnavailable(f"svgpathtools failed on {cmd.kind.value}: {e}") from e
        if not math.isfinite(length):
            raise MeasurementUnavailable(f"svgpathtools returned length {length}")
        return float(length)

    def point_at_length(self, cmd: PathCommand, s: float) -> Point:
        try:
            seg = self.to_segment(cmd)
            total = seg.length(error=self.error, min_depth=self.min_depth)
            if s <= 0:
                t = 0.0
            elif s >= total:
                t = 1.0
            else:
                t = seg.ilength(s, s_tol=1e-7)
            z = seg.point(t)
        except (ValueError, ArithmeticError, AssertionError) as e:
            raise MeasurementUnavailable(f"svgpathtools failed on {cmd.kind.value}: {e}") from e
        return (float(z.real), float(z.imag))


class QuadratureMeasurer:
    """Integrates the analytic speed of each segment with scipy.integrate.quad."""
    name = "quadrature"

    def _curve(self, cmd: PathCommand):
        """(point(t), speed(t)) callables for a curved command."""
        if cmd.kind is CommandKind.ARC_TO:
            ac = arc_center_params(cmd.start, cmd.end, *cmd.arc)
            def point(t):
                return arc_point(ac, ac.theta1+ac.dtheta*t)
            def speed(t):
                th = ac.theta1+ac.dtheta*t
                return abs(ac.dtheta)*math.hypot(ac.rx*math.sin(th), ac.ry*math.cos(th))
            return point, speed
        P = np.array([cmd.start, *cmd.controls, cmd.end], dtype=float)
        n = len(P)-1
        D = n*(P[1:]-P[:-1])
        def bernstein(pts, t):
            k = len(pts)-1
            w = np.array([math.comb(k, i)*t**i*(1-t)**(k-i) for i in range(k+1)])
            return w @ pts
        def point(t):
            x, y = bernstein(P, t)
            return (float(x), float(y))
        def speed(t):
            return float(np.hypot(*bernstein(D, t)))
        return point, speed

    def segment_length(self, cmd: PathCommand) -> float:
        try:
            _, speed = self._curve(cmd)
            length, _err = integrate.quad(speed, 0.0, 1.0, limit=200)
        except (GeometryError, ArithmeticError) as e:
            raise MeasurementUnavailable(f"quadrature failed on {cmd.kind.value}: {e}") from e
        if not math.isfinite(length):
            raise MeasurementUnavailable(f"quadrature returned length {length}")
        return float(length)

    def point_at_length(self, cmd: PathCommand, s: float) -> Point:
        try:
            point, speed = self._curve(cmd)
            total, _err = integrate.quad(speed, 0.0, 1.0, limit=200)
            if s <= 0:
                return point(0.0)
            if s >= total:
                return point(1.0)
            t = optimize.brentq(lambda u: integrate.quad(speed, 0.0, u, limit=200)[0]-s,
                                0.0, 1.0, xtol=1e-12)
        except (GeometryError, ArithmeticError, ValueError, RuntimeError) as e:
            raise MeasurementUnavailable(f"quadrature failed on {cmd.kind.value}: {e}") from e
        return point(t)


MEASURERS = {m.name: m for m in (SvgPathToolsMeasurer, QuadratureMeasurer)}
DEFAULT_MEASURER = SvgPathToolsMeasurer.name


def get_measurer(name: str | None = None) -> PathMeasurer:
    """Instantiate a backend by name (default: svgpathtools)."""
    key = name or DEFAULT_MEASURER
    if key not in MEASURERS:
        raise ValueError(f"Unknown measurer {key!r}; choose from {sorted(MEASURERS)}")
    return MEASURERS[key]()


# ============================================================
# Lengths with chord fallback
# ============================================================

def measure_length(cmd: PathCommand, measurer: PathMeasurer) -> float | None:
    """Length of one command, or None when the backend cannot measure it."""
    if cmd.kind is CommandKind.MOVE_TO:
        return 0.0
    if is_straight(cmd):
        return dist(cmd.start, cmd.end)
    try:
        return measurer.segment_length(cmd)
    except MeasurementUnavailable:
        return None


def command_length(cmd: PathCommand, measurer: PathMeasurer | None = None) -> float:
    """Measured length, falling back to the chord."""
    length = measure_length(cmd, measurer or get_measurer())
    return dist(cmd.start, cmd.end) if length is None else length


def arc_length(start: Point, rx: float, ry: float, rotation: float, large_arc: bool,
               sweep: bool, end: Point, measurer: PathMeasurer | None = None) -> float:
    """Elliptical arc length; the chord if the arc cannot be measured."""
    cmd = PathCommand(CommandKind.ARC_TO, start, end,
                      arc=ArcParams(abs(rx), abs(ry), rotation, bool(large_arc), bool(sweep)))
    return command_length(cmd, measurer)


def curve_length(start: Point, controls: tuple[Point, ...], end: Point,
                 measurer: PathMeasurer | None = None) -> float:
    """Quadratic (1 control) or cubic (2 controls) Bézier length."""
    kind = CommandKind.QUADRATIC_TO if len(controls) == 1 else CommandKind.CUBIC_TO
    return command_length(PathCommand(kind, start, end, tuple(controls)), measurer)


class SampledPath:
    """Arc-length parameterization of a command list.

    Segments the backend cannot measure are treated as their chord, both for
    length and for point lookup.
    """

    def __init__(self, cmds: list[PathCommand], measurer: PathMeasurer | None = None):
        self.measurer = measurer or get_measurer()
        self.cmds = [c for c in cmds if c.kind is not CommandKind.MOVE_TO]
        self.lengths = []; self.chord = []
        for c in self.cmds:
            length = measure_length(c, self.measurer)
            self.chord.append(length is None or is_straight(c))
            self.lengths.append(dist(c.start, c.end) if length is None else length)
        self.cum = [float(v) for v in np.cumsum([0.0]+self.lengths)]

    @property
    def total(self) -> float:
        return self.cum[-1]

    def point_at(self, s: float) -> Point:
        if not self.cmds:
            raise GeometryError("Path has no drawn segments")
        s = min(max(s, 0.0), self.total)
        i = min(bisect.bisect_right(self.cum, s)-1, len(self.cmds)-1)
        cmd = self.cmds[i]; local = s-self.cum[i]; seg_len = self.lengths[i]
        if self.chord[i]:
            return lerp(cmd.start, cmd.end, local/seg_len if seg_len > 0 else 0.0)
        try:
            return self.measurer.point_at_length(cmd, local)
        except MeasurementUnavailable:
            return lerp(cmd.start, cmd.end, local/seg_len if seg_len > 0 else 0.0)
