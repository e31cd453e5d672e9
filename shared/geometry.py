"""Pure geometry functions, polygon utilities, and the error taxonomy."""
import math
from .types import Point, BBox

# ============================================================
# Error Types
# ============================================================
class GeometryError(ValueError):
    """Raised for impossible geometry operations."""

class MeasurementUnavailable(GeometryError):
    """A length-measurement backend could not measure a segment."""

class ShapeError(ValueError):
    """Base class for failures surfaced to callers of the net generator."""

class InvalidInputError(ShapeError):
    """No usable shape source, or an option out of range."""

class UnparseablePathError(ShapeError):
    """Path data violates the SVG path grammar."""

class DegeneratePolygonError(ShapeError):
    """Fewer than 3 distinct vertices survive every fallback."""

# ============================================================
# Geometry Utilities
# ============================================================
def dist(p1: Point, p2: Point) -> float:
    return math.hypot(p2[0]-p1[0], p2[1]-p1[1])

def lerp(p1: Point, p2: Point, t: float) -> Point:
    return (p1[0]+(p2[0]-p1[0])*t, p1[1]+(p2[1]-p1[1])*t)

def left_norm(p1: Point, p2: Point) -> Point:
    """Unit normal vector to the left of the direction p1 → p2 (CCW perpendicular)."""
    dx = p2[0]-p1[0]; dy = p2[1]-p1[1]; Ln = math.sqrt(dx**2+dy**2)
    if Ln < 1e-12:
        raise GeometryError("Zero-length edge has no normal")
    return (-dy/Ln, dx/Ln)

def off_pt(p: Point, n: Point, d: float) -> Point:
    """Offset point p by distance d along unit direction n."""
    return (p[0]+d*n[0], p[1]+d*n[1])

def normalize_angle(a: float) -> float:
    """Map an angle into (-pi, pi]."""
    a = math.fmod(a, 2*math.pi)
    if a <= -math.pi:
        a += 2*math.pi
    elif a > math.pi:
        a -= 2*math.pi
    return a

def vec_angle(u: Point, v: Point) -> float:
    """Signed angle from vector u to vector v."""
    return math.atan2(u[0]*v[1]-u[1]*v[0], u[0]*v[0]+u[1]*v[1])

def ellipse_perimeter(rx: float, ry: float) -> float:
    """Ramanujan's first approximation; exact for circles."""
    a, b = abs(rx), abs(ry)
    return math.pi*(3*(a+b)-math.sqrt((3*a+b)*(a+3*b)))

# ============================================================
# Polygon Utilities
# ============================================================
def signed_area(verts: list[Point]) -> float:
    """Shoelace area; positive when the winding is clockwise on a y-down page."""
    n = len(verts); a = 0
    for i in range(n):
        j = (i+1)%n; a += verts[i][0]*verts[j][1]-verts[j][0]*verts[i][1]
    return a/2

def poly_area(verts: list[Point]) -> float:
    """Polygon area via the shoelace formula. Works for either winding order."""
    return abs(signed_area(verts))

def poly_perimeter(verts: list[Point]) -> float:
    n = len(verts)
    return sum(dist(verts[i], verts[(i+1)%n]) for i in range(n))

def poly_edges(verts: list[Point]) -> list[tuple[Point, Point, float]]:
    """Closed edge list as (start, end, length)."""
    n = len(verts)
    return [(verts[i], verts[(i+1)%n], dist(verts[i], verts[(i+1)%n])) for i in range(n)]

def centroid(verts: list[Point]) -> Point:
    """Vertex average. Rotation about this point leaves it fixed."""
    n = len(verts)
    return (sum(p[0] for p in verts)/n, sum(p[1] for p in verts)/n)

def rotate_point(p: Point, c: Point, angle: float) -> Point:
    s = math.sin(angle); co = math.cos(angle)
    dx = p[0]-c[0]; dy = p[1]-c[1]
    return (c[0]+dx*co-dy*s, c[1]+dx*s+dy*co)

def rotate_polygon(verts: list[Point], angle: float, c: Point | None = None) -> list[Point]:
    """Rotate about *c*, defaulting to the polygon's centroid."""
    if c is None:
        c = centroid(verts)
    return [rotate_point(p, c, angle) for p in verts]

def mirror_polygon_horiz(verts: list[Point]) -> list[Point]:
    """Reflect through the vertical line at the centroid's x."""
    cx = centroid(verts)[0]
    return [(2*cx-x, y) for x, y in verts]

def bbox(verts: list[Point]) -> BBox:
    xs = [p[0] for p in verts]; ys = [p[1] for p in verts]
    return (min(xs), min(ys), max(xs), max(ys))

def is_right_rect(verts: list[Point], tol: float = 1e-6) -> bool:
    """True for a 4-vertex polygon whose corners are all right angles."""
    if len(verts) != 4:
        return False
    for i in range(4):
        a, b, c = verts[i-1], verts[i], verts[(i+1)%4]
        u = (a[0]-b[0], a[1]-b[1]); v = (c[0]-b[0], c[1]-b[1])
        lu = math.hypot(*u); lv = math.hypot(*v)
        if lu < 1e-12 or lv < 1e-12 or abs(u[0]*v[0]+u[1]*v[1]) > tol*lu*lv:
            return False
    return True
