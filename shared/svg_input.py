"""Read the first drawable shape out of an SVG document.

Supported elements, first one in document order wins: circle, ellipse,
rect, path, polygon, polyline. Each is described by its own path data so
the rest of the pipeline only ever sees paths; primitive parameters are kept
for exact re-rendering.
"""
import re
import xml.etree.ElementTree as ET

from .types import OriginalShapeInfo
from .geometry import InvalidInputError

SHAPE_TAGS = ("circle", "ellipse", "rect", "path", "polygon", "polyline")
_NUM_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _num(el: ET.Element, name: str, default: float | None = None) -> float:
    raw = el.get(name)
    if raw is None or not raw.strip():
        if default is None:
            raise InvalidInputError(f"<{_local(el.tag)}> is missing attribute {name!r}")
        return default
    raw = raw.strip()
    if raw.endswith("px"):
        raw = raw[:-2]
    try:
        return float(raw)
    except ValueError:
        raise InvalidInputError(f"<{_local(el.tag)}> {name}={el.get(name)!r} is not a number") from None


def _n(v: float) -> str:
    """Path-data number; integral values drop the trailing .0"""
    return str(int(v)) if float(v).is_integer() else repr(float(v))


def ellipse_d(cx: float, cy: float, rx: float, ry: float) -> str:
    """Two half-ellipse arcs, clockwise on the page."""
    r = f"{_n(rx)},{_n(ry)}"
    return (f"M {_n(cx-rx)},{_n(cy)} A {r} 0 1 1 {_n(cx+rx)},{_n(cy)} "
            f"A {r} 0 1 1 {_n(cx-rx)},{_n(cy)} Z")


def rect_d(x: float, y: float, w: float, h: float, rx: float = 0.0, ry: float = 0.0) -> str:
    if rx <= 0 or ry <= 0:
        return f"M {_n(x)},{_n(y)} L {_n(x+w)},{_n(y)} L {_n(x+w)},{_n(y+h)} L {_n(x)},{_n(y+h)} Z"
    a = f"A {_n(rx)},{_n(ry)} 0 0 1"
    return (f"M {_n(x+rx)},{_n(y)} L {_n(x+w-rx)},{_n(y)} {a} {_n(x+w)},{_n(y+ry)} "
            f"L {_n(x+w)},{_n(y+h-ry)} {a} {_n(x+w-rx)},{_n(y+h)} "
            f"L {_n(x+rx)},{_n(y+h)} {a} {_n(x)},{_n(y+h-ry)} "
            f"L {_n(x)},{_n(y+ry)} {a} {_n(x+rx)},{_n(y)} Z")


def points_to_d(points: str) -> str:
    vals = [float(v) for v in _NUM_RE.findall(points or "")]
    if len(vals) < 6 or len(vals)%2:
        raise InvalidInputError(f"points attribute needs at least 3 coordinate pairs: {points!r}")
    pairs = [f"{_n(vals[i])},{_n(vals[i+1])}" for i in range(0, len(vals), 2)]
    return "M " + " L ".join(pairs) + " Z"


def _shape_info(el: ET.Element) -> OriginalShapeInfo:
    tag = _local(el.tag)
    if tag == "circle":
        cx = _num(el, "cx", 0.0); cy = _num(el, "cy", 0.0); r = _num(el, "r")
        if r <= 0:
            raise InvalidInputError(f"circle radius must be positive, got {r}")
        return OriginalShapeInfo("circle", ellipse_d(cx, cy, r, r), {"cx": cx, "cy": cy, "r": r})
    if tag == "ellipse":
        cx = _num(el, "cx", 0.0); cy = _num(el, "cy", 0.0)
        rx = _num(el, "rx"); ry = _num(el, "ry")
        if rx <= 0 or ry <= 0:
            raise InvalidInputError(f"ellipse radii must be positive, got rx={rx} ry={ry}")
        return OriginalShapeInfo("ellipse", ellipse_d(cx, cy, rx, ry),
                                 {"cx": cx, "cy": cy, "rx": rx, "ry": ry})
    if tag == "rect":
        x = _num(el, "x", 0.0); y = _num(el, "y", 0.0)
        w = _num(el, "width"); h = _num(el, "height")
        if w <= 0 or h <= 0:
            raise InvalidInputError(f"rect size must be positive, got {w}x{h}")
        rx = el.get("rx"); ry = el.get("ry")
        if rx is not None or ry is not None:
            rx = _num(el, "rx") if rx is not None else _num(el, "ry")
            ry = _num(el, "ry") if ry is not None else rx
            rx = min(rx, w/2); ry = min(ry, h/2)
            if rx > 0 and ry > 0:
                return OriginalShapeInfo("path", rect_d(x, y, w, h, rx, ry))
        return OriginalShapeInfo("rect", rect_d(x, y, w, h),
                                 {"x": x, "y": y, "width": w, "height": h})
    if tag == "path":
        d = (el.get("d") or "").strip()
        if not d:
            raise InvalidInputError("<path> has no d attribute")
        return OriginalShapeInfo("path", d)
    return OriginalShapeInfo(tag, points_to_d(el.get("points", "")))


def extract_shape_info(svg_text: str) -> OriginalShapeInfo:
    """Describe the first supported shape element of *svg_text*."""
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        raise InvalidInputError(f"Input is not well-formed SVG: {e}") from e
    for el in root.iter():
        if isinstance(el.tag, str) and _local(el.tag) in SHAPE_TAGS:
            return _shape_info(el)
    raise InvalidInputError(f"No {', '.join(SHAPE_TAGS)} element found in SVG input")
