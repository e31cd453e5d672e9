"""Shared types, geometry, SVG output helpers, and SVG shape input."""

from .types import (
    Point, BBox, CommandKind, ArcParams, PathCommand,
    LineEdge, ArcEdge, CurveEdge, Edge,
    SidePanel, Anchor, NetLayout, OriginalShapeInfo, NetMeta,
)
from .geometry import (
    GeometryError, MeasurementUnavailable,
    ShapeError, InvalidInputError, UnparseablePathError, DegeneratePolygonError,
    dist, lerp, left_norm, off_pt, normalize_angle, ellipse_perimeter,
    signed_area, poly_area, poly_perimeter, poly_edges, centroid,
    rotate_polygon, mirror_polygon_horiz, bbox, is_right_rect,
)
from .svg import Transform, fmt, points_d, style
from .svg_input import extract_shape_info
