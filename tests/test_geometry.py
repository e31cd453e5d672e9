"""Tests for shared/geometry.py pure functions."""
import math
import pytest
from shared.geometry import (
    GeometryError, ShapeError, InvalidInputError, UnparseablePathError, DegeneratePolygonError,
    MeasurementUnavailable,
    dist, lerp, left_norm, off_pt, normalize_angle, vec_angle, ellipse_perimeter,
    signed_area, poly_area, poly_perimeter, poly_edges, centroid,
    rotate_point, rotate_polygon, mirror_polygon_horiz, bbox, is_right_rect,
)

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]


# --- left_norm ---

def test_left_norm_horizontal():
    n = left_norm((0, 0), (1, 0))
    assert abs(n[0] - 0.0) < 1e-12
    assert abs(n[1] - 1.0) < 1e-12


def test_left_norm_vertical():
    n = left_norm((0, 0), (0, 1))
    assert abs(n[0] - (-1.0)) < 1e-12
    assert abs(n[1] - 0.0) < 1e-12


def test_left_norm_zero_length_raises():
    with pytest.raises(GeometryError, match="Zero-length"):
        left_norm((3, 3), (3, 3))


# --- off_pt / lerp / dist ---

def test_off_pt():
    p = off_pt((3, 4), (0, 1), 2.0)
    assert abs(p[0] - 3.0) < 1e-12
    assert abs(p[1] - 6.0) < 1e-12


def test_lerp_and_dist():
    assert lerp((0, 0), (10, 20), 0.25) == (2.5, 5.0)
    assert dist((0, 0), (3, 4)) == 5.0


# --- angles ---

@pytest.mark.parametrize("a, expected", [
    (0.0, 0.0),
    (math.pi, math.pi),
    (-math.pi, math.pi),
    (3*math.pi/2, -math.pi/2),
    (-5*math.pi/2, -math.pi/2),
    (4*math.pi+0.1, 0.1),
])
def test_normalize_angle(a, expected):
    assert abs(normalize_angle(a) - expected) < 1e-12


def test_vec_angle_signed():
    assert abs(vec_angle((1, 0), (0, 1)) - math.pi/2) < 1e-12
    assert abs(vec_angle((0, 1), (1, 0)) + math.pi/2) < 1e-12


def test_ellipse_perimeter_circle_exact():
    assert abs(ellipse_perimeter(10, 10) - 20*math.pi) < 1e-9


def test_ellipse_perimeter_ellipse():
    # Reference value for a=10, b=5 is 48.4422...
    assert abs(ellipse_perimeter(10, 5) - 48.4422) < 1e-3


# --- polygon measures ---

def test_poly_area_square():
    assert abs(poly_area(SQUARE) - 100.0) < 1e-10


def test_signed_area_winding():
    assert signed_area(SQUARE) > 0
    assert signed_area(list(reversed(SQUARE))) < 0


def test_poly_area_triangle():
    assert abs(poly_area([(0, 0), (4, 0), (0, 3)]) - 6.0) < 1e-10


def test_poly_perimeter():
    assert abs(poly_perimeter([(0, 0), (100, 0), (100, 50), (0, 50)]) - 300.0) < 1e-10


def test_poly_edges_closed():
    edges = poly_edges(SQUARE)
    assert len(edges) == 4
    assert edges[-1][0] == (0, 10) and edges[-1][1] == (0, 0)
    assert all(abs(e[2] - 10) < 1e-12 for e in edges)


def test_centroid():
    assert centroid(SQUARE) == (5.0, 5.0)


def test_bbox():
    assert bbox([(3, -1), (-2, 4), (0, 0)]) == (-2, -1, 3, 4)


# --- transforms ---

def test_rotate_point_quarter_turn():
    p = rotate_point((1, 0), (0, 0), math.pi/2)
    assert abs(p[0]) < 1e-12
    assert abs(p[1] - 1) < 1e-12


def test_rotate_polygon_keeps_centroid_area():
    r = rotate_polygon(SQUARE, 0.7)
    c = centroid(r)
    assert abs(c[0] - 5) < 1e-9 and abs(c[1] - 5) < 1e-9
    assert abs(poly_area(r) - 100) < 1e-9


def test_mirror_preserves_area_and_perimeter():
    poly = [(0, 0), (30, 5), (25, 20), (4, 12)]
    m = mirror_polygon_horiz(poly)
    assert poly_area(m) == pytest.approx(poly_area(poly), abs=1e-12)
    assert poly_perimeter(m) == pytest.approx(poly_perimeter(poly), abs=1e-12)
    assert signed_area(m) == pytest.approx(-signed_area(poly), abs=1e-12)


# --- is_right_rect ---

def test_is_right_rect():
    assert is_right_rect(SQUARE)
    assert is_right_rect(rotate_polygon([(0, 0), (40, 0), (40, 10), (0, 10)], 0.3))
    assert not is_right_rect([(0, 0), (10, 0), (12, 10), (0, 10)])
    assert not is_right_rect([(0, 0), (10, 0), (0, 10)])


# --- error taxonomy ---

def test_error_hierarchy():
    for cls in (InvalidInputError, UnparseablePathError, DegeneratePolygonError):
        assert issubclass(cls, ShapeError)
        assert issubclass(cls, ValueError)
    assert issubclass(MeasurementUnavailable, GeometryError)
    assert not issubclass(MeasurementUnavailable, ShapeError)
