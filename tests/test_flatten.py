"""Tests for pathdata/flatten.py sampling and colinear simplification."""
import math
from shared.geometry import dist, poly_area
from pathdata.flatten import flatten_path, simplify_colinear


# ============================================================
# flatten_path
# ============================================================

class TestFlatten:
    def test_samples_lie_on_circle(self, measurer):
        d = "M 0,10 A 10,10 0 1 1 20,10 A 10,10 0 1 1 0,10 Z"
        pts = flatten_path(d, 1.0, 1.0, measurer)
        assert len(pts) > 50
        for p in pts:
            assert abs(dist(p, (10, 10)) - 10) < 1e-3

    def test_spacing_close_to_tolerance(self, measurer):
        pts = flatten_path("M 0,0 L 10,0 L 10,10 L 0,10 Z", 0.5, 1.0, measurer)
        gaps = [dist(pts[i], pts[(i+1)%len(pts)]) for i in range(len(pts))]
        assert max(gaps) < 0.5+1e-9

    def test_no_duplicate_closing_point(self, measurer):
        pts = flatten_path("M 0,0 L 10,0 L 10,10 L 0,10 Z", 0.5, 1.0, measurer)
        assert dist(pts[0], pts[-1]) > 0.25

    def test_scale(self, measurer):
        a = flatten_path("M 0,0 L 10,0 L 10,10 Z", 1.0, 1.0, measurer)
        b = flatten_path("M 0,0 L 10,0 L 10,10 Z", 1.0, 2.0, measurer)
        assert len(a) == len(b)
        for p, q in zip(a, b):
            assert dist((2*p[0], 2*p[1]), q) < 1e-9

    def test_coarse_tolerance_collapses(self, measurer):
        # Samples closer than a quarter step are dropped; the caller retries finer
        pts = flatten_path("M 0,0 L 30,0 L 30,30 Z", 1000.0, 1.0, measurer)
        assert len(pts) < 3

    def test_halved_tolerance_recovers_triangle(self, measurer):
        # r=50 circle: samples a third of the way round sit 86.6 apart, under a
        # quarter of 400 but over a quarter of 200
        d = "M 0,50 A 50,50 0 1 1 100,50 A 50,50 0 1 1 0,50 Z"
        assert len(flatten_path(d, 400.0, 1.0, measurer)) == 1
        pts = flatten_path(d, 200.0, 1.0, measurer)
        assert len(pts) == 3
        for p in pts:
            assert abs(dist(p, (50, 50)) - 50) < 1e-6

    def test_tiny_tolerance_clamped(self, measurer):
        pts = flatten_path("M 0,0 L 1,0 L 1,1 Z", 0.0, 1.0, measurer)
        assert len(pts) <= math.ceil((2+math.sqrt(2))/0.01)+1

    def test_empty(self, measurer):
        assert flatten_path("", 0.5, 1.0, measurer) == []
        assert flatten_path("M 5,5", 0.5, 1.0, measurer) == []


# ============================================================
# simplify_colinear
# ============================================================

class TestSimplify:
    def test_removes_midpoints(self):
        pts = [(0, 0), (5, 0), (10, 0), (10, 5), (10, 10), (5, 10), (0, 10), (0, 5)]
        assert simplify_colinear(pts) == [(0, 0), (10, 0), (10, 10), (0, 10)]

    def test_square_from_samples(self, measurer):
        pts = flatten_path("M 0,0 L 10,0 L 10,10 L 0,10 Z", 0.5, 1.0, measurer)
        simp = simplify_colinear(pts)
        assert len(simp) == 4
        assert abs(poly_area(simp) - 100) < 1e-6

    def test_idempotent(self, measurer):
        pts = flatten_path("M 0,10 A 10,10 0 1 1 20,10 A 10,10 0 1 1 0,10 Z", 0.5, 1.0, measurer)
        once = simplify_colinear(pts)
        assert simplify_colinear(once) == once

    def test_closure(self, measurer):
        pts = flatten_path("M 0,0 L 40,0 L 40,20 Q 20,40 0,20 Z", 0.5, 1.0, measurer)
        simp = simplify_colinear(pts)
        assert dist(simp[0], simp[-1]) > 0.01

    def test_near_duplicates_dropped(self):
        pts = [(0, 0), (10, 0), (10.001, 0.001), (10, 10), (0, 10)]
        simp = simplify_colinear(pts)
        assert len(simp) == 4

    def test_collapses_line(self):
        assert len(simplify_colinear([(0, 0), (5, 0), (10, 0)])) < 3
