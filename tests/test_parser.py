"""Tests for pathdata/parser.py path-data interpretation."""
import pytest
from shared.geometry import UnparseablePathError
from shared.types import CommandKind
from pathdata.parser import parse_path, is_closing_edge


def _ends(cmds):
    return [c.end for c in cmds]


# ============================================================
# Absolute and relative commands
# ============================================================

class TestBasicCommands:
    def test_absolute_polygon(self):
        cmds = parse_path("M 0,0 L 100,0 L 100,50 L 0,50 Z")
        assert [c.kind for c in cmds] == [CommandKind.MOVE_TO] + [CommandKind.LINE_TO]*3 + [CommandKind.CLOSE_PATH]
        assert _ends(cmds) == [(0, 0), (100, 0), (100, 50), (0, 50), (0, 0)]

    def test_relative_matches_absolute(self):
        rel = parse_path("m 10,10 l 20,0 l 0,20 l -20,0 z")
        ab = parse_path("M 10,10 L 30,10 L 30,30 L 10,30 Z")
        assert _ends(rel) == _ends(ab)

    def test_horizontal_vertical(self):
        cmds = parse_path("M 5,5 H 15 V 25 h -10 v -20")
        assert _ends(cmds) == [(5, 5), (15, 5), (15, 25), (5, 25), (5, 5)]

    def test_starts_are_previous_ends(self):
        cmds = parse_path("M 0,0 L 10,0 L 10,10 Z")
        for prev, cur in zip(cmds, cmds[1:]):
            assert cur.start == prev.end

    def test_close_returns_to_subpath_start(self):
        cmds = parse_path("M 0,0 L 10,0 Z M 50,50 L 60,50 Z")
        assert cmds[2].end == (0, 0)
        assert cmds[-1].end == (50, 50)

    def test_compact_numbers(self):
        cmds = parse_path("M0-5L10.5.5l-1e1,0")
        assert _ends(cmds) == [(0, -5), (10.5, 0.5), (0.5, 0.5)]

    def test_empty_path(self):
        assert parse_path("") == []
        assert parse_path("   ") == []


# ============================================================
# Repetition
# ============================================================

class TestRepetition:
    def test_repeated_line_pairs(self):
        cmds = parse_path("M 0,0 L 10,0 10,10 0,10 Z")
        assert len(cmds) == 5
        assert all(c.kind is CommandKind.LINE_TO for c in cmds[1:4])

    def test_moveto_pairs_repeat_as_lineto(self):
        cmds = parse_path("M 0,0 10,0 10,10")
        assert [c.kind for c in cmds] == [CommandKind.MOVE_TO, CommandKind.LINE_TO, CommandKind.LINE_TO]

    def test_relative_moveto_pairs_are_relative(self):
        cmds = parse_path("m 5,5 10,0 0,10")
        assert _ends(cmds) == [(5, 5), (15, 5), (15, 15)]


# ============================================================
# Curves and arcs
# ============================================================

class TestCurves:
    def test_cubic_controls(self):
        (_, c) = parse_path("M 0,0 C 10,0 20,10 20,20")
        assert c.kind is CommandKind.CUBIC_TO
        assert c.controls == ((10, 0), (20, 10))
        assert c.end == (20, 20)

    def test_smooth_cubic_reflects_previous_control(self):
        cmds = parse_path("M 0,0 C 0,10 10,10 10,0 S 20,-10 20,0")
        assert cmds[2].controls[0] == (10, -10)

    def test_smooth_cubic_without_previous_uses_current_point(self):
        cmds = parse_path("M 0,0 L 5,0 S 10,10 20,0")
        assert cmds[2].controls[0] == (5, 0)

    def test_smooth_quadratic_chain(self):
        cmds = parse_path("M 0,0 Q 5,10 10,0 T 20,0")
        assert cmds[2].controls == ((15, -10),)

    def test_relative_quadratic(self):
        cmds = parse_path("M 10,10 q 5,10 10,0")
        assert cmds[1].controls == ((15, 20),)
        assert cmds[1].end == (20, 10)

    def test_arc_params(self):
        (_, a) = parse_path("M 0,0 A 10 10 30 1 0 20 0")
        assert a.arc.rx == 10 and a.arc.ry == 10
        assert a.arc.rotation == 30
        assert a.arc.large_arc is True
        assert a.arc.sweep is False

    def test_packed_arc_flags(self):
        (_, a) = parse_path("M0,0a5,5 0 01 10,0")
        assert a.arc.large_arc is False
        assert a.arc.sweep is True
        assert a.end == (10, 0)

    def test_negative_radii_are_absolute(self):
        (_, a) = parse_path("M 0,0 A -5,-5 0 0 1 10,0")
        assert a.arc.rx == 5 and a.arc.ry == 5


# ============================================================
# Errors
# ============================================================

class TestErrors:
    def test_unknown_command(self):
        with pytest.raises(UnparseablePathError, match="Unknown path command 'X'"):
            parse_path("M 0,0 X 10,10")

    def test_missing_argument(self):
        with pytest.raises(UnparseablePathError, match="Expected number"):
            parse_path("M 0,0 L 10")

    def test_must_start_with_moveto(self):
        with pytest.raises(UnparseablePathError, match="must begin with a moveTo"):
            parse_path("L 10,10")

    def test_bad_arc_flag(self):
        with pytest.raises(UnparseablePathError, match="arc flag"):
            parse_path("M 0,0 A 5,5 0 2 1 10,0")

    def test_leading_number(self):
        with pytest.raises(UnparseablePathError, match="Expected command"):
            parse_path("10,10")


class TestClosingEdge:
    def test_closing_edge_moves_pen(self):
        cmds = parse_path("M 0,0 L 10,0 L 10,10 Z")
        assert is_closing_edge(cmds[-1])

    def test_closing_edge_already_at_start(self):
        cmds = parse_path("M 0,0 L 10,0 L 10,10 L 0,0 Z")
        assert not is_closing_edge(cmds[-1])
        assert not is_closing_edge(cmds[1])
