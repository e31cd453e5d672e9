"""SVG path-data interpreter.

Turns path text into a list of PathCommand with absolute coordinates.
Relative commands are resolved against the current point, repeated
coordinate groups repeat the command (extra moveTo pairs become lineTo),
and smooth curves receive their reflected control point.
"""
import re

from shared.types import Point, CommandKind, ArcParams, PathCommand
from shared.geometry import UnparseablePathError, dist

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")
_SEPARATORS = " \t\r\n\f,"
_KINDS = {k.value: k for k in CommandKind}

CLOSE_TOL = 1e-9


# ============================================================
# Scanner
# ============================================================

class _Scanner:
    """Character cursor over path text."""

    def __init__(self, text: str):
        self.text = text; self.pos = 0

    def skip(self):
        while self.pos < len(self.text) and self.text[self.pos] in _SEPARATORS:
            self.pos += 1

    def at_end(self) -> bool:
        self.skip()
        return self.pos >= len(self.text)

    def at_command(self) -> bool:
        self.skip()
        return self.pos < len(self.text) and self.text[self.pos].isalpha()

    def read_command(self) -> str:
        self.skip()
        ch = self.text[self.pos]
        if ch.upper() not in _KINDS:
            raise UnparseablePathError(f"Unknown path command {ch!r} at offset {self.pos}")
        self.pos += 1
        return ch

    def read_number(self) -> float:
        self.skip()
        m = _NUMBER_RE.match(self.text, self.pos)
        if m is None:
            raise UnparseablePathError(self.unexpected("number"))
        self.pos = m.end()
        return float(m.group())

    def read_flag(self) -> bool:
        """Arc flags are single digits and may be packed without separators."""
        self.skip()
        if self.pos < len(self.text) and self.text[self.pos] in "01":
            self.pos += 1
            return self.text[self.pos-1] == "1"
        raise UnparseablePathError(self.unexpected("arc flag"))

    def unexpected(self, what: str) -> str:
        if self.pos >= len(self.text):
            return f"Expected {what} at end of path data"
        return f"Expected {what} at offset {self.pos}, found {self.text[self.pos]!r}"


# ============================================================
# Interpreter
# ============================================================

class _Cursor:
    """Interpreter state: current point, subpath start, last control points."""

    def __init__(self):
        self.current: Point = (0.0, 0.0)
        self.start: Point = (0.0, 0.0)
        self.last_cubic: Point | None = None
        self.last_quad: Point | None = None

    def resolve(self, x: float, y: float, rel: bool) -> Point:
        return (self.current[0]+x, self.current[1]+y) if rel else (x, y)

    def reflect(self, ctrl: Point | None) -> Point:
        if ctrl is None:
            return self.current
        return (2*self.current[0]-ctrl[0], 2*self.current[1]-ctrl[1])


def _read_pair(sc: _Scanner) -> tuple[float, float]:
    return sc.read_number(), sc.read_number()


def _read_command(sc: _Scanner, kind: CommandKind, rel: bool, cur: _Cursor) -> PathCommand:
    """Read one repetition of *kind* and advance the cursor."""
    p0 = cur.current
    last_cubic = last_quad = None
    match kind:
        case CommandKind.MOVE_TO:
            end = cur.resolve(*_read_pair(sc), rel)
            cur.start = end
            cmd = PathCommand(kind, p0, end)
        case CommandKind.LINE_TO:
            cmd = PathCommand(kind, p0, cur.resolve(*_read_pair(sc), rel))
        case CommandKind.HORIZONTAL_TO:
            x = sc.read_number()
            cmd = PathCommand(kind, p0, (p0[0]+x if rel else x, p0[1]))
        case CommandKind.VERTICAL_TO:
            y = sc.read_number()
            cmd = PathCommand(kind, p0, (p0[0], p0[1]+y if rel else y))
        case CommandKind.ARC_TO:
            rx = sc.read_number(); ry = sc.read_number(); rot = sc.read_number()
            large = sc.read_flag(); sweep = sc.read_flag()
            end = cur.resolve(*_read_pair(sc), rel)
            cmd = PathCommand(kind, p0, end, arc=ArcParams(abs(rx), abs(ry), rot, large, sweep))
        case CommandKind.CUBIC_TO:
            c1 = cur.resolve(*_read_pair(sc), rel); c2 = cur.resolve(*_read_pair(sc), rel)
            end = cur.resolve(*_read_pair(sc), rel)
            cmd = PathCommand(kind, p0, end, (c1, c2)); last_cubic = c2
        case CommandKind.SMOOTH_CUBIC_TO:
            c1 = cur.reflect(cur.last_cubic)
            c2 = cur.resolve(*_read_pair(sc), rel); end = cur.resolve(*_read_pair(sc), rel)
            cmd = PathCommand(kind, p0, end, (c1, c2)); last_cubic = c2
        case CommandKind.QUADRATIC_TO:
            c = cur.resolve(*_read_pair(sc), rel); end = cur.resolve(*_read_pair(sc), rel)
            cmd = PathCommand(kind, p0, end, (c,)); last_quad = c
        case CommandKind.SMOOTH_QUADRATIC_TO:
            c = cur.reflect(cur.last_quad); end = cur.resolve(*_read_pair(sc), rel)
            cmd = PathCommand(kind, p0, end, (c,)); last_quad = c
        case CommandKind.CLOSE_PATH:
            cmd = PathCommand(kind, p0, cur.start)
    cur.current = cmd.end
    cur.last_cubic = last_cubic; cur.last_quad = last_quad
    return cmd


def parse_path(d: str) -> list[PathCommand]:
    """Interpret SVG path data into absolute PathCommands.

    Raises UnparseablePathError on an unknown command letter, a missing or
    malformed argument, or path data that does not begin with a moveTo.
    Empty path data yields an empty list.
    """
    sc = _Scanner(d or "")
    cur = _Cursor()
    cmds: list[PathCommand] = []
    if sc.at_end():
        return cmds
    if not sc.at_command():
        raise UnparseablePathError(sc.unexpected("command"))
    first = sc.read_command()
    if first not in "Mm":
        raise UnparseablePathError(f"Path data must begin with a moveTo, found {first!r}")
    letter = first
    while True:
        kind = _KINDS[letter.upper()]; rel = letter.islower()
        cmds.append(_read_command(sc, kind, rel, cur))
        if kind is not CommandKind.CLOSE_PATH:
            # Repeated groups; moveTo repeats as lineTo
            if kind is CommandKind.MOVE_TO:
                kind = CommandKind.LINE_TO
            while not sc.at_end() and not sc.at_command():
                cmds.append(_read_command(sc, kind, rel, cur))
        if sc.at_end():
            break
        if not sc.at_command():
            raise UnparseablePathError(sc.unexpected("command"))
        letter = sc.read_command()
    return cmds


def is_closing_edge(cmd: PathCommand) -> bool:
    """A closePath draws an edge only when it actually moves the pen."""
    return cmd.kind is CommandKind.CLOSE_PATH and dist(cmd.start, cmd.end) > CLOSE_TOL
