"""
Parser for the maze description language (MDL).

An MDL document is line oriented. The first line names the language version,
every following line holds one statement:

    [version:1.0]
    [size:5,7]                      settings: [key:value]
    r0:wwwwwww;                     row: p = path, w = wall
    p1:c(1,1)r(4)d(2);              path from a coordinate
    p2:p(1,3)d;                     path from move 3 of path 1
    p3:e d(2);                      path from the entrance (x = from the exit)
    v:p(1,2,4,rgb(255:0:0));        visited moves 2..4 of path 1
    vc:rgb(0:0:255),c(1,1)>c(2,1);  visited walk given as coordinates

Lines are matched case-insensitively with all whitespace removed. The first
failing statement aborts compilation with a DescriptionError naming its line.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from maze_types import (
    LIGHT_GRAY,
    CellKind,
    Color,
    Coordinate,
    Description,
    VisitedSegment,
    parse_output_mode,
)
from mdl_errors import (
    DescriptionError,
    DescriptionSyntaxError,
    OutOfRangeError,
    UndefinedSizeError,
    UnexpectedStatementError,
    UnresolvedReferenceError,
    VersionMismatchError,
)
from moves import parse_moves
from path_registry import PathRegistry
from visits import annotate_segment

__all__ = ["MDL_VERSION", "DescriptionParser", "parse_description", "parse_color", "parse_coordinate"]

logger = logging.getLogger(__name__)

MDL_VERSION = "1.0"

_COORDINATE = re.compile(r"c\((-?\d+),(-?\d+)\)", re.ASCII)
_COLOR = re.compile(r"rgb\((\d+):(\d+):(\d+)\)", re.ASCII)
_PATH_REFERENCE = re.compile(r"p\((\d+),(\d+)\)", re.ASCII)
_ROW = re.compile(r"r(\d+):(.*);", re.ASCII)
_PATH = re.compile(r"p(\d+):(.*)", re.ASCII)
_INTEGER = re.compile(r"-?\d+", re.ASCII)
_VISITED_RANGE = re.compile(r"v:p\((.*)\);")
_VISITED_CHAIN = re.compile(r"vc:(rgb\([^)]*\)),(.*);")


def _normalize(line: str) -> str:
    return "".join(line.split()).lower()


def _parse_ints(text: str, sep: str, counts: tuple[int, ...]) -> list[int]:
    parts = text.split(sep)
    if len(parts) not in counts:
        expected = " or ".join(str(n) for n in counts)
        raise DescriptionSyntaxError(f"expected {expected} integers separated by '{sep}', got '{text}'")
    if not all(_INTEGER.fullmatch(part) for part in parts):
        raise DescriptionSyntaxError(f"expected integers separated by '{sep}', got '{text}'")
    return [int(part) for part in parts]


def parse_coordinate(text: str) -> Coordinate:
    """Parse a coordinate literal "c(row,col)"."""
    match = _COORDINATE.fullmatch(_normalize(text))
    if match is None:
        raise DescriptionSyntaxError(f"invalid coordinate '{text}', expected c(row,col)")
    return Coordinate(int(match.group(1)), int(match.group(2)))


def parse_color(text: str) -> Color:
    """Parse a colour literal "rgb(red:green:blue)"."""
    match = _COLOR.fullmatch(_normalize(text))
    if match is None:
        raise DescriptionSyntaxError(f"invalid colour '{text}', expected rgb(red:green:blue)")
    components = [int(group) for group in match.groups()]
    if any(component > 255 for component in components):
        raise DescriptionSyntaxError(f"colour components must be in 0..255, got '{text}'")
    return Color(*components)


class DescriptionParser:
    """
    Compiles one MDL document into a Description.

    All state (the description under construction and the path registry)
    belongs to the parser instance, so separate parsers never share paths.

    Example:
        description = DescriptionParser(text).parse()
    """

    def __init__(self, text: str) -> None:
        self.lines = text.splitlines()
        self.description = Description()
        self.registry = PathRegistry()
        # Line on which entrance/exit/current-position were last set
        self._marker_lines: dict[str, int] = {}
        self._line_number = 0

    # ------------------------------------------------------------------ #
    # Driver
    # ------------------------------------------------------------------ #

    def parse(self) -> Description:
        """
        Run the compilation.

        Raises:
            DescriptionError: On the first invalid line
        """
        self.description = Description()
        self.registry = PathRegistry()
        self._marker_lines = {}

        if not self.lines:
            raise DescriptionSyntaxError("expected version information", 1)
        self._run(1, self._parse_version, self.lines[0])

        for line_number, raw in enumerate(self.lines[1:], start=2):
            line = _normalize(raw)
            if not line:
                continue
            logger.debug("line %d: %s", line_number, line)
            self._run(line_number, self._dispatch, line)

        self._finish()
        logger.info(
            "compiled maze: %dx%d, %d paths, %d visited cells",
            self.description.height,
            self.description.width,
            len(self.registry),
            sum(1 for row in self.description.visits for cell in row if cell),
        )
        return self.description

    def _run(self, line_number: int, handler: Callable[[str], None], line: str) -> None:
        """Call a statement handler, attributing any failure to line_number."""
        self._line_number = line_number
        try:
            handler(line)
        except DescriptionError as e:
            if e.line_number is None:
                raise e.at_line(line_number) from e
            raise
        except ValueError as e:
            raise DescriptionSyntaxError(str(e), line_number) from e

    def _dispatch(self, line: str) -> None:
        if line.startswith("["):
            self._parse_setting(line)
        elif _is_numbered(line, "r"):
            self._require_size("rows")
            self._parse_row(line)
        elif _is_numbered(line, "p"):
            self._require_size("paths")
            self._parse_path(line)
        elif line.startswith("vc:"):
            self._require_size("visited paths")
            self._parse_visited_chain(line)
        elif line.startswith("v:"):
            self._require_size("visited paths")
            self._parse_visited_range(line)
        else:
            raise UnexpectedStatementError(f"unexpected statement '{line}'")

    def _require_size(self, what: str) -> None:
        if self.description.height == 0:
            raise UndefinedSizeError(f"maze size must be defined prior to defining {what}")

    def _finish(self) -> None:
        desc = self.description
        # A settings-only document (e.g. a generator configuration block) has no grid
        if desc.height == 0:
            return

        for name, coord in (
            ("entrance", desc.entrance),
            ("exit", desc.exit),
            ("current-position", desc.current_position),
        ):
            if coord is not None and not desc.grid.in_bounds(coord):
                raise OutOfRangeError(
                    f"{name} {coord} is outside the {desc.height}x{desc.width} maze",
                    self._marker_lines[name],
                )

        # Entrance and exit are always open, whatever the rows said
        for coord in (desc.entrance, desc.exit):
            if coord is not None:
                desc.grid.set(coord, CellKind.PATH)

    # ------------------------------------------------------------------ #
    # Statements
    # ------------------------------------------------------------------ #

    def _parse_version(self, raw: str) -> None:
        line = _normalize(raw)
        if not (line.startswith("[version:") and line.endswith("]")):
            raise DescriptionSyntaxError("expected version information")
        version = line[len("[version:") : -1]
        if version != MDL_VERSION.lower():
            raise VersionMismatchError(
                f"cannot read files of version '{version}', expected: '{MDL_VERSION}'"
            )

    def _parse_setting(self, line: str) -> None:
        # [key:value]
        if not line.endswith("]"):
            raise DescriptionSyntaxError(f"setting must end with ']': '{line}'")
        key, sep, value = line[1:-1].partition(":")
        if not sep:
            raise DescriptionSyntaxError(f"setting must have the form [key:value]: '{line}'")

        desc = self.description
        settings = desc.settings
        match key:
            case "size":
                height, width = _parse_ints(value, ",", (2,))
                if height <= 0 or width <= 0:
                    raise DescriptionSyntaxError(f"maze size must be positive, got {height}x{width}")
                desc.resize(height, width)
            case "output-mode":
                settings.output_mode = parse_output_mode(value)
            case "unit":
                (unit,) = _parse_ints(value, ",", (1,))
                if unit <= 0:
                    raise DescriptionSyntaxError(f"unit must be positive, got {unit}")
                settings.unit = unit
            case "entrance":
                desc.entrance = parse_coordinate(value)
                self._marker_lines["entrance"] = self._line_number
            case "exit":
                desc.exit = parse_coordinate(value)
                self._marker_lines["exit"] = self._line_number
            case "current-position":
                desc.current_position = parse_coordinate(value)
                self._marker_lines["current-position"] = self._line_number
            case "placeholder-char":
                chars = value.replace('"', "")
                if len(chars) not in (2, 4):
                    raise DescriptionSyntaxError(
                        f"placeholder-char needs 2 or 4 characters (path, wall[, visited, position]), got '{value}'"
                    )
                settings.path_char, settings.wall_char = chars[0], chars[1]
                if len(chars) == 4:
                    settings.visited_char, settings.position_char = chars[2], chars[3]
            case "placeholder-int":
                ints = _parse_ints(value, ",", (2, 4))
                settings.path_int, settings.wall_int = ints[0], ints[1]
                if len(ints) == 4:
                    settings.visited_int, settings.position_int = ints[2], ints[3]
            case "path-color":
                settings.path_color = parse_color(value)
            case "wall-color":
                settings.wall_color = parse_color(value)
            case "position-color":
                settings.position_color = parse_color(value)
            case "grid-color":
                settings.grid_color = parse_color(value)
            case "visited-sprite":
                settings.visited_sprite = _parse_quoted(value)
            case "position-sprite":
                settings.position_sprite = _parse_quoted(value)
            case "show-grid":
                settings.show_grid = value == "true"
            case "show-indices":
                settings.show_indices = value == "true"
            case _:
                raise DescriptionSyntaxError(f"unknown setting '{key}'")

    def _parse_row(self, line: str) -> None:
        # rN:pwpw...;
        match = _ROW.fullmatch(line)
        if match is None:
            raise DescriptionSyntaxError(f"row must have the form rN:cells; got '{line}'")
        row = int(match.group(1))
        grid = self.description.grid
        if row >= grid.height:
            raise OutOfRangeError(f"row {row} is outside the maze (rows 0..{grid.height - 1})")

        for col, char in enumerate(match.group(2)):
            if char == "p":
                kind = CellKind.PATH
            elif char == "w":
                kind = CellKind.WALL
            else:
                continue
            if col >= grid.width:
                raise OutOfRangeError(f"row {row} has cells beyond column {grid.width - 1}")
            grid.cells[row][col] = kind

    def _parse_path(self, line: str) -> None:
        # pN:<origin><moves>;
        match = _PATH.fullmatch(line)
        if match is None:
            raise DescriptionSyntaxError(f"path must have the form pN:<origin><moves>; got '{line}'")
        path_id = int(match.group(1))
        rest = match.group(2)
        if path_id in self.registry:
            raise DescriptionSyntaxError(f"path {path_id} is already defined")

        grid = self.description.grid
        origin, clause = self._parse_path_origin(path_id, rest)
        # A longer straight run cannot stay inside the grid
        moves = parse_moves(clause, max_count=max(grid.height, grid.width))

        trajectory = origin.copy().move_to(moves)
        for coord in trajectory:
            if not grid.in_bounds(coord):
                raise OutOfRangeError(
                    f"path {path_id} leaves the {grid.height}x{grid.width} maze at {coord}"
                )
        for coord in trajectory:
            grid.set(coord, CellKind.PATH)

        self.registry.register(path_id, origin, moves)
        logger.debug("path %d: %d moves from %s", path_id, len(moves), origin)

    def _parse_path_origin(self, path_id: int, rest: str) -> tuple[Coordinate, str]:
        """Split a path body into its starting coordinate and its move clause."""
        desc = self.description
        if rest.startswith("e"):
            if desc.entrance is None:
                raise UnresolvedReferenceError(f"path {path_id} starts at the entrance, which is not defined")
            return desc.entrance.copy(), rest[1:]
        if rest.startswith("x"):
            if desc.exit is None:
                raise UnresolvedReferenceError(f"path {path_id} starts at the exit, which is not defined")
            return desc.exit.copy(), rest[1:]
        if rest.startswith("c("):
            match = _COORDINATE.match(rest)
            if match is None:
                raise DescriptionSyntaxError(f"invalid path origin in '{rest}', expected c(row,col)")
            return Coordinate(int(match.group(1)), int(match.group(2))), rest[match.end() :]
        if rest.startswith("p("):
            match = _PATH_REFERENCE.match(rest)
            if match is None:
                raise DescriptionSyntaxError(f"invalid path origin in '{rest}', expected p(path,offset)")
            other_id, offset = int(match.group(1)), int(match.group(2))
            return self.registry.resolve_offset(other_id, offset, current_id=path_id), rest[match.end() :]
        raise DescriptionSyntaxError(
            f"invalid origin for path {path_id}: '{rest}'\n"
            f"  Valid origins: e (entrance), x (exit), c(row,col), p(path,offset)"
        )

    def _parse_visited_range(self, line: str) -> None:
        # v:p(path,start,end[,rgb(r:g:b)]);
        match = _VISITED_RANGE.fullmatch(line)
        if match is None:
            raise DescriptionSyntaxError(f"visited path must have the form v:p(path,start,end[,colour]); got '{line}'")
        fields = match.group(1).split(",")
        if len(fields) not in (3, 4):
            raise DescriptionSyntaxError(f"visited path needs 3 or 4 fields, got {len(fields)}")
        path_id, start, end = _parse_ints(",".join(fields[:3]), ",", (3,))
        color = parse_color(fields[3]) if len(fields) == 4 else LIGHT_GRAY

        if start < 0 or start > end:
            raise DescriptionSyntaxError(f"invalid visited range {start}..{end}")
        moves = self.registry.moves(path_id)
        if end > len(moves):
            raise DescriptionSyntaxError(f"visited range ends at move {end}, but path {path_id} has {len(moves)} moves")

        # Move k leads from trajectory point k-1 to point k
        trajectory = self.registry.trajectory(path_id)[max(start - 1, 0) : end + 1]
        if len(trajectory) < 2:
            raise DescriptionSyntaxError("visited range must cover at least one move")
        grid = self.description.grid
        for coord in trajectory:
            # Only possible when the maze was resized after the path was defined
            if not grid.in_bounds(coord):
                raise OutOfRangeError(f"{coord} is outside the {grid.height}x{grid.width} maze")
        annotate_segment(self.description, VisitedSegment(color, tuple(trajectory)))

    def _parse_visited_chain(self, line: str) -> None:
        # vc:rgb(r:g:b),c(r,c)>c(r,c)>...;
        match = _VISITED_CHAIN.fullmatch(line)
        if match is None:
            raise DescriptionSyntaxError(
                f"visited path must have the form vc:rgb(r:g:b),c(row,col)>c(row,col)...; got '{line}'"
            )
        color = parse_color(match.group(1))
        chain = [parse_coordinate(part) for part in match.group(2).split(">")]
        if len(chain) < 2:
            raise DescriptionSyntaxError("visited path must have at least two coordinates")

        grid = self.description.grid
        for i, coord in enumerate(chain):
            if not grid.in_bounds(coord):
                raise OutOfRangeError(f"{coord} is outside the {grid.height}x{grid.width} maze")
            if i > 0 and not coord.is_adjacent(chain[i - 1]):
                raise DescriptionSyntaxError(f"{coord} is not adjacent to {chain[i - 1]}")
        annotate_segment(self.description, VisitedSegment(color, tuple(chain)))


def _is_numbered(line: str, prefix: str) -> bool:
    return len(line) > 1 and line[0] == prefix and line[1] in "0123456789"


def _parse_quoted(value: str) -> str:
    if len(value) < 2 or not (value.startswith('"') and value.endswith('"')):
        raise DescriptionSyntaxError(f"expected a quoted path, got '{value}'")
    return value[1:-1]


def parse_description(text: str) -> Description:
    """
    Compile an MDL document.

    Args:
        text: The whole document, one statement per line

    Returns:
        The compiled Description

    Raises:
        DescriptionError: On the first invalid line
    """
    return DescriptionParser(text).parse()
