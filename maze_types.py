"""
Shared type definitions for the maze description language (MDL).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CellKind(Enum):
    """Kind of a single maze cell."""

    WALL = "w"
    PATH = "p"


class Move(Enum):
    """Unit step of a move string."""

    LEFT = "l"
    UP = "u"
    RIGHT = "r"
    DOWN = "d"

    @property
    def code(self) -> str:
        return self.value

    @property
    def delta(self) -> tuple[int, int]:
        """Get (d_row, d_col) for this move."""
        return _MOVE_DELTAS[self]

    @property
    def opposite(self) -> Move:
        return _OPPOSITES[self]


_MOVE_DELTAS = {
    Move.LEFT: (0, -1),
    Move.UP: (-1, 0),
    Move.RIGHT: (0, 1),
    Move.DOWN: (1, 0),
}

_OPPOSITES = {
    Move.LEFT: Move.RIGHT,
    Move.RIGHT: Move.LEFT,
    Move.UP: Move.DOWN,
    Move.DOWN: Move.UP,
}


class VisitDirection(Enum):
    """Shape of the line drawn through a visited cell."""

    # Half-lines at the two ends of a visited segment
    HORIZONTAL_LEFT = "horizontal_left"
    HORIZONTAL_RIGHT = "horizontal_right"
    VERTICAL_UP = "vertical_up"
    VERTICAL_DOWN = "vertical_down"

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    TOP_LEFT = "top_left"  # ┌
    TOP_RIGHT = "top_right"  # ┐
    BOTTOM_LEFT = "bottom_left"  # └
    BOTTOM_RIGHT = "bottom_right"  # ┘

    @property
    def arms(self) -> frozenset[Move]:
        """Sides of the cell the line reaches."""
        return _SHAPE_ARMS[self]


_SHAPE_ARMS = {
    VisitDirection.HORIZONTAL_LEFT: frozenset({Move.LEFT}),
    VisitDirection.HORIZONTAL_RIGHT: frozenset({Move.RIGHT}),
    VisitDirection.VERTICAL_UP: frozenset({Move.UP}),
    VisitDirection.VERTICAL_DOWN: frozenset({Move.DOWN}),
    VisitDirection.HORIZONTAL: frozenset({Move.LEFT, Move.RIGHT}),
    VisitDirection.VERTICAL: frozenset({Move.UP, Move.DOWN}),
    VisitDirection.TOP_LEFT: frozenset({Move.RIGHT, Move.DOWN}),
    VisitDirection.TOP_RIGHT: frozenset({Move.LEFT, Move.DOWN}),
    VisitDirection.BOTTOM_LEFT: frozenset({Move.RIGHT, Move.UP}),
    VisitDirection.BOTTOM_RIGHT: frozenset({Move.LEFT, Move.UP}),
}


# =============================================================================
# Coordinates
# =============================================================================


@dataclass(order=True)
class Coordinate:
    """
    A (row, col) position in the maze.

    Mutable: move_to() walks the coordinate in place. Use copy() when the
    starting point has to be preserved.
    """

    row: int
    col: int

    def copy(self) -> Coordinate:
        return Coordinate(self.row, self.col)

    def move_to(self, moves: str) -> list[Coordinate]:
        """
        Walk this coordinate through an expanded move string.

        Args:
            moves: String over l/u/r/d, one unit step per character

        Returns:
            Every position visited, starting with a snapshot of the start.
            The list always holds len(moves) + 1 coordinates.

        Raises:
            ValueError: If moves contains a character that is not a move code
        """
        trajectory = [self.copy()]
        for code in moves:
            d_row, d_col = Move(code).delta
            self.row += d_row
            self.col += d_col
            trajectory.append(self.copy())
        return trajectory

    def is_adjacent(self, other: Coordinate) -> bool:
        """True if other is one horizontal or vertical step away."""
        return abs(self.row - other.row) + abs(self.col - other.col) == 1

    def __str__(self) -> str:
        return f"c({self.row},{self.col})"


# =============================================================================
# Grid
# =============================================================================


@dataclass
class Grid:
    """A height x width matrix of cells, walls unless marked otherwise."""

    cells: list[list[CellKind]]

    @classmethod
    def filled(cls, height: int, width: int, kind: CellKind = CellKind.WALL) -> Grid:
        return cls([[kind for _ in range(width)] for _ in range(height)])

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def in_bounds(self, coord: Coordinate) -> bool:
        return 0 <= coord.row < self.height and 0 <= coord.col < self.width

    def get(self, coord: Coordinate) -> CellKind:
        return self.cells[coord.row][coord.col]

    def set(self, coord: Coordinate, kind: CellKind) -> None:
        self.cells[coord.row][coord.col] = kind

    def path_cells(self) -> list[Coordinate]:
        return [
            Coordinate(r, c)
            for r, row in enumerate(self.cells)
            for c, cell in enumerate(row)
            if cell is CellKind.PATH
        ]


# =============================================================================
# Paths and visits
# =============================================================================


@dataclass(frozen=True)
class PathDefinition:
    """A registered path: where it starts and its expanded move string."""

    path_id: int
    start: tuple[int, int]  # (row, col) of the origin
    moves: str

    @classmethod
    def at(cls, path_id: int, origin: Coordinate, moves: str) -> PathDefinition:
        return cls(path_id, (origin.row, origin.col), moves)

    @property
    def origin(self) -> Coordinate:
        """A fresh Coordinate at the start; moving it leaves the definition alone."""
        return Coordinate(*self.start)

    def trajectory(self, moves: int | None = None) -> list[Coordinate]:
        """Replay the first `moves` moves (all when None) from the origin."""
        steps = self.moves if moves is None else self.moves[:moves]
        return self.origin.move_to(steps)


@dataclass(frozen=True)
class Color:
    """An RGB colour."""

    red: int
    green: int
    blue: int

    def __str__(self) -> str:
        return f"rgb({self.red}:{self.green}:{self.blue})"


WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)
RED = Color(255, 0, 0)
LIGHT_GRAY = Color(192, 192, 192)


@dataclass(frozen=True)
class VisitedSegment:
    """A coloured walk over maze cells, drawn as a continuous line."""

    color: Color
    trajectory: tuple[Coordinate, ...]


Visit = tuple[VisitDirection, Color]


# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class CodeEmission:
    """Emit the maze as an array literal in a programming language."""

    language: str  # "java" or "python"
    cell_representation: str  # "int", "char" or "boolean"


@dataclass(frozen=True)
class ImageEmission:
    """Emit the maze as a bitmap image."""

    format: str  # "png", "jpg", "tif" or "bmp"


OutputMode = CodeEmission | ImageEmission

CODE_LANGUAGES = ("java", "python")
CELL_REPRESENTATIONS = ("int", "char", "boolean")
IMAGE_FORMATS = ("png", "jpg", "tif", "bmp")


def parse_output_mode(name: str) -> OutputMode:
    """
    Parse an output mode name such as "png", "python-char" or "JAVA_INT".

    Raises:
        ValueError: If the name is not a known output mode
    """
    normalized = name.strip().lower().replace("_", "-")
    if normalized in IMAGE_FORMATS:
        return ImageEmission(normalized)

    language, sep, representation = normalized.partition("-")
    if sep and language in CODE_LANGUAGES and representation in CELL_REPRESENTATIONS:
        return CodeEmission(language, representation)

    modes = [*IMAGE_FORMATS] + [f"{lang}-{rep}" for lang in CODE_LANGUAGES for rep in CELL_REPRESENTATIONS]
    raise ValueError(
        f"Unknown output mode '{name}'\n"
        f"  Valid modes: {', '.join(modes)}"
    )


@dataclass
class Settings:
    """Rendering and export options, passed through to output collaborators."""

    output_mode: OutputMode = ImageEmission("png")
    unit: int = 25  # Cell size in pixels
    show_grid: bool = True
    show_indices: bool = True

    # Placeholders for code emission
    path_char: str = " "
    wall_char: str = "#"
    visited_char: str = "~"
    position_char: str = "*"
    path_int: int = 1
    wall_int: int = 0
    visited_int: int = 2
    position_int: int = 3

    path_color: Color = WHITE
    wall_color: Color = BLACK
    grid_color: Color = WHITE
    position_color: Color = RED

    # Image paths; loading them is up to the renderer
    visited_sprite: str | None = None
    position_sprite: str | None = None


# =============================================================================
# Description
# =============================================================================


@dataclass
class Description:
    """A compiled maze: grid, settings, markers and visited-path annotations."""

    grid: Grid = field(default_factory=lambda: Grid([]))
    settings: Settings = field(default_factory=Settings)
    entrance: Coordinate | None = None
    exit: Coordinate | None = None
    current_position: Coordinate | None = None
    visits: list[list[list[Visit]]] = field(default_factory=list)

    @property
    def height(self) -> int:
        return self.grid.height

    @property
    def width(self) -> int:
        return self.grid.width

    def resize(self, height: int, width: int) -> None:
        """Allocate a fresh all-wall grid and clear every visit annotation."""
        self.grid = Grid.filled(height, width)
        self.visits = [[[] for _ in range(width)] for _ in range(height)]

    def visits_at(self, coord: Coordinate) -> list[Visit]:
        return self.visits[coord.row][coord.col]

    def is_visited(self, coord: Coordinate) -> bool:
        return bool(self.visits[coord.row][coord.col])

    def add_visit(self, coord: Coordinate, shape: VisitDirection, color: Color) -> None:
        self.visits[coord.row][coord.col].append((shape, color))
