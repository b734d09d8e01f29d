"""
Random maze generation by recursive division.

The maze starts as one open chamber inside a solid border. Each chamber is
split by one vertical and one horizontal wall into four sub-chambers, and a
hole is punched through three of the four resulting wall sections. Leaving a
single section closed keeps every sub-chamber reachable from every other, so
the finished maze always connects its entrance (top row) to its exit (bottom
row).

Generated mazes are written back out as MDL row statements, ready to be
appended to a shared settings block.
"""

from __future__ import annotations

import logging
import random
from collections import deque

__all__ = [
    "MazeDivider",
    "generate_maze",
    "find_entrance",
    "find_exit",
    "is_solvable",
    "maze_to_mdl",
    "compose_description",
    "read_generator_size",
    "generate_description",
]

logger = logging.getLogger(__name__)

# True = open, False = wall
BoolMaze = list[list[bool]]

# (row_start, col_start, row_end, col_end), all inclusive
Chamber = tuple[int, int, int, int]


class MazeDivider:
    """
    Recursive-division maze generator.

    Each divider owns its random number generator, so two dividers created
    with the same seed produce the same sequence of mazes.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)
        self._maze: BoolMaze = []

    def generate(self, width: int, height: int) -> BoolMaze | None:
        """
        Generate a maze.

        Args:
            width: Number of columns, including the border
            height: Number of rows, including the border

        Returns:
            height rows of width booleans (True = open), or None when either
            dimension is below 3
        """
        if width < 3 or height < 3:
            logger.info("refusing to generate a %dx%d maze", height, width)
            return None

        self._maze = [
            [0 < r < height - 1 and 0 < c < width - 1 for c in range(width)]
            for r in range(height)
        ]

        # Explicit stack instead of recursion so large mazes cannot hit the
        # recursion limit. Chambers are still processed depth first.
        pending: list[Chamber] = [(1, 1, height - 2, width - 2)]
        while pending:
            pending.extend(reversed(self._divide(pending.pop())))

        self._open_exits(height, width)
        maze = self._maze
        self._maze = []
        logger.info(
            "generated %dx%d maze, entrance column %s, exit column %s",
            height,
            width,
            find_entrance(maze),
            find_exit(maze),
        )
        return maze

    def _divide(self, chamber: Chamber) -> list[Chamber]:
        """Split one chamber and return its four sub-chambers (none if too small)."""
        rs, cs, re, ce = chamber
        d_col = ce - cs
        d_row = re - rs
        if d_col <= 1 or d_row <= 1:
            return []

        # A wall two cells in from the leading edge would leave a dead strip
        while True:
            vertical = cs + 1 + self.rng.randrange(d_col - 1)
            horizontal = rs + 1 + self.rng.randrange(d_row - 1)
            if vertical - cs != 2 and horizontal - rs != 2:
                break

        logger.debug("chamber %s split at column %d, row %d", chamber, vertical, horizontal)
        self._draw_walls(chamber, vertical, horizontal)
        self._punch_holes(chamber, vertical, horizontal)

        return [
            (rs, cs, horizontal - 1, vertical - 1),
            (rs, vertical + 1, horizontal - 1, ce),
            (horizontal + 1, cs, re, vertical - 1),
            (horizontal + 1, vertical + 1, re, ce),
        ]

    def _draw_walls(self, chamber: Chamber, vertical: int, horizontal: int) -> None:
        rs, cs, re, ce = chamber
        maze = self._maze

        for r in range(rs, re + 1):
            # Leave the end open if it faces a hole in the enclosing wall
            if r == rs and maze[r - 1][vertical]:
                continue
            if r == re and maze[r + 1][vertical]:
                continue
            maze[r][vertical] = False

        for c in range(cs, ce + 1):
            if c == cs and maze[horizontal][c - 1]:
                continue
            if c == ce and maze[horizontal][c + 1]:
                continue
            maze[horizontal][c] = False

    def _punch_holes(self, chamber: Chamber, vertical: int, horizontal: int) -> None:
        rs, cs, re, ce = chamber
        sections: list[Chamber] = [
            (rs, vertical, horizontal - 1, vertical),  # top
            (horizontal, vertical + 1, horizontal, ce),  # right
            (horizontal + 1, vertical, re, vertical),  # bottom
            (horizontal, cs, horizontal, vertical - 1),  # left
        ]
        closed = self.rng.randrange(4)

        for i, (r0, c0, r1, c1) in enumerate(sections):
            if i == closed:
                continue
            if r0 == r1:
                self._maze[r0][c0 + self.rng.randrange(c1 - c0 + 1)] = True
            else:
                self._maze[r0 + self.rng.randrange(r1 - r0 + 1)][c0] = True

    def _open_exits(self, height: int, width: int) -> None:
        maze = self._maze
        for c in range(1, width - 1):
            if maze[1][c]:
                maze[0][c] = True
                break
        for c in range(width - 2, 0, -1):
            if maze[height - 2][c]:
                maze[height - 1][c] = True
                break


def generate_maze(width: int, height: int, seed: int | None = None) -> BoolMaze | None:
    """Generate one maze with a fresh divider. See MazeDivider.generate."""
    return MazeDivider(seed).generate(width, height)


# =============================================================================
# Inspection
# =============================================================================


def find_entrance(maze: BoolMaze) -> int | None:
    """Column of the opening in the top row."""
    return next((c for c, is_open in enumerate(maze[0]) if is_open), None)


def find_exit(maze: BoolMaze) -> int | None:
    """Column of the opening in the bottom row."""
    return next((c for c, is_open in enumerate(maze[-1]) if is_open), None)


def is_solvable(maze: BoolMaze) -> bool:
    """True if open cells connect the top-row entrance to the bottom-row exit."""
    entrance = find_entrance(maze)
    exit_col = find_exit(maze)
    if entrance is None or exit_col is None:
        return False

    height, width = len(maze), len(maze[0])
    goal = (height - 1, exit_col)
    queue = deque([(0, entrance)])
    seen = {(0, entrance)}
    while queue:
        pos = queue.popleft()
        if pos == goal:
            return True
        r, c = pos
        for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
            if 0 <= nr < height and 0 <= nc < width and maze[nr][nc] and (nr, nc) not in seen:
                seen.add((nr, nc))
                queue.append((nr, nc))
    return False


# =============================================================================
# MDL output
# =============================================================================


def maze_to_mdl(maze: BoolMaze) -> str:
    """One "rN:pw...;" statement per row, newline terminated."""
    return "".join(
        f"r{r}:{''.join('p' if is_open else 'w' for is_open in row)};\n"
        for r, row in enumerate(maze)
    )


def compose_description(config: str, maze: BoolMaze) -> str:
    """Append a maze's row statements to a settings block."""
    if config and not config.endswith("\n"):
        config += "\n"
    return config + maze_to_mdl(maze)


def read_generator_size(config: str) -> tuple[int, int]:
    """
    Find the maze size in a settings block.

    Returns:
        (height, width) from the block's [size:H,W] line

    Raises:
        ValueError: If the block has no well-formed size line
    """
    for line_idx, raw in enumerate(config.splitlines()):
        line = "".join(raw.split()).lower()
        if not (line.startswith("[size:") and line.endswith("]")):
            continue
        parts = line[len("[size:") : -1].split(",")
        if len(parts) != 2 or not all(part.isascii() and part.isdigit() for part in parts):
            raise ValueError(
                f"Invalid size setting on line {line_idx + 1}: '{raw.strip()}'\n"
                f"  Expected format: [size:height,width]"
            )
        return int(parts[0]), int(parts[1])

    raise ValueError("Configuration has no [size:height,width] setting")


def generate_description(config: str, divider: MazeDivider | None = None) -> str | None:
    """
    Generate a maze sized by a settings block and return the complete MDL text.

    Returns:
        The settings block followed by the maze rows, or None if the
        configured size is too small to generate
    """
    height, width = read_generator_size(config)
    maze = (divider or MazeDivider()).generate(width, height)
    if maze is None:
        return None
    return compose_description(config, maze)
