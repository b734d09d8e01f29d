"""
ASCII preview rendering for compiled mazes.

Draws a Description as a framed character grid: walls and open cells use the
description's placeholder characters, visited paths are drawn with
box-drawing lines, and the current position is highlighted. Each distinct
visited-path colour gets its own terminal colour.
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from maze_types import CellKind, Color, Coordinate, Description, Move

__all__ = ["ARM_GLYPHS", "cell_glyph", "render_description", "render_generated"]

logger = logging.getLogger(__name__)

Colorizer = Callable[[str], str]

# Line glyph for the set of cell sides a visited line reaches
ARM_GLYPHS: dict[frozenset[Move], str] = {
    frozenset({Move.LEFT}): "╴",
    frozenset({Move.RIGHT}): "╶",
    frozenset({Move.UP}): "╵",
    frozenset({Move.DOWN}): "╷",
    frozenset({Move.LEFT, Move.RIGHT}): "─",
    frozenset({Move.UP, Move.DOWN}): "│",
    frozenset({Move.RIGHT, Move.DOWN}): "┌",
    frozenset({Move.LEFT, Move.DOWN}): "┐",
    frozenset({Move.RIGHT, Move.UP}): "└",
    frozenset({Move.LEFT, Move.UP}): "┘",
    frozenset({Move.LEFT, Move.RIGHT, Move.DOWN}): "┬",
    frozenset({Move.LEFT, Move.RIGHT, Move.UP}): "┴",
    frozenset({Move.UP, Move.DOWN, Move.RIGHT}): "├",
    frozenset({Move.UP, Move.DOWN, Move.LEFT}): "┤",
    frozenset({Move.LEFT, Move.UP, Move.RIGHT, Move.DOWN}): "┼",
}

_PALETTE: list[Colorizer] = [
    chalk.red,
    chalk.green,
    chalk.yellow,
    chalk.blue,
    chalk.magenta,
    chalk.cyan,
    chalk.redBright,
    chalk.greenBright,
    chalk.yellowBright,
    chalk.blueBright,
]


def _plain(s: str) -> str:
    return s


def cell_glyph(arms: frozenset[Move], cell_width: int = 1) -> str:
    """
    Draw a visited line reaching the given sides of a cell.

    Wider cells are padded with horizontal strokes on the sides the line
    reaches, so neighbouring cells join up.
    """
    glyph = ARM_GLYPHS[arms]
    if cell_width <= 1:
        return glyph
    left = (cell_width - 1) // 2
    right = cell_width - 1 - left
    return (
        ("─" if Move.LEFT in arms else " ") * left
        + glyph
        + ("─" if Move.RIGHT in arms else " ") * right
    )


def render_description(
    description: Description,
    cell_width: int = 3,
    colorize: bool = True,
) -> str:
    """
    Render a compiled maze for a terminal.

    Args:
        description: The compiled maze
        cell_width: Characters per cell (default 3)
        colorize: Emit ANSI colours (default True)

    Returns:
        The rendered maze, one line per text row
    """
    settings = description.settings

    visit_colors: list[Color] = sorted(
        {color for row in description.visits for cell in row for _, color in cell},
        key=lambda c: (c.red, c.green, c.blue),
    )
    color_map: dict[Color, Colorizer] = {
        color: _PALETTE[i % len(_PALETTE)] if colorize else _plain
        for i, color in enumerate(visit_colors)
    }
    wall_color: Colorizer = chalk.white if colorize else _plain
    frame_color: Colorizer = chalk.white if colorize else _plain
    position_color: Colorizer = chalk.bgWhite.black if colorize else _plain

    label_width = len(str(max(description.height - 1, 0))) + 1 if settings.show_indices else 0
    lines: list[str] = []

    if settings.show_indices:
        header = "".join(str(c)[-cell_width:].center(cell_width) for c in range(description.width))
        lines.append(" " * (label_width + 1) + header)

    lines.append(" " * label_width + frame_color("┌" + "─" * (description.width * cell_width) + "┐"))

    for r, row in enumerate(description.grid.cells):
        parts: list[str] = []
        if settings.show_indices:
            parts.append(str(r).rjust(label_width - 1) + " ")
        parts.append(frame_color("│"))

        for c, cell in enumerate(row):
            coord = Coordinate(r, c)
            visits = description.visits_at(coord)
            is_current = description.current_position == coord

            if is_current:
                content = position_color(settings.position_char.center(cell_width))
            elif visits:
                arms = frozenset().union(*(shape.arms for shape, _ in visits))
                # The most recent segment through a cell decides its colour
                content = color_map[visits[-1][1]](cell_glyph(arms, cell_width))
            elif cell is CellKind.WALL:
                content = wall_color(settings.wall_char * cell_width)
            else:
                content = settings.path_char * cell_width
            parts.append(content)

        parts.append(frame_color("│"))
        lines.append("".join(parts))

    lines.append(" " * label_width + frame_color("└" + "─" * (description.width * cell_width) + "┘"))

    logger.debug(
        "rendered %dx%d maze with %d visit colours",
        description.height,
        description.width,
        len(visit_colors),
    )
    return "\n".join(lines)


def render_generated(maze: list[list[bool]], wall_char: str = "#", path_char: str = " ") -> str:
    """Render a generated open/wall matrix, one character per cell."""
    return "\n".join("".join(path_char if is_open else wall_char for is_open in row) for row in maze)
