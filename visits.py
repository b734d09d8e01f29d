"""
Line shapes for visited paths.

Each cell on a visited segment gets the shape of the line passing through it:
a half-line at the two ends, and a straight piece or a bend in between,
chosen from the direction the walk enters the cell and the direction it
leaves in.
"""

from __future__ import annotations

from maze_types import Coordinate, Description, Move, VisitDirection, VisitedSegment

__all__ = [
    "HALF_LINES",
    "BEND_SHAPES",
    "ReversedVisitError",
    "relative_direction",
    "bend_shape",
    "visit_direction",
    "segment_shapes",
    "annotate_segment",
]


class ReversedVisitError(ValueError):
    """A visited walk steps straight back onto the cell it came from."""


_MOVES_BY_DELTA: dict[tuple[int, int], Move] = {move.delta: move for move in Move}

# Shape at an end cell, keyed by the direction of its only neighbour
HALF_LINES: dict[Move, VisitDirection] = {
    Move.LEFT: VisitDirection.HORIZONTAL_LEFT,
    Move.RIGHT: VisitDirection.HORIZONTAL_RIGHT,
    Move.UP: VisitDirection.VERTICAL_UP,
    Move.DOWN: VisitDirection.VERTICAL_DOWN,
}

# Shape at an interior cell, keyed by (move into the cell, move out of it).
# The four reversing pairs have no shape.
BEND_SHAPES: dict[tuple[Move, Move], VisitDirection] = {
    (Move.LEFT, Move.LEFT): VisitDirection.HORIZONTAL,
    (Move.LEFT, Move.UP): VisitDirection.BOTTOM_LEFT,
    (Move.LEFT, Move.DOWN): VisitDirection.TOP_LEFT,
    (Move.UP, Move.LEFT): VisitDirection.TOP_RIGHT,
    (Move.UP, Move.UP): VisitDirection.VERTICAL,
    (Move.UP, Move.RIGHT): VisitDirection.TOP_LEFT,
    (Move.RIGHT, Move.UP): VisitDirection.BOTTOM_RIGHT,
    (Move.RIGHT, Move.RIGHT): VisitDirection.HORIZONTAL,
    (Move.RIGHT, Move.DOWN): VisitDirection.TOP_RIGHT,
    (Move.DOWN, Move.LEFT): VisitDirection.BOTTOM_RIGHT,
    (Move.DOWN, Move.RIGHT): VisitDirection.BOTTOM_LEFT,
    (Move.DOWN, Move.DOWN): VisitDirection.VERTICAL,
}


def relative_direction(origin: Coordinate, target: Coordinate) -> Move:
    """
    Direction of target as seen from origin.

    Raises:
        ValueError: If the two coordinates are not adjacent
    """
    move = _MOVES_BY_DELTA.get((target.row - origin.row, target.col - origin.col))
    if move is None:
        raise ValueError(f"{target} is not adjacent to {origin}")
    return move


def bend_shape(incoming: Move, outgoing: Move) -> VisitDirection:
    """
    Shape of an interior cell entered with `incoming` and left with `outgoing`.

    Raises:
        ReversedVisitError: If outgoing undoes incoming
    """
    match BEND_SHAPES.get((incoming, outgoing)):
        case None:
            raise ReversedVisitError(
                f"Visited path reverses direction: {incoming.name} followed by {outgoing.name}"
            )
        case shape:
            return shape


def visit_direction(index: int, trajectory: list[Coordinate] | tuple[Coordinate, ...]) -> VisitDirection:
    """
    Shape of the line through trajectory[index].

    Args:
        index: Position on the trajectory
        trajectory: At least two consecutive adjacent coordinates

    Raises:
        ValueError: If the trajectory is too short or not contiguous around index
        ReversedVisitError: If the walk reverses at index
    """
    if len(trajectory) < 2:
        raise ValueError("A visited path needs at least two cells")

    current = trajectory[index]
    last = len(trajectory) - 1
    if index == 0:
        return HALF_LINES[relative_direction(current, trajectory[1])]
    if index == last:
        return HALF_LINES[relative_direction(current, trajectory[last - 1])]

    incoming = relative_direction(trajectory[index - 1], current)
    outgoing = relative_direction(current, trajectory[index + 1])
    return bend_shape(incoming, outgoing)


def segment_shapes(trajectory: list[Coordinate] | tuple[Coordinate, ...]) -> list[VisitDirection]:
    """Shape of every cell of a trajectory, in order."""
    return [visit_direction(i, trajectory) for i in range(len(trajectory))]


def annotate_segment(description: Description, segment: VisitedSegment) -> None:
    """
    Append the segment's shapes to the visit annotations of its cells.

    All shapes are resolved before the description is touched, so a failing
    segment leaves no partial annotations behind. A cell crossed by several
    segments keeps one entry per crossing.
    """
    shapes = segment_shapes(segment.trajectory)
    for coord, shape in zip(segment.trajectory, shapes):
        description.add_visit(coord, shape, segment.color)
