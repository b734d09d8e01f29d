"""
Move-string grammar.

A move clause is a sequence of direction codes terminated by a semicolon:

    l, u, r, d     one step left, up, right or down
    x(N)           the code x repeated N times (N a positive decimal)

Whitespace is ignored and codes are case-insensitive, so "L(3) u(2) rr;"
expands to "llluurr". An expanded string may never step straight back the
way it came ("lr", "rl", "ud", "du").
"""

from __future__ import annotations

import re

from maze_types import Move

__all__ = [
    "MOVE_CODES",
    "MoveSyntaxError",
    "ReversedMoveError",
    "expand_moves",
    "validate_moves",
    "parse_moves",
    "opposite",
]

MOVE_CODES = frozenset(move.code for move in Move)

_COUNT = re.compile(r"[0-9]+")


class MoveSyntaxError(ValueError):
    """A move clause does not follow the grammar."""


class ReversedMoveError(MoveSyntaxError):
    """A move string doubles back on itself."""


def opposite(code: str) -> str:
    """Code of the move that undoes `code`."""
    return Move(code.lower()).opposite.code


def expand_moves(clause: str, max_count: int | None = None) -> str:
    """
    Expand the repeat counts of a move clause.

    Args:
        clause: Move clause ending with ';', e.g. "l(3)u(2)rr;"
        max_count: Largest repeat count accepted (unbounded when None)

    Returns:
        The expanded lower-case move string, e.g. "llluurr"

    Raises:
        MoveSyntaxError: If the clause is not well formed
    """
    text = "".join(clause.split()).lower()
    if not text.endswith(";"):
        raise MoveSyntaxError(f"Move clause must end with ';': '{clause}'")

    body = text[:-1]
    expanded: list[str] = []
    i = 0
    while i < len(body):
        code = body[i]
        if code not in MOVE_CODES:
            raise MoveSyntaxError(
                f"Invalid move code '{code}' at position {i} in '{clause}'\n"
                f"  Valid codes: l, u, r, d (optionally followed by a count, e.g. 'l(3)')"
            )

        following = text[i + 1]
        if following == "(":
            close = body.find(")", i + 2)
            if close < 0:
                raise MoveSyntaxError(f"Unclosed repeat count after '{code}' in '{clause}'")
            count = body[i + 2 : close]
            if not _COUNT.fullmatch(count) or int(count) == 0:
                raise MoveSyntaxError(
                    f"Invalid repeat count '{count}' after '{code}' in '{clause}'\n"
                    f"  Counts must be positive integers"
                )
            if max_count is not None and int(count) > max_count:
                raise MoveSyntaxError(
                    f"Repeat count {count} after '{code}' exceeds the limit of {max_count}"
                )
            expanded.append(code * int(count))
            i = close + 1
        elif following == ";" or following in MOVE_CODES:
            expanded.append(code)
            i += 1
        else:
            raise MoveSyntaxError(
                f"Unexpected '{following}' after move code '{code}' in '{clause}'"
            )

    return "".join(expanded)


def validate_moves(moves: str) -> str:
    """
    Check that an expanded move string never reverses direction.

    Returns:
        The move string, unchanged

    Raises:
        ReversedMoveError: On an adjacent pair of opposite moves
    """
    for i, (first, second) in enumerate(zip(moves, moves[1:])):
        if opposite(first) == second.lower():
            raise ReversedMoveError(
                f"Move string reverses direction at position {i}: '{first}{second}' in '{moves}'"
            )
    return moves


def parse_moves(clause: str, max_count: int | None = None) -> str:
    """Expand a move clause and validate the result."""
    return validate_moves(expand_moves(clause, max_count))
