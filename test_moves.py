"""Tests for move-string grammar and coordinate movement."""

import pytest

from maze_types import Coordinate, Move
from moves import (
    MoveSyntaxError,
    ReversedMoveError,
    expand_moves,
    opposite,
    parse_moves,
    validate_moves,
)


class TestExpandMoves:
    """Tests for repeat-count expansion."""

    def test_repeat_counts(self) -> None:
        """Counted codes are repeated, plain codes kept."""
        assert expand_moves("l(3)u(2)rr;") == "llluurr"

    def test_case_insensitive(self) -> None:
        """Upper-case codes expand to the same lower-case string."""
        assert expand_moves("L(3)U(2)RR;") == "llluurr"

    def test_whitespace_ignored(self) -> None:
        """Whitespace anywhere in the clause is dropped."""
        assert expand_moves(" l ( 3 ) u\t(2) r r ; ") == "llluurr"

    def test_preserves_order_and_count(self) -> None:
        """Expansion concatenates tokens in order."""
        assert expand_moves("r(2)d(10)l;") == "rr" + "d" * 10 + "l"

    def test_multi_digit_count(self) -> None:
        """Counts may have several digits."""
        assert expand_moves("d(12);") == "d" * 12

    def test_empty_clause(self) -> None:
        """A bare semicolon is an empty move string."""
        assert expand_moves(";") == ""

    def test_missing_semicolon(self) -> None:
        """The clause must be terminated."""
        with pytest.raises(MoveSyntaxError, match="must end with ';'"):
            expand_moves("lll")

    def test_unclosed_count(self) -> None:
        """A count without a closing parenthesis fails."""
        with pytest.raises(MoveSyntaxError, match="Unclosed"):
            expand_moves("l(3;")

    def test_non_numeric_count(self) -> None:
        """Counts must be decimal numbers."""
        with pytest.raises(MoveSyntaxError, match="Invalid repeat count"):
            expand_moves("l(x);")

    def test_zero_count(self) -> None:
        """Counts must be positive."""
        with pytest.raises(MoveSyntaxError, match="Invalid repeat count"):
            expand_moves("l(0);")

    def test_count_limit(self) -> None:
        """Counts above max_count are rejected before expansion."""
        assert expand_moves("l(3)u;", max_count=3) == "lllu"
        with pytest.raises(MoveSyntaxError, match="exceeds the limit of 3"):
            expand_moves("l(4);", max_count=3)

    def test_huge_count_with_limit(self) -> None:
        """Counts too large to expand fail as grammar errors."""
        with pytest.raises(MoveSyntaxError, match="exceeds the limit"):
            parse_moves("d(99999999999999999999);", max_count=50)

    def test_non_ascii_count(self) -> None:
        """Counts use ASCII digits only."""
        with pytest.raises(MoveSyntaxError, match="Invalid repeat count"):
            expand_moves("l(\u0663);")

    def test_invalid_code(self) -> None:
        """Only l, u, r and d are moves."""
        with pytest.raises(MoveSyntaxError, match="Invalid move code 'x'"):
            expand_moves("xl;")

    def test_invalid_follower(self) -> None:
        """A code followed by something other than '(', a code or ';' fails."""
        with pytest.raises(MoveSyntaxError, match="Unexpected '3'"):
            expand_moves("l3;")

    def test_syntax_errors_are_value_errors(self) -> None:
        """Grammar errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            expand_moves("q;")


class TestValidateMoves:
    """Tests for the no-reversal rule."""

    @pytest.mark.parametrize("moves", ["lr", "rl", "ud", "du", "llluurrd" + "u"])
    def test_reversals_rejected(self, moves: str) -> None:
        """Any adjacent opposite pair is rejected."""
        with pytest.raises(ReversedMoveError):
            validate_moves(moves)

    @pytest.mark.parametrize("moves", ["lu", "ll", "ruld", "", "d"])
    def test_valid_strings_returned(self, moves: str) -> None:
        """Strings without reversals are returned unchanged."""
        assert validate_moves(moves) == moves

    def test_reversal_across_repeat_boundary(self) -> None:
        """The check runs over the expanded string."""
        with pytest.raises(ReversedMoveError, match="reverses direction"):
            parse_moves("l(3)r(2);")

    def test_opposite(self) -> None:
        """Opposites pair left/right and up/down."""
        assert opposite("l") == "r"
        assert opposite("r") == "l"
        assert opposite("u") == "d"
        assert opposite("D") == "u"


class TestCoordinateMovement:
    """Tests for Coordinate.move_to and is_adjacent."""

    def test_trajectory(self) -> None:
        """Every intermediate position is returned, start first."""
        start = Coordinate(2, 2)
        trajectory = start.move_to("rrdl")
        assert trajectory == [
            Coordinate(2, 2),
            Coordinate(2, 3),
            Coordinate(2, 4),
            Coordinate(3, 4),
            Coordinate(3, 3),
        ]

    def test_length_preserving(self) -> None:
        """Trajectory length is one more than the number of moves."""
        moves = expand_moves("l(4)u(3)r(2);")
        assert len(Coordinate(10, 10).move_to(moves)) == len(moves) + 1

    def test_mutates_in_place(self) -> None:
        """The coordinate ends at the final position."""
        coord = Coordinate(5, 5)
        coord.move_to("uul")
        assert coord == Coordinate(3, 4)

    def test_snapshot_preserves_origin(self) -> None:
        """Moving a copy leaves the original alone."""
        origin = Coordinate(1, 1)
        origin.copy().move_to("dd")
        assert origin == Coordinate(1, 1)

    def test_trajectory_entries_are_independent(self) -> None:
        """Trajectory entries do not alias the moving coordinate."""
        coord = Coordinate(0, 0)
        trajectory = coord.move_to("r")
        coord.move_to("d")
        assert trajectory == [Coordinate(0, 0), Coordinate(0, 1)]

    def test_deterministic(self) -> None:
        """The same moves from the same start give the same trajectory."""
        assert Coordinate(3, 3).move_to("ldru") == Coordinate(3, 3).move_to("ldru")

    def test_empty_moves(self) -> None:
        """No moves yields just the start."""
        assert Coordinate(4, 7).move_to("") == [Coordinate(4, 7)]

    def test_no_bounds_checking(self) -> None:
        """Negative positions are representable."""
        assert Coordinate(0, 0).move_to("lu")[-1] == Coordinate(-1, -1)

    def test_invalid_code(self) -> None:
        """Non-move characters are rejected."""
        with pytest.raises(ValueError):
            Coordinate(0, 0).move_to("x")

    @pytest.mark.parametrize(
        "other,expected",
        [
            (Coordinate(1, 2), True),
            (Coordinate(3, 2), True),
            (Coordinate(2, 1), True),
            (Coordinate(2, 3), True),
            (Coordinate(2, 2), False),
            (Coordinate(3, 3), False),
            (Coordinate(2, 4), False),
        ],
    )
    def test_is_adjacent(self, other: Coordinate, expected: bool) -> None:
        """Adjacency means Manhattan distance 1, in either direction."""
        here = Coordinate(2, 2)
        assert here.is_adjacent(other) is expected
        assert other.is_adjacent(here) is expected

    def test_move_deltas(self) -> None:
        """Each move changes one axis by one."""
        assert Move.LEFT.delta == (0, -1)
        assert Move.UP.delta == (-1, 0)
        assert Move.RIGHT.delta == (0, 1)
        assert Move.DOWN.delta == (1, 0)
