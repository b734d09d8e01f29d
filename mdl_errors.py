"""
Errors raised while compiling a maze description.

Every error is a ValueError carrying the 1-based line number it was raised
for (when known) and a short reason.
"""

from __future__ import annotations

__all__ = [
    "DescriptionError",
    "VersionMismatchError",
    "UndefinedSizeError",
    "DescriptionSyntaxError",
    "UnexpectedStatementError",
    "UnresolvedReferenceError",
    "OutOfRangeError",
]


class DescriptionError(ValueError):
    """Base class for maze description compilation failures."""

    def __init__(self, reason: str, line_number: int | None = None) -> None:
        self.reason = reason
        self.line_number = line_number
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line_number is None:
            return self.reason
        return f"Line {self.line_number}: {self.reason}"

    def at_line(self, line_number: int) -> DescriptionError:
        """Copy of this error attributed to a line."""
        return type(self)(self.reason, line_number)


class VersionMismatchError(DescriptionError):
    """The description targets a language version this compiler cannot read."""


class UndefinedSizeError(DescriptionError):
    """A grid statement appeared before the maze size was set."""


class DescriptionSyntaxError(DescriptionError):
    """A statement is malformed."""


class UnexpectedStatementError(DescriptionSyntaxError):
    """A line does not start like any known statement."""


class UnresolvedReferenceError(DescriptionError):
    """A path, entrance or exit was referenced before being defined."""


class OutOfRangeError(DescriptionError):
    """A row or coordinate lies outside the grid."""
