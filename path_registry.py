"""
Registry of the paths defined while compiling one maze description.

A path can start where another, already registered path is after a number
of its moves. The registry only sees paths registered before the lookup, so
self and forward references are rejected.
"""

from __future__ import annotations

from maze_types import Coordinate, PathDefinition
from mdl_errors import DescriptionSyntaxError, UnresolvedReferenceError

__all__ = ["PathRegistry"]


class PathRegistry:
    """Path id -> (origin, expanded move string) for a single compilation."""

    def __init__(self) -> None:
        self._paths: dict[int, PathDefinition] = {}

    def __contains__(self, path_id: object) -> bool:
        return path_id in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def register(self, path_id: int, origin: Coordinate, moves: str) -> PathDefinition:
        """
        Add a path. Entries cannot be replaced once registered.

        Only the origin's position is kept, so later moves of the caller's
        coordinate do not leak into the registry.
        """
        if path_id in self._paths:
            raise DescriptionSyntaxError(f"path {path_id} is already defined")
        definition = PathDefinition.at(path_id, origin, moves)
        self._paths[path_id] = definition
        return definition

    def get(self, path_id: int) -> PathDefinition:
        try:
            return self._paths[path_id]
        except KeyError:
            raise UnresolvedReferenceError(
                f"path {path_id} is not defined"
                + (f" (defined: {', '.join(str(p) for p in sorted(self._paths))})" if self._paths else "")
            ) from None

    def origin(self, path_id: int) -> Coordinate:
        return self.get(path_id).origin

    def moves(self, path_id: int) -> str:
        return self.get(path_id).moves

    def trajectory(self, path_id: int) -> list[Coordinate]:
        """Every coordinate the path touches, origin first."""
        return self.get(path_id).trajectory()

    def resolve_offset(self, path_id: int, offset: int, current_id: int | None = None) -> Coordinate:
        """
        Position on a registered path after `offset` of its moves.

        Args:
            path_id: Path to replay
            offset: Number of moves to replay, 0 meaning the path's origin
            current_id: Id of the path being defined, which may not refer to itself

        Raises:
            UnresolvedReferenceError: On a self reference, an unknown path,
                or an offset outside the path
        """
        if path_id == current_id:
            raise UnresolvedReferenceError(f"path {path_id} cannot start on itself")
        definition = self.get(path_id)
        if not 0 <= offset <= len(definition.moves):
            raise UnresolvedReferenceError(
                f"offset {offset} is outside path {path_id} "
                f"(valid offsets: 0..{len(definition.moves)})"
            )
        return definition.trajectory(offset)[-1]
