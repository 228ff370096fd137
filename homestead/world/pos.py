"""Pos — integer grid coordinate.

Used both for parcel positions in world space and for cell positions
inside a parcel.
"""

from __future__ import annotations

from typing import NamedTuple

_ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Pos(NamedTuple):
    """A hashable ``(x, y)`` coordinate."""

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Pos:
        """Return this position shifted by ``(dx, dy)``."""
        return Pos(self.x + dx, self.y + dy)

    def neighbours(self) -> tuple[Pos, ...]:
        """Return the four orthogonal neighbours."""
        return tuple(self.offset(dx, dy) for dx, dy in _ORTHOGONAL)

    def adjacent(self) -> tuple[Pos, ...]:
        """Return the four orthogonal neighbours followed by itself."""
        return (*self.neighbours(), self)

    def chebyshev(self) -> int:
        """Return the ring distance from the origin."""
        return max(abs(self.x), abs(self.y))

    def in_bounds(self, size: int) -> bool:
        """Return True if both coordinates lie in ``0..size``."""
        return 0 <= self.x < size and 0 <= self.y < size

    def __str__(self) -> str:
        return f"({self.x},{self.y})"
