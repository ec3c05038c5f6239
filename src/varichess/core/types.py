"""Square type alias, direction tables and coordinate helpers.

Board layout (row 0 at the top, black's back rank)::

    (0, 0)     (1, 0)     ...  (N-1, 0)
    ...
    (0, N-1)   (1, N-1)   ...  (N-1, N-1)

White starts on the bottom rows and its pawns advance toward ``y = 0``.
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = tuple[int, int]  # (x, y)
Vector: TypeAlias = tuple[int, int]  # (dx, dy)

ORTHOGONAL_DIRS: tuple[Vector, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL_DIRS: tuple[Vector, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
QUEEN_DIRS: tuple[Vector, ...] = ORTHOGONAL_DIRS + DIAGONAL_DIRS
VERTICAL_DIRS: tuple[Vector, ...] = ((0, 1), (0, -1))
KNIGHT_OFFSETS: tuple[Vector, ...] = (
    (1, 2),
    (2, 1),
    (2, -1),
    (1, -2),
    (-1, -2),
    (-2, -1),
    (-2, 1),
    (-1, 2),
)


def in_bounds(sq: Square, size: int) -> bool:
    """Whether *sq* lies on an ``size`` x ``size`` board."""
    x, y = sq
    return 0 <= x < size and 0 <= y < size


def offset(sq: Square, vector: Vector, steps: int = 1) -> Square:
    """Square reached from *sq* after *steps* repetitions of *vector*."""
    return (sq[0] + vector[0] * steps, sq[1] + vector[1] * steps)


def walk(sq: Square, vector: Vector, size: int, limit: int | None = None):
    """Yield squares outward from *sq* along *vector* until the edge.

    *limit* caps the number of steps; ``None`` walks to the edge.
    """
    steps = size if limit is None else limit
    x, y = sq
    dx, dy = vector
    for _ in range(steps):
        x += dx
        y += dy
        if not (0 <= x < size and 0 <= y < size):
            return
        yield (x, y)


def parse_square(value: str | Square) -> Square:
    """Parse ``"x,y"`` (the transport's format) or pass a tuple through."""
    if isinstance(value, tuple):
        return value
    parts = str(value).split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid square: {value!r}")
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError:
        raise ValueError(f"Invalid square: {value!r}") from None
