"""Move candidate value objects."""

from __future__ import annotations

from dataclasses import dataclass

from varichess.core.enums import MoveKind
from varichess.core.types import Square


@dataclass(frozen=True, slots=True)
class SecondaryMove:
    """A second piece relocated by the same move (castling rook, launched ally)."""

    piece_id: int
    to_sq: Square


@dataclass(frozen=True, slots=True)
class PossessionOrder:
    """Target and duration of a possession move."""

    target_id: int
    turns: int


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable candidate move for a single primary piece.

    ``to_sq`` is where the action lands: the mover's destination for
    relocating kinds, the target square for stationary kinds, the ally's
    landing square for launches and the final square of a berserk chain.
    """

    to_sq: Square
    kind: MoveKind = MoveKind.NORMAL
    captures: tuple[int, ...] = ()
    secondary: SecondaryMove | None = None
    possession: PossessionOrder | None = None
    path: tuple[Square, ...] = ()

    @property
    def capture_id(self) -> int | None:
        """Primary (first) captured piece id."""
        return self.captures[0] if self.captures else None

    @property
    def is_capture(self) -> bool:
        return bool(self.captures)

    @property
    def dedup_key(self) -> tuple:
        secondary_id = self.secondary.piece_id if self.secondary is not None else None
        return (self.to_sq, self.kind, self.capture_id, secondary_id, self.captures)

    def __str__(self) -> str:
        base = f"{self.kind}->{self.to_sq[0]},{self.to_sq[1]}"
        if self.captures:
            base += "x" + "x".join(str(pid) for pid in self.captures)
        return base


def dedup_moves(moves: list[Move]) -> list[Move]:
    """Drop repeated candidates, keeping first-seen order."""
    seen: set[tuple] = set()
    unique: list[Move] = []
    for move in moves:
        key = move.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(move)
    return unique
