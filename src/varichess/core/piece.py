"""Piece value object and its time-boxed effect records."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from varichess.core.enums import Color, PieceKind
from varichess.core.types import Square

# Letters that differ from the first letter of the type name.
_SYMBOL_OVERRIDES: dict[PieceKind, str] = {PieceKind.KNIGHT: "N"}


@dataclass(frozen=True, slots=True)
class StunEffect:
    """Piece generates no moves while ``color``'s counter is below the threshold."""

    color: Color
    until_turn_count: int

    def is_active(self, counters: dict[Color, int]) -> bool:
        return counters.get(self.color, 0) < self.until_turn_count


@dataclass(frozen=True, slots=True)
class PossessionEffect:
    """Temporary control of an enemy piece by ``controller_color``."""

    controller_color: Color
    original_color: Color
    expires_on_turn_count: int

    def is_expired(self, counters: dict[Color, int]) -> bool:
        return counters.get(self.controller_color, 0) >= self.expires_on_turn_count


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object for one piece on the board."""

    id: int
    name: str
    color: Color
    x: int
    y: int
    move_count: int = 0
    stun: StunEffect | None = None
    possession: PossessionEffect | None = None
    value_override: int | None = None
    # Ability kind resolved once from the type name (``None`` if custom).
    kind: PieceKind | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.move_count < 0:
            raise ValueError(f"Negative move count for piece {self.id}")
        object.__setattr__(self, "kind", PieceKind.lookup(self.name))

    # ── Derived attributes ───────────────────────────────────────────────

    @property
    def square(self) -> Square:
        return (self.x, self.y)

    @property
    def is_king(self) -> bool:
        return self.kind is PieceKind.KING

    @property
    def unmoved(self) -> bool:
        return self.move_count <= 0

    @property
    def symbol(self) -> str:
        """One-letter symbol, upper-case for white."""
        letter = _SYMBOL_OVERRIDES.get(self.kind) or self.name[:1] or "?"
        return letter.upper() if self.color == Color.WHITE else letter.lower()

    # ── Copy helpers ─────────────────────────────────────────────────────

    def moved_to(self, sq: Square) -> Piece:
        """Copy relocated to *sq* with the move counter bumped."""
        return replace(self, x=sq[0], y=sq[1], move_count=self.move_count + 1)

    def with_stun(self, stun: StunEffect | None) -> Piece:
        return replace(self, stun=stun)

    def with_possession(self, possession: PossessionEffect | None, color: Color) -> Piece:
        return replace(self, possession=possession, color=color)

    def __str__(self) -> str:
        return f"{self.color} {self.name}#{self.id}@{self.x},{self.y}"
