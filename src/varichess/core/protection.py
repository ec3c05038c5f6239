"""ProtectionTauntResolver — capture shields and forced taunt responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from varichess.core.effects import EffectsEngine
from varichess.core.enums import Color, ProtectMode
from varichess.core.types import walk

if TYPE_CHECKING:
    from varichess.core.board import BoardState
    from varichess.core.catalog import PatternCatalog
    from varichess.core.move import Move
    from varichess.core.piece import Piece


@dataclass(frozen=True, slots=True)
class TauntOutcome:
    """Move map after the taunt rule plus whether it narrowed anything."""

    moves_by_piece: dict[int, list[Move]]
    restricting: bool


class ProtectionTauntResolver:
    """Computes protected piece ids and applies the taunt rule."""

    __slots__ = ("_catalog",)

    def __init__(self, catalog: PatternCatalog) -> None:
        self._catalog = catalog

    def protected_ids(self, board: BoardState) -> frozenset[int]:
        """Ids of every piece shielded from capture by an allied protector."""
        protected: set[int] = set()
        for protector in board.pieces:
            spec = self._catalog.protect_spec(protector.name, protector.color)
            if spec is None:
                continue
            for direction in spec.directions:
                for sq in walk(protector.square, direction, board.size, spec.max_steps):
                    occupant = board.piece_at(sq)
                    if occupant is None:
                        continue
                    if occupant.color != protector.color:
                        break
                    protected.add(occupant.id)
                    if spec.mode == ProtectMode.LINE:
                        break
        return frozenset(protected)

    def taunt_sources(
        self,
        board: BoardState,
        color: Color,
        protected: frozenset[int],
    ) -> list[Piece]:
        """Opposing taunters that *color* may be forced to capture."""
        counters = board.turn_counters
        return [
            p
            for p in board.pieces_of(color.opposite)
            if self._catalog.is_taunting(p.name, p.color)
            and p.id not in protected
            and not EffectsEngine.is_stunned(p, counters)
        ]

    def taunt_forced(
        self,
        moves_by_piece: dict[int, list[Move]],
        board: BoardState,
        color: Color,
        protected: frozenset[int],
    ) -> TauntOutcome:
        """Narrow the side's moves to taunter captures when any exist."""
        taunt_ids = {p.id for p in self.taunt_sources(board, color, protected)}
        if not taunt_ids:
            return TauntOutcome(moves_by_piece, False)

        filtered = {
            pid: [m for m in moves if taunt_ids.intersection(m.captures)]
            for pid, moves in moves_by_piece.items()
        }
        if not any(filtered.values()):
            return TauntOutcome(moves_by_piece, False)
        return TauntOutcome(filtered, True)
