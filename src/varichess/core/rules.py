"""Legality: attacked squares, check detection and move filtering."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from varichess.core.enums import Color
from varichess.core.move_generator import MoveGenerator
from varichess.core.protection import ProtectionTauntResolver
from varichess.settings import DEFAULT_SETTINGS, EngineSettings

if TYPE_CHECKING:
    from varichess.core.board import BoardState
    from varichess.core.catalog import PatternCatalog
    from varichess.core.move import Move
    from varichess.core.piece import Piece
    from varichess.core.types import Square

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LegalMoveSet:
    """Legal moves of one side for the current turn."""

    color: Color
    moves_by_piece: dict[int, list[Move]] = field(default_factory=dict)
    taunt_restricting: bool = False
    taunt_sources: list[Piece] = field(default_factory=list)

    def for_piece(self, piece_id: int) -> list[Move]:
        return self.moves_by_piece.get(piece_id, [])

    def count(self) -> int:
        return sum(len(moves) for moves in self.moves_by_piece.values())

    def __bool__(self) -> bool:
        return any(self.moves_by_piece.values())


class Rules:
    """Rule-checker bound to a pattern catalog.

    Every method takes the snapshot to judge, so one instance serves any
    number of positions. Legality is decided by full re-simulation: each
    candidate is applied and the resulting snapshot checked for check.
    """

    __slots__ = ("_catalog", "_settings", "_resolver")

    def __init__(
        self,
        catalog: PatternCatalog,
        settings: EngineSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._catalog = catalog
        self._settings = settings
        self._resolver = ProtectionTauntResolver(catalog)

    @property
    def resolver(self) -> ProtectionTauntResolver:
        return self._resolver

    def generator(
        self, board: BoardState, protected_ids: frozenset[int] | None = None
    ) -> MoveGenerator:
        if protected_ids is None:
            protected_ids = self._resolver.protected_ids(board)
        return MoveGenerator(board, self._catalog, protected_ids, self._settings)

    # -- Attack detection ---------------------------------------------------

    def attacked_squares(self, board: BoardState, color: Color) -> set[Square]:
        """Squares covered by *color*'s non-stunned pieces."""
        return self.generator(board).attacked_squares(color)

    def is_in_check(self, board: BoardState, color: Color) -> bool:
        """Is any king of *color* on a square the opponent covers?"""
        kings = board.kings(color)
        if not kings:
            return False
        attacked = self.attacked_squares(board, color.opposite)
        return any(k.square in attacked for k in kings)

    # -- Legal moves --------------------------------------------------------

    def legal_moves(
        self,
        board: BoardState,
        piece: Piece,
        protected_ids: frozenset[int] | None = None,
    ) -> list[Move]:
        """Candidates for *piece* that do not leave its own king in check."""
        gen = self.generator(board, protected_ids)
        legal: list[Move] = []
        for move in gen.generate(piece):
            after = board.apply_move(piece, move)
            if not self.is_in_check(after, piece.color):
                legal.append(move)
        return legal

    def legal_moves_for_color(self, board: BoardState, color: Color) -> LegalMoveSet:
        """Legal moves for every piece of *color*, after the taunt rule."""
        protected = self._resolver.protected_ids(board)
        moves_by_piece = {
            piece.id: self.legal_moves(board, piece, protected)
            for piece in board.pieces_of(color)
        }
        outcome = self._resolver.taunt_forced(moves_by_piece, board, color, protected)
        if outcome.restricting:
            _LOGGER.debug("%s is forced to answer a taunt", color)
        return LegalMoveSet(
            color=color,
            moves_by_piece=outcome.moves_by_piece,
            taunt_restricting=outcome.restricting,
            taunt_sources=self._resolver.taunt_sources(board, color, protected),
        )
