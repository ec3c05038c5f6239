"""Game state machine — validates, applies and persists committed moves."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from varichess.core.board import BoardState
from varichess.core.effects import EffectsEngine
from varichess.core.enums import Color, MoveKind, PieceKind
from varichess.core.rules import LegalMoveSet, Rules
from varichess.errors import IllegalDestination, PieceNotFound, WrongColor, WrongTurn
from varichess.settings import DEFAULT_SETTINGS, EngineSettings

if TYPE_CHECKING:
    from varichess.core.catalog import PatternCatalog
    from varichess.core.move import Move
    from varichess.core.piece import Piece
    from varichess.core.types import Square
    from varichess.game.interfaces import IBoardStore

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Outcome of a successful :meth:`GameStateMachine.commit`."""

    piece: Piece  # the mover as it stood before the move
    move: Move
    before: BoardState
    board: BoardState

    @property
    def captured_ids(self) -> tuple[int, ...]:
        return self.move.captures


class GameStateMachine:
    """Turns validated move requests into new persisted snapshots.

    This is a pure logic class: no threading, no transport. Callers must
    not interleave two commits against the same store.
    """

    __slots__ = ("_store", "_rules", "_effects", "_settings")

    def __init__(
        self,
        store: IBoardStore,
        catalog: PatternCatalog,
        settings: EngineSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._store = store
        self._rules = Rules(catalog, settings)
        self._effects = EffectsEngine(settings)
        self._settings = settings

    @property
    def rules(self) -> Rules:
        return self._rules

    # ── Snapshot access ──────────────────────────────────────────────────

    def current(self) -> BoardState:
        """Current snapshot with expired effects swept.

        An empty store is initialised with the default layout.
        """
        board = self._store.load()
        if board is None:
            return self.reset(self._settings.default_board_size)
        swept = self._effects.sweep(board)
        if swept is not board:
            swept = swept.evolve(version=board.version + 1)
            self._store.save(swept)
        return swept

    def reset(self, size: int | None = None) -> BoardState:
        """Replace the game with the default layout on a ``size`` board."""
        if size is None:
            previous = self._store.load()
            size = previous.size if previous is not None else self._settings.default_board_size
        board = BoardState.initial(self._settings.clamp_board_size(size))
        self._store.save(board)
        _LOGGER.info("Board reset to %dx%d", board.size, board.size)
        return board

    def legal_moves(self, color: Color, board: BoardState | None = None) -> LegalMoveSet:
        if board is None:
            board = self.current()
        return self._rules.legal_moves_for_color(board, color)

    # ── Commit pipeline ──────────────────────────────────────────────────

    def commit(
        self,
        from_sq: Square,
        to_sq: Square,
        acting_color: Color,
        *,
        kind: MoveKind | str | None = None,
        captures: Sequence[int] | None = None,
        secondary_id: int | None = None,
    ) -> CommitResult:
        """Validate and play one move for *acting_color*.

        ``kind``, ``captures`` and ``secondary_id`` narrow the choice when
        several legal moves of the piece share *to_sq*; otherwise the first
        legal match is played.

        Raises:
            PieceNotFound: Nothing stands on *from_sq*.
            WrongColor: The piece belongs to the other side.
            WrongTurn: *acting_color* is not to move.
            IllegalDestination: No legal move matches the request.
        """
        board = self.current()

        piece = board.piece_at(from_sq)
        if piece is None:
            raise PieceNotFound(from_sq)
        if piece.color != acting_color:
            raise WrongColor(piece.color, acting_color)
        if board.turn != acting_color:
            raise WrongTurn(acting_color, board.turn)

        legal = self._rules.legal_moves_for_color(board, acting_color).for_piece(piece.id)
        move = _select(legal, to_sq, kind, captures, secondary_id)
        if move is None:
            raise IllegalDestination(from_sq, to_sq)

        after = self._advance(board, piece, move, acting_color)
        self._store.save(after)
        _LOGGER.info("%s %s played %s (v%d)", acting_color, piece.name, move, after.version)
        return CommitResult(piece=piece, move=move, before=board, board=after)

    def _advance(
        self, board: BoardState, piece: Piece, move: Move, acting_color: Color
    ) -> BoardState:
        # Captures are removed by apply_move, before any effect is swept.
        after = board.apply_move(piece, move)

        counters = dict(board.turn_counters)
        counters[acting_color] += 1

        if piece.kind is PieceKind.DOOMFIST and move.captures:
            mover = after.piece_by_id(piece.id)
            if mover is not None:
                stunned = self._effects.stun(mover, self._settings.doomfist_stun_turns, counters)
                after = after.with_pieces(
                    stunned if p.id == piece.id else p for p in after.pieces
                )

        after = after.evolve(
            turn=acting_color.opposite,
            turn_counters=counters,
            version=board.version + 1,
        )
        return self._effects.sweep(after)


def _select(
    legal: list[Move],
    to_sq: Square,
    kind: MoveKind | str | None,
    captures: Sequence[int] | None,
    secondary_id: int | None,
) -> Move | None:
    try:
        wanted_kind = MoveKind(kind) if kind is not None else None
    except ValueError:
        return None
    wanted_captures = tuple(captures) if captures is not None else None
    for move in legal:
        if move.to_sq != to_sq:
            continue
        if wanted_kind is not None and move.kind != wanted_kind:
            continue
        if wanted_captures is not None and move.captures != wanted_captures:
            continue
        if secondary_id is not None and (
            move.secondary is None or move.secondary.piece_id != secondary_id
        ):
            continue
        return move
    return None
