"""Pseudo-legal move generation: catalog patterns plus piece abilities."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from varichess.core.berserk import expand_chains
from varichess.core.effects import EffectsEngine
from varichess.core.enums import Color, MoveKind, PieceKind
from varichess.core.move import Move, PossessionOrder, SecondaryMove, dedup_moves
from varichess.core.protection import ProtectionTauntResolver
from varichess.core.types import QUEEN_DIRS, Square, offset, walk
from varichess.settings import DEFAULT_SETTINGS, EngineSettings

if TYPE_CHECKING:
    from varichess.core.board import BoardState
    from varichess.core.catalog import PatternCatalog
    from varichess.core.patterns import PatternDefinition
    from varichess.core.piece import Piece

_LOGGER = logging.getLogger(__name__)


def capture_allowed(attacker: Piece, target: Piece, protected_ids: frozenset[int]) -> bool:
    """Whether *attacker* may take *target* at all.

    A possessed piece may never take the king of the side it was taken from.
    """
    if attacker.color == target.color:
        return False
    if target.id in protected_ids:
        return False
    possession = attacker.possession
    if possession is not None and target.is_king and target.color == possession.original_color:
        return False
    return True


class MoveGenerator:
    """Generates candidate moves for pieces on one :class:`BoardState`.

    Candidates are pseudo-legal: they may leave the mover's own king in
    check. :class:`~varichess.core.rules.Rules` filters them.
    """

    __slots__ = ("_board", "_catalog", "_settings", "_effects", "_protected")

    def __init__(
        self,
        board: BoardState,
        catalog: PatternCatalog,
        protected_ids: frozenset[int] | None = None,
        settings: EngineSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._board = board
        self._catalog = catalog
        self._settings = settings
        self._effects = EffectsEngine(settings)
        if protected_ids is None:
            protected_ids = ProtectionTauntResolver(catalog).protected_ids(board)
        self._protected = protected_ids

    @property
    def protected_ids(self) -> frozenset[int]:
        return self._protected

    # -- Public API ---------------------------------------------------------

    def generate(self, piece: Piece, for_attack: bool = False) -> list[Move]:
        """All candidate moves for *piece*.

        With ``for_attack`` only square-covering moves are produced: no
        move-only steps, no first-move patterns, no abilities and no
        castling. Capture-only offsets then count even when empty.
        """
        if EffectsEngine.is_stunned(piece, self._board.turn_counters):
            return []

        moves = self.base_moves(piece, for_attack)
        if not for_attack and piece.kind is not None:
            ability = _ABILITIES.get(piece.kind)
            if ability is not None:
                ability(self, piece, moves)
        return dedup_moves(moves)

    def base_moves(self, piece: Piece, for_attack: bool = False) -> list[Move]:
        """Moves produced by the piece's catalog patterns alone."""
        moves: list[Move] = []
        for pattern in self._catalog.patterns_for(piece.name, piece.color):
            self._expand(piece, pattern, for_attack, moves)
            if pattern.first_move is not None and piece.unmoved and not for_attack:
                self._expand(piece, pattern.first_move, for_attack, moves)
        return moves

    def attacked_squares(self, color: Color) -> set[Square]:
        """Squares covered by any non-stunned piece of *color*."""
        attacked: set[Square] = set()
        for piece in self._board.pieces_of(color):
            for move in self.generate(piece, for_attack=True):
                attacked.add(move.to_sq)
        return attacked

    def capture_allowed(self, attacker: Piece, target: Piece) -> bool:
        return capture_allowed(attacker, target, self._protected)

    # -- Pattern expansion (private) ---------------------------------------

    def _expand(
        self,
        piece: Piece,
        pattern: PatternDefinition,
        for_attack: bool,
        moves: list[Move],
    ) -> None:
        board = self._board
        size = board.size
        origin = piece.square

        limit = pattern.effective_ray_limit(size)
        for direction in pattern.rays:
            for sq in walk(origin, direction, size, limit):
                target = board.piece_at(sq)
                if target is None:
                    moves.append(Move(sq))
                    continue
                if pattern.ray_captures and self.capture_allowed(piece, target):
                    moves.append(Move(sq, captures=(target.id,)))
                break

        for vector in pattern.leaps:
            sq = offset(origin, vector)
            if not board.in_bounds(sq):
                continue
            target = board.piece_at(sq)
            if target is None:
                moves.append(Move(sq))
            elif self.capture_allowed(piece, target):
                moves.append(Move(sq, captures=(target.id,)))

        if not for_attack:
            for vector in pattern.move_only:
                sq = offset(origin, vector)
                if board.in_bounds(sq) and board.is_empty(sq):
                    moves.append(Move(sq))

        for vector in pattern.capture_only:
            sq = offset(origin, vector)
            if not board.in_bounds(sq):
                continue
            target = board.piece_at(sq)
            if target is None:
                if for_attack:
                    moves.append(Move(sq))
            elif self.capture_allowed(piece, target):
                moves.append(Move(sq, captures=(target.id,)))

    def _can_strike(self, piece: Piece, target: Piece) -> bool:
        # Abilities never take kings.
        return not target.is_king and self.capture_allowed(piece, target)

    # -- Abilities (private) -----------------------------------------------

    def _gen_doomfist(self, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        for y in range(board.size):
            if y == piece.y:
                continue
            for x in range(board.size):
                if x == piece.x:
                    continue
                target = board.piece_at((x, y))
                if target is None:
                    moves.append(Move((x, y)))
                elif self._can_strike(piece, target):
                    moves.append(Move((x, y), captures=(target.id,)))

    def _gen_sniper(self, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        for direction in QUEEN_DIRS:
            for sq in walk(piece.square, direction, board.size):
                target = board.piece_at(sq)
                if target is None:
                    continue
                if self._can_strike(piece, target):
                    moves.append(
                        Move(sq, MoveKind.STATIONARY_CAPTURE, captures=(target.id,))
                    )
                break

    def _gen_assassin(self, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        for direction in QUEEN_DIRS:
            vault_sq = offset(piece.square, direction)
            if not board.in_bounds(vault_sq):
                continue
            vault = board.piece_at(vault_sq)
            if vault is None or vault.id in self._protected:
                continue
            for sq in walk(vault_sq, direction, board.size):
                target = board.piece_at(sq)
                if target is None:
                    continue
                if self._can_strike(piece, target):
                    moves.append(Move(sq, MoveKind.JUMP_CAPTURE, captures=(target.id,)))
                break

    def _gen_catapult(self, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        for neighbour_dir in QUEEN_DIRS:
            ally_sq = offset(piece.square, neighbour_dir)
            if not board.in_bounds(ally_sq):
                continue
            ally = board.piece_at(ally_sq)
            if ally is None or ally.color != piece.color:
                continue
            for direction in QUEEN_DIRS:
                landing: Square | None = None
                captured: tuple[int, ...] = ()
                for sq in walk(ally_sq, direction, board.size):
                    target = board.piece_at(sq)
                    if target is None:
                        landing = sq
                        continue
                    if self._can_strike(ally, target):
                        landing = sq
                        captured = (target.id,)
                    break
                if landing is None:
                    continue
                moves.append(
                    Move(
                        landing,
                        MoveKind.LAUNCH,
                        captures=captured,
                        secondary=SecondaryMove(ally.id, landing),
                    )
                )

    def _gen_wraith(self, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        reach = self._settings.wraith_reach
        turns = self._settings.possession_turns
        for direction in QUEEN_DIRS:
            for sq in walk(piece.square, direction, board.size, reach):
                target = board.piece_at(sq)
                if target is None:
                    continue
                if (
                    target.color != piece.color
                    and not target.is_king
                    and target.kind is not PieceKind.WRAITH
                    and target.id not in self._protected
                ):
                    moves.append(
                        Move(
                            sq,
                            MoveKind.POSSESSION,
                            possession=PossessionOrder(target.id, turns),
                        )
                    )
                break

    def _gen_juggernaut(self, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        runs: list[tuple[list[Square], Piece | None]] = []
        for direction in QUEEN_DIRS:
            run: list[Square] = []
            blocker: Piece | None = None
            for sq in walk(piece.square, direction, board.size):
                target = board.piece_at(sq)
                if target is not None:
                    blocker = target
                    break
                run.append(sq)
            runs.append((run, blocker))

        longest = max(len(run) for run, _ in runs)
        for run, blocker in runs:
            if len(run) != longest:
                continue
            if blocker is not None and self._can_strike(piece, blocker):
                moves.append(Move(blocker.square, captures=(blocker.id,)))
            elif run:
                moves.append(Move(run[-1]))

    def _gen_berserker(self, piece: Piece, moves: list[Move]) -> None:
        openings = [m for m in moves if m.kind == MoveKind.NORMAL and m.captures]
        if not openings:
            return
        moves[:] = [m for m in moves if not (m.kind == MoveKind.NORMAL and m.captures)]
        chains = expand_chains(
            self._board,
            piece,
            openings,
            self._chain_captures,
            self._effects.piece_value,
        )
        _LOGGER.debug("Berserker %s: %d chain endings", piece, len(chains))
        moves.extend(chains)

    def _chain_captures(self, board: BoardState, piece: Piece) -> list[Move]:
        gen = MoveGenerator(board, self._catalog, settings=self._settings)
        return [m for m in gen.base_moves(piece) if m.captures]

    def _gen_castling(self, king: Piece, moves: list[Move]) -> None:
        board = self._board
        if not king.unmoved or board.size < self._settings.min_castling_board_size:
            return

        attacked = self.attacked_squares(king.color.opposite)
        if king.square in attacked:
            return

        rooks = [
            p
            for p in board.pieces_of(king.color)
            if p.kind is PieceKind.ROOK and p.y == king.y and p.unmoved
        ]
        for rook in rooks:
            direction = -1 if rook.x < king.x else 1
            between = range(min(rook.x, king.x) + 1, max(rook.x, king.x))
            if not between:
                continue
            if any(not board.is_empty((x, king.y)) for x in between):
                continue

            through = (king.x + direction, king.y)
            target = (king.x + 2 * direction, king.y)
            if not board.in_bounds(target):
                continue
            if through in attacked or target in attacked:
                continue

            moves.append(
                Move(
                    target,
                    MoveKind.CASTLE,
                    secondary=SecondaryMove(rook.id, (target[0] - direction, king.y)),
                )
            )


_ABILITIES: dict[PieceKind, Callable[[MoveGenerator, Piece, list[Move]], None]] = {
    PieceKind.DOOMFIST: MoveGenerator._gen_doomfist,
    PieceKind.SNIPER: MoveGenerator._gen_sniper,
    PieceKind.ASSASSIN: MoveGenerator._gen_assassin,
    PieceKind.CATAPULT: MoveGenerator._gen_catapult,
    PieceKind.WRAITH: MoveGenerator._gen_wraith,
    PieceKind.JUGGERNAUT: MoveGenerator._gen_juggernaut,
    PieceKind.BERSERKER: MoveGenerator._gen_berserker,
    PieceKind.KING: MoveGenerator._gen_castling,
}
