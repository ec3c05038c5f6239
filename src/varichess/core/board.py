"""BoardState — immutable, versioned snapshot of a game."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from varichess.core.enums import Color, MoveKind, PieceKind
from varichess.core.effects import possess
from varichess.core.piece import Piece
from varichess.core.types import Square, in_bounds
from varichess.errors import InvalidBoardState
from varichess.settings import DEFAULT_SETTINGS

if TYPE_CHECKING:
    from varichess.core.move import Move

_BACK_RANK: tuple[str, ...] = (
    "Rook",
    "Knight",
    "Bishop",
    "Queen",
    "King",
    "Bishop",
    "Knight",
    "Rook",
)


class BoardState:
    """Pieces + side to move + per-color turn counters.

    Instances never change after construction; every transition returns
    a new snapshot. Square and id indexes are built once per snapshot.
    """

    __slots__ = ("_size", "_pieces", "_by_square", "_by_id", "_turn", "_counters", "_version")

    def __init__(
        self,
        size: int,
        pieces: Iterable[Piece] = (),
        turn: Color = Color.WHITE,
        turn_counters: Mapping[Color, int] | None = None,
        version: int = 0,
    ) -> None:
        if not DEFAULT_SETTINGS.min_board_size <= size <= DEFAULT_SETTINGS.max_board_size:
            raise InvalidBoardState(f"Unsupported board size: {size}")
        self._size = size
        self._pieces: tuple[Piece, ...] = tuple(pieces)
        self._by_square: dict[Square, Piece] = {}
        self._by_id: dict[int, Piece] = {}
        for piece in self._pieces:
            if not in_bounds(piece.square, size):
                raise InvalidBoardState(f"Piece {piece.id} is off the board at {piece.square}")
            if piece.square in self._by_square:
                raise InvalidBoardState(f"Two pieces share square {piece.square}")
            if piece.id in self._by_id:
                raise InvalidBoardState(f"Duplicate piece id {piece.id}")
            self._by_square[piece.square] = piece
            self._by_id[piece.id] = piece
        self._turn = turn
        counters = {Color.WHITE: 0, Color.BLACK: 0}
        if turn_counters:
            counters.update(turn_counters)
        self._counters = MappingProxyType(counters)
        self._version = version

    # ── Element access ───────────────────────────────────────────────────

    @property
    def size(self) -> int:
        return self._size

    @property
    def pieces(self) -> tuple[Piece, ...]:
        return self._pieces

    @property
    def turn(self) -> Color:
        return self._turn

    @property
    def turn_counters(self) -> Mapping[Color, int]:
        return self._counters

    @property
    def version(self) -> int:
        return self._version

    def counter(self, color: Color) -> int:
        return self._counters[color]

    def piece_at(self, sq: Square) -> Piece | None:
        return self._by_square.get(sq)

    def piece_by_id(self, piece_id: int) -> Piece | None:
        return self._by_id.get(piece_id)

    def is_empty(self, sq: Square) -> bool:
        return sq not in self._by_square

    def in_bounds(self, sq: Square) -> bool:
        return in_bounds(sq, self._size)

    def pieces_of(self, color: Color) -> list[Piece]:
        return [p for p in self._pieces if p.color == color]

    def kings(self, color: Color) -> list[Piece]:
        return [p for p in self._pieces if p.color == color and p.is_king]

    def __contains__(self, piece_id: object) -> bool:
        return piece_id in self._by_id

    def __len__(self) -> int:
        return len(self._pieces)

    # ── Copying ──────────────────────────────────────────────────────────

    def evolve(
        self,
        *,
        pieces: Iterable[Piece] | None = None,
        turn: Color | None = None,
        turn_counters: Mapping[Color, int] | None = None,
        version: int | None = None,
    ) -> BoardState:
        """Copy with the given fields replaced."""
        return BoardState(
            self._size,
            self._pieces if pieces is None else pieces,
            self._turn if turn is None else turn,
            self._counters if turn_counters is None else turn_counters,
            self._version if version is None else version,
        )

    def with_pieces(self, pieces: Iterable[Piece]) -> BoardState:
        return self.evolve(pieces=pieces)

    # ── Transition ───────────────────────────────────────────────────────

    def apply_move(self, piece: Piece, move: Move) -> BoardState:
        """Return the snapshot after *piece* plays *move*.

        Pure: neither the turn nor the counters change here, so the same
        call serves legality simulation and committed play.
        """
        if piece.id not in self._by_id:
            raise ValueError(f"Piece {piece.id} is not on this board")

        removed = set(move.captures)
        if move.kind == MoveKind.BERSERK:
            removed.add(piece.id)

        updated: dict[int, Piece] = {
            p.id: p for p in self._pieces if p.id not in removed
        }

        mover = updated.get(piece.id)
        if mover is not None and not move.kind.keeps_mover_in_place:
            updated[piece.id] = mover.moved_to(move.to_sq)

        if move.secondary is not None:
            secondary = updated.get(move.secondary.piece_id)
            if secondary is not None:
                updated[secondary.id] = secondary.moved_to(move.secondary.to_sq)

        if move.kind == MoveKind.POSSESSION and move.possession is not None:
            target = updated.get(move.possession.target_id)
            if target is not None:
                updated[target.id] = possess(
                    target, piece.color, move.possession.turns, self._counters[piece.color]
                )

        return self.evolve(pieces=updated.values())

    # ── Factory ──────────────────────────────────────────────────────────

    @classmethod
    def initial(cls, size: int = DEFAULT_SETTINGS.default_board_size) -> BoardState:
        """Default layout for an ``size`` x ``size`` board, white to move."""
        pieces: list[Piece] = []

        def place(name: str, color: Color, x: int, y: int) -> None:
            pieces.append(Piece(len(pieces) + 1, name, color, x, y))

        for x in range(size):
            place(PieceKind.PAWN.value, Color.WHITE, x, size - 2)
            place(PieceKind.PAWN.value, Color.BLACK, x, 1)

        if size >= len(_BACK_RANK):
            for x, name in enumerate(_BACK_RANK):
                place(name, Color.WHITE, x, size - 1)
                place(name, Color.BLACK, x, 0)
        else:
            king_x = size // 2
            place(PieceKind.KING.value, Color.WHITE, king_x, size - 1)
            place(PieceKind.KING.value, Color.BLACK, king_x, 0)

        return cls(size, pieces)

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return (
            self._size == other._size
            and self._turn == other._turn
            and dict(self._counters) == dict(other._counters)
            and self._by_id == other._by_id
        )

    def __hash__(self) -> int:
        return hash((self._size, self._turn, frozenset(self._by_id.items())))

    def __repr__(self) -> str:
        rows: list[str] = []
        for y in range(self._size):
            row = []
            for x in range(self._size):
                p = self._by_square.get((x, y))
                row.append(p.symbol if p else ".")
            rows.append(f"{y:>2} {' '.join(row)}")
        rows.append(f"   turn={self._turn} counters={dict(self._counters)} v{self._version}")
        return "\n".join(rows)

