"""Typed, recoverable engine errors.

None of these indicate a corrupted engine: each one rejects a single
request and leaves every snapshot, counter and catalog entry untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from varichess.core.enums import Color
    from varichess.core.types import Square


class VariChessError(Exception):
    """Base class for every error the engine reports to its caller."""


# ── Move requests ────────────────────────────────────────────────────────────


class MoveRejected(VariChessError):
    """A ``commit`` request was refused."""


class PieceNotFound(MoveRejected):
    """No piece stands on the requested source square."""

    def __init__(self, square: Square) -> None:
        super().__init__(f"No piece at {square}")
        self.square = square


class WrongColor(MoveRejected):
    """The piece on the source square belongs to the other side."""

    def __init__(self, piece_color: Color, acting_color: Color) -> None:
        super().__init__(f"Piece is {piece_color}, request came from {acting_color}")
        self.piece_color = piece_color
        self.acting_color = acting_color


class WrongTurn(MoveRejected):
    """The acting side is not the side to move."""

    def __init__(self, acting_color: Color, turn: Color) -> None:
        super().__init__(f"It is {turn}'s turn, not {acting_color}'s")
        self.acting_color = acting_color
        self.turn = turn


class IllegalDestination(MoveRejected):
    """The destination (or requested move kind) is not in the legal set."""

    def __init__(self, from_sq: Square, to_sq: Square) -> None:
        super().__init__(f"Illegal move {from_sq} -> {to_sq}")
        self.from_sq = from_sq
        self.to_sq = to_sq


# ── Data validation ──────────────────────────────────────────────────────────


class InvalidPatternDefinition(VariChessError, ValueError):
    """A catalog write carried a malformed movement pattern."""


class InvalidBoardState(VariChessError, ValueError):
    """A board snapshot violates a structural invariant."""
