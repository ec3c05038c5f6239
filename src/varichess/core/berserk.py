"""Berserker capture chains.

After an ordinary capture the berserker may keep capturing from its new
square, as long as each victim is worth no more than the previous one.
Every way the chain can end is a separate candidate, and the berserker
is removed from the board at the end of each one.

The search is an explicit depth-first backtrack over immutable
snapshots; each step removes one piece, so the stack depth is bounded by
the number of pieces on the board.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from varichess.core.enums import MoveKind
from varichess.core.move import Move
from varichess.core.types import Square

if TYPE_CHECKING:
    from varichess.core.board import BoardState
    from varichess.core.piece import Piece

# (snapshot, attacker) -> ordinary capture moves from the attacker's square
CaptureSource = Callable[["BoardState", "Piece"], list[Move]]
ValueOf = Callable[["Piece"], int]


@dataclass(frozen=True, slots=True)
class _ChainFrame:
    """One partial chain: berserker standing on ``path[-1]`` in ``board``."""

    board: BoardState
    captures: tuple[int, ...]
    path: tuple[Square, ...]
    ceiling: int  # value of the piece captured last


def expand_chains(
    board: BoardState,
    berserker: Piece,
    openings: list[Move],
    captures_from: CaptureSource,
    value_of: ValueOf,
) -> list[Move]:
    """Expand each opening capture into every terminal berserk chain.

    Args:
        board: Snapshot before the berserker moves.
        berserker: The capturing piece.
        openings: Its ordinary single-capture moves on *board*.
        captures_from: Generates ordinary captures for a piece on a snapshot.
        value_of: Material value used for the non-increasing rule.

    Returns:
        ``MoveKind.BERSERK`` moves carrying the full capture sequence and
        the squares visited, in depth-first discovery order.
    """
    stack: list[_ChainFrame] = []
    for opening in reversed(openings):
        stack.append(_advance(board, berserker, opening, (), (), value_of))

    chains: list[Move] = []
    while stack:
        frame = stack.pop()
        mover = frame.board.piece_by_id(berserker.id)
        assert mover is not None
        continuations = [
            m
            for m in captures_from(frame.board, mover)
            if value_of(_victim(frame.board, m)) <= frame.ceiling
        ]
        if not continuations:
            chains.append(
                Move(
                    frame.path[-1],
                    MoveKind.BERSERK,
                    captures=frame.captures,
                    path=frame.path,
                )
            )
            continue
        for move in reversed(continuations):
            stack.append(
                _advance(frame.board, mover, move, frame.captures, frame.path, value_of)
            )
    return chains


def _victim(board: BoardState, move: Move) -> Piece:
    victim = board.piece_by_id(move.captures[0])
    assert victim is not None
    return victim


def _advance(
    board: BoardState,
    mover: Piece,
    move: Move,
    captures: tuple[int, ...],
    path: tuple[Square, ...],
    value_of: ValueOf,
) -> _ChainFrame:
    victim = _victim(board, move)
    return _ChainFrame(
        board=board.apply_move(mover, move),
        captures=captures + (victim.id,),
        path=path + (move.to_sq,),
        ceiling=value_of(victim),
    )
