"""Abstract interfaces for the game layer.

Follows Dependency Inversion: the state machine persists snapshots
through :class:`IBoardStore`, never through a concrete database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from varichess.core.board import BoardState


class IBoardStore(ABC):
    """Owner of the current board snapshot.

    The transport collaborator is expected to serialise calls; the store
    only has to make :meth:`save` replace the current snapshot as a whole.
    """

    @abstractmethod
    def load(self) -> BoardState | None:
        """Current snapshot, or ``None`` if nothing was saved yet."""

    @abstractmethod
    def save(self, board: BoardState) -> None:
        """Replace the current snapshot with *board*."""


class InMemoryBoardStore(IBoardStore):
    """Keeps the snapshot in process memory."""

    __slots__ = ("_board", "saves")

    def __init__(self, board: BoardState | None = None) -> None:
        self._board = board
        self.saves = 0

    def load(self) -> BoardState | None:
        return self._board

    def save(self, board: BoardState) -> None:
        self._board = board
        self.saves += 1
