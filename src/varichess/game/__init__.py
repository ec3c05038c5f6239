"""Game management layer — commit pipeline, store interface, engine facade.

Quick start::

    from varichess.game import GameController

    ctrl = GameController()
    ctrl.reset_board(8)
    ctrl.list_valid_moves(0, 6).as_dict()
    ctrl.commit((0, 6), (0, 5), "white")
"""

from varichess.game.controller import GameController, GameEvents, TauntSource, ValidMoves
from varichess.game.interfaces import IBoardStore, InMemoryBoardStore
from varichess.game.state import CommitResult, GameStateMachine

__all__ = [
    # Interfaces
    "IBoardStore",
    # Concrete
    "CommitResult",
    "GameController",
    "GameEvents",
    "GameStateMachine",
    "InMemoryBoardStore",
    "TauntSource",
    "ValidMoves",
]
