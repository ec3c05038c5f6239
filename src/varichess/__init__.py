"""varichess — rules engine for a two-player variant chess game."""

from varichess.core import BoardState, Color, Move, MoveKind, PatternCatalog, Piece, Rules
from varichess.errors import (
    IllegalDestination,
    InvalidBoardState,
    InvalidPatternDefinition,
    MoveRejected,
    PieceNotFound,
    VariChessError,
    WrongColor,
    WrongTurn,
)
from varichess.game import GameController
from varichess.settings import DEFAULT_SETTINGS, EngineSettings

__version__ = "0.1.0"

__all__ = [
    "BoardState",
    "Color",
    "DEFAULT_SETTINGS",
    "EngineSettings",
    "GameController",
    "IllegalDestination",
    "InvalidBoardState",
    "InvalidPatternDefinition",
    "Move",
    "MoveKind",
    "MoveRejected",
    "PatternCatalog",
    "Piece",
    "PieceNotFound",
    "Rules",
    "VariChessError",
    "WrongColor",
    "WrongTurn",
    "__version__",
]
