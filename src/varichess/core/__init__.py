"""Core rules layer — pure variant chess logic, no transport or storage.

Quick start::

    from varichess.core import BoardState, PatternCatalog, Rules, Color

    board = BoardState.initial(8)
    rules = Rules(PatternCatalog())
    moves = rules.legal_moves_for_color(board, Color.WHITE)
"""

from varichess.core.board import BoardState
from varichess.core.catalog import PATTERN_RULES_VERSION, CatalogEntry, PatternCatalog
from varichess.core.effects import EffectsEngine
from varichess.core.enums import Color, MoveKind, PieceKind, ProtectMode
from varichess.core.move import Move, PossessionOrder, SecondaryMove
from varichess.core.move_generator import MoveGenerator, capture_allowed
from varichess.core.patterns import (
    DEFAULT_PATTERNS,
    PatternDefinition,
    ProtectSpec,
    parse_definition,
    pattern_from_vector,
)
from varichess.core.piece import Piece, PossessionEffect, StunEffect
from varichess.core.protection import ProtectionTauntResolver
from varichess.core.rules import LegalMoveSet, Rules
from varichess.core.types import Square, in_bounds, parse_square

__all__ = [
    # Enums
    "Color",
    "MoveKind",
    "PieceKind",
    "ProtectMode",
    # Types / helpers
    "Square",
    "in_bounds",
    "parse_square",
    # Domain objects
    "BoardState",
    "Move",
    "Piece",
    "PossessionEffect",
    "PossessionOrder",
    "SecondaryMove",
    "StunEffect",
    # Patterns
    "DEFAULT_PATTERNS",
    "PATTERN_RULES_VERSION",
    "CatalogEntry",
    "PatternCatalog",
    "PatternDefinition",
    "ProtectSpec",
    "parse_definition",
    "pattern_from_vector",
    # Engines
    "EffectsEngine",
    "LegalMoveSet",
    "MoveGenerator",
    "ProtectionTauntResolver",
    "Rules",
    "capture_allowed",
]
