"""Engine-wide configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Base material values used by the berserker chain rule.
_BASE_PIECE_VALUES: Mapping[str, int] = MappingProxyType(
    {
        "Pawn": 1,
        "Knight": 3,
        "Bishop": 3,
        "Rook": 5,
        "Queen": 9,
        "King": 100,
        "Doomfist": 5,
        "Sniper": 4,
        "Assassin": 4,
        "Catapult": 3,
        "Wraith": 4,
        "Juggernaut": 6,
        "Berserker": 3,
    }
)


@dataclass(frozen=True)
class EngineSettings:
    """All tunable engine parameters."""

    # Board
    default_board_size: int = 8
    min_board_size: int = 4
    max_board_size: int = 20
    min_castling_board_size: int = 5

    # Abilities
    possession_turns: int = 3
    wraith_reach: int = 3
    doomfist_stun_turns: int = 1

    # Material
    piece_values: Mapping[str, int] = field(default_factory=lambda: _BASE_PIECE_VALUES)
    default_piece_value: int = 1

    def clamp_board_size(self, size: int) -> int:
        """Force *size* into the supported ``[min, max]`` range."""
        return max(self.min_board_size, min(self.max_board_size, int(size)))


DEFAULT_SETTINGS = EngineSettings()
