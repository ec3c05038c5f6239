"""EffectsEngine — stun and possession lifecycle, piece values.

Effects expire against per-color turn counters, not against plies: a
threshold is reached when the relevant color has *completed* that many
moves in total.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING

from varichess.core.enums import Color
from varichess.core.piece import Piece, PossessionEffect, StunEffect
from varichess.settings import DEFAULT_SETTINGS, EngineSettings

if TYPE_CHECKING:
    from varichess.core.board import BoardState

_LOGGER = logging.getLogger(__name__)


def possess(target: Piece, controller: Color, turns: int, controller_count: int) -> Piece:
    """Hand *target* to *controller* for *turns* of its completed turns.

    The controller's counter is bumped once when the possession move
    itself is committed, so the threshold is counted from after that.
    """
    if target.possession is not None and target.possession.original_color == controller:
        # Taken back by its own side: the possession simply ends.
        return target.with_possession(None, controller)
    original = (
        target.possession.original_color if target.possession is not None else target.color
    )
    record = PossessionEffect(
        controller_color=controller,
        original_color=original,
        expires_on_turn_count=controller_count + 1 + turns,
    )
    return replace(target, color=controller, possession=record)


class EffectsEngine:
    """Reads and advances the time-boxed effects attached to pieces."""

    __slots__ = ("_settings",)

    def __init__(self, settings: EngineSettings = DEFAULT_SETTINGS) -> None:
        self._settings = settings

    # ── Queries ──────────────────────────────────────────────────────────

    @staticmethod
    def is_stunned(piece: Piece, counters: Mapping[Color, int]) -> bool:
        return piece.stun is not None and piece.stun.is_active(dict(counters))

    def piece_value(self, piece: Piece) -> int:
        """Material value: per-piece override, else the base table."""
        if piece.value_override is not None:
            return piece.value_override
        return self._settings.piece_values.get(piece.name, self._settings.default_piece_value)

    # ── Transitions ──────────────────────────────────────────────────────

    @staticmethod
    def stun(piece: Piece, turns: int, counters: Mapping[Color, int]) -> Piece:
        """Stun *piece* for its color's next *turns* completed turns."""
        color = piece.color
        return piece.with_stun(StunEffect(color, counters.get(color, 0) + turns))

    @staticmethod
    def possess(target: Piece, controller: Color, turns: int, counters: Mapping[Color, int]) -> Piece:
        return possess(target, controller, turns, counters.get(controller, 0))

    def sweep(self, board: BoardState) -> BoardState:
        """Clear expired stuns and revert expired possessions.

        Idempotent: sweeping an already clean board returns it unchanged.
        """
        counters = dict(board.turn_counters)
        changed = False
        swept: list[Piece] = []
        for piece in board.pieces:
            updated = piece
            if updated.stun is not None and not updated.stun.is_active(counters):
                updated = updated.with_stun(None)
            if updated.possession is not None and updated.possession.is_expired(counters):
                _LOGGER.debug("Possession of %s expired", updated)
                updated = updated.with_possession(None, updated.possession.original_color)
            changed = changed or updated is not piece
            swept.append(updated)
        if not changed:
            return board
        return board.with_pieces(swept)
