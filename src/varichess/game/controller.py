"""GameController — the engine surface offered to the transport layer.

Coordinates: PatternCatalog, GameStateMachine, the board store.
Emits events via simple callbacks so transports / tests can subscribe.
Every payload it returns is plain data or a small frozen record with an
``as_dict`` view.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from varichess.core.board import BoardState
from varichess.core.catalog import PatternCatalog
from varichess.core.enums import Color, MoveKind
from varichess.core.patterns import PatternDefinition
from varichess.core.types import Square, parse_square
from varichess.errors import InvalidPatternDefinition, MoveRejected
from varichess.game.interfaces import IBoardStore, InMemoryBoardStore
from varichess.game.state import CommitResult, GameStateMachine
from varichess.settings import DEFAULT_SETTINGS, EngineSettings

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

CommitCallback = Callable[[CommitResult], None]
ResetCallback = Callable[[BoardState], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_commit: list[CommitCallback] = field(default_factory=list)
    on_reset: list[ResetCallback] = field(default_factory=list)


# ── Response records ─────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TauntSource:
    id: int
    type: str
    x: int
    y: int

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type, "x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class ValidMoves:
    """Answer to a "where can this piece go" query."""

    moves: list[Square] = field(default_factory=list)
    in_check: bool = False
    taunted_by: list[TauntSource] = field(default_factory=list)
    taunt_restricting: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "moves": [list(sq) for sq in self.moves],
            "in_check": self.in_check,
            "taunted_by": [t.as_dict() for t in self.taunted_by],
            "taunt_restricting": self.taunt_restricting,
        }


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Single-board engine facade.

    Thread-safety: none. The transport must serialise mutating calls
    (``commit``, ``reset_board`` and the catalog writes).
    """

    __slots__ = ("_catalog", "_machine", "_settings", "events")

    def __init__(
        self,
        store: IBoardStore | None = None,
        catalog: PatternCatalog | None = None,
        settings: EngineSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._catalog = catalog if catalog is not None else PatternCatalog()
        self._settings = settings
        self._machine = GameStateMachine(
            store if store is not None else InMemoryBoardStore(),
            self._catalog,
            settings,
        )
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def catalog(self) -> PatternCatalog:
        return self._catalog

    @property
    def machine(self) -> GameStateMachine:
        return self._machine

    def snapshot(self) -> BoardState:
        return self._machine.current()

    def current_turn(self) -> Color:
        return self.snapshot().turn

    def board_size(self) -> int:
        return self.snapshot().size

    def state_summary(self) -> dict[str, Any]:
        board = self.snapshot()
        return {"turn": str(board.turn), "board_size": board.size}

    # ── Play ─────────────────────────────────────────────────────────────

    def list_valid_moves(self, x: int, y: int) -> ValidMoves:
        """Legal destinations of the piece on ``(x, y)`` plus check/taunt status."""
        board = self.snapshot()
        piece = board.piece_at((x, y))
        if piece is None:
            return ValidMoves()

        rules = self._machine.rules
        legal = rules.legal_moves_for_color(board, piece.color)
        destinations = list(dict.fromkeys(m.to_sq for m in legal.for_piece(piece.id)))
        return ValidMoves(
            moves=destinations,
            in_check=rules.is_in_check(board, piece.color),
            taunted_by=[TauntSource(t.id, t.name, t.x, t.y) for t in legal.taunt_sources],
            taunt_restricting=legal.taunt_restricting,
        )

    def commit(
        self,
        from_sq: Square | str,
        to_sq: Square | str,
        acting_color: Color | str,
        *,
        kind: MoveKind | str | None = None,
        captures: Sequence[int] | None = None,
        secondary_id: int | None = None,
    ) -> CommitResult:
        """Play a move for *acting_color*; see :meth:`GameStateMachine.commit`.

        Raises:
            MoveRejected: One of its typed subclasses; nothing is changed.
        """
        color = Color.parse(acting_color)
        try:
            result = self._machine.commit(
                parse_square(from_sq),
                parse_square(to_sq),
                color,
                kind=kind,
                captures=captures,
                secondary_id=secondary_id,
            )
        except MoveRejected as exc:
            _LOGGER.warning("Rejected move %s -> %s for %s: %s", from_sq, to_sq, color, exc)
            raise
        for cb in self.events.on_commit:
            cb(result)
        return result

    def reset_board(self, size: int | None = None) -> BoardState:
        """Restart the game; *size* is clamped into the supported range."""
        board = self._machine.reset(size)
        for cb in self.events.on_reset:
            cb(board)
        return board

    # ── Pattern catalog management ───────────────────────────────────────

    def list_patterns(self) -> dict[str, Any]:
        rules = [entry.as_dict() for entry in self._catalog.entries()]
        return {"count": len(rules), "rules": rules}

    def upsert_pattern(
        self,
        name: str,
        color: Color | str | None,
        definition: PatternDefinition | Mapping[str, Any] | str,
    ) -> dict[str, Any]:
        """Store a pattern; malformed input leaves the prior entry intact.

        Raises:
            InvalidPatternDefinition: If the name or definition is malformed.
        """
        try:
            entry = self._catalog.upsert(name, color, definition)
        except InvalidPatternDefinition as exc:
            _LOGGER.warning("Rejected pattern for %r: %s", name, exc)
            raise
        return entry.as_dict()

    def upsert_vector_pattern(
        self,
        name: str,
        color: Color | str | None,
        dx: int,
        dy: int,
        kind: str = "",
        max_steps: int = 1,
    ) -> dict[str, Any]:
        """Store a one-vector pattern from the legacy vector form."""
        try:
            entry = self._catalog.upsert_vector(name, color, dx, dy, kind, max_steps)
        except InvalidPatternDefinition as exc:
            _LOGGER.warning("Rejected vector pattern for %r: %s", name, exc)
            raise
        return entry.as_dict()

    def reseed_defaults(self) -> bool:
        """Seed the default patterns if the catalog is empty."""
        return self._catalog.ensure_seeded()

    def reset_to_defaults(self) -> None:
        """Drop custom patterns and restore the default catalog."""
        self._catalog.reset()
