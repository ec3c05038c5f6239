"""Movement pattern schema and the default pattern set.

A pattern is plain structured data (the transport usually hands it over
as JSON). It is validated into an immutable :class:`PatternDefinition`
before it reaches the catalog, so the move generator never sees a
half-formed definition.
"""

from __future__ import annotations

import json
from typing import Any, Literal, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    field_validator,
    model_validator,
)

from varichess.core.enums import ProtectMode
from varichess.core.types import (
    DIAGONAL_DIRS,
    KNIGHT_OFFSETS,
    ORTHOGONAL_DIRS,
    QUEEN_DIRS,
    VERTICAL_DIRS,
)
from varichess.errors import InvalidPatternDefinition

VectorField = tuple[StrictInt, StrictInt]


def _reject_zero_vectors(vectors: tuple[VectorField, ...]) -> tuple[VectorField, ...]:
    for dx, dy in vectors:
        if dx == 0 and dy == 0:
            raise ValueError("zero vector is not a movement")
    return vectors


class ProtectSpec(BaseModel):
    """Explicit protection declaration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    directions: tuple[VectorField, ...] = VERTICAL_DIRS
    mode: ProtectMode = ProtectMode.LINE
    max_steps: StrictInt | None = Field(default=None, ge=1)

    @field_validator("directions")
    @classmethod
    def check_directions(cls, value: tuple[VectorField, ...]) -> tuple[VectorField, ...]:
        return _reject_zero_vectors(value)


class PatternDefinition(BaseModel):
    """Validated movement definition for one (type, color) catalog entry."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    rays: tuple[VectorField, ...] = ()
    ray_limit: StrictInt | Literal["infinite"] | None = None
    # False turns rays into pure advances (pawn double step).
    ray_captures: StrictBool = True
    leaps: tuple[VectorField, ...] = ()
    move_only: tuple[VectorField, ...] = ()
    capture_only: tuple[VectorField, ...] = ()
    first_move: PatternDefinition | None = None
    protect: StrictBool | ProtectSpec = False
    taunt: StrictBool = False

    @field_validator("rays", "leaps", "move_only", "capture_only")
    @classmethod
    def check_vectors(cls, value: tuple[VectorField, ...]) -> tuple[VectorField, ...]:
        return _reject_zero_vectors(value)

    @model_validator(mode="before")
    @classmethod
    def accept_max_steps_alias(cls, data: Any) -> Any:
        # Older catalog rows spell the ray limit ``max_steps``.
        if isinstance(data, Mapping) and "max_steps" in data:
            data = dict(data)
            steps = data.pop("max_steps")
            data.setdefault("ray_limit", steps)
        return data

    # ── Derived accessors ────────────────────────────────────────────────

    def effective_ray_limit(self, board_size: int) -> int:
        """Ray length in steps; unlimited rays run to the board edge."""
        limit = self.ray_limit
        if limit is None or limit == "infinite" or limit <= 0:
            return board_size
        return limit

    @property
    def protect_spec(self) -> ProtectSpec | None:
        if isinstance(self.protect, ProtectSpec):
            return self.protect
        return ProtectSpec() if self.protect else None

    def to_data(self) -> dict[str, Any]:
        """Plain JSON-compatible representation (defaults omitted)."""
        return self.model_dump(mode="json", exclude_defaults=True)


def parse_definition(raw: PatternDefinition | Mapping[str, Any] | str) -> PatternDefinition:
    """Validate *raw* into a :class:`PatternDefinition`.

    Accepts an existing definition, a mapping, or a JSON document.

    Raises:
        InvalidPatternDefinition: If the payload is not a well-formed pattern.
    """
    if isinstance(raw, PatternDefinition):
        return raw
    try:
        if isinstance(raw, (str, bytes)):
            return PatternDefinition.model_validate_json(raw)
        if not isinstance(raw, Mapping):
            raise InvalidPatternDefinition(
                f"Pattern definition must be an object, got {type(raw).__name__}"
            )
        return PatternDefinition.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidPatternDefinition(f"Invalid pattern definition: {exc}") from exc


def pattern_from_vector(dx: int, dy: int, kind: str = "", max_steps: int = 1) -> PatternDefinition:
    """Build a single-vector pattern from the legacy form inputs.

    ``kind`` may be ``"move_only"`` or ``"capture_only"``; anything else is
    a leap when ``max_steps <= 1`` and a limited ray otherwise.
    """
    try:
        vector = [int(dx), int(dy)]
        steps = int(max_steps)
    except (TypeError, ValueError) as exc:
        raise InvalidPatternDefinition(f"Invalid vector pattern input: {exc}") from exc
    if kind == "move_only":
        data: dict[str, Any] = {"move_only": [vector]}
    elif kind == "capture_only":
        data = {"capture_only": [vector]}
    elif steps > 1:
        data = {"rays": [vector], "ray_limit": steps}
    else:
        data = {"leaps": [vector]}
    return parse_definition(data)


def dumps_definition(definition: PatternDefinition) -> str:
    """Compact JSON text for a definition."""
    return json.dumps(definition.to_data(), separators=(",", ":"), sort_keys=True)


# ── Defaults ─────────────────────────────────────────────────────────────────

_KING_STEP = {"rays": QUEEN_DIRS, "ray_limit": 1}

DEFAULT_PATTERNS: tuple[tuple[str, str | None, dict[str, Any]], ...] = (
    ("King", None, _KING_STEP),
    ("Queen", None, {"rays": QUEEN_DIRS, "ray_limit": "infinite"}),
    ("Rook", None, {"rays": ORTHOGONAL_DIRS, "ray_limit": "infinite"}),
    ("Bishop", None, {"rays": DIAGONAL_DIRS, "ray_limit": "infinite"}),
    ("Knight", None, {"leaps": KNIGHT_OFFSETS}),
    (
        "Pawn",
        "white",
        {
            "move_only": [(0, -1)],
            "capture_only": [(-1, -1), (1, -1)],
            "first_move": {"rays": [(0, -1)], "ray_limit": 2, "ray_captures": False},
        },
    ),
    (
        "Pawn",
        "black",
        {
            "move_only": [(0, 1)],
            "capture_only": [(-1, 1), (1, 1)],
            "first_move": {"rays": [(0, 1)], "ray_limit": 2, "ray_captures": False},
        },
    ),
    # Variant pieces: base movement only, abilities are added by the generator.
    ("Doomfist", None, {}),
    ("Sniper", None, {"move_only": QUEEN_DIRS}),
    ("Assassin", None, _KING_STEP),
    ("Catapult", None, {"move_only": ORTHOGONAL_DIRS}),
    ("Wraith", None, _KING_STEP),
    ("Juggernaut", None, {}),
    ("Berserker", None, {"rays": QUEEN_DIRS, "ray_limit": 2}),
)
