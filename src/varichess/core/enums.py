"""Core enumerations for the variant chess domain."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str | Color) -> Color:
        """Accept ``Color`` members or their lower-case names."""
        if isinstance(value, Color):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Invalid color: {value!r}") from None


class PieceKind(StrEnum):
    """Piece types the engine knows abilities for.

    The value is the catalog type name. Pieces whose name is not listed
    here still move by their catalog patterns; they simply have no
    ability pass.
    """

    PAWN = "Pawn"
    KNIGHT = "Knight"
    BISHOP = "Bishop"
    ROOK = "Rook"
    QUEEN = "Queen"
    KING = "King"
    DOOMFIST = "Doomfist"
    SNIPER = "Sniper"
    ASSASSIN = "Assassin"
    CATAPULT = "Catapult"
    WRAITH = "Wraith"
    JUGGERNAUT = "Juggernaut"
    BERSERKER = "Berserker"

    @classmethod
    def lookup(cls, name: str) -> PieceKind | None:
        """Case-insensitive name lookup; ``None`` for custom types."""
        return _KIND_BY_LOWER_NAME.get(type_key(name))


def type_key(name: str) -> str:
    """Case- and whitespace-insensitive form of a piece type name."""
    return name.strip().lower()


_KIND_BY_LOWER_NAME: dict[str, PieceKind] = {type_key(k.value): k for k in PieceKind}


class MoveKind(StrEnum):
    """How a candidate move is carried out."""

    NORMAL = "normal"
    CASTLE = "castle"
    STATIONARY_CAPTURE = "stationary_capture"
    JUMP_CAPTURE = "jump_capture"
    LAUNCH = "launch"
    POSSESSION = "possession"
    BERSERK = "berserk"

    @property
    def keeps_mover_in_place(self) -> bool:
        return self in _STATIONARY_KINDS


_STATIONARY_KINDS = frozenset(
    {MoveKind.STATIONARY_CAPTURE, MoveKind.LAUNCH, MoveKind.POSSESSION}
)


class ProtectMode(StrEnum):
    """How a protector walks its directions."""

    LINE = "line"  # first ally per direction only
    CHAIN = "chain"  # every ally until an enemy or the edge
