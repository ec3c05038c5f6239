"""PatternCatalog — typed store of movement patterns per (type, color)."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from varichess.core.enums import Color, type_key
from varichess.core.patterns import (
    DEFAULT_PATTERNS,
    PatternDefinition,
    ProtectSpec,
    parse_definition,
    pattern_from_vector,
)
from varichess.errors import InvalidPatternDefinition

_LOGGER = logging.getLogger(__name__)

# Bump when DEFAULT_PATTERNS changes so existing catalogs pick the new rows up.
PATTERN_RULES_VERSION = 2


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One stored (type, color) pattern row."""

    name: str
    color: Color | None
    definition: PatternDefinition

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "color": str(self.color) if self.color is not None else None,
            "definition": self.definition.to_data(),
        }


def _normalize_color(color: Color | str | None) -> Color | None:
    if color is None:
        return None
    if isinstance(color, str) and not color.strip():
        return None
    try:
        return Color.parse(color)
    except ValueError as exc:
        raise InvalidPatternDefinition(str(exc)) from None


class PatternCatalog:
    """In-memory pattern store keyed by ``(type name, color or None)``.

    Definitions are immutable once stored; a write replaces the whole
    definition for its key or, when invalid, changes nothing.
    """

    __slots__ = ("_entries", "_rules_version")

    def __init__(self, *, seed: bool = True) -> None:
        # Keyed by the normalized type name; entries keep the spelling last written.
        self._entries: dict[tuple[str, Color | None], CatalogEntry] = {}
        self._rules_version = 0
        if seed:
            self.ensure_seeded()
            self.ensure_version(PATTERN_RULES_VERSION)

    # ── Lookups ──────────────────────────────────────────────────────────

    def patterns_for(self, name: str, color: Color) -> list[PatternDefinition]:
        """Patterns for a piece, color-specific ones taking precedence."""
        key = type_key(name)
        specific = self._entries.get((key, color))
        if specific is not None:
            return [specific.definition]
        generic = self._entries.get((key, None))
        return [generic.definition] if generic is not None else []

    def is_taunting(self, name: str, color: Color) -> bool:
        return any(p.taunt for p in self.patterns_for(name, color))

    def protect_spec(self, name: str, color: Color) -> ProtectSpec | None:
        for pattern in self.patterns_for(name, color):
            spec = pattern.protect_spec
            if spec is not None:
                return spec
        return None

    def entries(self) -> list[CatalogEntry]:
        """All rows ordered by name, color-agnostic first."""
        keys = sorted(
            self._entries, key=lambda k: (k[0], -1 if k[1] is None else int(k[1]))
        )
        return [self._entries[key] for key in keys]

    def count(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries())

    @property
    def rules_version(self) -> int:
        return self._rules_version

    # ── Writes ───────────────────────────────────────────────────────────

    def upsert(
        self,
        name: str,
        color: Color | str | None,
        definition: PatternDefinition | Mapping[str, Any] | str,
    ) -> CatalogEntry:
        """Insert or replace the definition for ``(name, color)``.

        Raises:
            InvalidPatternDefinition: On a blank name, an unknown color or a
                malformed definition. The stored entry is left intact.
        """
        clean_name = str(name).strip()
        if not clean_name:
            raise InvalidPatternDefinition("Pattern name is required")
        key_color = _normalize_color(color)
        parsed = parse_definition(definition)
        entry = CatalogEntry(clean_name, key_color, parsed)
        self._entries[(type_key(clean_name), key_color)] = entry
        _LOGGER.info(
            "Stored pattern %s/%s", clean_name, "any" if key_color is None else key_color
        )
        return entry

    def upsert_vector(
        self,
        name: str,
        color: Color | str | None,
        dx: int,
        dy: int,
        kind: str = "",
        max_steps: int = 1,
    ) -> CatalogEntry:
        """Store a single-vector pattern built from the legacy form inputs."""
        return self.upsert(name, color, pattern_from_vector(dx, dy, kind, max_steps))

    def seed_defaults(self) -> None:
        """Upsert every default pattern, overwriting same-key rows."""
        for name, color, data in DEFAULT_PATTERNS:
            self.upsert(name, color, data)

    def ensure_seeded(self) -> bool:
        """Seed defaults only into an empty catalog. Returns whether it seeded."""
        if self._entries:
            return False
        self.seed_defaults()
        return True

    def ensure_version(self, version: int) -> bool:
        """Re-seed defaults once when the stored rules predate *version*."""
        if self._rules_version >= version:
            return False
        self.seed_defaults()
        self._rules_version = version
        return True

    def reset(self) -> None:
        """Drop every row (including custom ones) and restore the defaults."""
        self._entries.clear()
        self.seed_defaults()
        _LOGGER.info("Pattern catalog reset to %d default rows", len(self._entries))
