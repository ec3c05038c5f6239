"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from varichess.core.catalog import PatternCatalog
from varichess.core.rules import Rules


@pytest.fixture
def catalog() -> PatternCatalog:
    """A fresh catalog seeded with the default patterns."""
    return PatternCatalog()


@pytest.fixture
def rules(catalog: PatternCatalog) -> Rules:
    return Rules(catalog)
