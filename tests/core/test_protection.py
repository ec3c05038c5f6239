"""Tests for protection walks and the taunt rule."""

import pytest

from varichess.core.board import BoardState
from varichess.core.catalog import PatternCatalog
from varichess.core.enums import Color
from varichess.core.move_generator import MoveGenerator
from varichess.core.piece import Piece, StunEffect
from varichess.core.protection import ProtectionTauntResolver
from varichess.core.rules import Rules

W, B = Color.WHITE, Color.BLACK


@pytest.fixture
def custom() -> PatternCatalog:
    catalog = PatternCatalog()
    catalog.upsert("Shield", None, {"protect": True})
    catalog.upsert("Wall", None, {"protect": {"mode": "chain"}})
    catalog.upsert("Lance", None, {"protect": {"directions": [[1, 0]], "max_steps": 1}})
    catalog.upsert("Jester", None, {"taunt": True, "rays": [[0, 1]], "ray_limit": 1})
    return catalog


def _protected(catalog: PatternCatalog, *pieces: Piece) -> frozenset[int]:
    return ProtectionTauntResolver(catalog).protected_ids(BoardState(8, pieces))


class TestProtection:
    def test_line_marks_first_ally_each_way(self, custom: PatternCatalog) -> None:
        protected = _protected(
            custom,
            Piece(1, "Shield", W, 3, 3),
            Piece(2, "Pawn", W, 3, 2),
            Piece(3, "Pawn", W, 3, 1),
            Piece(4, "Pawn", W, 3, 5),  # gap at (3, 4)
        )
        assert protected == {2, 4}

    def test_chain_marks_every_ally(self, custom: PatternCatalog) -> None:
        protected = _protected(
            custom,
            Piece(1, "Wall", W, 3, 3),
            Piece(2, "Pawn", W, 3, 2),
            Piece(3, "Pawn", W, 3, 1),
            Piece(4, "Rook", W, 3, 0),
        )
        assert protected == {2, 3, 4}

    def test_chain_stops_at_enemy(self, custom: PatternCatalog) -> None:
        protected = _protected(
            custom,
            Piece(1, "Wall", W, 3, 3),
            Piece(2, "Pawn", W, 3, 2),
            Piece(3, "Pawn", B, 3, 1),
            Piece(4, "Rook", W, 3, 0),
        )
        assert protected == {2}

    def test_enemy_first_blocks_line(self, custom: PatternCatalog) -> None:
        protected = _protected(
            custom,
            Piece(1, "Shield", W, 3, 3),
            Piece(2, "Pawn", B, 3, 2),
            Piece(3, "Pawn", W, 3, 1),
        )
        assert protected == frozenset()

    def test_max_steps_and_directions(self, custom: PatternCatalog) -> None:
        protected = _protected(
            custom,
            Piece(1, "Lance", W, 3, 3),
            Piece(2, "Pawn", W, 4, 3),
            Piece(3, "Pawn", W, 3, 2),  # not in a declared direction
        )
        assert protected == {2}
        far = _protected(custom, Piece(1, "Lance", W, 3, 3), Piece(2, "Pawn", W, 5, 3))
        assert far == frozenset()

    def test_protected_piece_cannot_be_captured(self, custom: PatternCatalog) -> None:
        rook = Piece(1, "Rook", B, 0, 2)
        board = BoardState(8, [rook, Piece(2, "Shield", W, 3, 3), Piece(3, "Pawn", W, 3, 2)])
        dests = {m.to_sq for m in MoveGenerator(board, custom).generate(rook)}
        assert (2, 2) in dests
        assert (3, 2) not in dests

    def test_no_protectors_in_default_catalog(self, catalog: PatternCatalog) -> None:
        assert ProtectionTauntResolver(catalog).protected_ids(BoardState.initial(8)) == frozenset()


class TestTaunt:
    def test_capture_of_taunter_is_forced(self, custom: PatternCatalog) -> None:
        board = BoardState(
            8,
            [
                Piece(1, "Rook", W, 5, 7),
                Piece(2, "Knight", W, 0, 7),
                Piece(3, "Jester", B, 5, 3),
            ],
        )
        legal = Rules(custom).legal_moves_for_color(board, W)
        assert legal.taunt_restricting
        assert [p.id for p in legal.taunt_sources] == [3]
        assert legal.for_piece(2) == []
        assert [m.captures for m in legal.for_piece(1)] == [(3,)]

    def test_unreachable_taunter_does_not_restrict(self, custom: PatternCatalog) -> None:
        board = BoardState(8, [Piece(2, "Knight", W, 0, 7), Piece(3, "Jester", B, 5, 3)])
        legal = Rules(custom).legal_moves_for_color(board, W)
        assert not legal.taunt_restricting
        assert [p.id for p in legal.taunt_sources] == [3]
        assert legal.count() == 2

    def test_protected_taunter_ignored(self, custom: PatternCatalog) -> None:
        board = BoardState(
            8,
            [
                Piece(1, "Rook", W, 5, 7),
                Piece(3, "Jester", B, 5, 3),
                Piece(4, "Shield", B, 5, 2),
            ],
        )
        legal = Rules(custom).legal_moves_for_color(board, W)
        assert not legal.taunt_restricting
        assert legal.taunt_sources == []

    def test_stunned_taunter_ignored(self, custom: PatternCatalog) -> None:
        board = BoardState(
            8,
            [
                Piece(1, "Rook", W, 5, 7),
                Piece(3, "Jester", B, 5, 3, stun=StunEffect(B, 4)),
            ],
        )
        legal = Rules(custom).legal_moves_for_color(board, W)
        assert not legal.taunt_restricting
        assert legal.taunt_sources == []

    def test_own_taunters_do_not_count(self, custom: PatternCatalog) -> None:
        board = BoardState(8, [Piece(1, "Rook", W, 5, 7), Piece(3, "Jester", W, 5, 3)])
        resolver = ProtectionTauntResolver(custom)
        assert resolver.taunt_sources(board, W, frozenset()) == []
