"""Tests for BoardState construction, layout and apply_move."""

import pytest

from varichess.core.board import BoardState
from varichess.core.enums import Color, MoveKind
from varichess.core.move import Move, PossessionOrder, SecondaryMove
from varichess.core.piece import Piece, PossessionEffect
from varichess.errors import InvalidBoardState

W, B = Color.WHITE, Color.BLACK


def _board(*pieces: Piece, size: int = 8, counters: dict | None = None) -> BoardState:
    return BoardState(size, pieces, turn_counters=counters)


# ── Construction ─────────────────────────────────────────────────────────────


class TestConstruction:
    def test_empty_board(self) -> None:
        board = BoardState(8)
        assert len(board) == 0
        assert board.turn == W
        assert dict(board.turn_counters) == {W: 0, B: 0}
        assert board.version == 0

    @pytest.mark.parametrize("size", [3, 21, 0])
    def test_size_out_of_range(self, size: int) -> None:
        with pytest.raises(InvalidBoardState):
            BoardState(size)

    def test_two_pieces_on_one_square(self) -> None:
        with pytest.raises(InvalidBoardState):
            _board(Piece(1, "Rook", W, 0, 0), Piece(2, "Rook", B, 0, 0))

    def test_duplicate_ids(self) -> None:
        with pytest.raises(InvalidBoardState):
            _board(Piece(1, "Rook", W, 0, 0), Piece(1, "Rook", B, 1, 0))

    def test_off_board_piece(self) -> None:
        with pytest.raises(InvalidBoardState):
            _board(Piece(1, "Rook", W, 8, 0))

    def test_negative_move_count(self) -> None:
        with pytest.raises(ValueError):
            Piece(1, "Rook", W, 0, 0, move_count=-1)

    def test_lookups(self) -> None:
        rook = Piece(7, "Rook", W, 2, 3)
        board = _board(rook)
        assert board.piece_at((2, 3)) is rook
        assert board.piece_by_id(7) is rook
        assert 7 in board
        assert board.is_empty((3, 3))
        assert board.piece_at((3, 3)) is None
        assert board.pieces_of(B) == []

    def test_piece_kind_resolved_from_name(self) -> None:
        assert Piece(1, "sniper", W, 0, 0).kind is not None
        assert Piece(1, "Dragon", W, 0, 0).kind is None
        assert Piece(1, "King", B, 0, 0).is_king

    def test_symbol(self) -> None:
        assert Piece(1, "Queen", W, 0, 0).symbol == "Q"
        assert Piece(2, "Queen", B, 0, 0).symbol == "q"

    def test_knight_symbol_differs_from_king(self) -> None:
        assert Piece(1, "Knight", W, 0, 0).symbol == "N"
        assert Piece(2, "knight", B, 0, 0).symbol == "n"
        assert Piece(3, "King", B, 0, 0).symbol == "k"
        assert Piece(4, "Dragon", W, 0, 0).symbol == "D"


# ── Default layout ───────────────────────────────────────────────────────────


class TestInitial:
    def test_standard_size(self) -> None:
        board = BoardState.initial(8)
        assert len(board) == 32
        assert board.turn == W
        assert sorted(p.id for p in board.pieces) == list(range(1, 33))

        king = board.piece_at((4, 7))
        assert king is not None and king.name == "King" and king.color == W
        queen = board.piece_at((3, 0))
        assert queen is not None and queen.name == "Queen" and queen.color == B
        for x in range(8):
            assert board.piece_at((x, 6)).name == "Pawn"  # type: ignore[union-attr]
            assert board.piece_at((x, 1)).color == B  # type: ignore[union-attr]

    def test_small_board_has_kings_only(self) -> None:
        board = BoardState.initial(5)
        assert len(board) == 12
        white_king = board.piece_at((2, 4))
        black_king = board.piece_at((2, 0))
        assert white_king is not None and white_king.is_king and white_king.color == W
        assert black_king is not None and black_king.is_king and black_king.color == B
        assert {p.y for p in board.pieces if p.name == "Pawn"} == {1, 3}

    def test_large_board_pawn_rows(self) -> None:
        board = BoardState.initial(12)
        assert board.piece_at((11, 10)).name == "Pawn"  # type: ignore[union-attr]
        assert board.piece_at((4, 11)).is_king  # type: ignore[union-attr]
        assert board.piece_at((9, 11)) is None


# ── apply_move ───────────────────────────────────────────────────────────────


class TestApplyMove:
    def test_normal_move(self) -> None:
        rook = Piece(1, "Rook", W, 0, 7)
        board = _board(rook)
        after = board.apply_move(rook, Move((0, 3)))
        moved = after.piece_by_id(1)
        assert moved is not None and moved.square == (0, 3)
        assert moved.move_count == 1
        # Original snapshot untouched.
        assert board.piece_by_id(1).square == (0, 7)  # type: ignore[union-attr]

    def test_turn_and_counters_unchanged(self) -> None:
        rook = Piece(1, "Rook", W, 0, 7)
        board = _board(rook, counters={W: 3, B: 2})
        after = board.apply_move(rook, Move((0, 3)))
        assert after.turn == board.turn
        assert dict(after.turn_counters) == {W: 3, B: 2}

    def test_capture_removes_target(self) -> None:
        rook = Piece(1, "Rook", W, 0, 7)
        pawn = Piece(2, "Pawn", B, 0, 3)
        after = _board(rook, pawn).apply_move(rook, Move((0, 3), captures=(2,)))
        assert 2 not in after
        assert after.piece_at((0, 3)).id == 1  # type: ignore[union-attr]

    def test_stationary_capture_keeps_mover(self) -> None:
        sniper = Piece(1, "Sniper", W, 4, 4)
        pawn = Piece(2, "Pawn", B, 4, 7)
        after = _board(sniper, pawn).apply_move(
            sniper, Move((4, 7), MoveKind.STATIONARY_CAPTURE, captures=(2,))
        )
        assert after.piece_by_id(1) == sniper
        assert after.is_empty((4, 7))

    def test_berserk_removes_mover(self) -> None:
        berserker = Piece(1, "Berserker", W, 2, 2)
        a = Piece(2, "Rook", B, 2, 3)
        b = Piece(3, "Pawn", B, 2, 5)
        move = Move((2, 5), MoveKind.BERSERK, captures=(2, 3), path=((2, 3), (2, 5)))
        after = _board(berserker, a, b).apply_move(berserker, move)
        assert len(after) == 0

    def test_secondary_mover_relocated(self) -> None:
        king = Piece(1, "King", W, 4, 7)
        rook = Piece(2, "Rook", W, 7, 7)
        move = Move((6, 7), MoveKind.CASTLE, secondary=SecondaryMove(2, (5, 7)))
        after = _board(king, rook).apply_move(king, move)
        assert after.piece_by_id(1).square == (6, 7)  # type: ignore[union-attr]
        moved_rook = after.piece_by_id(2)
        assert moved_rook is not None
        assert moved_rook.square == (5, 7)
        assert moved_rook.move_count == 1

    def test_launch_moves_only_the_ally(self) -> None:
        catapult = Piece(1, "Catapult", W, 3, 3)
        ally = Piece(2, "Rook", W, 4, 3)
        move = Move((7, 3), MoveKind.LAUNCH, secondary=SecondaryMove(2, (7, 3)))
        after = _board(catapult, ally).apply_move(catapult, move)
        assert after.piece_by_id(1) == catapult
        assert after.piece_by_id(2).square == (7, 3)  # type: ignore[union-attr]

    def test_possession_switches_color(self) -> None:
        wraith = Piece(1, "Wraith", W, 3, 3)
        pawn = Piece(2, "Pawn", B, 3, 5)
        move = Move((3, 5), MoveKind.POSSESSION, possession=PossessionOrder(2, 3))
        after = _board(wraith, pawn, counters={W: 2, B: 2}).apply_move(wraith, move)
        possessed = after.piece_by_id(2)
        assert possessed is not None
        assert possessed.color == W
        assert possessed.square == (3, 5)
        assert possessed.possession == PossessionEffect(W, B, 2 + 1 + 3)
        assert after.piece_by_id(1).square == (3, 3)  # type: ignore[union-attr]

    def test_retaking_own_piece_ends_possession(self) -> None:
        wraith = Piece(1, "Wraith", B, 3, 3)
        pawn = Piece(2, "Pawn", W, 3, 5, possession=PossessionEffect(W, B, 9))
        move = Move((3, 5), MoveKind.POSSESSION, possession=PossessionOrder(2, 3))
        after = _board(wraith, pawn).apply_move(wraith, move)
        restored = after.piece_by_id(2)
        assert restored is not None
        assert restored.color == B
        assert restored.possession is None

    def test_piece_not_on_board(self) -> None:
        board = _board(Piece(1, "Rook", W, 0, 0))
        with pytest.raises(ValueError):
            board.apply_move(Piece(9, "Rook", W, 5, 5), Move((5, 6)))


# ── Equality / repr ──────────────────────────────────────────────────────────


class TestDunder:
    def test_equality_ignores_version(self) -> None:
        a = _board(Piece(1, "Rook", W, 0, 0))
        b = a.evolve(version=5)
        assert a == b
        assert hash(a) == hash(b)

    def test_inequality_on_turn(self) -> None:
        a = _board(Piece(1, "Rook", W, 0, 0))
        assert a != a.evolve(turn=B)

    def test_repr_grid(self) -> None:
        text = repr(BoardState.initial(8))
        assert "turn=white" in text
        assert "R N B Q K B N R" in text
