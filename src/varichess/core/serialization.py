"""Conversion between engine values and plain structured data.

The transport and storage collaborators speak dicts, lists and
primitives only; colors travel as ``"white"`` / ``"black"`` and squares
as ``[x, y]`` pairs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from varichess.core.board import BoardState
from varichess.core.enums import Color
from varichess.core.move import Move
from varichess.core.piece import Piece, PossessionEffect, StunEffect
from varichess.errors import InvalidBoardState


def piece_to_dict(piece: Piece) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": piece.id,
        "name": piece.name,
        "symbol": piece.symbol,
        "color": str(piece.color),
        "x": piece.x,
        "y": piece.y,
        "move_count": piece.move_count,
    }
    effects: dict[str, Any] = {}
    if piece.stun is not None:
        effects["stun"] = {
            "color": str(piece.stun.color),
            "until_turn_count": piece.stun.until_turn_count,
        }
    if piece.possession is not None:
        effects["possession"] = {
            "controller_color": str(piece.possession.controller_color),
            "original_color": str(piece.possession.original_color),
            "expires_on_turn_count": piece.possession.expires_on_turn_count,
        }
    if piece.value_override is not None:
        effects["value_override"] = piece.value_override
    if effects:
        data["effects"] = effects
    return data


def piece_from_dict(data: Mapping[str, Any]) -> Piece:
    """Build a piece from its plain form.

    Raises:
        InvalidBoardState: If a required field is missing or malformed.
    """
    try:
        effects = data.get("effects") or {}
        stun_data = effects.get("stun")
        possession_data = effects.get("possession")
        return Piece(
            id=int(data["id"]),
            name=str(data["name"]),
            color=Color.parse(data["color"]),
            x=int(data["x"]),
            y=int(data["y"]),
            move_count=int(data.get("move_count") or 0),
            stun=(
                StunEffect(
                    Color.parse(stun_data["color"]),
                    int(stun_data["until_turn_count"]),
                )
                if stun_data
                else None
            ),
            possession=(
                PossessionEffect(
                    Color.parse(possession_data["controller_color"]),
                    Color.parse(possession_data["original_color"]),
                    int(possession_data["expires_on_turn_count"]),
                )
                if possession_data
                else None
            ),
            value_override=(
                int(effects["value_override"])
                if effects.get("value_override") is not None
                else None
            ),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidBoardState(f"Malformed piece record {data!r}: {exc}") from exc


def board_to_dict(board: BoardState) -> dict[str, Any]:
    return {
        "size": board.size,
        "turn": str(board.turn),
        "turn_counters": {str(c): n for c, n in board.turn_counters.items()},
        "version": board.version,
        "pieces": [piece_to_dict(p) for p in board.pieces],
    }


def board_from_dict(data: Mapping[str, Any]) -> BoardState:
    """Rebuild a snapshot from :func:`board_to_dict` output.

    Raises:
        InvalidBoardState: If the payload is malformed or violates a board
            invariant.
    """
    try:
        counters = {
            Color.parse(c): int(n) for c, n in (data.get("turn_counters") or {}).items()
        }
        return BoardState(
            size=int(data["size"]),
            pieces=[piece_from_dict(p) for p in data.get("pieces") or []],
            turn=Color.parse(data.get("turn") or Color.WHITE),
            turn_counters=counters,
            version=int(data.get("version") or 0),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        if isinstance(exc, InvalidBoardState):
            raise
        raise InvalidBoardState(f"Malformed board payload: {exc}") from exc


def move_to_dict(move: Move) -> dict[str, Any]:
    data: dict[str, Any] = {
        "x": move.to_sq[0],
        "y": move.to_sq[1],
        "kind": str(move.kind),
        "captures": list(move.captures),
    }
    if move.secondary is not None:
        data["secondary"] = {
            "piece_id": move.secondary.piece_id,
            "x": move.secondary.to_sq[0],
            "y": move.secondary.to_sq[1],
        }
    if move.possession is not None:
        data["possession"] = {
            "target_id": move.possession.target_id,
            "turns": move.possession.turns,
        }
    if move.path:
        data["path"] = [list(sq) for sq in move.path]
    return data
