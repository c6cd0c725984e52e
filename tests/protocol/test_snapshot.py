from __future__ import annotations

from typing import Any, Dict

import pytest

from mimic_chess.engine.board import WHITE
from mimic_chess.engine.move import str_to_square
from mimic_chess.engine.state import apply_move, new_game
from mimic_chess.protocol.snapshot import StateSnapshot


def _payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "board": "4k3/8/8/8/8/8/8/4K3",
        "side_to_move": "b",
        "history": {"w": ["q"], "b": []},
        "unmoved": ["e8"],
        "winner": None,
    }
    payload.update(overrides)
    return payload


def test_snapshot_of_new_game() -> None:
    snap = StateSnapshot.from_state(new_game())
    assert snap.board == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
    assert snap.side_to_move == "w"
    assert snap.history == {"w": [], "b": []}
    assert len(snap.unmoved) == 32
    assert snap.unmoved[:3] == ["a1", "b1", "c1"]
    assert snap.winner is None


def test_snapshot_restores_equal_state_over_json() -> None:
    s = new_game()
    s = apply_move(s, str_to_square("e2"), str_to_square("e4"))
    s = apply_move(s, str_to_square("g8"), str_to_square("f6"))
    wire = StateSnapshot.from_state(s).model_dump_json()
    restored = StateSnapshot.model_validate_json(wire).to_state()
    assert restored == s
    assert restored.mimic_logic(WHITE).kind == "p"


def test_snapshot_accepts_full_fen_board() -> None:
    snap = StateSnapshot(**_payload(board="4k3/8/8/8/8/8/8/4K3 b - - 0 1"))
    assert snap.board == "4k3/8/8/8/8/8/8/4K3"
    assert snap.to_state().unmoved == frozenset({str_to_square("e8")})


@pytest.mark.parametrize(
    "overrides",
    [
        {"board": "8/8/8"},
        {"side_to_move": "x"},
        {"history": {"w": ["z"], "b": []}},
        {"history": {"red": []}},
        {"unmoved": ["i9"]},
        {"winner": "draw"},
    ],
)
def test_invalid_snapshot_raises(overrides: Dict[str, Any]) -> None:
    with pytest.raises(ValueError):
        StateSnapshot(**_payload(**overrides))


@pytest.mark.parametrize(
    "overrides",
    [
        # Both kings still on the board
        {"side_to_move": "w", "winner": "w"},
        # Turn must stay with the winner
        {"board": "8/8/8/8/8/8/8/4K3", "side_to_move": "b", "winner": "w"},
    ],
)
def test_inconsistent_finished_game_is_rejected_on_rebuild(overrides: Dict[str, Any]) -> None:
    snap = StateSnapshot(**_payload(**overrides))
    with pytest.raises(ValueError):
        snap.to_state()


def test_finished_game_rebuilds() -> None:
    snap = StateSnapshot(**_payload(board="8/8/8/8/8/8/8/4K3", side_to_move="w", winner="w"))
    assert snap.to_state().is_terminal
