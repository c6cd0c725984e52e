from __future__ import annotations

from typing import Iterable, List, Tuple

from mimic_chess.engine.board import BLACK, PAWN, WHITE, Board
from mimic_chess.engine.move import square_to_str, str_to_square
from mimic_chess.engine.movegen import generate_moves
from mimic_chess.engine.state import GameState, apply_move, new_game


def _state(
    placement: str,
    stm: str = WHITE,
    white: Tuple[str, ...] = (),
    black: Tuple[str, ...] = (),
    unmoved: Iterable[str] = (),
) -> GameState:
    return GameState(
        board=Board.from_fen(placement),
        side_to_move=stm,
        history={WHITE: white, BLACK: black},
        unmoved=frozenset(str_to_square(s) for s in unmoved),
    )


def dests(state: GameState, sq: str) -> set[str]:
    return {square_to_str(s) for s in generate_moves(state, str_to_square(sq))}


def _play(state: GameState, moves: List[Tuple[str, str]]) -> GameState:
    for fr, to in moves:
        assert to in dests(state, fr), f"{fr}{to} not offered"
        state = apply_move(state, str_to_square(fr), str_to_square(to))
    return state


def test_pawn_single_and_dash_from_start() -> None:
    assert dests(new_game(), "e2") == {"e3", "e4"}


def test_black_pawn_moves_down_the_board() -> None:
    s = _play(new_game(), [("e2", "e4")])
    assert dests(s, "d7") == {"d6", "d5"}


def test_blocked_pawn_has_no_moves_and_no_dash() -> None:
    s = _state("4k3/8/8/8/8/4p3/4P3/4K3", unmoved=["e2"])
    assert dests(s, "e2") == set()


def test_dash_needs_second_square_empty() -> None:
    s = _state("4k3/8/8/8/4p3/8/4P3/4K3", unmoved=["e2"])
    assert dests(s, "e2") == {"e3"}


def test_no_dash_once_origin_has_moved() -> None:
    s = _state("4k3/8/8/8/8/8/4P3/4K3", unmoved=[])
    assert dests(s, "e2") == {"e3"}


def test_diagonal_only_captures_enemies() -> None:
    # Black pawn on d3 is capturable, own pawn on f3 is not; empty diagonals never are
    s = _state("4k3/8/8/8/8/3p1P2/4P3/4K3", unmoved=["e2"])
    assert dests(s, "e2") == {"e3", "e4", "d3"}


def test_non_pawn_under_pawn_logic_may_dash_from_any_rank() -> None:
    # Rook on its home square, never moved, moving like a pawn
    s = _state("4k3/8/8/8/8/8/8/R3K3", white=(PAWN,), unmoved=["a1", "e1"])
    assert dests(s, "a1") == {"a2", "a3"}
    # Black knight under pawn logic heads towards rank 1
    s = _state("1n2k3/8/8/8/8/8/8/4K3", stm=BLACK, black=(PAWN,), unmoved=["b8"])
    assert dests(s, "b8") == {"b7", "b6"}


def test_dash_never_offered_twice_from_same_square() -> None:
    s = _state("4k3/8/8/8/8/8/7P/R3K3", unmoved=["a1", "e1", "h2", "e8"])
    s = _play(
        s,
        [
            ("h2", "h3"),  # standard; white now mimics pawn
            ("e8", "d8"),
            ("a1", "a3"),  # rook dashes under pawn logic
            ("d8", "e8"),
            ("a3", "a1"),  # rook logic, back home
            ("e8", "d8"),
            ("h3", "h4"),  # pawn moving like a rook; white mimics pawn again
            ("d8", "e8"),
        ],
    )
    assert s.mimic_logic(WHITE).kind == PAWN
    assert str_to_square("a1") not in s.unmoved
    assert dests(s, "a1") == {"a2"}
