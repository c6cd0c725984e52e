from __future__ import annotations

from typing import FrozenSet, List, Set, Tuple

from .board import BISHOP, KING, KNIGHT, PAWN, QUEEN, ROOK, WHITE, Board
from .move import Move, coords_to_square, square_coords
from .state import GameState, is_promotion


Offsets = Tuple[Tuple[int, int], ...]

# Direction vectors (df, dr)
KNIGHT_OFFSETS: Offsets = ((1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2))
BISHOP_DIRS: Offsets = ((1, 1), (1, -1), (-1, -1), (-1, 1))
ROOK_DIRS: Offsets = ((1, 0), (-1, 0), (0, 1), (0, -1))
QUEEN_DIRS: Offsets = ROOK_DIRS + BISHOP_DIRS
KING_OFFSETS: Offsets = QUEEN_DIRS

SLIDER_DIRS = {BISHOP: BISHOP_DIRS, ROOK: ROOK_DIRS, QUEEN: QUEEN_DIRS}
STEP_OFFSETS = {KNIGHT: KNIGHT_OFFSETS, KING: KING_OFFSETS}


def generate_moves(state: GameState, origin: int) -> FrozenSet[int]:
    """Return the legal destination squares for the piece on ``origin``.

    The geometry comes from the mover's mimic logic (its own kind on a
    player's first move, else the kind that player moved last); friend/foe
    checks always use the piece's real color.

    Returns:
        FrozenSet[int]: Destination squares; empty when ``origin`` is empty,
            holds a piece of the side not to move, or the game is over.
    """
    if state.winner is not None:
        return frozenset()
    board = state.board
    piece = board.piece_at(origin)
    if piece is None or piece.color != state.side_to_move:
        return frozenset()

    kind = state.mimic_logic(piece.color).movement_kind(piece)
    if kind in SLIDER_DIRS:
        dests = _slide(board, origin, piece.color, SLIDER_DIRS[kind])
    elif kind in STEP_OFFSETS:
        dests = _step(board, origin, piece.color, STEP_OFFSETS[kind])
    elif kind == PAWN:
        dests = _pawn(board, origin, piece.color, origin in state.unmoved)
    else:
        raise ValueError(f"unknown movement kind: {kind!r}")
    return frozenset(dests)


def legal_moves(state: GameState) -> List[Move]:
    """Return every legal move for the side to move, ordered by squares."""
    moves: List[Move] = []
    for sq, piece in state.board.pieces():
        if piece.color != state.side_to_move:
            continue
        for to_sq in sorted(generate_moves(state, sq)):
            promotion = "q" if is_promotion(state.board, sq, to_sq) else None
            moves.append(Move(sq, to_sq, promotion))
    return moves


def _slide(board: Board, origin: int, color: str, dirs: Offsets) -> Set[int]:
    out: Set[int] = set()
    f0, r0 = square_coords(origin)
    for df, dr in dirs:
        tf, tr = f0 + df, r0 + dr
        while True:
            sq = coords_to_square(tf, tr)
            if sq is None:
                break
            target = board.squares[sq]
            if target is None:
                out.add(sq)
            else:
                if target.color != color:
                    out.add(sq)
                break
            tf += df
            tr += dr
    return out


def _step(board: Board, origin: int, color: str, offsets: Offsets) -> Set[int]:
    out: Set[int] = set()
    f0, r0 = square_coords(origin)
    for df, dr in offsets:
        sq = coords_to_square(f0 + df, r0 + dr)
        if sq is None:
            continue
        target = board.squares[sq]
        if target is None or target.color != color:
            out.add(sq)
    return out


def _pawn(board: Board, origin: int, color: str, unmoved: bool) -> Set[int]:
    out: Set[int] = set()
    f0, r0 = square_coords(origin)
    dr = 1 if color == WHITE else -1

    one = coords_to_square(f0, r0 + dr)
    if one is not None and board.squares[one] is None:
        out.add(one)
        # Dash: any piece under pawn logic whose origin has never moved
        two = coords_to_square(f0, r0 + 2 * dr)
        if unmoved and two is not None and board.squares[two] is None:
            out.add(two)

    # Diagonal captures only; no en passant
    for df in (-1, 1):
        sq = coords_to_square(f0 + df, r0 + dr)
        if sq is None:
            continue
        target = board.squares[sq]
        if target is not None and target.color != color:
            out.add(sq)
    return out
