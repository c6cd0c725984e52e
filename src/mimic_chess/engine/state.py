from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from .board import (
    BLACK,
    KING,
    PAWN,
    PIECE_NAMES,
    PROMOTION_RANK,
    QUEEN,
    WHITE,
    Board,
    Piece,
    opponent,
)
from .move import square_coords


# What a promotion records in the mover's history
PROMOTION_RECORDS_QUEEN = "queen"
PROMOTION_RECORDS_PAWN = "pawn"
PROMOTION_POLICIES = (PROMOTION_RECORDS_QUEEN, PROMOTION_RECORDS_PAWN)
DEFAULT_PROMOTION_POLICY = PROMOTION_RECORDS_QUEEN


@dataclass(frozen=True)
class MimicLogic:
    """Movement rule in force for one player's upcoming turn.

    ``kind is None`` is standard logic (each piece moves like itself);
    otherwise every piece of that player moves like ``kind``.
    """

    kind: Optional[str] = None

    @property
    def is_standard(self) -> bool:
        return self.kind is None

    def movement_kind(self, piece: Piece) -> str:
        return piece.kind if self.kind is None else self.kind

    def label(self) -> str:
        return "standard" if self.kind is None else PIECE_NAMES[self.kind]


STANDARD = MimicLogic()


@dataclass(frozen=True)
class GameState:
    """Complete, immutable Mimic Chess position.

    Attributes:
        board (Board): Piece placement.
        side_to_move (str): ``'w'`` or ``'b'``. After a winning capture it
            stays on the winner.
        history (Mapping[str, Tuple[str, ...]]): Recorded piece kinds per
            color, one per completed move. Stored as a read-only mapping.
        unmoved (FrozenSet[int]): Squares never used as a move origin.
        winner (Optional[str]): Color that captured a king, if any.
    """

    board: Board
    side_to_move: str
    history: Mapping[str, Tuple[str, ...]]
    unmoved: FrozenSet[int]
    winner: Optional[str] = None

    def __post_init__(self) -> None:
        frozen = MappingProxyType({c: tuple(kinds) for c, kinds in self.history.items()})
        object.__setattr__(self, "history", frozen)
        object.__setattr__(self, "unmoved", frozenset(self.unmoved))

    def __hash__(self) -> int:
        return hash(
            (
                self.board,
                self.side_to_move,
                tuple(sorted(self.history.items())),
                self.unmoved,
                self.winner,
            )
        )

    @classmethod
    def from_fen(cls, fen: str) -> "GameState":
        """Build a state from a FEN string with no recorded history.

        Only the placement and side-to-move fields are read. Every occupied
        square on ranks 1, 2, 7 and 8 counts as unmoved, which reproduces
        ``new_game()`` for the start position.

        Raises:
            ValueError: If the placement or side to move is invalid.
        """
        parts = fen.strip().split()
        board = Board.from_fen(fen)
        side = parts[1] if len(parts) > 1 else WHITE
        if side not in (WHITE, BLACK):
            raise ValueError("Invalid side to move in FEN")
        unmoved = frozenset(sq for sq, _ in board.pieces() if sq // 8 in (0, 1, 6, 7))
        return cls(
            board=board,
            side_to_move=side,
            history={WHITE: (), BLACK: ()},
            unmoved=unmoved,
        )

    @property
    def is_terminal(self) -> bool:
        return self.winner is not None

    def mimic_logic(self, color: str) -> MimicLogic:
        recorded = self.history.get(color, ())
        if not recorded:
            return STANDARD
        return MimicLogic(recorded[-1])

    def to_fen(self) -> str:
        # Castling and en passant do not exist in this variant
        fullmove = len(self.history.get(BLACK, ())) + 1
        return f"{self.board.to_fen()} {self.side_to_move} - - 0 {fullmove}"


def new_game() -> GameState:
    """Return the initial state: standard layout, white to move."""
    board = Board.startpos()
    unmoved = frozenset(sq for sq in range(64) if sq // 8 in (0, 1, 6, 7))
    return GameState(
        board=board,
        side_to_move=WHITE,
        history={WHITE: (), BLACK: ()},
        unmoved=unmoved,
        winner=None,
    )


def apply_move(
    state: GameState,
    from_sq: int,
    to_sq: int,
    *,
    promotion_policy: str = DEFAULT_PROMOTION_POLICY,
) -> GameState:
    """Return the state after moving the piece on ``from_sq`` to ``to_sq``.

    The pair is expected to come from ``generate_moves(state, from_sq)``; no
    legality check is made here. A terminal ``state`` is returned unchanged.

    Steps:
    - capturing a king makes the side to move the winner;
    - a pawn reaching its far rank becomes a queen;
    - the mover's kind is appended to its history (after a promotion, ``q``
      or ``p`` depending on ``promotion_policy``);
    - ``from_sq`` leaves the unmoved set;
    - the turn passes to the opponent unless the game just ended.

    Raises:
        ValueError: If ``from_sq`` is empty or the policy is unknown.
    """
    if promotion_policy not in PROMOTION_POLICIES:
        raise ValueError(f"unknown promotion policy: {promotion_policy!r}")
    if state.winner is not None:
        return state

    board = state.board
    mover = board.piece_at(from_sq)
    if mover is None:
        raise ValueError("no piece to move from from_sq")
    captured = board.piece_at(to_sq)
    stm = state.side_to_move

    winner = stm if captured is not None and captured.kind == KING else None

    promoted = is_promotion(board, from_sq, to_sq)
    placed = Piece(QUEEN, mover.color) if promoted else mover
    if promoted:
        recorded = QUEEN if promotion_policy == PROMOTION_RECORDS_QUEEN else PAWN
    else:
        recorded = mover.kind

    history = dict(state.history)
    history[stm] = history.get(stm, ()) + (recorded,)

    return GameState(
        board=board.relocate(from_sq, to_sq, placed),
        side_to_move=stm if winner is not None else opponent(stm),
        history=history,
        unmoved=state.unmoved - {from_sq},
        winner=winner,
    )


def is_promotion(board: Board, from_sq: int, to_sq: int) -> bool:
    """True when the piece on ``from_sq`` is a pawn landing on its far rank."""
    mover = board.piece_at(from_sq)
    if mover is None or mover.kind != PAWN:
        return False
    return square_coords(to_sq)[1] == PROMOTION_RANK[mover.color]
