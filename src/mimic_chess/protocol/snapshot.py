from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..engine.board import BLACK, KING, PIECE_KINDS, WHITE, Board, opponent
from ..engine.move import square_to_str, str_to_square
from ..engine.state import GameState


class StateSnapshot(BaseModel):
    """Wire form of a ``GameState`` exchanged with a remote peer.

    The receiver replaces its local state wholesale with ``to_state()``;
    there is no merge.
    """

    board: str = Field(..., description="FEN piece placement")
    side_to_move: Literal["w", "b"]
    history: Dict[Literal["w", "b"], List[str]] = Field(default_factory=dict)
    unmoved: List[str] = Field(default_factory=list, description="Square names")
    winner: Optional[Literal["w", "b"]] = None

    @field_validator("board")
    @classmethod
    def _check_board(cls, v: str) -> str:
        Board.from_fen(v)
        return v.strip().split()[0]

    @field_validator("history")
    @classmethod
    def _check_history(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        for kinds in v.values():
            for k in kinds:
                if k not in PIECE_KINDS:
                    raise ValueError(f"invalid piece kind in history: {k!r}")
        return v

    @field_validator("unmoved")
    @classmethod
    def _check_unmoved(cls, v: List[str]) -> List[str]:
        for s in v:
            str_to_square(s)
        return v

    @classmethod
    def from_state(cls, state: GameState) -> "StateSnapshot":
        return cls(
            board=state.board.to_fen(),
            side_to_move=state.side_to_move,  # type: ignore[arg-type]
            history={c: list(state.history.get(c, ())) for c in (WHITE, BLACK)},  # type: ignore[misc]
            unmoved=[square_to_str(sq) for sq in sorted(state.unmoved)],
            winner=state.winner,  # type: ignore[arg-type]
        )

    def to_state(self) -> GameState:
        """Rebuild the engine state.

        Raises:
            ValueError: If a finished game is inconsistent: the winner is not
                the side to move or the losing king is still on the board.
        """
        board = Board.from_fen(self.board)
        if self.winner is not None:
            if self.side_to_move != self.winner:
                raise ValueError("winner must be the side to move")
            loser = opponent(self.winner)
            if any(p.kind == KING and p.color == loser for _, p in board.pieces()):
                raise ValueError("losing king is still on the board")
        return GameState(
            board=board,
            side_to_move=self.side_to_move,
            history={c: tuple(self.history.get(c, [])) for c in (WHITE, BLACK)},  # type: ignore[call-overload]
            unmoved=frozenset(str_to_square(s) for s in self.unmoved),
            winner=self.winner,
        )
