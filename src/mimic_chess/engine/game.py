from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from .move import Move
from .movegen import generate_moves, legal_moves
from .state import (
    DEFAULT_PROMOTION_POLICY,
    PROMOTION_POLICIES,
    GameState,
    MimicLogic,
    apply_move,
    is_promotion,
    new_game,
)


logger = logging.getLogger(__name__)


@dataclass
class Game:
    """Mutable holder around the current immutable ``GameState``.

    Responsibility: own the single writable reference to a game, validate
    requested moves, and keep prior states for undo.
    """

    state: GameState
    promotion_policy: str = DEFAULT_PROMOTION_POLICY
    move_stack: List[Move] = field(default_factory=list)
    _previous: List[GameState] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.promotion_policy not in PROMOTION_POLICIES:
            raise ValueError(f"unknown promotion policy: {self.promotion_policy!r}")

    @classmethod
    def new(cls, promotion_policy: str = DEFAULT_PROMOTION_POLICY) -> "Game":
        return cls(state=new_game(), promotion_policy=promotion_policy)

    @classmethod
    def from_state(
        cls, state: GameState, promotion_policy: str = DEFAULT_PROMOTION_POLICY
    ) -> "Game":
        return cls(state=state, promotion_policy=promotion_policy)

    @property
    def side_to_move(self) -> str:
        return self.state.side_to_move

    @property
    def winner(self) -> Optional[str]:
        return self.state.winner

    def to_fen(self) -> str:
        return self.state.to_fen()

    def mimic_logic(self, color: str) -> MimicLogic:
        return self.state.mimic_logic(color)

    def destinations(self, square: int) -> FrozenSet[int]:
        return generate_moves(self.state, square)

    def legal_moves(self) -> List[Move]:
        return legal_moves(self.state)

    def apply_move(self, move: Move) -> GameState:
        if self.state.winner is not None:
            raise ValueError("game is over")
        if move.to_sq not in generate_moves(self.state, move.from_sq):
            raise ValueError("illegal move")
        if move.promotion is not None and not is_promotion(
            self.state.board, move.from_sq, move.to_sq
        ):
            raise ValueError("illegal move")
        prev = self.state
        self.state = apply_move(
            prev, move.from_sq, move.to_sq, promotion_policy=self.promotion_policy
        )
        self._previous.append(prev)
        self.move_stack.append(move)
        logger.debug("move %s by %s", move.to_uci(), prev.side_to_move)
        if self.state.winner is not None:
            logger.debug("king captured, winner=%s", self.state.winner)
        return self.state

    def undo_move(self) -> None:
        if not self.move_stack:
            raise ValueError("no moves to undo")
        self.move_stack.pop()
        self.state = self._previous.pop()

    def reset(self) -> None:
        self.state = new_game()
        self.move_stack.clear()
        self._previous.clear()
        logger.info("game reset")

    def replace_state(self, state: GameState) -> None:
        # Received from a peer: no merge, prior local history is dropped
        self.state = state
        self.move_stack.clear()
        self._previous.clear()

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.move_stack]
