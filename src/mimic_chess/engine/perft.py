from __future__ import annotations

from .movegen import legal_moves
from .state import DEFAULT_PROMOTION_POLICY, GameState, apply_move


def perft(
    state: GameState, depth: int, *, promotion_policy: str = DEFAULT_PROMOTION_POLICY
) -> int:
    """Compute perft node count for `state` at `depth`.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).
    - A finished game (king captured) has no children.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for m in legal_moves(state):
        child = apply_move(state, m.from_sq, m.to_sq, promotion_policy=promotion_policy)
        nodes += perft(child, depth - 1, promotion_policy=promotion_policy)
    return nodes
