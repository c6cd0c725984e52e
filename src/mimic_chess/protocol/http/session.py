from __future__ import annotations

import threading
import uuid
from typing import Dict, Optional

from ...engine.game import Game
from ...engine.state import DEFAULT_PROMOTION_POLICY


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Retrieve existing sessions by `game_id`
    - Delete sessions

    Each stored ``Game`` is the single writable reference for its game;
    callers replace its state rather than editing it.
    """

    def __init__(self, default_policy: str = DEFAULT_PROMOTION_POLICY) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, Game] = {}
        self.default_policy = default_policy

    def create(self, promotion_policy: Optional[str] = None) -> str:
        """Create a new game session and return its `game_id`."""
        game = Game.new(promotion_policy or self.default_policy)
        gid = str(uuid.uuid4())
        with self._lock:
            self._games[gid] = game
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
