from __future__ import annotations

import threading
import uuid
from typing import Dict, Optional

from ...engine.game import Game


class InMemorySessionStore:
    """Games held by the HTTP API, keyed by an opaque UUID4 ``game_id``.

    Sync handlers run in FastAPI's threadpool, so every access takes the lock.
    A ``Game`` handed out by :meth:`get` is mutated in place by the move and
    undo endpoints; loading a new FEN swaps the whole game via :meth:`set`.
    Nothing is persisted and sessions live until deleted.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, Game] = {}

    def create(self, game: Optional[Game] = None) -> str:
        """Register ``game`` (start position if omitted); return its id."""
        game_id = str(uuid.uuid4())
        with self._lock:
            self._games[game_id] = game if game is not None else Game.new()
        return game_id

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def set(self, game_id: str, game: Game) -> None:
        """Replace the game behind an existing id.

        Raises:
            KeyError: If ``game_id`` was never created or has been deleted.
        """
        with self._lock:
            if game_id not in self._games:
                raise KeyError(game_id)
            self._games[game_id] = game

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
