from __future__ import annotations

import pytest

from chesscore.engine.game import Game
from chesscore.protocol.http.session import InMemorySessionStore


def test_create_get_set_delete() -> None:
    store = InMemorySessionStore()
    gid = store.create()
    assert len(store) == 1
    game = store.get(gid)
    assert isinstance(game, Game)

    replacement = Game.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    store.set(gid, replacement)
    assert store.get(gid) is replacement

    assert store.delete(gid) is True
    assert store.get(gid) is None
    assert store.delete(gid) is False
    assert len(store) == 0


def test_set_unknown_id_raises() -> None:
    store = InMemorySessionStore()
    with pytest.raises(KeyError):
        store.set("missing", Game.new())


def test_ids_are_unique() -> None:
    store = InMemorySessionStore()
    ids = {store.create() for _ in range(10)}
    assert len(ids) == 10
