from __future__ import annotations

import pytest

from chesscore.engine.fen import STARTPOS_FEN
from chesscore.engine.position import Position
from chesscore.engine.zobrist import compute_hash_from_scratch

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


def test_make_unmake_restores_position() -> None:
    p = Position.from_fen(STARTPOS_FEN)
    h_before = p.hash
    mv = p.move_from_uci("e2e4")
    p.make_move(mv)
    assert p.to_fen() != STARTPOS_FEN
    p.unmake_move(mv)
    assert p.to_fen() == STARTPOS_FEN
    assert p.hash == h_before
    assert compute_hash_from_scratch(p) == h_before


@pytest.mark.parametrize(
    "fen",
    [
        STARTPOS_FEN,
        KIWIPETE,
        "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
        "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1",
        "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3",
    ],
)
def test_every_legal_move_round_trips(fen: str) -> None:
    p = Position.from_fen(fen)
    snapshot = p.copy()
    for mv in p.all_legal_moves():
        p.make_move(mv)
        assert p.hash == compute_hash_from_scratch(p), str(mv)
        p.unmake_move(mv)
        assert p == snapshot, str(mv)
        assert p.hash == snapshot.hash, str(mv)
        assert p.to_fen() == fen


def test_two_ply_round_trip_keeps_hash_consistent() -> None:
    p = Position.from_fen(KIWIPETE)
    original = p.to_fen()
    for mv in p.all_legal_moves():
        p.make_move(mv)
        for reply in p.all_legal_moves():
            p.make_move(reply)
            assert p.hash == compute_hash_from_scratch(p), f"{mv} {reply}"
            p.unmake_move(reply)
        p.unmake_move(mv)
    assert p.to_fen() == original
