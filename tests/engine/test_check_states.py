from __future__ import annotations

import pytest

from chesscore.engine.piece import Color
from chesscore.engine.position import CheckState, Position


def test_checkmate() -> None:
    p = Position.from_fen("4k3/4Q3/4K3/8/8/8/8/8 b - - 0 1")
    assert p.is_king_in_check()
    assert p.all_legal_moves() == []
    assert p.check_state() is CheckState.CHECKMATE


def test_stalemate() -> None:
    p = Position.from_fen("k7/8/1KN5/8/8/8/8/8 b - - 0 1")
    assert not p.is_king_in_check()
    assert p.all_legal_moves() == []
    assert p.check_state() is CheckState.STALEMATE


def test_check_with_escape() -> None:
    p = Position.from_fen("4k3/8/8/8/8/8/8/4RK2 b - - 0 1")
    assert p.check_state() is CheckState.CHECK
    for mv in p.all_legal_moves():
        p.make_move(mv)
        assert not p.is_king_in_check(Color.BLACK)
        p.unmake_move(mv)


def test_start_position_is_quiet() -> None:
    assert Position.startpos().check_state() is CheckState.NONE


def test_position_without_king_is_never_in_check() -> None:
    p = Position.from_fen("8/8/8/8/8/8/8/r3K3 b - - 0 1")
    assert not p.is_king_in_check()
    assert p.is_king_in_check(Color.WHITE)


@pytest.mark.parametrize(
    "fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
        "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
        "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
        "r4rk1/1pp1qppp/p1np1n2/2b1p1B1/2B1P1b1/P1NP1N2/1PP1QPPP/R4RK1 w - - 0 10",
    ],
)
def test_no_legal_move_leaves_own_king_attacked(fen: str) -> None:
    p = Position.from_fen(fen)
    mover = p.side_to_move
    for mv in p.all_legal_moves():
        p.make_move(mv)
        assert not p.is_king_in_check(mover), str(mv)
        p.unmake_move(mv)


def test_capture_moves_are_the_capturing_subset() -> None:
    p = Position.from_fen("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1")
    captures = p.capture_moves()
    assert captures
    assert all(m.is_capture for m in captures)
    assert {m.to_uci() for m in captures} == {m.to_uci() for m in p.all_legal_moves() if m.captured}
