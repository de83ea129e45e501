from __future__ import annotations

from chesscore.engine.piece import WHITE_KING, WHITE_ROOK
from chesscore.engine.position import Position
from chesscore.engine.square import Square


def moves_set(p: Position) -> set[str]:
    return {m.to_uci() for m in p.all_legal_moves()}


def test_white_castling_available_when_clear_and_not_in_check() -> None:
    p = Position.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    ms = moves_set(p)
    assert "e1g1" in ms
    assert "e1c1" in ms


def test_black_castling_available() -> None:
    p = Position.from_fen("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
    ms = moves_set(p)
    assert {"e8g8", "e8c8"} <= ms


def test_white_castling_blocked_when_in_check() -> None:
    # A black rook on e8 gives check on e1
    p = Position.from_fen("4r2k/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    ms = moves_set(p)
    assert "e1g1" not in ms
    assert "e1c1" not in ms


def test_castling_through_attacked_square_is_illegal() -> None:
    # f1 is covered by the rook on f8; d1 is free
    p = Position.from_fen("k4r2/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    ms = moves_set(p)
    assert "e1g1" not in ms
    assert "e1c1" in ms


def test_castling_into_check_is_illegal() -> None:
    # g1 is covered by the rook on g8, c1 by the bishop on f4
    p = Position.from_fen("k5r1/8/8/8/5b2/8/8/R3K2R w KQ - 0 1")
    ms = moves_set(p)
    assert "e1g1" not in ms
    assert "e1c1" not in ms


def test_queenside_b1_may_be_attacked_but_not_occupied() -> None:
    # b1 attacked by the rook on b8 does not prevent O-O-O
    p = Position.from_fen("kr6/8/8/8/8/8/8/R3K3 w Q - 0 1")
    assert "e1c1" in moves_set(p)
    # a knight on b1 does
    p = Position.from_fen("k7/8/8/8/8/8/8/RN2K3 w Q - 0 1")
    assert "e1c1" not in moves_set(p)


def test_castling_requires_the_right() -> None:
    p = Position.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Qkq - 0 1")
    ms = moves_set(p)
    assert "e1g1" not in ms
    assert "e1c1" in ms


def test_castling_needs_rook_on_its_corner() -> None:
    # Right claimed but rook missing from h1
    p = Position.from_fen("4k3/8/8/8/8/8/8/R3K3 w KQ - 0 1")
    ms = moves_set(p)
    assert "e1g1" not in ms
    assert "e1c1" in ms


def test_castling_moves_rook_correctly() -> None:
    p = Position.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    mv = p.move_from_uci("e1g1")
    assert mv.is_castling
    p.make_move(mv)
    assert p.piece_at(Square.from_name("g1")) == WHITE_KING
    assert p.piece_at(Square.from_name("f1")) == WHITE_ROOK
    assert p.piece_at(Square.from_name("h1")) is None
    assert p.to_fen() == "r3k2r/8/8/8/8/8/8/R4RK1 b kq - 1 1"
    p.unmake_move(mv)
    assert p.to_fen() == "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"


def test_queenside_castling_moves_rook_to_d_file() -> None:
    p = Position.from_fen("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 3 10")
    p.make_move(p.move_from_uci("e8c8"))
    assert p.to_fen() == "2kr3r/8/8/8/8/8/8/R3K2R w KQ - 4 11"
