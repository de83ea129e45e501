from __future__ import annotations

import pytest

from chesscore.engine.fen import EMPTY_FEN, STARTPOS_FEN, format_fen, parse_fen
from chesscore.engine.piece import WHITE_ROOK, Color
from chesscore.engine.position import Position
from chesscore.engine.square import Square
from chesscore.errors import InvalidFen


def test_startpos_round_trip() -> None:
    p = Position.from_fen(STARTPOS_FEN)
    assert p.to_fen() == STARTPOS_FEN
    assert Position.startpos() == p


def test_parse_fen_fields() -> None:
    record = parse_fen("r3k2r/8/8/8/4P3/8/8/R3K2R b Kq e3 4 12")
    assert record.placement[0] == WHITE_ROOK
    assert record.side_to_move is Color.BLACK
    assert record.castling_rights.to_fen() == "Kq"
    assert record.en_passant_target == Square.from_name("e3")
    assert record.halfmove_clock == 4
    assert record.fullmove_number == 12
    assert format_fen(record) == "r3k2r/8/8/8/4P3/8/8/R3K2R b Kq e3 4 12"


def test_empty_board() -> None:
    p = Position.from_fen(EMPTY_FEN)
    assert p.board.is_empty()
    assert p == Position()


@pytest.mark.parametrize(
    "fen",
    [
        "r1bqkbnr/pppp1ppp/2n5/4p3/3P4/5N2/PPP1PPPP/RNBQKB1R b KQ - 2 3",
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - e3 0 1",
        "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1",
        "8/8/8/8/8/8/8/8 w - - 0 1",
    ],
)
def test_round_trip_various_positions(fen: str) -> None:
    p = Position.from_fen(fen)
    assert p.to_fen() == fen


@pytest.mark.parametrize(
    "fen",
    [
        "",  # empty
        "8/8/8/8/8/8/8 w - - 0 1",  # not enough ranks
        "8/8/8/8/8/8/8/8 w - - 0",  # missing fields
        "8/8/8/8/8/8/8/8 x - - 0 1",  # bad side to move
        "8/8/8/8/8/8/8/8 w A - 0 1",  # bad castling
        "8/8/8/8/8/8/8/8 w KK - 0 1",  # repeated castling letter
        "8/8/8/8/8/8/8/8 w - z9 0 1",  # bad ep square
        "8/8/8/8/8/8/8/8 w - e3 0 1",  # ep on the wrong rank for white to move
        "8/8/8/8/8/8/8/8 b - e6 0 1",  # ep on the wrong rank for black to move
        "8/8/8/8/8/8/8/8 w - - -1 1",  # bad halfmove
        "8/8/8/8/8/8/8/8 w - - 0 0",  # bad fullmove
        "8/8/8/8/8/8/8/8 w - - x 1",  # non-numeric counter
        "9/8/8/8/8/8/8/8 w - - 0 1",  # too many squares
        "7/8/8/8/8/8/8/8 w - - 0 1",  # too few squares
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",  # bad piece
        "8/8/8/8/8/8/8/44 w - - 0 1",  # consecutive empty counts
        "8/8/8/8/8/8/8/\u00b2\u00b2\u00b2\u00b2 w - - 0 1",  # superscript digits
        "8/8/8/8/8/8/8/0008 w - - 0 1",  # zero empty count
    ],
)
def test_invalid_fen_raises(fen: str) -> None:
    with pytest.raises(InvalidFen):
        Position.from_fen(fen)


def test_invalid_fen_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="invalid FEN"):
        Position.from_fen("nonsense")
