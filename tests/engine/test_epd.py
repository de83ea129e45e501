from __future__ import annotations

import pytest

from chesscore.engine.epd import parse_epd_line, read_epd
from chesscore.engine.piece import Color
from chesscore.errors import InvalidEpd


def test_parse_common_operations() -> None:
    record = parse_epd_line(
        'r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - '
        'bm Qxf7#; id "scholar mate"; acd 3; ce 32767; c0 "first comment"; pv Qxf7#;'
    )
    assert record.bm == ["Qxf7#"]
    assert record.id == "scholar mate"
    assert record.acd == 3
    assert record.ce == 32767
    assert record.c[0] == "first comment"
    assert record.c[1] is None
    assert record.pv == ["Qxf7#"]
    assert record.position.side_to_move is Color.WHITE
    assert record.position.to_fen() == "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 0 1"


def test_counters_applied_to_position() -> None:
    record = parse_epd_line("4k3/8/8/8/8/8/8/4K3 b - - hmvc 12; fmvn 40;")
    assert record.hmvc == 12
    assert record.fmvn == 40
    assert record.position.halfmove_clock == 12
    assert record.position.fullmove_number == 40
    assert record.position.to_fen() == "4k3/8/8/8/8/8/8/4K3 b - - 12 40"


def test_flags_identifiers_and_unknown_opcodes_are_kept() -> None:
    record = parse_epd_line(
        '4k3/8/8/8/8/8/8/4K3 w - - draw_offer; tcri 192.168.0.1 "Deep Blue"; '
        'noop a b c; xyz 1 2; v3 "var";'
    )
    assert record.draw_offer is True
    assert record.resign is False
    assert record.tcri == ("192.168.0.1", "Deep Blue")
    assert record.noop == ["a", "b", "c"]
    assert record.v[3] == "var"
    assert len(record.unknown) == 1
    assert record.unknown[0].opcode == "xyz"
    assert record.unknown[0].operands == ["1", "2"]


def test_quoted_string_may_contain_semicolons() -> None:
    record = parse_epd_line('4k3/8/8/8/8/8/8/4K3 w - - c0 "a; b";')
    assert record.c[0] == "a; b"


def test_record_without_operations() -> None:
    record = parse_epd_line("4k3/8/8/8/8/8/8/4K3 w - -")
    assert record.bm == []
    assert record.unknown == []


@pytest.mark.parametrize(
    "line",
    [
        "4k3/8/8/8/8/8/8/4K3 w -",  # missing field
        "4k3/8/8/8/8/8/8/4K3 x - -",  # bad side
        "4k3/8/8/8/8/8/8/4K3 w - - acd 3",  # unterminated operation
        "4k3/8/8/8/8/8/8/4K3 w - - acd three;",  # non-numeric
        "4k3/8/8/8/8/8/8/4K3 w - - id unquoted;",  # id needs a quoted string
        '4k3/8/8/8/8/8/8/4K3 w - - id "open;',  # unterminated string
        "4k3/8/8/8/8/8/8/4K3 w - - bm;",  # empty move list
        "4k3/8/8/8/8/8/8/4K3 w - - ;",  # empty operation
        "4k3/8/8/8/8/8/8/4K3 w - - fmvn 0;",  # fullmove below 1
        "4k3/8/8/8/8/8/8/4K3 w - - resign now;",  # flag with operand
    ],
)
def test_invalid_records_raise(line: str) -> None:
    with pytest.raises(InvalidEpd):
        parse_epd_line(line)


def test_read_epd_skips_blank_lines_and_comments() -> None:
    lines = [
        "# sample suite",
        "",
        '4k3/8/8/8/8/8/8/4K3 w - - id "one";',
        "   ",
        '4k3/8/8/8/8/8/8/4K2R w K - id "two";',
    ]
    records = read_epd(lines)
    assert [r.id for r in records] == ["one", "two"]
