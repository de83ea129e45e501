from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..errors import InvalidEpd, InvalidFen
from .fen import FenRecord, parse_fen_fields
from .position import Position


# quoted string | terminator | bare word
_TOKEN_RE = re.compile(r'"[^"]*"|;|[^\s;"]+')


@dataclass
class UnknownOperation:
    opcode: str
    operands: List[str] = field(default_factory=list)


@dataclass
class EpdRecord:
    """A position from an EPD file together with its operations.

    Move operands (``bm``, ``pm``, ``pv``, ``sm``) are kept as the SAN text
    found in the record.
    """

    position: Position
    acd: Optional[int] = None  # analysis count: depth
    acn: Optional[int] = None  # analysis count: nodes
    acs: Optional[int] = None  # analysis count: seconds
    bm: List[str] = field(default_factory=list)
    c: List[Optional[str]] = field(default_factory=lambda: [None] * 10)
    ce: Optional[int] = None
    dm: Optional[int] = None
    draw_accept: bool = False
    draw_claim: bool = False
    draw_offer: bool = False
    draw_reject: bool = False
    eco: Optional[str] = None
    fmvn: Optional[int] = None
    hmvc: Optional[int] = None
    id: Optional[str] = None
    nic: Optional[str] = None
    noop: List[str] = field(default_factory=list)
    pm: Optional[str] = None
    pv: List[str] = field(default_factory=list)
    rc: Optional[int] = None
    resign: bool = False
    sm: Optional[str] = None
    tcgs: Optional[int] = None
    tcri: Optional[Tuple[str, str]] = None
    tcsi: Optional[Tuple[str, str]] = None
    v: List[Optional[str]] = field(default_factory=lambda: [None] * 10)
    unknown: List[UnknownOperation] = field(default_factory=list)


_INT_OPS = ("acd", "acn", "acs", "ce", "dm", "fmvn", "hmvc", "rc", "tcgs")
_STRING_OPS = ("eco", "id", "nic")
_MOVE_OPS = ("pm", "sm")
_MOVE_LIST_OPS = ("bm", "pv")
_FLAG_OPS = ("draw_accept", "draw_claim", "draw_offer", "draw_reject", "resign")


def _unquote(token: str, opcode: str) -> str:
    if len(token) < 2 or token[0] != '"' or token[-1] != '"':
        raise InvalidEpd(f"{opcode} expects a quoted string")
    return token[1:-1]


def _single(operands: List[str], opcode: str) -> str:
    if len(operands) != 1:
        raise InvalidEpd(f"{opcode} expects exactly one operand")
    return operands[0]


def _apply_int(record: EpdRecord, opcode: str, operands: List[str]) -> None:
    token = _single(operands, opcode)
    try:
        setattr(record, opcode, int(token))
    except ValueError as e:
        raise InvalidEpd(f"{opcode} expects an integer") from e


def _apply_string(record: EpdRecord, opcode: str, operands: List[str]) -> None:
    setattr(record, opcode, _unquote(_single(operands, opcode), opcode))


def _apply_move(record: EpdRecord, opcode: str, operands: List[str]) -> None:
    setattr(record, opcode, _single(operands, opcode))


def _apply_move_list(record: EpdRecord, opcode: str, operands: List[str]) -> None:
    if not operands:
        raise InvalidEpd(f"{opcode} expects at least one move")
    setattr(record, opcode, list(operands))


def _apply_flag(record: EpdRecord, opcode: str, operands: List[str]) -> None:
    if operands:
        raise InvalidEpd(f"{opcode} takes no operands")
    setattr(record, opcode, True)


def _apply_noop(record: EpdRecord, opcode: str, operands: List[str]) -> None:
    record.noop.extend(operands)


def _apply_indexed_string(record: EpdRecord, opcode: str, operands: List[str]) -> None:
    slots = record.c if opcode[0] == "c" else record.v
    slots[int(opcode[1])] = _unquote(_single(operands, opcode), opcode)


def _apply_identifier(record: EpdRecord, opcode: str, operands: List[str]) -> None:
    if len(operands) != 2:
        raise InvalidEpd(f"{opcode} expects an address and a quoted name")
    setattr(record, opcode, (operands[0], _unquote(operands[1], opcode)))


_HANDLERS: Dict[str, Callable[[EpdRecord, str, List[str]], None]] = {}
_HANDLERS.update({op: _apply_int for op in _INT_OPS})
_HANDLERS.update({op: _apply_string for op in _STRING_OPS})
_HANDLERS.update({op: _apply_move for op in _MOVE_OPS})
_HANDLERS.update({op: _apply_move_list for op in _MOVE_LIST_OPS})
_HANDLERS.update({op: _apply_flag for op in _FLAG_OPS})
_HANDLERS.update({f"c{i}": _apply_indexed_string for i in range(10)})
_HANDLERS.update({f"v{i}": _apply_indexed_string for i in range(10)})
_HANDLERS["noop"] = _apply_noop
_HANDLERS["tcri"] = _apply_identifier
_HANDLERS["tcsi"] = _apply_identifier


def _split_operations(text: str) -> List[Tuple[str, List[str]]]:
    tokens = _TOKEN_RE.findall(text)
    if text.count('"') % 2:
        raise InvalidEpd("unterminated string")
    operations: List[Tuple[str, List[str]]] = []
    current: List[str] = []
    for token in tokens:
        if token == ";":
            if not current:
                raise InvalidEpd("empty operation")
            operations.append((current[0], current[1:]))
            current = []
        else:
            current.append(token)
    if current:
        raise InvalidEpd(f"operation {current[0]!r} is not terminated by ';'")
    return operations


def parse_epd_line(line: str) -> EpdRecord:
    """Parse one EPD record.

    Raises:
        InvalidEpd: If the position fields or any operation are malformed.
    """
    parts = line.strip().split(None, 4)
    if len(parts) < 4:
        raise InvalidEpd("record needs four position fields")
    try:
        placement, side_to_move, castling, en_passant = parse_fen_fields(parts)
    except InvalidFen as e:
        raise InvalidEpd(str(e)) from e

    fen = FenRecord(
        placement=placement,
        side_to_move=side_to_move,
        castling_rights=castling,
        en_passant_target=en_passant,
    )
    operations = _split_operations(parts[4]) if len(parts) == 5 else []

    record = EpdRecord(position=Position())
    for opcode, operands in operations:
        handler = _HANDLERS.get(opcode)
        if handler is None:
            record.unknown.append(UnknownOperation(opcode, operands))
        else:
            handler(record, opcode, operands)

    if record.hmvc is not None:
        if record.hmvc < 0:
            raise InvalidEpd("hmvc must be >= 0")
        fen.halfmove_clock = record.hmvc
    if record.fmvn is not None:
        if record.fmvn < 1:
            raise InvalidEpd("fmvn must be >= 1")
        fen.fullmove_number = record.fmvn
    record.position = Position.from_record(fen)
    return record


def read_epd(lines: Iterable[str]) -> List[EpdRecord]:
    """Parse every record in ``lines``, skipping blanks and ``#`` comments."""
    records: List[EpdRecord] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        records.append(parse_epd_line(stripped))
    return records
