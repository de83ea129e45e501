from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..errors import InvalidFen, InvalidPiece, InvalidSquare
from .piece import Color, Piece
from .square import Square
from .state import CastlingRights


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
EMPTY_FEN = "8/8/8/8/8/8/8/8 w - - 0 1"

PiecePlacement = List[Optional[Piece]]


@dataclass
class FenRecord:
    """Position fields decoded from a FEN string.

    ``placement`` holds 64 optional pieces indexed a1..h8 (rank-major).
    """

    placement: PiecePlacement = field(default_factory=lambda: [None] * 64)
    side_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = CastlingRights()
    en_passant_target: Optional[Square] = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    def to_fen(self) -> str:
        return format_fen(self)


def parse_placement(text: str) -> PiecePlacement:
    """Decode the piece-placement field (ranks 8..1 separated by ``/``)."""
    ranks = text.split("/")
    if len(ranks) != 8:
        raise InvalidFen("board must have 8 ranks")
    placement: PiecePlacement = [None] * 64
    for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
        file_idx = 0
        prev_was_count = False
        for ch in rank:
            if ch in "12345678":
                if prev_was_count:
                    raise InvalidFen("two consecutive empty counts in rank")
                file_idx += int(ch)
                prev_was_count = True
            elif ch.isdigit():
                raise InvalidFen(f"invalid empty count {ch!r} in rank")
            else:
                prev_was_count = False
                if file_idx >= 8:
                    raise InvalidFen("too many squares in rank")
                try:
                    placement[rank_idx * 8 + file_idx] = Piece.from_char(ch)
                except InvalidPiece as e:
                    raise InvalidFen(f"invalid piece {ch!r}") from e
                file_idx += 1
            if file_idx > 8:
                raise InvalidFen("too many squares in rank")
        if file_idx != 8:
            raise InvalidFen("rank does not sum to 8 squares")
    return placement


def parse_side_to_move(text: str) -> Color:
    if text == "w":
        return Color.WHITE
    if text == "b":
        return Color.BLACK
    raise InvalidFen("side to move must be 'w' or 'b'")


def parse_en_passant(text: str, side_to_move: Color) -> Optional[Square]:
    """Decode the en passant field; the target must sit on the rank the last
    double step skipped (6th when White is to move, 3rd when Black is)."""
    if text == "-":
        return None
    try:
        square = Square.from_name(text)
    except InvalidSquare as e:
        raise InvalidFen("invalid en passant square") from e
    expected_rank = 6 if side_to_move is Color.WHITE else 3
    if square.rank != expected_rank:
        raise InvalidFen("invalid en passant square rank")
    return square


def parse_fen_fields(fields: Sequence[str]) -> Tuple[PiecePlacement, Color, CastlingRights, Optional[Square]]:
    """Decode the first four FEN fields (shared with EPD)."""
    if len(fields) < 4:
        raise InvalidFen("missing position fields")
    placement_text, stm_text, castling_text, ep_text = fields[:4]
    placement = parse_placement(placement_text)
    side_to_move = parse_side_to_move(stm_text)
    castling = CastlingRights.from_fen(castling_text)
    en_passant = parse_en_passant(ep_text, side_to_move)
    return placement, side_to_move, castling, en_passant


def parse_fen(fen: str) -> FenRecord:
    """Parse a Forsyth–Edwards Notation (FEN) string.

    Args:
        fen (str): FEN string describing the position.

    Returns:
        FenRecord: The decoded fields.

    Raises:
        InvalidFen: If ``fen`` is empty, has the wrong number of fields, or
            contains invalid piece placement, castling rights, en passant
            square, or move counters.
    """
    if not fen or not isinstance(fen, str):
        raise InvalidFen("FEN must be a non-empty string")
    parts = fen.strip().split()
    if len(parts) != 6:
        raise InvalidFen("FEN must have 6 fields")
    placement, side_to_move, castling, en_passant = parse_fen_fields(parts)

    try:
        halfmove_clock = int(parts[4])
        fullmove_number = int(parts[5])
    except ValueError as e:
        raise InvalidFen("invalid move counters") from e
    if halfmove_clock < 0 or fullmove_number <= 0:
        raise InvalidFen("invalid move counters")

    return FenRecord(
        placement=placement,
        side_to_move=side_to_move,
        castling_rights=castling,
        en_passant_target=en_passant,
        halfmove_clock=halfmove_clock,
        fullmove_number=fullmove_number,
    )


def format_placement(placement: Sequence[Optional[Piece]]) -> str:
    ranks_str: List[str] = []
    for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
        run = 0
        row = []
        for file_idx in range(8):
            piece = placement[rank_idx * 8 + file_idx]
            if piece is None:
                run += 1
            else:
                if run > 0:
                    row.append(str(run))
                    run = 0
                row.append(piece.char)
        if run > 0:
            row.append(str(run))
        ranks_str.append("".join(row))
    return "/".join(ranks_str)


def format_fen(record: FenRecord) -> str:
    """Serialize ``record`` into a normalized FEN string."""
    ep = record.en_passant_target.name if record.en_passant_target is not None else "-"
    return (
        f"{format_placement(record.placement)} {record.side_to_move.letter} "
        f"{record.castling_rights.to_fen()} {ep} {record.halfmove_clock} {record.fullmove_number}"
    )
