from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..errors import InvalidMove, InvalidSquare
from .piece import Piece, PieceType
from .square import Square
from .state import CastlingRights


PROMOTION_PIECES = {"q", "r", "b", "n"}


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    A move carries everything needed to undo it: besides the moving, captured
    and promoted pieces it snapshots the castling rights, halfmove clock and
    en passant target that were in effect before it was made.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.
        piece (Piece): The moving piece.
        captured (Optional[Piece]): Piece removed by this move, if any.
        promoted (Optional[Piece]): Piece a pawn turns into, if any.
        en_passant (bool): Whether this is an en passant capture.
        castling_rights_before (CastlingRights): Rights before the move.
        halfmove_clock_before (int): Halfmove clock before the move.
        en_passant_target_before (Optional[Square]): En passant target before
            the move.
    """

    from_sq: Square
    to_sq: Square
    piece: Piece
    captured: Optional[Piece] = None
    promoted: Optional[Piece] = None
    en_passant: bool = False
    castling_rights_before: CastlingRights = CastlingRights()
    halfmove_clock_before: int = 0
    en_passant_target_before: Optional[Square] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_castling(self) -> bool:
        return (
            self.piece.type is PieceType.KING
            and self.from_sq.rank == self.to_sq.rank
            and abs(self.from_sq.file - self.to_sq.file) == 2
        )

    @property
    def is_double_step(self) -> bool:
        return self.piece.type is PieceType.PAWN and abs(self.from_sq.rank - self.to_sq.rank) == 2

    @property
    def en_passant_square(self) -> Square:
        """Square of the pawn removed by an en passant capture."""
        return Square.from_index((self.from_sq.rank - 1) * 8 + (self.to_sq.file - 1))

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = self.promoted.type.letter if self.promoted is not None else ""
        return self.from_sq.name + self.to_sq.name + promo

    def __str__(self) -> str:
        parts = []
        if self.piece.type is not PieceType.PAWN:
            parts.append(self.piece.type.letter.upper())
        parts.append(self.from_sq.name)
        if self.captured is not None:
            parts.append("x" + self.captured.type.letter.upper())
        else:
            parts.append("-")
        parts.append(self.to_sq.name)
        if self.promoted is not None:
            parts.append("=" + self.promoted.type.letter.upper())
        if self.en_passant:
            parts.append(" e.p.")
        return "".join(parts)


def parse_uci(uci: str) -> Tuple[Square, Square, Optional[PieceType]]:
    """Parse a UCI move string.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        Tuple[Square, Square, Optional[PieceType]]: Origin, destination and
            promotion piece type.

    Raises:
        InvalidMove: If the string has an invalid length, squares, or
            promotion piece.
    """
    if not isinstance(uci, str) or len(uci) not in (4, 5):
        raise InvalidMove(f"invalid UCI move length: {uci!r}")
    try:
        from_sq = Square.from_name(uci[0:2])
        to_sq = Square.from_name(uci[2:4])
    except InvalidSquare as e:
        raise InvalidMove(f"invalid UCI move: {uci!r}") from e
    promo: Optional[PieceType] = None
    if len(uci) == 5:
        letter = uci[4].lower()
        if letter not in PROMOTION_PIECES:
            raise InvalidMove(f"invalid promotion piece: {letter!r}")
        promo = PieceType.from_char(letter)
    return from_sq, to_sq, promo


def moves_to_str(moves: Iterable[Move]) -> str:
    return ", ".join(str(m) for m in moves)
