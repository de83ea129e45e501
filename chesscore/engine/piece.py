from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from ..errors import InvalidPiece


class PieceType(Enum):
    PAWN = 0
    ROOK = 1
    KNIGHT = 2
    BISHOP = 3
    QUEEN = 4
    KING = 5

    @property
    def letter(self) -> str:
        """Lowercase FEN letter for this piece type."""
        return _TYPE_TO_LETTER[self]

    @classmethod
    def from_char(cls, letter: str) -> "PieceType":
        """Convert a FEN letter (either case) into a piece type.

        Raises:
            InvalidPiece: If ``letter`` does not name a piece type.
        """
        try:
            return _LETTER_TO_TYPE[letter.lower()]
        except (KeyError, AttributeError):
            raise InvalidPiece(f"invalid piece letter: {letter!r}") from None


_TYPE_TO_LETTER = {
    PieceType.PAWN: "p",
    PieceType.ROOK: "r",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_LETTER_TO_TYPE = {v: k for k, v in _TYPE_TO_LETTER.items()}

PROMOTION_TYPES: Tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


class Color(Enum):
    WHITE = 0
    BLACK = 1

    @property
    def other(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def letter(self) -> str:
        return "w" if self is Color.WHITE else "b"


@dataclass(frozen=True)
class Piece:
    """A piece: type and color, compared structurally."""

    type: PieceType
    color: Color

    @property
    def index(self) -> int:
        """Position of this piece's bitmap in the board's 12 bitmaps."""
        return self.type.value + (6 if self.color is Color.BLACK else 0)

    @property
    def char(self) -> str:
        """FEN letter: uppercase for white, lowercase for black."""
        letter = self.type.letter
        return letter.upper() if self.color is Color.WHITE else letter

    @classmethod
    def from_char(cls, letter: str) -> "Piece":
        """Parse a FEN piece letter.

        Raises:
            InvalidPiece: If ``letter`` is not one of ``PNBRQKpnbrqk``.
        """
        if not isinstance(letter, str) or len(letter) != 1:
            raise InvalidPiece(f"invalid piece letter: {letter!r}")
        piece_type = PieceType.from_char(letter)
        color = Color.WHITE if letter.isupper() else Color.BLACK
        return piece_of(piece_type, color)

    def __str__(self) -> str:
        return self.char


PIECES: Tuple[Piece, ...] = tuple(
    Piece(t, c) for c in (Color.WHITE, Color.BLACK) for t in PieceType
)
_PIECE_LOOKUP: Dict[Tuple[PieceType, Color], Piece] = {(p.type, p.color): p for p in PIECES}


def piece_of(piece_type: PieceType, color: Color) -> Piece:
    """Return the interned piece for ``piece_type`` and ``color``."""
    return _PIECE_LOOKUP[(piece_type, color)]


(
    WHITE_PAWN,
    WHITE_ROOK,
    WHITE_KNIGHT,
    WHITE_BISHOP,
    WHITE_QUEEN,
    WHITE_KING,
    BLACK_PAWN,
    BLACK_ROOK,
    BLACK_KNIGHT,
    BLACK_BISHOP,
    BLACK_QUEEN,
    BLACK_KING,
) = PIECES
