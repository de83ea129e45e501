from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..errors import InvalidFen
from .piece import Color
from .square import Square


_RIGHT_LETTERS = "KQkq"


@dataclass(frozen=True)
class CastlingRights:
    """Castling availability for both players."""

    white_kingside: bool = False
    white_queenside: bool = False
    black_kingside: bool = False
    black_queenside: bool = False

    @classmethod
    def all(cls) -> "CastlingRights":
        return cls(True, True, True, True)

    @classmethod
    def none(cls) -> "CastlingRights":
        return cls(False, False, False, False)

    @classmethod
    def from_fen(cls, text: str) -> "CastlingRights":
        """Parse the FEN castling field (``"KQkq"``, ``"Kq"``, ``"-"``)."""
        if text == "-":
            return cls.none()
        if not text or any(ch not in _RIGHT_LETTERS for ch in text) or len(set(text)) != len(text):
            raise InvalidFen(f"invalid castling rights: {text!r}")
        return cls("K" in text, "Q" in text, "k" in text, "q" in text)

    def __getitem__(self, letter: str) -> bool:
        return getattr(self, _attr_for(letter))

    def without(self, *letters: str) -> "CastlingRights":
        """Return a copy with the rights named by FEN ``letters`` revoked."""
        return replace(self, **{_attr_for(ch): False for ch in letters})

    @property
    def index(self) -> int:
        """4-bit code (K=8, Q=4, k=2, q=1) selecting one of 16 hash keys."""
        return (
            (8 if self.white_kingside else 0)
            | (4 if self.white_queenside else 0)
            | (2 if self.black_kingside else 0)
            | (1 if self.black_queenside else 0)
        )

    def to_fen(self) -> str:
        text = "".join(ch for ch in _RIGHT_LETTERS if self[ch])
        return text or "-"

    def __str__(self) -> str:
        return self.to_fen()


def _attr_for(letter: str) -> str:
    if letter == "K":
        return "white_kingside"
    if letter == "Q":
        return "white_queenside"
    if letter == "k":
        return "black_kingside"
    if letter == "q":
        return "black_queenside"
    raise KeyError(f"invalid castling letter: {letter!r}")


@dataclass
class PositionState:
    """Turn-level state that accompanies the piece placement."""

    side_to_move: Color = Color.WHITE
    fullmove_number: int = 1
    halfmove_clock: int = 0
    castling_rights: CastlingRights = CastlingRights()
    en_passant_target: Optional[Square] = None

    def copy(self) -> "PositionState":
        return replace(self)
