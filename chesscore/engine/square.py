from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ..errors import InvalidSquare


MIN_COORD = 1
MAX_COORD = 8


@dataclass(frozen=True)
class File:
    """Board column, 1..8 (a..h)."""

    file: int

    def __post_init__(self) -> None:
        if not isinstance(self.file, int) or not MIN_COORD <= self.file <= MAX_COORD:
            raise InvalidSquare(f"invalid file: {self.file!r}")

    @classmethod
    def from_name(cls, name: str) -> "File":
        if len(name) != 1 or not "a" <= name.lower() <= "h":
            raise InvalidSquare(f"invalid file name: {name!r}")
        return cls(ord(name.lower()) - ord("a") + 1)

    @property
    def name(self) -> str:
        return chr(ord("a") + self.file - 1)


@dataclass(frozen=True)
class Rank:
    """Board row, 1..8."""

    rank: int

    def __post_init__(self) -> None:
        if not isinstance(self.rank, int) or not MIN_COORD <= self.rank <= MAX_COORD:
            raise InvalidSquare(f"invalid rank: {self.rank!r}")


@dataclass(frozen=True)
class Square:
    """A cell on the board identified by file and rank (both 1..8).

    Notes:
    - ``index`` is the dense linear index ``(rank-1)*8 + (file-1)``; a1=0,
      h1=7, a8=56, h8=63.
    - The 64 squares are interned: the named constructors always return the
      same instance for the same cell.
    """

    file: int
    rank: int
    index: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.file, int) or not MIN_COORD <= self.file <= MAX_COORD:
            raise InvalidSquare(f"invalid file: {self.file!r}")
        if not isinstance(self.rank, int) or not MIN_COORD <= self.rank <= MAX_COORD:
            raise InvalidSquare(f"invalid rank: {self.rank!r}")
        object.__setattr__(self, "index", (self.rank - 1) * 8 + (self.file - 1))

    @classmethod
    def from_index(cls, index: int) -> "Square":
        """Return the square with linear index ``index``.

        Raises:
            InvalidSquare: If ``index`` is outside 0..63.
        """
        if not isinstance(index, int) or index < 0 or index > 63:
            raise InvalidSquare(f"invalid square index: {index!r}")
        return SQUARES[index]

    @classmethod
    def from_name(cls, name: str) -> "Square":
        """Parse algebraic notation such as ``"e4"``.

        Raises:
            InvalidSquare: If ``name`` is not a valid square.
        """
        if not isinstance(name, str) or len(name) != 2:
            raise InvalidSquare(f"invalid square: {name!r}")
        f, r = name[0].lower(), name[1]
        if f < "a" or f > "h" or r < "1" or r > "8":
            raise InvalidSquare(f"invalid square: {name!r}")
        return SQUARES[(int(r) - 1) * 8 + (ord(f) - ord("a"))]

    @property
    def name(self) -> str:
        return chr(ord("a") + self.file - 1) + str(self.rank)

    def file_of(self) -> File:
        return File(self.file)

    def rank_of(self) -> Rank:
        return Rank(self.rank)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Square({self.name})"


SQUARES: Tuple[Square, ...] = tuple(
    Square(file, rank) for rank in range(1, 9) for file in range(1, 9)
)

(
    A1, B1, C1, D1, E1, F1, G1, H1,
    A2, B2, C2, D2, E2, F2, G2, H2,
    A3, B3, C3, D3, E3, F3, G3, H3,
    A4, B4, C4, D4, E4, F4, G4, H4,
    A5, B5, C5, D5, E5, F5, G5, H5,
    A6, B6, C6, D6, E6, F6, G6, H6,
    A7, B7, C7, D7, E7, F7, G7, H7,
    A8, B8, C8, D8, E8, F8, G8, H8,
) = SQUARES  # fmt: skip

