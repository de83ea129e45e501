from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, List

from .bitmap import iter_indices
from .piece import PIECES, Color, Piece
from .square import Square
from .state import CastlingRights

if TYPE_CHECKING:  # pragma: no cover
    from .position import Position


logger = logging.getLogger(__name__)

MASK64 = 0xFFFFFFFFFFFFFFFF


class _SplitMix64:
    def __init__(self, seed: int) -> None:
        self.state = seed & MASK64

    def next(self) -> int:
        # Deterministic 64-bit SplitMix64
        self.state = (self.state + 0x9E3779B97F4A7C15) & MASK64
        z = self.state
        z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & MASK64
        z = (z ^ (z >> 27)) * 0x94D049BB133111EB & MASK64
        z = z ^ (z >> 31)
        return z & MASK64

    def next_nonzero(self) -> int:
        key = self.next()
        while key == 0:
            key = self.next()
        return key


class ZobristKeys:
    """Process-wide Zobrist key table.

    Table layout:
    - piece_square[12][64]: indexed by ``Piece.index`` and square index
    - castling[16]: indexed by ``CastlingRights.index``
    - ep_file[8]: files a..h
    - side_to_move: toggled while black is to move

    The table is generated once from a fixed seed by ``initialize()`` and is
    read-only afterwards. ``initialize()`` is safe to call from several
    threads; only the first call does any work.
    """

    SEED = 3275739884

    _lock = threading.Lock()
    _initialized = False
    piece_square: List[List[int]] = []
    castling: List[int] = []
    ep_file: List[int] = []
    side_to_move: int = 0

    @classmethod
    def initialize(cls) -> None:
        if cls._initialized:
            return
        with cls._lock:
            if cls._initialized:
                return
            prng = _SplitMix64(cls.SEED)
            cls.piece_square = [[prng.next_nonzero() for _ in range(64)] for _ in range(12)]
            cls.castling = [prng.next_nonzero() for _ in range(16)]
            cls.ep_file = [prng.next_nonzero() for _ in range(8)]
            cls.side_to_move = prng.next_nonzero()
            cls._initialized = True
        logger.debug("zobrist key table initialized (seed=%d)", cls.SEED)

    @classmethod
    def initialized(cls) -> bool:
        return cls._initialized

    @classmethod
    def piece_key(cls, piece: Piece, square: Square) -> int:
        return cls.piece_square[piece.index][square.index]

    @classmethod
    def castling_key(cls, rights: CastlingRights) -> int:
        return cls.castling[rights.index]

    @classmethod
    def enpassant_key(cls, file: int) -> int:
        """Key for an en passant target on ``file`` (1..8)."""
        return cls.ep_file[file - 1]

    @classmethod
    def side_key(cls) -> int:
        return cls.side_to_move


class ZobristHash:
    """Running 64-bit hash updated by XOR toggles.

    Every setter is its own inverse: ``set_piece`` and ``clear_piece`` apply
    the same toggle and are named separately only for readability.
    """

    __slots__ = ("value",)

    def __init__(self, value: int = 0) -> None:
        ZobristKeys.initialize()
        self.value = value & MASK64

    def set_piece(self, piece: Piece, square: Square) -> "ZobristHash":
        self.value ^= ZobristKeys.piece_square[piece.index][square.index]
        return self

    def clear_piece(self, piece: Piece, square: Square) -> "ZobristHash":
        return self.set_piece(piece, square)

    def move_piece(self, piece: Piece, from_sq: Square, to_sq: Square) -> "ZobristHash":
        keys = ZobristKeys.piece_square[piece.index]
        self.value ^= keys[from_sq.index] ^ keys[to_sq.index]
        return self

    def swap_side(self) -> "ZobristHash":
        self.value ^= ZobristKeys.side_to_move
        return self

    def set_enpassant(self, square: Square) -> "ZobristHash":
        self.value ^= ZobristKeys.enpassant_key(square.file)
        return self

    def clear_enpassant(self, square: Square) -> "ZobristHash":
        return self.set_enpassant(square)

    def set_castling(self, rights: CastlingRights) -> "ZobristHash":
        self.value ^= ZobristKeys.castling_key(rights)
        return self

    def switch_castling(self, before: CastlingRights, after: CastlingRights) -> "ZobristHash":
        self.value ^= ZobristKeys.castling_key(before) ^ ZobristKeys.castling_key(after)
        return self

    def copy(self) -> "ZobristHash":
        return ZobristHash(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ZobristHash):
            return self.value == other.value
        if isinstance(other, int):
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"ZobristHash(0x{self.value:016x})"


def compute_hash_from_scratch(position: "Position") -> int:
    """Compute the 64-bit Zobrist hash of ``position`` from its contents.

    Deterministic across runs given the fixed-seed key table.
    """
    h = ZobristHash()
    board = position.board
    for piece in PIECES:
        keys = ZobristKeys.piece_square[piece.index]
        for sq in iter_indices(board.bitmap(piece)):
            h.value ^= keys[sq]
    if position.side_to_move is Color.BLACK:
        h.swap_side()
    h.set_castling(position.castling_rights)
    if position.en_passant_target is not None:
        h.set_enpassant(position.en_passant_target)
    return h.value


def incremental_hash_update(current_hash: int, before: "Position", after: "Position") -> int:
    """Derive the hash of ``after`` from the hash of ``before``.

    Applies XOR toggles for every difference between the two positions,
    starting from ``current_hash`` (which must be the hash of ``before``).
    Side-effect free; used to cross-check the hash kept by ``make_move``.
    """
    ZobristKeys.initialize()
    h = current_hash & MASK64

    for piece in PIECES:
        diff = before.board.bitmap(piece) ^ after.board.bitmap(piece)
        for sq in iter_indices(diff):
            h ^= ZobristKeys.piece_square[piece.index][sq]

    if before.side_to_move != after.side_to_move:
        h ^= ZobristKeys.side_to_move

    if before.castling_rights != after.castling_rights:
        h ^= ZobristKeys.castling_key(before.castling_rights)
        h ^= ZobristKeys.castling_key(after.castling_rights)

    if before.en_passant_target is not None:
        h ^= ZobristKeys.enpassant_key(before.en_passant_target.file)
    if after.en_passant_target is not None:
        h ^= ZobristKeys.enpassant_key(after.en_passant_target.file)

    return h & MASK64
