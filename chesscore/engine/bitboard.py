from __future__ import annotations

from typing import List, Optional, Sequence

from .bitmap import MASK64, count_bits, get_bit, highest_set_index, iter_indices, lowest_set_index
from .move import Move
from .piece import PIECES, PROMOTION_TYPES, Color, Piece, PieceType, piece_of
from .square import SQUARES, Square
from .state import PositionState
from .tables import (
    ALL_DIRECTIONS,
    DIAGONAL_DIRECTIONS,
    FILE_MASKS,
    KING_TARGETS,
    KNIGHT_TARGETS,
    ORTHOGONAL_DIRECTIONS,
    RANK_MASKS,
    RAY_TARGETS,
    RayDirection,
)


NOT_FILE_A = ~FILE_MASKS[0] & MASK64
NOT_FILE_H = ~FILE_MASKS[7] & MASK64

# Squares a pawn lands on after one step from its starting rank
WHITE_DOUBLE_STEP_MASK = RANK_MASKS[2]
BLACK_DOUBLE_STEP_MASK = RANK_MASKS[5]

_NEGATIVE = tuple(d.negative for d in RayDirection)

_SLIDER_DIRECTIONS = {
    PieceType.QUEEN: ALL_DIRECTIONS,
    PieceType.BISHOP: DIAGONAL_DIRECTIONS,
    PieceType.ROOK: ORTHOGONAL_DIRECTIONS,
}

# king from, king to, rook from, rook to, squares that must be empty, squares that must not be attacked
_CASTLING_PATHS = {
    "K": (4, 6, 7, 5, (5, 6), (4, 5, 6)),
    "Q": (4, 2, 0, 3, (3, 2, 1), (4, 3, 2)),
    "k": (60, 62, 63, 61, (61, 62), (60, 61, 62)),
    "q": (60, 58, 56, 59, (59, 58, 57), (60, 59, 58)),
}


def _step_pawns(pawns: int, color: Color) -> int:
    return ((pawns << 8) & MASK64) if color is Color.WHITE else pawns >> 8


def _shift_west(bits: int) -> int:
    # drop the a-file first so pieces don't wrap around to the h-file
    return (bits & NOT_FILE_A) >> 1


def _shift_east(bits: int) -> int:
    # drop the h-file first so pieces don't wrap around to the a-file
    return ((bits & NOT_FILE_H) << 1) & MASK64


class Bitboard:
    """Piece placement stored as 12 bitmaps plus color/all aggregates.

    Notes:
    - Bitmap ``i`` follows ``Piece.index``: white pawn..king are 0..5, black
      pawn..king are 6..11.
    - Bit ``n`` of every bitmap is the square with linear index ``n``
      (a1=0 .. h8=63).
    - A square is always cleared before a piece is placed on it, so no square
      appears in more than one of the 12 bitmaps.
    - Moves handed to ``make_move``/``unmake_move`` are trusted; nothing is
      re-validated.
    """

    __slots__ = ("_bitmaps", "_white", "_black", "_all")

    def __init__(self, placement: Optional[Sequence[Optional[Piece]]] = None) -> None:
        self._bitmaps: List[int] = [0] * 12
        self._white = 0
        self._black = 0
        self._all = 0
        if placement is not None:
            for index, piece in enumerate(placement):
                if piece is not None:
                    self._place(piece, index)

    def copy(self) -> "Bitboard":
        other = Bitboard.__new__(Bitboard)
        other._bitmaps = list(self._bitmaps)
        other._white = self._white
        other._black = self._black
        other._all = self._all
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitboard):
            return NotImplemented
        return (
            self._bitmaps == other._bitmaps
            and self._white == other._white
            and self._black == other._black
            and self._all == other._all
        )

    def __repr__(self) -> str:
        return f"Bitboard({self.diagram()!r})"

    # --- Queries ---
    def is_empty(self) -> bool:
        return self._all == 0

    @property
    def occupied(self) -> int:
        return self._all

    def occupancy(self, color: Color) -> int:
        return self._white if color is Color.WHITE else self._black

    def bitmap(self, piece: Piece) -> int:
        return self._bitmaps[piece.index]

    def is_occupied(self, square: Square) -> bool:
        return get_bit(self._all, square.index)

    def has_piece(self, piece: Piece) -> bool:
        return self._bitmaps[piece.index] != 0

    def has_piece_type(self, piece_type: PieceType) -> bool:
        return (self._bitmaps[piece_type.value] | self._bitmaps[piece_type.value + 6]) != 0

    def has_color(self, color: Color) -> bool:
        return self.occupancy(color) != 0

    def piece_count(self, piece: Piece) -> int:
        return count_bits(self._bitmaps[piece.index])

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self._piece_at_index(square.index)

    def _piece_at_index(self, index: int) -> Optional[Piece]:
        if not (self._all >> index) & 1:
            return None
        # color is known from the aggregates, so only six bitmaps are scanned
        start = 0 if (self._white >> index) & 1 else 6
        bitmaps = self._bitmaps
        for i in range(start, start + 6):
            if (bitmaps[i] >> index) & 1:
                return PIECES[i]
        return None

    def find_king(self, color: Color) -> Optional[Square]:
        index = self._king_index(color)
        return SQUARES[index] if index >= 0 else None

    def _king_index(self, color: Color) -> int:
        return lowest_set_index(self._bitmaps[5 if color is Color.WHITE else 11])

    def diagram(self) -> str:
        """ASCII board, rank 8 on top, '.' for empty squares."""
        rows = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                piece = self._piece_at_index(rank * 8 + file)
                row.append(piece.char if piece is not None else ".")
            rows.append(" ".join(row))
        return "\n".join(rows)

    # --- Mutation ---
    def place(self, piece: Piece, square: Square) -> None:
        """Put ``piece`` on ``square``, evicting whatever was there."""
        self._place(piece, square.index)

    def clear(self, square: Square) -> None:
        """Remove any piece from ``square``; no-op on an empty square."""
        self._clear(square.index)

    def _place(self, piece: Piece, index: int) -> None:
        self._clear(index)
        mask = 1 << index
        self._bitmaps[piece.index] |= mask
        if piece.color is Color.WHITE:
            self._white |= mask
        else:
            self._black |= mask
        self._all |= mask

    def _clear(self, index: int) -> None:
        mask = 1 << index
        if not self._all & mask:
            return
        keep = ~mask
        bitmaps = self._bitmaps
        for i in range(12):
            if bitmaps[i] & mask:
                bitmaps[i] &= keep
                break
        self._white &= keep
        self._black &= keep
        self._all &= keep

    def make_move(self, move: Move) -> None:
        """Apply ``move`` in-place (normal, capture, promotion, castling, en passant)."""
        self._clear(move.from_sq.index)
        self._place(move.promoted if move.promoted is not None else move.piece, move.to_sq.index)
        if move.is_castling:
            self._move_castling_rook(move, undo=False)
        if move.en_passant:
            self._clear(move.en_passant_square.index)

    def unmake_move(self, move: Move) -> None:
        """Reverse ``move`` using only the fields it carries."""
        self._place(move.piece, move.from_sq.index)
        if move.captured is not None:
            if move.en_passant:
                self._place(move.captured, move.en_passant_square.index)
                self._clear(move.to_sq.index)
            else:
                self._place(move.captured, move.to_sq.index)
        else:
            self._clear(move.to_sq.index)
        if move.is_castling:
            self._move_castling_rook(move, undo=True)

    def _move_castling_rook(self, move: Move, *, undo: bool) -> None:
        rank_base = (move.from_sq.rank - 1) * 8
        if move.to_sq.file > move.from_sq.file:
            corner, crossing = rank_base + 7, rank_base + 5
        else:
            corner, crossing = rank_base, rank_base + 3
        rook = piece_of(PieceType.ROOK, move.piece.color)
        if undo:
            self._clear(crossing)
            self._place(rook, corner)
        else:
            self._clear(corner)
            self._place(rook, crossing)

    # --- Attack detection ---
    def is_attacked(self, square: Square, by_color: Color) -> bool:
        """Return True if ``square`` is attacked by a piece of ``by_color``."""
        return self._is_attacked(square.index, by_color)

    def _is_attacked(self, index: int, by_color: Color) -> bool:
        offset = 0 if by_color is Color.WHITE else 6
        bitmaps = self._bitmaps
        if KING_TARGETS[index] & bitmaps[offset + PieceType.KING.value]:
            return True
        if KNIGHT_TARGETS[index] & bitmaps[offset + PieceType.KNIGHT.value]:
            return True
        stepped = _step_pawns(bitmaps[offset + PieceType.PAWN.value], by_color)
        if ((_shift_west(stepped) | _shift_east(stepped)) >> index) & 1:
            return True
        queens = bitmaps[offset + PieceType.QUEEN.value]
        rook_like = bitmaps[offset + PieceType.ROOK.value] | queens
        if rook_like:
            for direction in ORTHOGONAL_DIRECTIONS:
                if self._ray_targets(index, direction) & rook_like:
                    return True
        bishop_like = bitmaps[offset + PieceType.BISHOP.value] | queens
        if bishop_like:
            for direction in DIAGONAL_DIRECTIONS:
                if self._ray_targets(index, direction) & bishop_like:
                    return True
        return False

    def _ray_targets(self, index: int, direction: RayDirection) -> int:
        """Squares reachable from ``index`` along ``direction``, up to and
        including the first occupied square."""
        table = RAY_TARGETS[direction]
        targets = table[index]
        blockers = targets & self._all
        if blockers:
            if _NEGATIVE[direction]:
                blocker = highest_set_index(blockers)
            else:
                blocker = lowest_set_index(blockers)
            targets ^= table[blocker]
        return targets

    def targets_along_ray(self, square: Square, moving_color: Color, direction: RayDirection) -> int:
        """Slider targets from ``square`` along ``direction`` for ``moving_color``."""
        return self._ray_targets(square.index, direction) & ~self.occupancy(moving_color)

    # --- Move generation ---
    def all_legal_moves(self, state: PositionState) -> List[Move]:
        """Return all legal moves for ``state.side_to_move``.

        Every candidate (knight, king, slider, pawn, castling) is checked by
        playing it on a copy of the board and testing whether the mover's king
        is attacked afterwards.
        """
        moves: List[Move] = []
        self._stepping_moves(PieceType.KNIGHT, KNIGHT_TARGETS, state, moves)
        self._stepping_moves(PieceType.KING, KING_TARGETS, state, moves)
        self._castling_moves(state, moves)
        for piece_type in (PieceType.QUEEN, PieceType.BISHOP, PieceType.ROOK):
            self._sliding_moves(piece_type, state, moves)
        self._pawn_moves(state, moves)
        return moves

    def capture_moves(self, state: PositionState) -> List[Move]:
        """Return the legal moves that capture a piece, en passant included."""
        return [m for m in self.all_legal_moves(state) if m.captured is not None]

    def _stepping_moves(
        self, piece_type: PieceType, table: Sequence[int], state: PositionState, moves: List[Move]
    ) -> None:
        piece = piece_of(piece_type, state.side_to_move)
        not_own = ~self.occupancy(state.side_to_move)
        for from_idx in iter_indices(self._bitmaps[piece.index]):
            self._extract_moves(table[from_idx] & not_own, from_idx, piece, state, moves)

    def _sliding_moves(self, piece_type: PieceType, state: PositionState, moves: List[Move]) -> None:
        piece = piece_of(piece_type, state.side_to_move)
        not_own = ~self.occupancy(state.side_to_move)
        for from_idx in iter_indices(self._bitmaps[piece.index]):
            for direction in _SLIDER_DIRECTIONS[piece_type]:
                targets = self._ray_targets(from_idx, direction) & not_own
                self._extract_moves(targets, from_idx, piece, state, moves)

    def _pawn_moves(self, state: PositionState, moves: List[Move]) -> None:
        color = state.side_to_move
        pawns = self._bitmaps[piece_of(PieceType.PAWN, color).index]
        if not pawns:
            return
        empty = ~self._all & MASK64
        forward = 8 if color is Color.WHITE else -8

        advance1 = _step_pawns(pawns, color)
        step1 = advance1 & empty
        for to_idx in iter_indices(step1):
            self._pawn_move(to_idx - forward, to_idx, None, False, state, moves)

        # pawns already advanced one rank, so the mask is the 3rd/6th rank
        double_mask = WHITE_DOUBLE_STEP_MASK if color is Color.WHITE else BLACK_DOUBLE_STEP_MASK
        step2 = _step_pawns(step1 & double_mask, color) & empty
        for to_idx in iter_indices(step2):
            self._pawn_move(to_idx - 2 * forward, to_idx, None, False, state, moves)

        capturable = self.occupancy(color.other)
        if state.en_passant_target is not None:
            capturable |= 1 << state.en_passant_target.index
        for targets, source_delta in (
            (_shift_west(advance1) & capturable, forward - 1),
            (_shift_east(advance1) & capturable, forward + 1),
        ):
            for to_idx in iter_indices(targets):
                captured = self._piece_at_index(to_idx)
                if captured is None:
                    self._pawn_move(
                        to_idx - source_delta,
                        to_idx,
                        piece_of(PieceType.PAWN, color.other),
                        True,
                        state,
                        moves,
                    )
                else:
                    self._pawn_move(to_idx - source_delta, to_idx, captured, False, state, moves)

    def _pawn_move(
        self,
        from_idx: int,
        to_idx: int,
        captured: Optional[Piece],
        en_passant: bool,
        state: PositionState,
        moves: List[Move],
    ) -> None:
        color = state.side_to_move
        pawn = piece_of(PieceType.PAWN, color)
        if to_idx >= 56 or to_idx < 8:
            promotions: Sequence[Optional[Piece]] = [piece_of(t, color) for t in PROMOTION_TYPES]
        else:
            promotions = [None]
        for promoted in promotions:
            self._store_if_legal(
                Move(
                    SQUARES[from_idx],
                    SQUARES[to_idx],
                    pawn,
                    captured,
                    promoted,
                    en_passant,
                    state.castling_rights,
                    state.halfmove_clock,
                    state.en_passant_target,
                ),
                moves,
            )

    def _castling_moves(self, state: PositionState, moves: List[Move]) -> None:
        color = state.side_to_move
        opponent = color.other
        king = piece_of(PieceType.KING, color)
        rook_bits = self._bitmaps[piece_of(PieceType.ROOK, color).index]
        for letter in ("K", "Q") if color is Color.WHITE else ("k", "q"):
            if not state.castling_rights[letter]:
                continue
            king_from, king_to, rook_from, _, must_be_empty, must_be_safe = _CASTLING_PATHS[letter]
            if not get_bit(self._bitmaps[king.index], king_from) or not get_bit(rook_bits, rook_from):
                continue
            if any(get_bit(self._all, sq) for sq in must_be_empty):
                continue
            if any(self._is_attacked(sq, opponent) for sq in must_be_safe):
                continue
            self._store_if_legal(
                Move(
                    SQUARES[king_from],
                    SQUARES[king_to],
                    king,
                    None,
                    None,
                    False,
                    state.castling_rights,
                    state.halfmove_clock,
                    state.en_passant_target,
                ),
                moves,
            )

    def _extract_moves(
        self, targets: int, from_idx: int, piece: Piece, state: PositionState, moves: List[Move]
    ) -> None:
        from_sq = SQUARES[from_idx]
        for to_idx in iter_indices(targets):
            self._store_if_legal(
                Move(
                    from_sq,
                    SQUARES[to_idx],
                    piece,
                    self._piece_at_index(to_idx),
                    None,
                    False,
                    state.castling_rights,
                    state.halfmove_clock,
                    state.en_passant_target,
                ),
                moves,
            )

    def _store_if_legal(self, move: Move, moves: List[Move]) -> None:
        color = move.piece.color
        if move.piece.type is PieceType.KING:
            king_idx = move.to_sq.index
        else:
            king_idx = self._king_index(color)
        # without a king of the moving color nothing can be left in check
        if king_idx >= 0:
            test_board = self.copy()
            test_board.make_move(move)
            if test_board._is_attacked(king_idx, color.other):
                return
        moves.append(move)
