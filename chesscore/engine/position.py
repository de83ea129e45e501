from __future__ import annotations

from enum import Enum
from typing import List, Optional

from ..errors import IllegalMove
from .bitboard import Bitboard
from .fen import STARTPOS_FEN, FenRecord, PiecePlacement, format_fen, parse_fen
from .move import Move, parse_uci
from .piece import Color, Piece, PieceType, piece_of
from .square import SQUARES, Square
from .state import CastlingRights, PositionState
from .zobrist import ZobristHash, compute_hash_from_scratch


class CheckState(Enum):
    NONE = "none"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


_NO_RIGHTS = CastlingRights.none()

# Home corner of each rook -> castling right lost when it moves or is captured
_ROOK_CORNERS = {
    SQUARES[0]: "Q",
    SQUARES[7]: "K",
    SQUARES[56]: "q",
    SQUARES[63]: "k",
}


class Position:
    """Board plus turn state and an incrementally maintained Zobrist hash.

    Responsibility: apply and revert moves while keeping the board, the
    counters, castling rights, the en passant target and the hash in step.

    Notes:
    - ``make_move`` expects a move generated for this position; it is not
      validated (see ``move_from_uci`` for parsing user input).
    - ``unmake_move`` needs no history: each move carries the state it
      replaced.
    """

    def __init__(self, board: Optional[Bitboard] = None, state: Optional[PositionState] = None) -> None:
        self._board = board if board is not None else Bitboard()
        self._state = state if state is not None else PositionState()
        self._hash = ZobristHash(compute_hash_from_scratch(self))

    @classmethod
    def from_record(cls, record: FenRecord) -> "Position":
        state = PositionState(
            side_to_move=record.side_to_move,
            fullmove_number=record.fullmove_number,
            halfmove_clock=record.halfmove_clock,
            castling_rights=record.castling_rights,
            en_passant_target=record.en_passant_target,
        )
        return cls(Bitboard(record.placement), state)

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        """Create a position from a FEN string.

        Raises:
            InvalidFen: If ``fen`` is malformed.
        """
        return cls.from_record(parse_fen(fen))

    @classmethod
    def startpos(cls) -> "Position":
        return cls.from_fen(STARTPOS_FEN)

    def to_record(self) -> FenRecord:
        s = self._state
        return FenRecord(
            placement=self.piece_placement(),
            side_to_move=s.side_to_move,
            castling_rights=s.castling_rights,
            en_passant_target=s.en_passant_target,
            halfmove_clock=s.halfmove_clock,
            fullmove_number=s.fullmove_number,
        )

    def to_fen(self) -> str:
        return format_fen(self.to_record())

    def copy(self) -> "Position":
        other = Position.__new__(Position)
        other._board = self._board.copy()
        other._state = self._state.copy()
        other._hash = self._hash.copy()
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._board == other._board and self._state == other._state

    def __repr__(self) -> str:
        return f"Position({self.to_fen()!r})"

    # --- Accessors ---
    @property
    def board(self) -> Bitboard:
        return self._board

    @property
    def state(self) -> PositionState:
        return self._state

    @property
    def side_to_move(self) -> Color:
        return self._state.side_to_move

    @property
    def castling_rights(self) -> CastlingRights:
        return self._state.castling_rights

    @property
    def en_passant_target(self) -> Optional[Square]:
        return self._state.en_passant_target

    @property
    def halfmove_clock(self) -> int:
        return self._state.halfmove_clock

    @property
    def fullmove_number(self) -> int:
        return self._state.fullmove_number

    @property
    def hash(self) -> int:
        return self._hash.value

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self._board.piece_at(square)

    def piece_placement(self) -> PiecePlacement:
        return [self._board.piece_at(sq) for sq in SQUARES]

    def diagram(self) -> str:
        return self._board.diagram()

    # --- Move generation and status ---
    def all_legal_moves(self) -> List[Move]:
        return self._board.all_legal_moves(self._state)

    def capture_moves(self) -> List[Move]:
        return self._board.capture_moves(self._state)

    def has_legal_moves(self) -> bool:
        return bool(self.all_legal_moves())

    def is_king_in_check(self, color: Optional[Color] = None) -> bool:
        """Return True if ``color`` (default: side to move) is in check.

        A side without a king is never in check.
        """
        color = self._state.side_to_move if color is None else color
        king_sq = self._board.find_king(color)
        if king_sq is None:
            return False
        return self._board.is_attacked(king_sq, color.other)

    def check_state(self) -> CheckState:
        in_check = self.is_king_in_check()
        has_moves = self.has_legal_moves()
        if in_check:
            return CheckState.CHECK if has_moves else CheckState.CHECKMATE
        return CheckState.NONE if has_moves else CheckState.STALEMATE

    def move_from_uci(self, uci: str) -> Move:
        """Resolve a UCI move string against the legal moves.

        Raises:
            InvalidMove: If ``uci`` is malformed.
            IllegalMove: If no legal move matches.
        """
        from_sq, to_sq, promo = parse_uci(uci)
        for move in self.all_legal_moves():
            if move.from_sq != from_sq or move.to_sq != to_sq:
                continue
            moved_type = move.promoted.type if move.promoted is not None else None
            if moved_type is promo:
                return move
        raise IllegalMove(f"illegal move: {uci}")

    # --- Make / unmake ---
    def make_move(self, move: Move) -> None:
        """Apply ``move`` in-place, updating hash, board and turn state."""
        state = self._state
        h = self._hash
        self._move_piece_hash(move)
        self._board.make_move(move)

        if state.side_to_move is Color.BLACK:
            state.fullmove_number += 1

        if move.captured is not None or move.piece.type is PieceType.PAWN:
            state.halfmove_clock = 0
        else:
            state.halfmove_clock += 1

        if state.en_passant_target is not None:
            h.clear_enpassant(state.en_passant_target)
        if move.is_double_step:
            target = SQUARES[(move.from_sq.index + move.to_sq.index) // 2]
            state.en_passant_target = target
            h.set_enpassant(target)
        else:
            state.en_passant_target = None

        old_rights = state.castling_rights
        new_rights = _rights_after(old_rights, move)
        if new_rights != old_rights:
            h.switch_castling(old_rights, new_rights)
            state.castling_rights = new_rights

        state.side_to_move = state.side_to_move.other
        h.swap_side()

    def unmake_move(self, move: Move) -> None:
        """Revert ``move``, which must be the last move made."""
        state = self._state
        h = self._hash
        self._unmove_piece_hash(move)
        self._board.unmake_move(move)

        if move.piece.color is Color.BLACK:
            state.fullmove_number -= 1
        state.halfmove_clock = move.halfmove_clock_before

        if state.en_passant_target is not None:
            h.clear_enpassant(state.en_passant_target)
        state.en_passant_target = move.en_passant_target_before
        if state.en_passant_target is not None:
            h.set_enpassant(state.en_passant_target)

        if state.castling_rights != move.castling_rights_before:
            h.switch_castling(state.castling_rights, move.castling_rights_before)
            state.castling_rights = move.castling_rights_before

        state.side_to_move = state.side_to_move.other
        h.swap_side()

    def _move_piece_hash(self, move: Move) -> None:
        h = self._hash
        if move.captured is not None:
            h.clear_piece(move.captured, move.en_passant_square if move.en_passant else move.to_sq)
        if move.promoted is not None:
            h.clear_piece(move.piece, move.from_sq)
            h.set_piece(move.promoted, move.to_sq)
        else:
            h.move_piece(move.piece, move.from_sq, move.to_sq)
        if move.is_castling:
            corner, crossing = _castling_rook_squares(move)
            h.move_piece(piece_of(PieceType.ROOK, move.piece.color), corner, crossing)

    def _unmove_piece_hash(self, move: Move) -> None:
        h = self._hash
        if move.promoted is not None:
            h.clear_piece(move.promoted, move.to_sq)
            h.set_piece(move.piece, move.from_sq)
        else:
            h.move_piece(move.piece, move.to_sq, move.from_sq)
        if move.captured is not None:
            h.set_piece(move.captured, move.en_passant_square if move.en_passant else move.to_sq)
        if move.is_castling:
            corner, crossing = _castling_rook_squares(move)
            h.move_piece(piece_of(PieceType.ROOK, move.piece.color), crossing, corner)


def _castling_rook_squares(move: Move) -> tuple[Square, Square]:
    rank_base = (move.from_sq.rank - 1) * 8
    if move.to_sq.file > move.from_sq.file:
        return SQUARES[rank_base + 7], SQUARES[rank_base + 5]
    return SQUARES[rank_base], SQUARES[rank_base + 3]


def _rights_after(rights: CastlingRights, move: Move) -> CastlingRights:
    """Castling rights once ``move`` is played: a king move drops both of its
    side's rights, a rook leaving or captured on its home corner drops one."""
    if rights == _NO_RIGHTS:
        return rights
    revoked: List[str] = []
    if move.piece.type is PieceType.KING:
        revoked.extend(("K", "Q") if move.piece.color is Color.WHITE else ("k", "q"))
    elif move.piece.type is PieceType.ROOK and move.from_sq in _ROOK_CORNERS:
        letter = _ROOK_CORNERS[move.from_sq]
        if (letter.isupper()) == (move.piece.color is Color.WHITE):
            revoked.append(letter)
    if move.captured is not None and move.captured.type is PieceType.ROOK and move.to_sq in _ROOK_CORNERS:
        letter = _ROOK_CORNERS[move.to_sq]
        if (letter.isupper()) == (move.captured.color is Color.WHITE):
            revoked.append(letter)
    if not revoked:
        return rights
    return rights.without(*revoked)
