from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .move import Move
from .position import CheckState, Position


logger = logging.getLogger(__name__)


@dataclass
class Game:
    """Game wrapper around a position with a move history.

    Responsibility: validate and apply moves given in UCI form, undo them,
    and report check, mate and draw status.
    """

    position: Position
    move_stack: List[Move] = field(default_factory=list)
    repetition: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def new(cls) -> "Game":
        return cls(position=Position.startpos())

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(position=Position.from_fen(fen))

    def to_fen(self) -> str:
        return self.position.to_fen()

    def __post_init__(self) -> None:
        # Seed repetition with current position
        h = self.position.hash
        self.repetition[h] = self.repetition.get(h, 0) + 1

    def legal_moves(self) -> List[Move]:
        return self.position.all_legal_moves()

    def apply_move(self, uci: str) -> Move:
        """Play the legal move matching ``uci`` and record it for undo.

        Raises:
            InvalidMove: If ``uci`` is malformed.
            IllegalMove: If it does not name a legal move.
        """
        move = self.position.move_from_uci(uci)
        self.position.make_move(move)
        self.move_stack.append(move)
        h = self.position.hash
        self.repetition[h] = self.repetition.get(h, 0) + 1
        logger.debug("applied %s -> %s", move.to_uci(), self.position.to_fen())
        return move

    def undo_move(self) -> Move:
        if not self.move_stack:
            raise ValueError("no moves to undo")
        # Decrement count for current position
        curr = self.position.hash
        if curr in self.repetition:
            self.repetition[curr] -= 1
            if self.repetition[curr] <= 0:
                del self.repetition[curr]
        last = self.move_stack.pop()
        self.position.unmake_move(last)
        return last

    @property
    def last_move(self) -> Optional[Move]:
        return self.move_stack[-1] if self.move_stack else None

    # --- State flags for protocol ---
    def check_state(self) -> CheckState:
        return self.position.check_state()

    def in_check(self) -> bool:
        return self.position.is_king_in_check()

    def checkmate(self) -> bool:
        return self.check_state() is CheckState.CHECKMATE

    def stalemate(self) -> bool:
        return self.check_state() is CheckState.STALEMATE

    def repetition_count(self) -> int:
        return self.repetition.get(self.position.hash, 0)

    def is_draw(self) -> bool:
        # Draw by 50-move rule, stalemate, or threefold repetition
        if self.position.halfmove_clock >= 100:
            return True
        if self.stalemate():
            return True
        return self.repetition_count() >= 3

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.move_stack]
