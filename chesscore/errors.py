from __future__ import annotations


class ChessError(ValueError):
    """Base class for invalid chess input.

    Subclasses ``ValueError`` so callers can treat every malformed coordinate,
    piece letter, FEN/EPD record or move uniformly.
    """


class InvalidSquare(ChessError):
    pass


class InvalidPiece(ChessError):
    pass


class InvalidFen(ChessError):
    def __init__(self, message: str) -> None:
        super().__init__(f"invalid FEN: {message}")


class InvalidEpd(ChessError):
    def __init__(self, message: str) -> None:
        super().__init__(f"invalid EPD record: {message}")


class InvalidMove(ChessError):
    """Raised when a move string cannot be parsed."""


class IllegalMove(ChessError):
    """Raised when a well-formed move is not legal in the current position."""
