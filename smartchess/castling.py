"""Castling: whether the side to move may castle, and castling notation."""

from __future__ import annotations

from enum import IntEnum

from .board import (
    BLACK_KING_START_SQUARE,
    EMPTY,
    WHITE_KING_START_SQUARE,
    Color,
    MoveTypes,
    Position,
)
from .move_validation import is_king_in_check


class CastlingType(IntEnum):
    """Kingside or queenside castling; the values encode the castling-rights bits."""

    SHORT = 32
    LONG = 64


# (colour, castling type) -> (rook start square, rook target square)
ROOK_SQUARES = {
    (Color.WHITE, CastlingType.SHORT): (7, 5),
    (Color.WHITE, CastlingType.LONG): (0, 3),
    (Color.BLACK, CastlingType.SHORT): (63, 61),
    (Color.BLACK, CastlingType.LONG): (56, 59),
}


def _has_right(position: Position, king: int, castling_type: CastlingType) -> bool:
    rights = position.castling_rights
    if king & Color.WHITE and not rights & (int(castling_type) >> 3):
        return False
    if king & Color.BLACK and not rights & (int(castling_type) >> 5):
        return False
    return True


def can_castle(position: Position, castling_type: CastlingType) -> bool:
    """Tell whether the side to move may castle the given way."""
    if position.whose_move == Color.WHITE:
        king_square = WHITE_KING_START_SQUARE
    else:
        king_square = BLACK_KING_START_SQUARE
    if is_king_in_check(position, king_square):
        return False

    board = position.board
    king = board[king_square]
    if not _has_right(position, king, castling_type):
        return False

    step = -1 if castling_type == CastlingType.LONG else 1
    for distance in (1, 2):
        square = king_square + step * distance
        if board[square]:
            return False
        board[king_square] = EMPTY
        board[square] = king
        try:
            attacked = is_king_in_check(position, square)
        finally:
            board[king_square] = king
            board[square] = EMPTY
        if attacked:
            return False
    return True


def castling_notation(castling_type: CastlingType, move_types: MoveTypes) -> str:
    """Return 'O-O' or 'O-O-O' with a check or mate suffix."""
    notation = "O-O-O" if castling_type == CastlingType.LONG else "O-O"
    if move_types.checkmate:
        return notation + "#"
    if move_types.check:
        return notation + "+"
    return notation