"""Detection of stalemate: the side to move has no legal move and is not in check."""

from __future__ import annotations

from .board import BLACK_KING_START_SQUARE, COLOR_MASK, EMPTY, KNIGHT_MOVE_OFFSETS, TYPE_MASK, WHITE_PAWN
from .board import Color, PieceType, Position
from .move_validation import (
    is_king_in_check,
    is_legal_move,
    is_on_the_same_first_diagonal,
    is_on_the_same_second_diagonal,
    king_has_legal_moves,
    within_the_board,
)

_PAWN_MOVE_OFFSETS = (8, 16, 7, 9)
_BISHOP_RAYS = (
    (9, is_on_the_same_first_diagonal),
    (-9, is_on_the_same_first_diagonal),
    (7, is_on_the_same_second_diagonal),
    (-7, is_on_the_same_second_diagonal),
)

__all__ = [
    "BLACK_KING_START_SQUARE",
    "bishop_has_legal_moves",
    "is_stalemate",
    "knight_has_legal_moves",
    "pawn_has_legal_moves",
    "piece_has_legal_moves",
    "rook_has_legal_moves",
]


def pawn_has_legal_moves(position: Position, pawn_square: int, own_king_square: int) -> bool:
    """Tell whether the pawn on pawn_square has a legal push or capture."""
    direction = 1 if position.board[pawn_square] & WHITE_PAWN else -1
    return any(
        is_legal_move(position, pawn_square, pawn_square + offset * direction, own_king_square)
        for offset in _PAWN_MOVE_OFFSETS
    )


def knight_has_legal_moves(position: Position, knight_square: int, own_king_square: int) -> bool:
    """Tell whether the knight on knight_square has a legal jump."""
    return any(
        is_legal_move(position, knight_square, knight_square + offset, own_king_square)
        for offset in KNIGHT_MOVE_OFFSETS
    )


def rook_has_legal_moves(position: Position, rook_square: int, own_king_square: int) -> bool:
    """Tell whether a rook-moving piece on rook_square has a legal move along its rank or file."""
    rook_rank, rook_file = divmod(rook_square, 8)
    return any(
        is_legal_move(position, rook_square, rook_rank * 8 + i, own_king_square)
        or is_legal_move(position, rook_square, i * 8 + rook_file, own_king_square)
        for i in range(8)
    )


def bishop_has_legal_moves(position: Position, bishop_square: int, own_king_square: int) -> bool:
    """Tell whether a bishop-moving piece on bishop_square has a legal diagonal move."""
    for step, on_diagonal in _BISHOP_RAYS:
        for i in range(1, 8):
            square = bishop_square + i * step
            if not on_diagonal(bishop_square, square) or not within_the_board(square):
                break
            if is_legal_move(position, bishop_square, square, own_king_square):
                return True
    return False


def piece_has_legal_moves(position: Position, square: int) -> bool:
    """Tell whether the piece on square has any legal move."""
    piece = position.board[square]
    own_king_square = position.black_king_square if piece & Color.BLACK else position.white_king_square
    kind = piece & TYPE_MASK
    if kind == PieceType.PAWN:
        return pawn_has_legal_moves(position, square, own_king_square)
    if kind == PieceType.KNIGHT:
        return knight_has_legal_moves(position, square, own_king_square)
    if kind == PieceType.BISHOP:
        return bishop_has_legal_moves(position, square, own_king_square)
    if kind == PieceType.ROOK:
        return rook_has_legal_moves(position, square, own_king_square)
    if kind == PieceType.QUEEN:
        return rook_has_legal_moves(position, square, own_king_square) or bishop_has_legal_moves(
            position, square, own_king_square
        )
    if kind == PieceType.KING:
        return king_has_legal_moves(position, square)
    return False


def is_stalemate(position: Position, king_square: int) -> bool:
    """Tell whether the side of the king on king_square is stalemated."""
    king_color = position.board[king_square] & COLOR_MASK
    if is_king_in_check(position, king_square) or king_has_legal_moves(position, king_square):
        return False
    for square, piece in enumerate(position.board):
        if square == king_square or not (piece & COLOR_MASK & king_color) or piece == EMPTY:
            continue
        if piece_has_legal_moves(position, square):
            return False
    return True