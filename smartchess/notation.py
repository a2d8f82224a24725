"""Algebraic notation of ordinary (non-castling) moves."""

from __future__ import annotations

from .board import PieceType, Position, MoveTypes, file_letter, piece_letter, square_name
from .disambiguation import disambiguation_notation


def move_notation(
    position: Position,
    from_square: int,
    to_square: int,
    move_types: MoveTypes,
    disambiguation: int,
) -> str:
    """Return the notation of a move already made on the board."""
    piece = position.board[to_square]
    notation = piece_letter(piece) + square_name(to_square)

    if move_types.capture:
        if piece & PieceType.PAWN or (piece & PieceType.QUEEN and move_types.promotion):
            notation = file_letter(from_square) + "x" + square_name(to_square)
        else:
            notation = notation[0] + "x" + notation[1:]

    notation = notation[0] + disambiguation_notation(disambiguation, from_square) + notation[1:]

    if move_types.promotion:
        notation = notation[1:] + "=Q"

    if move_types.checkmate:
        return notation + "#"
    if move_types.check:
        notation += "+"
    return notation