"""Detection of checkmate: can any piece block or capture a checking piece."""

from __future__ import annotations

from collections.abc import Callable

from .board import BLACK_PAWN, COLOR_MASK, KNIGHT_MOVE_OFFSETS, TYPE_MASK, PieceType, Position
from .move_validation import (
    get_checks_information,
    is_king_in_check,
    is_legal_move,
    is_on_the_same_first_diagonal,
    is_on_the_same_second_diagonal,
    king_has_legal_moves,
    within_the_board,
)

_LINE_MOVERS = PieceType.ROOK | PieceType.QUEEN
_DIAGONAL_MOVERS = PieceType.BISHOP | PieceType.QUEEN


def _between(square: int, king_square: int, attacking_square: int, inclusive: bool) -> bool:
    """Tell whether a square lies between king and attacker (attacker itself if inclusive)."""
    if inclusive and square == attacking_square:
        return True
    low, high = sorted((king_square, attacking_square))
    return low < square < high


def _blocks(
    position: Position,
    piece_square: int,
    square: int,
    king_square: int,
    attacking_square: int,
    inclusive: bool = True,
) -> bool:
    """Tell whether moving the piece to square legally stands in the attacker's way."""
    return (
        within_the_board(square)
        and _between(square, king_square, attacking_square, inclusive)
        and is_legal_move(position, piece_square, square, king_square)
    )


def _any_blocks(
    position: Position,
    piece_square: int,
    squares: tuple[int, ...],
    king_square: int,
    attacking_square: int,
    inclusive: bool = True,
) -> bool:
    return any(
        _blocks(position, piece_square, square, king_square, attacking_square, inclusive) for square in squares
    )


def _knight_blocks(
    position: Position,
    piece_square: int,
    king_square: int,
    attacking_square: int,
    on_line: Callable[[int], bool],
) -> bool:
    return any(
        on_line(piece_square + offset)
        and _blocks(position, piece_square, piece_square + offset, king_square, attacking_square)
        for offset in KNIGHT_MOVE_OFFSETS
    )


def _pawn_blocks_diagonal(
    position: Position,
    piece_square: int,
    king_square: int,
    attacking_square: int,
    same_diagonal: Callable[[int, int], bool],
) -> bool:
    step = -8 if position.board[piece_square] == BLACK_PAWN else 8
    for square in (piece_square + step, piece_square + 2 * step):
        if (
            within_the_board(square)
            and same_diagonal(square, attacking_square)
            and _blocks(position, piece_square, square, king_square, attacking_square, inclusive=False)
        ):
            return True
    return is_legal_move(position, piece_square, attacking_square, king_square)


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    return int(numerator / denominator)


def can_block_file_check(position: Position, piece_square: int, king_square: int, attacking_square: int) -> bool:
    """Tell whether the piece can interpose on, or capture along, a file check."""
    defender = position.board[piece_square] & TYPE_MASK
    defender_file = piece_square % 8
    attacker_file = attacking_square % 8
    files = attacker_file - defender_file

    if defender & _LINE_MOVERS and _blocks(
        position, piece_square, piece_square + files, king_square, attacking_square
    ):
        return True
    if defender & _DIAGONAL_MOVERS:
        first = piece_square + files + files * 8
        second = first - 2 * files * 8
        if _any_blocks(position, piece_square, (first, second), king_square, attacking_square):
            return True
    if defender & PieceType.KNIGHT and _knight_blocks(
        position, piece_square, king_square, attacking_square, lambda square: square % 8 == attacker_file
    ):
        return True
    if defender & PieceType.PAWN and is_legal_move(position, piece_square, attacking_square, king_square):
        return True
    return False


def can_block_rank_check(position: Position, piece_square: int, king_square: int, attacking_square: int) -> bool:
    """Tell whether the piece can interpose on, or capture along, a rank check."""
    defender = position.board[piece_square] & TYPE_MASK
    defender_rank = piece_square // 8
    attacker_rank = attacking_square // 8
    ranks = attacker_rank - defender_rank

    if defender & _LINE_MOVERS and _blocks(
        position, piece_square, piece_square + ranks * 8, king_square, attacking_square
    ):
        return True
    if defender & _DIAGONAL_MOVERS:
        first = piece_square + ranks + ranks * 8
        second = first - 2 * ranks
        if _any_blocks(position, piece_square, (first, second), king_square, attacking_square):
            return True
    if defender & PieceType.KNIGHT and _knight_blocks(
        position, piece_square, king_square, attacking_square, lambda square: square // 8 == attacker_rank
    ):
        return True
    if defender & PieceType.PAWN:
        if _blocks(
            position, piece_square, piece_square + 8 * ranks, king_square, attacking_square, inclusive=False
        ):
            return True
        if is_legal_move(position, piece_square, attacking_square, king_square):
            return True
    return False


def _bishop_blocks_diagonal(
    position: Position, piece_square: int, king_square: int, attacking_square: int
) -> bool | None:
    """Bishop/queen interposition on a diagonal; None when square colours differ."""
    defender_rank, defender_file = divmod(piece_square, 8)
    attacker_rank, attacker_file = divmod(attacking_square, 8)
    if (defender_file + defender_rank) % 2 != (attacker_file + attacker_rank) % 2:
        return None
    files = attacker_file - defender_file
    ranks = attacker_rank - defender_rank
    square = piece_square - _trunc_div(files - ranks, 2) * 7
    return _blocks(position, piece_square, square, king_square, attacking_square)


def can_block_first_diagonal_check(
    position: Position, piece_square: int, king_square: int, attacking_square: int
) -> bool:
    """Tell whether the piece can interpose on, or capture along, an a1-h8 diagonal check."""
    defender = position.board[piece_square] & TYPE_MASK
    ranks = attacking_square // 8 - piece_square // 8
    files = attacking_square % 8 - piece_square % 8

    if defender & _LINE_MOVERS:
        first = piece_square + (ranks - files) * 8
        second = piece_square + files - ranks
        if _any_blocks(position, piece_square, (first, second), king_square, attacking_square):
            return True
    if defender & _DIAGONAL_MOVERS:
        result = _bishop_blocks_diagonal(position, piece_square, king_square, attacking_square)
        if result is None:
            return False
        if result:
            return True
    if defender & PieceType.KNIGHT and _knight_blocks(
        position,
        piece_square,
        king_square,
        attacking_square,
        lambda square: is_on_the_same_first_diagonal(square, attacking_square),
    ):
        return True
    if defender & PieceType.PAWN and _pawn_blocks_diagonal(
        position, piece_square, king_square, attacking_square, is_on_the_same_first_diagonal
    ):
        return True
    return False


def can_block_second_diagonal_check(
    position: Position, piece_square: int, king_square: int, attacking_square: int
) -> bool:
    """Tell whether the piece can interpose on, or capture along, an h1-a8 diagonal check."""
    defender = position.board[piece_square] & TYPE_MASK
    ranks = attacking_square // 8 - piece_square // 8
    files = attacking_square % 8 - piece_square % 8

    if defender & _LINE_MOVERS:
        if attacking_square < king_square:
            first = piece_square + (ranks - files) * 8
            second = piece_square + files + ranks
        else:
            first = piece_square + (ranks + files) * 8
            second = piece_square + files - ranks
        if _any_blocks(position, piece_square, (first, second), king_square, attacking_square):
            return True
    if defender & _DIAGONAL_MOVERS:
        result = _bishop_blocks_diagonal(position, piece_square, king_square, attacking_square)
        if result is None:
            return False
        if result:
            return True
    if defender & PieceType.KNIGHT and _knight_blocks(
        position,
        piece_square,
        king_square,
        attacking_square,
        lambda square: is_on_the_same_second_diagonal(square, attacking_square),
    ):
        return True
    if defender & PieceType.PAWN and _pawn_blocks_diagonal(
        position, piece_square, king_square, attacking_square, is_on_the_same_second_diagonal
    ):
        return True
    return False


def is_checkmate(position: Position, king_square: int) -> bool:
    """Tell whether the king on king_square is checkmated."""
    king_color = position.board[king_square] & COLOR_MASK
    info = get_checks_information(position, king_square)
    if not is_king_in_check(position, king_square) or king_has_legal_moves(position, king_square):
        return False
    # A double check that the king cannot step out of is always mate.
    if info.checks_number > 1:
        return True

    attacker = info.checking_piece_square
    for square, piece in enumerate(position.board):
        if not piece & king_color:
            continue
        if info.rank_check and can_block_rank_check(position, square, king_square, attacker):
            return False
        if info.file_check and can_block_file_check(position, square, king_square, attacker):
            return False
        if info.first_diagonal_check and can_block_first_diagonal_check(position, square, king_square, attacker):
            return False
        if info.second_diagonal_check and can_block_second_diagonal_check(
            position, square, king_square, attacker
        ):
            return False
        if info.knight_check and is_legal_move(position, square, attacker, king_square):
            return False
    return True