"""Pseudo-legal and legal move checks, and detection of checks."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from .board import (
    COLOR_MASK,
    EMPTY,
    KING_MOVE_OFFSETS,
    KNIGHT_MOVE_OFFSETS,
    TYPE_MASK,
    Color,
    PieceType,
    Position,
    piece_color,
)


@dataclass
class CheckInformation:
    """What checks a king is under and where the (last found) checker stands."""

    check: bool = False
    rank_check: bool = False
    file_check: bool = False
    first_diagonal_check: bool = False
    second_diagonal_check: bool = False
    knight_check: bool = False
    checks_number: int = 0
    checking_piece_square: int = -1

    def _record(self, square: int) -> None:
        self.check = True
        self.checks_number += 1
        self.checking_piece_square = square


def within_the_board(square: int) -> bool:
    """Tell whether a square index lies on the board."""
    return 0 <= square <= 63


def is_on_the_same_diagonal(first_square: int, second_square: int) -> bool:
    """Tell whether two squares share any diagonal."""
    if not (within_the_board(first_square) and within_the_board(second_square)):
        return False
    return abs(first_square // 8 - second_square // 8) == abs(first_square % 8 - second_square % 8)


def is_on_the_same_first_diagonal(first_square: int, second_square: int) -> bool:
    """Tell whether two squares share an a1-h8 direction diagonal."""
    return is_on_the_same_diagonal(first_square, second_square) and first_square % 9 == second_square % 9


def is_on_the_same_second_diagonal(first_square: int, second_square: int) -> bool:
    """Tell whether two squares share an h1-a8 direction diagonal."""
    return is_on_the_same_diagonal(first_square, second_square) and first_square % 7 == second_square % 7


def is_on_the_same_rank(first_square: int, second_square: int) -> bool:
    """Tell whether two squares are on the same rank."""
    if not (within_the_board(first_square) and within_the_board(second_square)):
        return False
    return first_square // 8 == second_square // 8


def is_on_the_same_file(first_square: int, second_square: int) -> bool:
    """Tell whether two squares are on the same file."""
    if not (within_the_board(first_square) and within_the_board(second_square)):
        return False
    return first_square % 8 == second_square % 8


def _basic_checks(position: Position, from_square: int, to_square: int) -> bool:
    """Both squares on the board and the target not held by the same colour."""
    if not (within_the_board(from_square) and within_the_board(to_square)):
        return False
    board = position.board
    return piece_color(board[to_square]) != piece_color(board[from_square])


def is_pseudo_legal_knight_move(position: Position, from_square: int, to_square: int) -> bool:
    """Tell whether a knight could jump between the squares."""
    if not _basic_checks(position, from_square, to_square):
        return False
    rank_diff = abs(from_square // 8 - to_square // 8)
    file_diff = abs(from_square % 8 - to_square % 8)
    return (rank_diff, file_diff) in ((2, 1), (1, 2))


def is_pseudo_legal_pawn_move(position: Position, from_square: int, to_square: int) -> bool:
    """Tell whether a pawn could push or capture between the squares."""
    if not _basic_checks(position, from_square, to_square):
        return False
    board = position.board
    rank_diff = to_square // 8 - from_square // 8
    file_diff = to_square % 8 - from_square % 8
    target = board[to_square]
    pawn = board[from_square]

    if pawn & Color.WHITE and not target:
        if rank_diff == 1 and file_diff == 0:
            return True
        if from_square // 8 == 1 and rank_diff == 2 and file_diff == 0 and not board[to_square - 8]:
            return True
    if pawn & Color.BLACK and not target:
        if rank_diff == -1 and file_diff == 0:
            return True
        if from_square // 8 == 6 and rank_diff == -2 and file_diff == 0 and not board[to_square + 8]:
            return True
    en_passant = to_square == position.en_passant_square
    if pawn & Color.WHITE and rank_diff == 1 and abs(file_diff) == 1 and (target & Color.BLACK or en_passant):
        return True
    if pawn & Color.BLACK and rank_diff == -1 and abs(file_diff) == 1 and (target & Color.WHITE or en_passant):
        return True
    return False


def is_pseudo_legal_king_move(position: Position, from_square: int, to_square: int) -> bool:
    """Tell whether a king could step between the squares."""
    if not _basic_checks(position, from_square, to_square):
        return False
    return abs(from_square // 8 - to_square // 8) <= 1 and abs(from_square % 8 - to_square % 8) <= 1


def _path_is_clear(position: Position, from_square: int, step: int, count: int) -> bool:
    return not any(position.board[from_square + i * step] for i in range(1, count))


def is_pseudo_legal_bishop_move(position: Position, from_square: int, to_square: int) -> bool:
    """Tell whether a bishop could slide between the squares."""
    if not _basic_checks(position, from_square, to_square):
        return False
    count = abs(from_square // 8 - to_square // 8)
    direction = -1 if from_square > to_square else 1
    if is_on_the_same_first_diagonal(from_square, to_square):
        return _path_is_clear(position, from_square, 9 * direction, count)
    if is_on_the_same_second_diagonal(from_square, to_square):
        return _path_is_clear(position, from_square, 7 * direction, count)
    return False


def is_pseudo_legal_rook_move(position: Position, from_square: int, to_square: int) -> bool:
    """Tell whether a rook could slide between the squares."""
    if not _basic_checks(position, from_square, to_square):
        return False
    direction = -1 if from_square > to_square else 1
    if is_on_the_same_file(from_square, to_square):
        count = abs(from_square // 8 - to_square // 8)
        return _path_is_clear(position, from_square, 8 * direction, count)
    if is_on_the_same_rank(from_square, to_square):
        count = abs(from_square % 8 - to_square % 8)
        return _path_is_clear(position, from_square, direction, count)
    return False


def is_pseudo_legal_queen_move(position: Position, from_square: int, to_square: int) -> bool:
    """Tell whether a queen could slide between the squares."""
    return is_pseudo_legal_bishop_move(position, from_square, to_square) or is_pseudo_legal_rook_move(
        position, from_square, to_square
    )


_PSEUDO_LEGAL_BY_TYPE: dict[int, Callable[[Position, int, int], bool]] = {
    PieceType.BISHOP: is_pseudo_legal_bishop_move,
    PieceType.QUEEN: is_pseudo_legal_queen_move,
    PieceType.ROOK: is_pseudo_legal_rook_move,
    PieceType.PAWN: is_pseudo_legal_pawn_move,
    PieceType.KNIGHT: is_pseudo_legal_knight_move,
    PieceType.KING: is_pseudo_legal_king_move,
}


def is_pseudo_legal_move(position: Position, from_square: int, to_square: int) -> bool:
    """Tell whether the piece on from_square moves that way, ignoring checks."""
    if not within_the_board(from_square):
        return False
    check = _PSEUDO_LEGAL_BY_TYPE.get(position.board[from_square] & TYPE_MASK)
    return check is not None and check(position, from_square, to_square)


def can_attack_the_king(position: Position, piece_square: int, king_square: int) -> bool:
    """Tell whether the piece on piece_square attacks the king on king_square."""
    if not (within_the_board(piece_square) and within_the_board(king_square)):
        return False
    board = position.board
    if board[piece_square] & COLOR_MASK == board[king_square] & COLOR_MASK:
        return False

    kind = board[piece_square] & TYPE_MASK
    if kind == PieceType.PAWN:
        rank_diff = king_square // 8 - piece_square // 8
        file_diff = king_square % 8 - piece_square % 8
        if abs(file_diff) != 1:
            return False
        king = board[king_square]
        return bool((king & Color.WHITE and rank_diff == -1) or (king & Color.BLACK and rank_diff == 1))
    check = _PSEUDO_LEGAL_BY_TYPE.get(kind)
    return check is not None and check(position, piece_square, king_square)


def _first_piece_on_ray(
    position: Position,
    king_square: int,
    step: int,
    on_line: Callable[[int, int], bool] | None,
) -> int | None:
    for i in range(1, 8):
        square = king_square + i * step
        if not within_the_board(square) or (on_line is not None and not on_line(king_square, square)):
            return None
        if position.board[square]:
            return square
    return None


def _attackers_along(
    position: Position,
    king_square: int,
    step: int,
    on_line: Callable[[int, int], bool] | None = None,
) -> Iterator[int]:
    king_color = position.board[king_square] & COLOR_MASK
    for direction in (1, -1):
        square = _first_piece_on_ray(position, king_square, step * direction, on_line)
        if (
            square is not None
            and position.board[square] & COLOR_MASK != king_color
            and can_attack_the_king(position, square, king_square)
        ):
            yield square


def get_checks_information(position: Position, king_square: int) -> CheckInformation:
    """Collect every check given to the king on king_square."""
    info = CheckInformation()
    if not within_the_board(king_square):
        return info

    for square in _attackers_along(position, king_square, 1):
        info.rank_check = True
        info._record(square)
    for square in _attackers_along(position, king_square, 8):
        info.file_check = True
        info._record(square)
    for square in _attackers_along(position, king_square, 9, is_on_the_same_first_diagonal):
        info.first_diagonal_check = True
        info._record(square)
    for square in _attackers_along(position, king_square, 7, is_on_the_same_second_diagonal):
        info.second_diagonal_check = True
        info._record(square)

    king_color = position.board[king_square] & COLOR_MASK
    for offset in KNIGHT_MOVE_OFFSETS:
        square = king_square + offset
        if not within_the_board(square) or not position.board[square]:
            continue
        if position.board[square] & COLOR_MASK != king_color and can_attack_the_king(
            position, square, king_square
        ):
            info.knight_check = True
            info._record(square)
    return info


def is_king_in_check(position: Position, king_square: int) -> bool:
    """Tell whether the king on king_square is attacked."""
    return get_checks_information(position, king_square).check


def is_legal_move(position: Position, from_square: int, to_square: int, own_king_square: int) -> bool:
    """Tell whether a move is pseudo-legal and leaves the own king out of check."""
    if not all(within_the_board(square) for square in (from_square, to_square, own_king_square)):
        return False
    if from_square == to_square:
        return False

    board = position.board
    moving = board[from_square]
    captured = board[to_square]
    if from_square == own_king_square:
        own_king_square = to_square

    pseudo_legal = is_pseudo_legal_move(position, from_square, to_square)
    board[from_square] = EMPTY
    board[to_square] = moving
    try:
        return pseudo_legal and not is_king_in_check(position, own_king_square)
    finally:
        board[from_square] = moving
        board[to_square] = captured


def king_has_legal_moves(position: Position, king_square: int) -> bool:
    """Tell whether the king on king_square can step anywhere legally."""
    if not within_the_board(king_square):
        return False
    return any(
        is_legal_move(position, king_square, king_square + offset, king_square) for offset in KING_MOVE_OFFSETS
    )