"""Disambiguation of moves when several like pieces can reach the same square."""

from __future__ import annotations

from enum import IntEnum, IntFlag

from .board import EMPTY, KNIGHT_MOVE_OFFSETS, TYPE_MASK, PieceType, Position, file_letter, rank_number
from .move_validation import is_legal_move, is_on_the_same_file, within_the_board

UP = 1
DOWN = -1
LOOKUP_DIRECTIONS = (UP, DOWN)


class LineDirection(IntEnum):
    """Lines along which a sliding piece travels."""

    FILE = 1
    RANK = 2
    FIRST_DIAGONAL = 4  # a1-h8 direction
    SECOND_DIAGONAL = 8  # h1-a8 direction


class Disambiguation(IntFlag):
    """Which extra coordinate a move's notation needs."""

    NONE = 0
    FILE = 1
    RANK = 2
    FULL = 3


_LINE_OFFSETS = {
    LineDirection.FILE: 8,
    LineDirection.RANK: 1,
    LineDirection.FIRST_DIAGONAL: 9,
    LineDirection.SECOND_DIAGONAL: 7,
}

_SLIDER_LINES = {
    PieceType.ROOK: (LineDirection.FILE, LineDirection.RANK),
    PieceType.BISHOP: (LineDirection.FIRST_DIAGONAL, LineDirection.SECOND_DIAGONAL),
    PieceType.QUEEN: tuple(LineDirection),
}


def find_closest_piece(position: Position, direction: int, lookup_direction: int, square: int) -> int:
    """Return the nearest occupied square along a line from square, or -1."""
    offset = _LINE_OFFSETS.get(direction)
    if offset is None:
        return -1
    for i in range(1, 8):
        candidate = square + i * lookup_direction * offset
        if not within_the_board(candidate):
            break
        if position.board[candidate]:
            return candidate
    return -1


class _Tracker:
    """Accumulates file/rank disambiguation as rival pieces are found."""

    def __init__(self, from_square: int) -> None:
        self.from_square = from_square
        self.file = False
        self.rank = False

    def add(self, rival_square: int) -> bool:
        """Record a rival; return True once both coordinates are needed."""
        if is_on_the_same_file(self.from_square, rival_square) and not self.file:
            self.file = True
        elif not self.rank:
            self.rank = True
        return self.file and self.rank

    @property
    def result(self) -> Disambiguation:
        value = Disambiguation.NONE
        if self.file:
            value |= Disambiguation.FILE
        if self.rank:
            value |= Disambiguation.RANK
        return value


def slide_piece_disambiguation(position: Position, from_square: int, to_square: int) -> Disambiguation:
    """Disambiguate a rook, bishop or queen move."""
    piece = position.board[from_square]
    lines = _SLIDER_LINES.get(piece & TYPE_MASK)
    if lines is None:
        return Disambiguation.NONE
    own_king = position.own_king_square()
    tracker = _Tracker(from_square)
    for line in lines:
        for direction in LOOKUP_DIRECTIONS:
            rival = find_closest_piece(position, line, direction, to_square)
            if (
                not within_the_board(rival)
                or rival == from_square
                or position.board[rival] != piece
                or not is_legal_move(position, rival, to_square, own_king)
            ):
                continue
            if tracker.add(rival):
                return Disambiguation.FULL
    return tracker.result


def knight_disambiguation(position: Position, from_square: int, to_square: int) -> Disambiguation:
    """Disambiguate a knight move."""
    piece = position.board[from_square]
    own_king = position.own_king_square()
    tracker = _Tracker(from_square)
    for offset in KNIGHT_MOVE_OFFSETS:
        rival = to_square + offset
        if (
            not within_the_board(rival)
            or rival == from_square
            or position.board[rival] != piece
            or position.board[rival] == EMPTY
            or not is_legal_move(position, rival, to_square, own_king)
        ):
            continue
        if tracker.add(rival):
            return Disambiguation.FULL
    return tracker.result


def get_disambiguation(position: Position, from_square: int, to_square: int) -> Disambiguation:
    """Tell which coordinate, if any, must be added to the notation of a move."""
    kind = position.board[from_square] & TYPE_MASK
    if kind == PieceType.KNIGHT:
        return knight_disambiguation(position, from_square, to_square)
    if kind in (PieceType.KING, PieceType.EMPTY):
        return Disambiguation.NONE
    return slide_piece_disambiguation(position, from_square, to_square)


def disambiguation_notation(disambiguation: int, from_square: int) -> str:
    """Return the text inserted into a move's notation for a disambiguation."""
    if disambiguation == Disambiguation.FULL:
        return file_letter(from_square) + file_letter(from_square)
    if disambiguation == Disambiguation.FILE:
        return str(rank_number(from_square))
    if disambiguation == Disambiguation.RANK:
        return file_letter(from_square)
    return ""