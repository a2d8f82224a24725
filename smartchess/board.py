"""Piece encoding, board helpers and the mutable game position."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag


class Color(IntFlag):
    """Piece colour, stored in the two lowest bits of a piece."""

    NONE = 0
    WHITE = 1
    BLACK = 2


class PieceType(IntEnum):
    """Piece kind, stored in the six upper bits of a piece."""

    EMPTY = 0
    PAWN = 4
    KNIGHT = 8
    BISHOP = 16
    ROOK = 32
    QUEEN = 64
    KING = 128


COLOR_MASK = 3
TYPE_MASK = 252

EMPTY = 0
WHITE_PAWN = int(PieceType.PAWN) | int(Color.WHITE)
WHITE_KNIGHT = int(PieceType.KNIGHT) | int(Color.WHITE)
WHITE_BISHOP = int(PieceType.BISHOP) | int(Color.WHITE)
WHITE_ROOK = int(PieceType.ROOK) | int(Color.WHITE)
WHITE_QUEEN = int(PieceType.QUEEN) | int(Color.WHITE)
WHITE_KING = int(PieceType.KING) | int(Color.WHITE)
BLACK_PAWN = int(PieceType.PAWN) | int(Color.BLACK)
BLACK_KNIGHT = int(PieceType.KNIGHT) | int(Color.BLACK)
BLACK_BISHOP = int(PieceType.BISHOP) | int(Color.BLACK)
BLACK_ROOK = int(PieceType.ROOK) | int(Color.BLACK)
BLACK_QUEEN = int(PieceType.QUEEN) | int(Color.BLACK)
BLACK_KING = int(PieceType.KING) | int(Color.BLACK)

WHITE_KING_START_SQUARE = 4
BLACK_KING_START_SQUARE = 60

FULL_CASTLING_RIGHTS = 15
WHITE_CASTLING_RIGHTS = 12
BLACK_CASTLING_RIGHTS = 3

MAX_POSITIONS = 100

KNIGHT_MOVE_OFFSETS = (17, -17, 15, -15, 10, -10, 6, -6)
KING_MOVE_OFFSETS = (1, -1, 8, -8, 7, -7, 9, -9)

_HASH_MASK = 0xFFFFFFFF

_PIECE_LETTERS = {
    PieceType.PAWN: "",
    PieceType.ROOK: "R",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

_FIRST_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def file_letter(square: int) -> str:
    """Return the file letter ('a'..'h') of a square index."""
    return chr(ord("a") + square % 8)


def rank_number(square: int) -> int:
    """Return the rank number (1..8) of a square index."""
    return square // 8 + 1


def square_name(square: int) -> str:
    """Return the algebraic name of a square, e.g. 'e4'."""
    return f"{file_letter(square)}{rank_number(square)}"


def piece_color(piece: int) -> Color:
    """Return the colour bits of a piece (Color.NONE for an empty square)."""
    return Color(piece & COLOR_MASK)


def piece_type(piece: int) -> PieceType:
    """Return the kind of a piece, ignoring its colour."""
    return PieceType(piece & TYPE_MASK)


def piece_letter(piece: int) -> str:
    """Return the notation letter of a piece; pawns and empty squares give ''."""
    return _PIECE_LETTERS.get(piece & TYPE_MASK, "")


def _starting_board() -> list[int]:
    board = [EMPTY] * 64
    for file, kind in enumerate(_FIRST_RANK):
        board[file] = int(kind) | int(Color.WHITE)
        board[56 + file] = int(kind) | int(Color.BLACK)
        board[8 + file] = WHITE_PAWN
        board[48 + file] = BLACK_PAWN
    return board


@dataclass
class MoveTypes:
    """Flags describing the move being made and the game state it produced."""

    capture: bool = False
    check: bool = False
    checkmate: bool = False
    promotion: bool = False
    draw: bool = False


@dataclass
class Position:
    """The board together with side to move, king squares and move tracking."""

    board: list[int] = field(default_factory=_starting_board)
    whose_move: Color = Color.WHITE
    white_king_square: int = WHITE_KING_START_SQUARE
    black_king_square: int = BLACK_KING_START_SQUARE
    castling_rights: int = FULL_CASTLING_RIGHTS
    en_passant_square: int = -1
    picked_square: int = -1
    attacked_piece_square: int = -1
    move_types: MoveTypes = field(default_factory=MoveTypes)
    history: list[int] = field(default_factory=list)

    def __getitem__(self, square: int) -> int:
        return self.board[square]

    def __setitem__(self, square: int, piece: int) -> None:
        self.board[square] = piece

    def clear_square(self, square: int) -> None:
        """Remove whatever stands on a square."""
        self.board[square] = EMPTY

    def update_position(self, from_square: int, to_square: int) -> None:
        """Move the piece on one square to another, replacing what was there."""
        moved = self.board[from_square]
        self.clear_square(from_square)
        self.board[to_square] = moved

    def opposite_king_square(self) -> int:
        """Return the king square of the side not to move."""
        if self.whose_move == Color.WHITE:
            return self.black_king_square
        return self.white_king_square

    def own_king_square(self) -> int:
        """Return the king square of the side to move."""
        if self.whose_move == Color.WHITE:
            return self.white_king_square
        return self.black_king_square

    def toggle_whose_move(self) -> None:
        """Pass the move to the other side."""
        self.whose_move = Color.BLACK if self.whose_move == Color.WHITE else Color.WHITE

    def reset_dynamics(self) -> None:
        """Forget picked and attacked squares and per-move flags."""
        self.picked_square = -1
        self.attacked_piece_square = -1
        self.move_types.capture = False
        self.move_types.check = False
        self.move_types.promotion = False

    def is_sufficient_material(self, color: Color) -> bool:
        """Tell whether a side still has enough material to deliver mate."""
        material = 0
        for piece in self.board:
            if not piece & color:
                continue
            kind = piece & TYPE_MASK
            if kind & PieceType.KING:
                continue
            if kind & (PieceType.PAWN | PieceType.ROOK | PieceType.QUEEN):
                return True
            material += kind
        # 16 is one bishop or two knights: more than that can mate.
        return material > 16

    def clear_board(self) -> None:
        """Empty every square."""
        self.board[:] = [EMPTY] * 64

    def reset_board(self) -> None:
        """Set up the starting position of the pieces."""
        self.board[:] = _starting_board()

    @property
    def current_position_index(self) -> int:
        """Index of the last saved position, -1 when nothing is saved."""
        return len(self.history) - 1

    def reset_position_tracking(self) -> None:
        """Forget all saved positions."""
        self.history.clear()

    def position_hash(self) -> int:
        """Return a 32-bit hash of the board, castling rights and en passant square."""
        value = 5381
        for item in (*self.board, self.castling_rights, self.en_passant_square):
            value = (((value << 5) + value) ^ item) & _HASH_MASK
        return value

    def save_position(self) -> None:
        """Record the hash of the current position."""
        self.history.append(self.position_hash())

    def is_threefold_repetition(self) -> bool:
        """Tell whether the last saved position has occurred three times."""
        if not self.history:
            return False
        return self.history.count(self.history[-1]) > 2