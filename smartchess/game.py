"""A game on the sensor board: turns square readings into moves, clock and records."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from .api import GameApiClient
from .board import (
    BLACK_CASTLING_RIGHTS,
    BLACK_KING_START_SQUARE,
    BLACK_QUEEN,
    EMPTY,
    FULL_CASTLING_RIGHTS,
    MAX_POSITIONS,
    WHITE_CASTLING_RIGHTS,
    WHITE_KING_START_SQUARE,
    WHITE_QUEEN,
    Color,
    MoveTypes,
    PieceType,
    Position,
    piece_letter,
    square_name,
)
from .castling import ROOK_SQUARES, CastlingType, can_castle, castling_notation
from .checkmate import is_checkmate
from .clock import ChessClock, time_control_for_square
from .disambiguation import get_disambiguation
from .move_validation import is_king_in_check, is_legal_move
from .notation import move_notation
from .pgn import PgnRecorder
from .stalemate import is_stalemate

# Sensor level (volts) above which a square counts as occupied.
PEAK_VALUE = 1.65

_TIME_CONTROL_SQUARES = range(16, 48)
_ROOK_CORNER_RIGHTS = {0: 8, 7: 4, 56: 2, 63: 1}
_SIDE_CASTLING_RIGHTS = {Color.WHITE: WHITE_CASTLING_RIGHTS, Color.BLACK: BLACK_CASTLING_RIGHTS}


@dataclass(frozen=True)
class _PendingCastling:
    castling_type: CastlingType
    rook_to_square: int
    rook_from_square: int
    color: Color


@dataclass
class Game:
    """One game played on the board, driven by passes of 64 sensor readings."""

    position: Position = field(default_factory=Position)
    clock: ChessClock = field(default_factory=ChessClock)
    api: GameApiClient | None = None
    recorder: PgnRecorder | None = None
    peak_value: float = PEAK_VALUE
    move_number: int = 0
    screen: list[str] = field(default_factory=lambda: ["", ""])
    clock_display: tuple[str, str] = ("", "")
    verifying: bool = False
    last_upload: threading.Thread | None = None
    _pending: _PendingCastling | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.position.history:
            self.position.save_position()
        if self.api is not None and self.api.connected:
            self.api.create_new_game()
        if self.recorder is not None:
            self.recorder.create_new_game_file()

    @property
    def is_over(self) -> bool:
        """Tell whether the game has ended by mate, draw or a flag falling."""
        types = self.position.move_types
        return types.checkmate or types.draw or not self.clock.has_time()

    @property
    def awaiting_rook(self) -> bool:
        """Tell whether a castling king has been placed and its rook is still expected."""
        return self._pending is not None

    def _show(self, top: str, bottom: str = "") -> None:
        self.screen[:] = [top, bottom]

    def _show_whose_move(self) -> None:
        side = "White" if self.position.whose_move == Color.WHITE else "Black"
        self._show(f"{side} to move!")

    def _show_draw(self, message: str = "Draw!") -> None:
        self._show(message, "1/2 - 1/2")

    def _record(self, notation: str, from_square: int, to_square: int, castling: bool) -> None:
        if self.api is not None:
            self.last_upload = self.api.send_move(
                notation, from_square, to_square, self.position.whose_move, castling
            )
        if self.recorder is not None and self.recorder.path is not None:
            self.recorder.write_move(notation, self.move_number)
        self.move_number += 1

    def _values(self, readings: Sequence[float]) -> list[float]:
        values = list(readings)
        if len(values) != 64:
            raise ValueError(f"expected 64 readings, got {len(values)}")
        return values

    def choose_time_control(self, square: int) -> bool:
        """Pick the time control for a piece placed on square; False if the square picks nothing."""
        if square not in _TIME_CONTROL_SQUARES:
            return False
        control = time_control_for_square(square)
        if control is not None:
            self.clock.set_time_control(control)
        self._show_whose_move()
        return True

    def missing_squares(self, readings: Sequence[float]) -> list[int]:
        """Return the squares that should hold a piece but read as empty."""
        values = self._values(readings)
        return [
            square
            for square, value in enumerate(values)
            if value < self.peak_value and self.position.board[square] != EMPTY
        ]

    def _verify(self, values: list[float]) -> None:
        missing = self.missing_squares(values)
        if missing:
            self.screen[1] = f"{square_name(missing[0])} is missing!"
            return
        self.verifying = False
        self._show_whose_move()

    def _finish_castling(self) -> None:
        pending = self._pending
        self._pending = None
        self.perform_castling(pending.castling_type, pending.rook_to_square, pending.rook_from_square)
        self.position.castling_rights &= ~_SIDE_CASTLING_RIGHTS[pending.color]

    def _try_castling(self, square: int) -> bool:
        position = self.position
        color = position.whose_move
        start = WHITE_KING_START_SQUARE if color == Color.WHITE else BLACK_KING_START_SQUARE
        if position.picked_square != start:
            return False
        offset = square - position.picked_square
        for castling_type, wanted in ((CastlingType.SHORT, 2), (CastlingType.LONG, -2)):
            if offset == wanted and can_castle(position, castling_type):
                position.update_position(position.picked_square, square)
                if color == Color.WHITE:
                    position.white_king_square = square
                else:
                    position.black_king_square = square
                rook_from, rook_to = ROOK_SQUARES[(color, castling_type)]
                self._pending = _PendingCastling(castling_type, rook_to, rook_from, color)
                return True
        return False

    def _remove_en_passant_victim(self, square: int) -> None:
        position = self.position
        attacked = position.attacked_piece_square
        if attacked == -1:
            return
        if position.whose_move == Color.WHITE and attacked + 8 == square:
            position.clear_square(attacked)
        if position.whose_move == Color.BLACK and attacked - 8 == square:
            position.clear_square(attacked)

    def process_readings(self, readings: Sequence[float]) -> None:
        """Handle one pass of sensor readings, one value per square a1..h8."""
        values = self._values(readings)
        if self.is_over:
            return
        position = self.position
        self.clock_display = self.clock.tick(position.whose_move)

        if self.verifying:
            self._verify(values)
            return
        if self._pending is not None:
            if values[self._pending.rook_to_square] >= self.peak_value:
                self._finish_castling()
            return

        peak = self.peak_value
        for square, value in enumerate(values):
            piece = position.board[square]
            if (
                value < peak
                and piece
                and square != position.picked_square
                and square != position.attacked_piece_square
            ):
                if not piece & position.whose_move:
                    position.move_types.capture = True
                    position.attacked_piece_square = square
                    self._show(f"Capturing {piece_letter(piece)}{square_name(square)}")
                    break
                position.picked_square = square
                self._show(f"{piece_letter(piece)}{square_name(square)} is picked!")

            if position.attacked_piece_square == square and value > peak and position.picked_square == -1:
                position.move_types.capture = False
                position.attacked_piece_square = -1
                self._show(f"Moved back {piece_letter(piece)}{square_name(square)}")
                break

            if value > peak and (position.board[square] == EMPTY or position.attacked_piece_square == square):
                if self._try_castling(square):
                    break
                if is_legal_move(position, position.picked_square, square, position.own_king_square()):
                    self._remove_en_passant_victim(square)
                    position.en_passant_square = -1
                    self.make_move(position.picked_square, square, position.move_types)
                else:
                    self.handle_illegal_move()
                break

    def make_move(self, from_square: int, to_square: int, move_types: MoveTypes) -> str:
        """Play a move on the board, record it and update the game state; return its notation."""
        position = self.position
        board = position.board
        move_types = dataclasses.replace(move_types)
        disambiguation = get_disambiguation(position, from_square, to_square)

        if move_types.capture or board[from_square] & PieceType.PAWN:
            position.reset_position_tracking()
        position.update_position(from_square, to_square)
        position.save_position()

        if position.castling_rights & FULL_CASTLING_RIGHTS and from_square in _ROOK_CORNER_RIGHTS:
            position.castling_rights &= ~_ROOK_CORNER_RIGHTS[from_square]

        moved = board[to_square]
        if moved & PieceType.KING:
            if moved & Color.WHITE:
                position.castling_rights &= ~WHITE_CASTLING_RIGHTS
                position.white_king_square = to_square
            else:
                position.castling_rights &= ~BLACK_CASTLING_RIGHTS
                position.black_king_square = to_square

        if moved & PieceType.PAWN:
            if position.whose_move == Color.WHITE:
                if to_square // 8 == 7:
                    move_types.promotion = True
                    board[to_square] = WHITE_QUEEN
                elif to_square - from_square == 16:
                    position.en_passant_square = to_square - 8
            else:
                if to_square // 8 == 0:
                    move_types.promotion = True
                    board[to_square] = BLACK_QUEEN
                elif from_square - to_square == 16:
                    position.en_passant_square = to_square + 8

        enemy_king = position.opposite_king_square()
        move_types.check = is_king_in_check(position, enemy_king)
        move_types.checkmate = is_checkmate(position, enemy_king)
        position.move_types.checkmate = move_types.checkmate

        notation = move_notation(position, from_square, to_square, move_types, disambiguation)
        self._record(notation, from_square, to_square, castling=False)

        if position.current_position_index == MAX_POSITIONS:
            position.move_types.draw = True
            self._show_draw("50 moves rule!")
            return notation
        if position.is_threefold_repetition():
            position.move_types.draw = True
            self._show_draw("Threefold!")
            return notation
        if is_stalemate(position, enemy_king):
            position.move_types.draw = True
            self._show_draw("Stalemate!")
            return notation

        if move_types.checkmate:
            if position.whose_move == Color.WHITE:
                self._show("White won! 1-0")
            else:
                self._show("Black won! 0-1")

        if not (position.is_sufficient_material(Color.WHITE) or position.is_sufficient_material(Color.BLACK)):
            self._show_draw("Draw!")

        self.clock.apply_increment(position.whose_move)
        position.toggle_whose_move()
        if not move_types.checkmate:
            self._show_whose_move()
        position.reset_dynamics()
        return notation

    def perform_castling(
        self, castling_type: CastlingType, rook_to_square: int, rook_from_square: int
    ) -> str | None:
        """Complete a castling whose king has already moved; return its notation, None on stalemate."""
        position = self.position
        position.update_position(rook_from_square, rook_to_square)
        enemy_king = position.opposite_king_square()
        position.move_types.check = is_king_in_check(position, enemy_king)
        position.move_types.checkmate = is_checkmate(position, enemy_king)
        if is_stalemate(position, enemy_king):
            position.move_types.draw = True
            self._show_draw("Stalemate!")
            return None

        self.clock.apply_increment(position.whose_move)
        position.toggle_whose_move()
        position.save_position()
        self._show_whose_move()

        notation = castling_notation(castling_type, position.move_types)
        if rook_from_square > rook_to_square:
            king_from, king_to = rook_to_square - 1, rook_to_square + 1
        else:
            king_from, king_to = rook_to_square + 1, rook_to_square - 1
        self._record(notation, king_from, king_to, castling=True)
        position.reset_dynamics()
        return notation

    def handle_illegal_move(self) -> None:
        """Report an illegal move and wait for the pieces to be put back."""
        self._show("Illegal move!")
        self.position.reset_dynamics()
        self.verifying = True