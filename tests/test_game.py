import json

import pytest

from smartchess.api import GameApiClient
from smartchess.board import (
    BLACK_KING,
    BLACK_PAWN,
    EMPTY,
    WHITE_CASTLING_RIGHTS,
    WHITE_KING,
    WHITE_PAWN,
    WHITE_QUEEN,
    WHITE_ROOK,
    Color,
    MoveTypes,
    Position,
)
from smartchess.clock import TICK_MILLISECONDS, format_time
from smartchess.game import Game
from smartchess.pgn import PgnRecorder, pgn_fragment

HIGH = 3.0
LOW = 0.0


def _readings(game, lifted=(), placed=()):
    values = [HIGH if piece else LOW for piece in game.position.board]
    for square in lifted:
        values[square] = LOW
    for square in placed:
        values[square] = HIGH
    return values


@pytest.fixture
def game():
    g = Game()
    g.choose_time_control(16)
    return g


def test_choose_time_control_sets_clock():
    g = Game()
    assert g.choose_time_control(24) is True
    assert g.clock.white_time == 180000
    assert g.clock.black_time == 180000
    assert g.clock.increment == 2000
    assert g.screen[0] == "White to move!"


def test_choose_time_control_outside_rows():
    g = Game()
    assert g.choose_time_control(5) is False
    assert g.clock.white_time == 0
    assert g.is_over


def test_missing_squares(game):
    assert game.missing_squares(_readings(game)) == []
    assert game.missing_squares(_readings(game, lifted=(12, 60))) == [12, 60]


def test_readings_must_cover_the_board(game):
    with pytest.raises(ValueError):
        game.process_readings([HIGH] * 10)


def test_no_processing_without_time():
    g = Game()
    g.process_readings(_readings(g, lifted=(12,)))
    assert g.position.picked_square == -1


def test_clock_ticks(game):
    before = game.clock.white_time
    game.process_readings(_readings(game))
    assert game.clock.white_time == before - TICK_MILLISECONDS
    assert game.clock_display[0] == format_time(before)


def test_pick_and_place_pawn(game):
    game.process_readings(_readings(game, lifted=(12,)))
    assert game.position.picked_square == 12
    assert game.screen[0] == "e2 is picked!"

    game.process_readings(_readings(game, lifted=(12,), placed=(28,)))
    assert game.position.board[28] == WHITE_PAWN
    assert game.position.board[12] == EMPTY
    assert game.position.whose_move == Color.BLACK
    assert game.position.en_passant_square == 20
    assert game.position.picked_square == -1
    assert game.move_number == 1
    assert game.screen[0] == "Black to move!"


def test_enemy_piece_lifted_and_put_back(game):
    game.process_readings(_readings(game, lifted=(52,)))
    assert game.position.attacked_piece_square == 52
    assert game.position.move_types.capture is True
    assert game.screen[0] == "Capturing e7"

    game.process_readings(_readings(game))
    assert game.position.attacked_piece_square == -1
    assert game.position.move_types.capture is False


def test_illegal_move_then_verification(game):
    game.process_readings(_readings(game, lifted=(12,)))
    game.process_readings(_readings(game, lifted=(12,), placed=(36,)))
    assert game.screen[0] == "Illegal move!"
    assert game.position.board[12] == WHITE_PAWN
    assert game.position.board[36] == EMPTY
    assert game.position.picked_square == -1
    assert game.verifying

    game.process_readings(_readings(game, lifted=(12,), placed=(36,)))
    assert game.screen[1] == "e2 is missing!"
    assert game.verifying

    game.process_readings(_readings(game))
    assert not game.verifying
    assert game.screen[0] == "White to move!"


def test_make_move_applies_increment():
    g = Game()
    g.choose_time_control(24)
    before = g.clock.white_time
    notation = g.make_move(12, 28, MoveTypes())
    assert notation == "e4"
    assert g.clock.white_time == before + g.clock.increment


def test_capture_notation(game):
    board = game.position.board
    board[12] = EMPTY
    board[28] = WHITE_PAWN
    board[51] = EMPTY
    board[35] = BLACK_PAWN
    assert game.make_move(28, 35, MoveTypes(capture=True)) == "exd5"
    assert board[35] == WHITE_PAWN
    assert board[28] == EMPTY


def test_promotion_with_check():
    position = Position()
    position.clear_board()
    position[4] = WHITE_KING
    position[60] = BLACK_KING
    position[48] = WHITE_PAWN
    g = Game(position=position)
    g.choose_time_control(16)
    assert g.make_move(48, 56, MoveTypes()) == "a8=Q+"
    assert position[56] == WHITE_QUEEN


def test_fools_mate(game):
    game.make_move(13, 21, MoveTypes())
    game.make_move(52, 36, MoveTypes())
    game.make_move(14, 30, MoveTypes())
    notation = game.make_move(59, 31, MoveTypes())
    assert notation == "Qh4#"
    assert game.position.move_types.checkmate
    assert game.is_over
    assert game.screen[0] == "Black won! 0-1"


def test_threefold_repetition(game):
    shuffle = [(6, 21), (62, 45), (21, 6), (45, 62)]
    for from_square, to_square in shuffle * 2:
        assert not game.position.move_types.draw
        game.make_move(from_square, to_square, MoveTypes())
    assert game.position.move_types.draw
    assert game.screen == ["Threefold!", "1/2 - 1/2"]
    assert game.is_over


def test_rook_move_removes_one_castling_right(game):
    board = game.position.board
    board[8] = EMPTY
    game.make_move(0, 8, MoveTypes())
    assert game.position.castling_rights & 8 == 0
    assert game.position.castling_rights & 4 == 4


def test_king_move_removes_castling_rights(game):
    game.position.board[12] = EMPTY
    game.make_move(4, 12, MoveTypes())
    assert game.position.white_king_square == 12
    assert game.position.castling_rights & WHITE_CASTLING_RIGHTS == 0


def test_short_castling_through_readings(tmp_path):
    position = Position()
    position.clear_board()
    position[4] = WHITE_KING
    position[7] = WHITE_ROOK
    position[60] = BLACK_KING
    recorder = PgnRecorder(tmp_path)
    g = Game(position=position, recorder=recorder)
    g.choose_time_control(16)

    g.process_readings(_readings(g, lifted=(4,)))
    g.process_readings(_readings(g, lifted=(4,), placed=(6,)))
    assert g.awaiting_rook
    assert position[6] == WHITE_KING
    assert position.white_king_square == 6

    g.process_readings(_readings(g, lifted=(7,), placed=(5,)))
    assert not g.awaiting_rook
    assert position[5] == WHITE_ROOK
    assert position[7] == EMPTY
    assert position.castling_rights & WHITE_CASTLING_RIGHTS == 0
    assert position.whose_move == Color.BLACK
    assert recorder.path.read_text(encoding="utf-8") == pgn_fragment("O-O", 0)


def test_moves_are_written_to_pgn(tmp_path):
    recorder = PgnRecorder(tmp_path)
    g = Game(recorder=recorder)
    g.choose_time_control(16)
    first = g.make_move(12, 28, MoveTypes())
    second = g.make_move(52, 36, MoveTypes())
    expected = pgn_fragment(first, 0) + pgn_fragment(second, 1)
    assert recorder.path.read_text(encoding="utf-8") == expected


class _FakeResponse:
    def __init__(self, body):
        self.body = body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def read(self):
        return self.body


def test_moves_are_sent_to_api():
    requests = []

    def opener(request, timeout):
        requests.append(request)
        return _FakeResponse(b'{"game_id": 7}')

    client = GameApiClient(host="http://localhost:3000", opener=opener)
    g = Game(api=client)
    assert client.game_id == 7
    assert requests[0].full_url.endswith("/chess_games")

    g.choose_time_control(16)
    notation = g.make_move(12, 28, MoveTypes())
    g.last_upload.join(5)
    sent = json.loads(requests[-1].data)
    assert requests[-1].full_url.endswith("/chess_moves")
    assert sent["notation"] == notation
    assert sent["chess_game_id"] == 7
    assert sent["from_square"] == 12
    assert sent["to_square"] == 28
    assert sent["move_side"] == int(Color.WHITE)
    assert sent["castling"] is False