import pytest

from smartchess.board import (
    BLACK_BISHOP,
    BLACK_KING,
    BLACK_PAWN,
    EMPTY,
    WHITE_BISHOP,
    WHITE_KING,
    WHITE_KNIGHT,
    WHITE_PAWN,
    WHITE_QUEEN,
    WHITE_ROOK,
    Color,
    MoveTypes,
    PieceType,
    Position,
    file_letter,
    piece_color,
    piece_letter,
    piece_type,
    rank_number,
    square_name,
)


@pytest.fixture
def position():
    return Position()


@pytest.mark.parametrize(
    "square, letter",
    [(0, "a"), (1, "b"), (2, "c"), (3, "d"), (4, "e"), (5, "f"), (6, "g"), (7, "h")],
)
def test_file_letter(square, letter):
    assert file_letter(square) == letter


@pytest.mark.parametrize(
    "square, rank",
    [(0, 1), (8, 2), (18, 3), (29, 4), (35, 5), (44, 6), (50, 7), (62, 8)],
)
def test_rank_number(square, rank):
    assert rank_number(square) == rank


@pytest.mark.parametrize("square, name", [(0, "a1"), (63, "h8"), (28, "e4"), (57, "b8")])
def test_square_name(square, name):
    assert square_name(square) == name


def test_piece_color_on_starting_board(position):
    assert piece_color(position[0]) == Color.WHITE
    assert piece_color(position[5]) == Color.WHITE
    assert piece_color(position[55]) == Color.BLACK
    assert piece_color(position[63]) == Color.BLACK
    assert piece_color(position[32]) == Color.NONE


def test_piece_type_and_letter():
    assert piece_type(BLACK_BISHOP) == PieceType.BISHOP
    assert piece_type(EMPTY) == PieceType.EMPTY
    assert piece_letter(WHITE_KNIGHT) == "N"
    assert piece_letter(BLACK_KING) == "K"
    assert piece_letter(WHITE_QUEEN) == "Q"
    assert piece_letter(WHITE_ROOK) == "R"
    assert piece_letter(WHITE_PAWN) == ""
    assert piece_letter(EMPTY) == ""


def test_opposite_king_square(position):
    position.whose_move = Color.WHITE
    assert position.opposite_king_square() == 60
    position.whose_move = Color.BLACK
    assert position.opposite_king_square() == 4


def test_own_king_square(position):
    position.whose_move = Color.BLACK
    assert position.own_king_square() == 60
    position.whose_move = Color.WHITE
    assert position.own_king_square() == 4


def test_toggle_whose_move(position):
    assert position.whose_move == Color.WHITE
    position.toggle_whose_move()
    assert position.whose_move == Color.BLACK
    position.toggle_whose_move()
    assert position.whose_move == Color.WHITE


def test_reset_dynamics(position):
    position.picked_square = 10
    position.attacked_piece_square = 5
    position.move_types.capture = True
    position.move_types.check = True
    position.move_types.promotion = True
    position.move_types.checkmate = True

    position.reset_dynamics()

    assert position.picked_square == -1
    assert position.attacked_piece_square == -1
    assert position.move_types.capture is False
    assert position.move_types.check is False
    assert position.move_types.promotion is False
    assert position.move_types.checkmate is True


def test_move_types_defaults():
    flags = MoveTypes()
    assert (flags.capture, flags.check, flags.checkmate, flags.promotion, flags.draw) == (
        False,
        False,
        False,
        False,
        False,
    )


def test_update_position_moves_piece(position):
    position.update_position(12, 28)
    assert position[12] == EMPTY
    assert position[28] == WHITE_PAWN


def test_clear_square(position):
    position.clear_square(0)
    assert position[0] == EMPTY


def test_clear_and_reset_board(position):
    position.clear_board()
    assert all(piece == EMPTY for piece in position.board)
    position.reset_board()
    assert position.board == Position().board
    assert position[8] == WHITE_PAWN
    assert position[48] == BLACK_PAWN
    assert position[4] == WHITE_KING
    assert position[60] == BLACK_KING


def test_sufficient_material_at_start(position):
    assert position.is_sufficient_material(Color.WHITE)
    assert position.is_sufficient_material(Color.BLACK)


@pytest.mark.parametrize(
    "extra, expected",
    [
        ({}, False),
        ({10: WHITE_BISHOP}, False),
        ({10: WHITE_KNIGHT}, False),
        ({10: WHITE_KNIGHT, 11: WHITE_KNIGHT}, False),
        ({10: WHITE_BISHOP, 11: WHITE_BISHOP}, True),
        ({10: WHITE_BISHOP, 11: WHITE_KNIGHT}, True),
        ({10: WHITE_ROOK}, True),
        ({10: WHITE_PAWN}, True),
        ({10: WHITE_QUEEN}, True),
    ],
)
def test_sufficient_material(position, extra, expected):
    position.clear_board()
    position[4] = WHITE_KING
    position[60] = BLACK_KING
    for square, piece in extra.items():
        position[square] = piece
    assert position.is_sufficient_material(Color.WHITE) is expected
    assert position.is_sufficient_material(Color.BLACK) is False


def test_position_hash_is_deterministic_and_32_bit(position):
    first = position.position_hash()
    assert first == Position().position_hash()
    assert 0 <= first <= 0xFFFFFFFF


def test_position_hash_depends_on_state(position):
    start = position.position_hash()
    position.update_position(12, 28)
    moved = position.position_hash()
    assert moved != start
    position.castling_rights = 3
    assert position.position_hash() != moved
    position.castling_rights = 15
    assert position.position_hash() == moved
    position.en_passant_square = 20
    assert position.position_hash() != moved


def test_threefold_repetition(position):
    assert position.is_threefold_repetition() is False
    position.save_position()
    position.save_position()
    assert position.is_threefold_repetition() is False
    position.save_position()
    assert position.is_threefold_repetition() is True


def test_threefold_repetition_counts_only_current(position):
    position.save_position()
    position.save_position()
    position.update_position(12, 28)
    position.save_position()
    assert position.is_threefold_repetition() is False
    assert position.current_position_index == 2


def test_reset_position_tracking(position):
    position.save_position()
    position.save_position()
    position.reset_position_tracking()
    assert position.history == []
    assert position.current_position_index == -1