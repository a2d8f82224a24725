import pytest

from smartchess.pgn import PgnRecorder, pgn_fragment


def test_white_move_fragment_is_numbered():
    assert pgn_fragment("e4", 0) == "1. e4 "


def test_black_move_fragment_ends_line():
    assert pgn_fragment("e5", 1) == "e5\n"


def test_move_numbers_advance_every_two_half_moves():
    assert pgn_fragment("Nf3", 2).startswith("2. ")
    assert pgn_fragment("Nf3", 3) == pgn_fragment("Nf3", 1)


def test_first_game_file(tmp_path):
    recorder = PgnRecorder(tmp_path / "games")
    path = recorder.create_new_game_file()
    assert path.name == "1.txt"
    assert path.read_text() == ""


def test_game_files_are_numbered_in_sequence(tmp_path):
    first = PgnRecorder(tmp_path).create_new_game_file()
    second = PgnRecorder(tmp_path).create_new_game_file()
    assert int(second.stem) == int(first.stem) + 1
    assert first.exists() and second.exists()


def test_directories_are_not_counted(tmp_path):
    (tmp_path / "sub").mkdir()
    path = PgnRecorder(tmp_path).create_new_game_file()
    assert path.name == "1.txt"


def test_write_moves(tmp_path):
    recorder = PgnRecorder(tmp_path)
    recorder.create_new_game_file()
    moves = ["e4", "e5", "Nf3"]
    for number, move in enumerate(moves):
        recorder.write_move(move, number)
    expected = "".join(pgn_fragment(move, number) for number, move in enumerate(moves))
    assert recorder.path.read_text() == expected


def test_write_without_file_raises(tmp_path):
    recorder = PgnRecorder(tmp_path)
    with pytest.raises(RuntimeError):
        recorder.write_move("e4", 0)