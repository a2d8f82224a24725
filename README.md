# smartchess

smartchess is the game logic for a physical chess board whose squares
report whether a piece is standing on them. You hand it one reading per
square and it keeps track of the position, checks every move for
legality, runs a chess clock, writes the game down in algebraic notation
and can report moves to a game server over HTTP.

Squares are numbered 0 to 63: `0` is a1, `7` is h1, `56` is a8 and `63`
is h8.

## Modules

- `smartchess.board`: piece encoding (`Color`, `PieceType`, constants such
  as `WHITE_KING` or `BLACK_PAWN`), the text helpers `file_letter`,
  `rank_number`, `square_name`, `piece_color`, `piece_type` and
  `piece_letter`, the per-move flags `MoveTypes`, and `Position`. A
  `Position` holds the 64 squares, the side to move, both king squares,
  castling rights, the en-passant square and a history of 32-bit position
  hashes (`save_position`, `position_hash`, `is_threefold_repetition`,
  `reset_position_tracking`). It also offers `update_position`,
  `toggle_whose_move`, `own_king_square`, `opposite_king_square`,
  `is_sufficient_material`, `clear_board` and `reset_board`.
- `smartchess.move_validation`: square geometry (`within_the_board`,
  `is_on_the_same_rank`, `is_on_the_same_file`, the diagonal tests),
  pseudo-legal checks for each piece type and `is_pseudo_legal_move`,
  `can_attack_the_king`, `get_checks_information` (returns a
  `CheckInformation` saying along which lines the king is attacked and how
  many times), `is_king_in_check`, `is_legal_move` (rejects moves that
  leave the own king in check) and `king_has_legal_moves`.
- `smartchess.checkmate`: `is_checkmate`, plus the helpers that test
  whether a piece can block or capture a rank, file or diagonal check.
- `smartchess.stalemate`: `is_stalemate` and per-piece
  `..._has_legal_moves` helpers.
- `smartchess.disambiguation`: `get_disambiguation` decides whether a
  move's notation needs an extra coordinate (`Disambiguation`), and
  `disambiguation_notation` gives the text to insert.
- `smartchess.notation`: `move_notation` writes a move already made on the
  board in algebraic notation, with capture, promotion (`=Q`), check (`+`)
  and mate (`#`) marks.
- `smartchess.castling`: `CastlingType`, `can_castle` for the side to move,
  and `castling_notation` (`O-O` / `O-O-O` with check or mate suffix).
- `smartchess.clock`: `TimeControl`, `time_control_for_square` (the square
  a piece is placed on picks the control), `format_time` (`mm:ss` from one
  minute up, `ss.t` below it) and `ChessClock` with `set_time_control`,
  `decrement`, `apply_increment`, `tick` and `has_time`. One tick is
  100 ms.
- `smartchess.pgn`: `pgn_fragment` and `PgnRecorder`, which creates the
  next numbered `.txt` file in a directory and appends each half-move in
  PGN move-text form (`1. e4 e5`).
- `smartchess.api`: `GameApiClient` posts JSON to a server
  (`/chess_games` to create a game, `/chess_moves` for each move, sent on a
  background thread); `move_payload` and `parse_game_id` build and read the
  messages. The default host is `http://localhost:3000`.
- `smartchess.game`: `Game` ties the above together.

## Playing a game

`Game.process_readings` takes 64 sensor values (volts, one per square).
A value above `Game.peak_value` (1.65 by default) means a piece is there.
Each pass ticks the clock for the side to move and then looks for a piece
being lifted, an enemy piece being lifted for a capture, a captured piece
being put back, or a piece being set down on a square. Set-downs become
moves through `Game.make_move`, which handles promotion to a queen, en
passant, castling rights, notation, recording, the clock increment and
the end of the game: checkmate, stalemate, threefold repetition and the
hundred-half-move limit end it; insufficient material only shows a draw
message.

When a king is set down two squares from its start and castling is
allowed, the game waits for the rook to be placed on its target square and
then calls `Game.perform_castling`. An illegal move calls
`Game.handle_illegal_move`, after which passes only check, through
`Game.missing_squares`, that every piece is back in place.

`Game.choose_time_control(square)` sets the clock from a piece placed on
squares 16 to 47. What the board would show is kept as two text lines in
`Game.screen`, and the clock texts in `Game.clock_display`.

```python
from smartchess.game import Game

game = Game()
game.choose_time_control(16)                     # three minutes, no increment

readings = [3.3 if piece else 0.0 for piece in game.position.board]
readings[12] = 0.0                               # lift the e2 pawn
game.process_readings(readings)                  # screen: "e2 is picked!"
readings[28] = 3.3                               # set it down on e4
game.process_readings(readings)                  # move registered, black to move
```

## Small examples

```python
from smartchess.board import Position, square_name, file_letter, rank_number
from smartchess.clock import format_time
from smartchess.move_validation import is_legal_move, is_king_in_check

square_name(28)      # "e4"
file_letter(3)       # "d"
rank_number(62)      # 8
format_time(61000)   # "01:01"
format_time(9500)    # "09.5"

position = Position()
is_legal_move(position, 12, 28, position.own_king_square())   # True
is_legal_move(position, 12, 36, position.own_king_square())   # False
is_king_in_check(position, position.opposite_king_square())   # False
```

## What it does not do

smartchess does not read sensors, drive a display or connect to a network
by itself: readings come from your code, the screen text is only stored on
the `Game`, and the HTTP client sends only what `Game` asks it to. There is
no command-line program and no server side for the game service.
Promotion is always to a queen.

## Installing

smartchess needs only the Python standard library and supports Python
3.10 and later. The tests use pytest, available through the `test` extra.