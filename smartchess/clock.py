"""The chess clock: time controls, formatting and ticking."""

from __future__ import annotations

from dataclasses import dataclass

from .board import Color

TICK_MILLISECONDS = 100


@dataclass(frozen=True)
class TimeControl:
    """Starting time per player and increment per move, in milliseconds."""

    initial: int
    increment: int


# Squares a piece is placed on to pick a time control.
_TIME_CONTROLS = {
    16: TimeControl(180000, 0),
    24: TimeControl(180000, 2000),
    32: TimeControl(300000, 0),
    40: TimeControl(300000, 2000),
    17: TimeControl(600000, 0),
    25: TimeControl(600000, 5000),
    33: TimeControl(900000, 0),
    41: TimeControl(900000, 10000),
    18: TimeControl(5400000, 30000),
}


def time_control_for_square(square: int) -> TimeControl | None:
    """Return the time control chosen by a square, or None if it chooses none."""
    return _TIME_CONTROLS.get(square)


def format_time(milliseconds: int | float) -> str:
    """Format a remaining time as MM:SS, or SS.t below one minute."""
    value = int(milliseconds)
    minutes = value // 60000
    seconds = value // 1000 % 60
    tenths = value % 1000 // 100
    if value >= 60000:
        return f"{minutes:02d}:{seconds:02d}"
    return f"{seconds:02d}.{tenths}"


@dataclass
class ChessClock:
    """Remaining time of both players and the increment, in milliseconds."""

    white_time: int = 0
    black_time: int = 0
    increment: int = 0

    def set_time_control(self, control: TimeControl) -> None:
        """Start both players with the control's time and increment."""
        self.white_time = control.initial
        self.black_time = control.initial
        self.increment = control.increment

    def decrement(self, color: Color) -> None:
        """Take one tick off the given player's time."""
        if color == Color.BLACK:
            self.black_time -= TICK_MILLISECONDS
        if color == Color.WHITE:
            self.white_time -= TICK_MILLISECONDS

    def apply_increment(self, color: Color) -> None:
        """Add the increment to the given player's time."""
        if color == Color.BLACK:
            self.black_time += self.increment
        if color == Color.WHITE:
            self.white_time += self.increment

    def tick(self, color: Color) -> tuple[str, str]:
        """Return the white and black display texts, then run the player's clock one tick."""
        display = (format_time(self.white_time), format_time(self.black_time))
        self.decrement(color)
        return display

    def has_time(self) -> bool:
        """Tell whether both players still have time left."""
        return self.white_time > 0 and self.black_time > 0