"""Recording of a game's moves to numbered text files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def pgn_fragment(move: str, move_number: int) -> str:
    """Return the text written for a half-move: numbered for white, newline after black."""
    if move_number % 2 == 0:
        return f"{move_number // 2 + 1}. {move} "
    return move + "\n"


@dataclass
class PgnRecorder:
    """Writes each game to the next numbered file in a directory."""

    directory: Path
    path: Path | None = None

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)

    def create_new_game_file(self) -> Path:
        """Create an empty file named after the count of existing files plus one."""
        self.directory.mkdir(parents=True, exist_ok=True)
        count = sum(1 for entry in self.directory.iterdir() if not entry.is_dir())
        self.path = self.directory / f"{count + 1}.txt"
        self.path.write_text("", encoding="utf-8")
        logger.info("New file name: %s", self.path)
        return self.path

    def write_move(self, move: str, move_number: int) -> None:
        """Append a half-move to the current game file."""
        if self.path is None:
            raise RuntimeError("no game file has been created")
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(pgn_fragment(move, move_number))