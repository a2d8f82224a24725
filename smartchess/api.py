"""Client of the game-recording HTTP service."""

from __future__ import annotations

import json
import logging
import threading
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_HOST = "http://localhost:3000"
MAX_ATTEMPT_NUMBER = 3


def move_payload(
    game_id: int,
    notation: str,
    from_square: int,
    to_square: int,
    move_side: int,
    castling: bool,
) -> dict[str, Any]:
    """Build the JSON object that describes one move."""
    return {
        "chess_game_id": game_id,
        "notation": notation,
        "from_square": from_square,
        "to_square": to_square,
        "move_side": int(move_side),
        "castling": castling,
    }


def parse_game_id(response: str | None) -> int | None:
    """Extract 'game_id' from a JSON response; None if it is absent or unreadable."""
    if not response:
        return None
    try:
        data = json.loads(response)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return data.get("game_id")


@dataclass
class GameApiClient:
    """Creates games on the service and sends moves to it."""

    host: str = DEFAULT_HOST
    max_attempts: int = MAX_ATTEMPT_NUMBER
    timeout: float = 10.0
    connected: bool = True
    game_id: int | None = None
    opener: Callable[..., Any] = field(default=urllib.request.urlopen, repr=False)

    def post(self, path: str, payload: str | dict[str, Any]) -> str | None:
        """POST JSON to host + path; return the response body, or None when every attempt fails."""
        body = payload if isinstance(payload, str) else json.dumps(payload)
        url = self.host + path
        for attempt in range(1, self.max_attempts + 1):
            request = urllib.request.Request(
                url,
                data=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                method="POST",
            )
            try:
                with self.opener(request, timeout=self.timeout) as response:
                    return response.read().decode("utf-8")
            except urllib.error.HTTPError as error:
                logger.info("HTTP response code: %s", error.code)
                return error.read().decode("utf-8")
            except OSError as error:
                logger.warning("Error on HTTP request (attempt %d): %s", attempt, error)
        return None

    def create_new_game(self) -> int | None:
        """Ask the service for a new game and remember its id."""
        self.game_id = parse_game_id(self.post("/chess_games", ""))
        return self.game_id

    def send_move(
        self,
        notation: str,
        from_square: int,
        to_square: int,
        move_side: int,
        castling: bool,
    ) -> threading.Thread | None:
        """Send a move in the background; None when offline or no game exists."""
        if not self.connected or not self.game_id:
            return None
        payload = move_payload(self.game_id, notation, from_square, to_square, move_side, castling)
        thread = threading.Thread(
            target=self.post,
            args=("/chess_moves", payload),
            name="SendMoveTask",
            daemon=True,
        )
        thread.start()
        return thread