"""
Game Configuration Constants Module

Constants shared by the session controller and the match engine. The server
owns word selection and evaluation; the client only needs the board shape.
"""

from typing import Final

WORD_LENGTH: Final[int] = 5
"""
Number of letters in every guess and in every feedback row.
"""

MAX_GUESSES: Final[int] = 6
"""
Maximum number of guess attempts allowed per player.
Type: Final[int] - Immutable to prevent accidental modification
"""

GAME_NOT_FOUND_MESSAGE: Final[str] = "game not found or full"
"""
Server error message that sends the client back to a fresh lobby.
Compared case-insensitively.
"""

# Socket.IO resumption link query parameter
GAME_ID_QUERY_PARAM: Final[str] = "gameId"


def is_game_not_found(message: str) -> bool:
    """Return True when a server error message is the lobby-reset case."""
    if not message:
        return False
    return message.strip().lower() == GAME_NOT_FOUND_MESSAGE
