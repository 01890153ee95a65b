"""
Message Data Models

Typed inbound events, outbound commands and presentation notices exchanged
between the connection manager, the controllers and the presentation layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from .game import FeedbackMark
from .session import PlayerRole


class EventName:
    """Socket.IO event names received from the server plus local connectivity events."""
    GAME_CREATED = "game_created"
    GAME_JOINED = "game_joined"
    GAME_START = "game_start"
    GUESS_MADE = "guess_made"
    GAME_OVER = "game_over"
    PLAYER_DISCONNECTED = "player_disconnected"
    ERROR = "error"

    # Raised by the connection manager itself, never sent by the server
    CONNECTION_LOST = "connection_lost"
    RECONNECTED = "reconnected"
    CONNECTION_FAILED = "connection_failed"

    SERVER_EVENTS = (
        GAME_CREATED, GAME_JOINED, GAME_START, GUESS_MADE,
        GAME_OVER, PLAYER_DISCONNECTED, ERROR,
    )
    CONNECTIVITY_EVENTS = (CONNECTION_LOST, RECONNECTED, CONNECTION_FAILED)


class CommandName:
    """Socket.IO event names sent to the server."""
    CREATE_GAME = "create_game"
    JOIN_GAME = "join_game"
    MAKE_GUESS = "make_guess"


# Inbound events

@dataclass(frozen=True)
class GameCreated:
    name: ClassVar[str] = EventName.GAME_CREATED
    game_id: str
    role: PlayerRole


@dataclass(frozen=True)
class GameJoined:
    name: ClassVar[str] = EventName.GAME_JOINED
    role: PlayerRole


@dataclass(frozen=True)
class GameStart:
    name: ClassVar[str] = EventName.GAME_START


@dataclass(frozen=True)
class GuessMade:
    name: ClassVar[str] = EventName.GUESS_MADE
    role: PlayerRole
    letters: str
    feedback: Tuple[FeedbackMark, ...]


@dataclass(frozen=True)
class GameOver:
    name: ClassVar[str] = EventName.GAME_OVER
    winner: Optional[PlayerRole]
    word: str


@dataclass(frozen=True)
class PlayerDisconnected:
    name: ClassVar[str] = EventName.PLAYER_DISCONNECTED


@dataclass(frozen=True)
class ServerError:
    name: ClassVar[str] = EventName.ERROR
    message: str


@dataclass(frozen=True)
class ConnectionLost:
    name: ClassVar[str] = EventName.CONNECTION_LOST
    reason: str = ""


@dataclass(frozen=True)
class Reconnected:
    name: ClassVar[str] = EventName.RECONNECTED
    attempts: int = 1


@dataclass(frozen=True)
class ConnectionFailed:
    name: ClassVar[str] = EventName.CONNECTION_FAILED
    attempts: int = 0


# Outbound commands

@dataclass(frozen=True)
class CreateGame:
    name: ClassVar[str] = CommandName.CREATE_GAME

    def to_payload(self) -> Optional[Dict[str, Any]]:
        return None


@dataclass(frozen=True)
class JoinGame:
    name: ClassVar[str] = CommandName.JOIN_GAME
    game_id: str

    def to_payload(self) -> Optional[Dict[str, Any]]:
        return {'game_id': self.game_id}


@dataclass(frozen=True)
class SubmitGuess:
    name: ClassVar[str] = CommandName.MAKE_GUESS
    game_id: str
    role: PlayerRole
    letters: str

    def to_payload(self) -> Optional[Dict[str, Any]]:
        return {
            'game_id': self.game_id,
            'player_id': self.role.value,
            'guess': self.letters
        }


# Presentation notices

class NoticeKind(Enum):
    """Transient, dismissable signals for the presentation layer."""
    INFO = "info"
    ERROR = "error"
    INVALID_GUESS = "invalid_guess"
    CONNECTION_LOST = "connection_lost"
    CONNECTION_RESTORED = "connection_restored"
    CONNECTION_FAILED = "connection_failed"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    message: str = ""
