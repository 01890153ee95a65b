"""
Session Data Models

Contains the top-level session aggregate and its lifecycle enums.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .game import MatchState


class SessionState(Enum):
    """Top-level lifecycle of one duel, from lobby to a terminal state."""
    UNINITIALIZED = "uninitialized"
    CREATING_OR_JOINING = "creating_or_joining"
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"
    DISCONNECTED = "disconnected"


PRE_PLAYING_STATES = frozenset({
    SessionState.UNINITIALIZED,
    SessionState.CREATING_OR_JOINING,
    SessionState.WAITING,
})


class PlayerRole(Enum):
    """Role assigned by the server; values are the wire identifiers."""
    PLAYER_ONE = "player1"
    PLAYER_TWO = "player2"

    @property
    def opponent(self) -> "PlayerRole":
        return PlayerRole.PLAYER_TWO if self is PlayerRole.PLAYER_ONE else PlayerRole.PLAYER_ONE


class LobbyRequest(Enum):
    """Lobby command currently awaiting a server answer."""
    CREATE = "create"
    JOIN = "join"


@dataclass(frozen=True)
class Session:
    """Server-facing state of this client, one per process."""
    state: SessionState = SessionState.UNINITIALIZED
    game_id: Optional[str] = None
    role: Optional[PlayerRole] = None
    pending_request: Optional[LobbyRequest] = None
    auto_join_attempted: bool = False
    connection_failed: bool = False
    match: Optional["MatchState"] = None

    @property
    def is_frozen(self) -> bool:
        return self.connection_failed

    def reset(self) -> "Session":
        """Return a fresh lobby session. The auto-join guard is kept."""
        return Session(auto_join_attempted=self.auto_join_attempted,
                       connection_failed=self.connection_failed)
