"""
Wire Codec

Turns raw Socket.IO payloads into typed events. Anything that does not match
the expected shape raises ProtocolError so the connection manager can drop it.
"""

from typing import Any, Callable, Dict, Optional, Tuple

from ..config.game_settings import WORD_LENGTH
from ..models.game import FeedbackMark
from ..models.messages import (
    EventName,
    GameCreated,
    GameJoined,
    GameOver,
    GameStart,
    GuessMade,
    PlayerDisconnected,
    ServerError,
)
from ..models.session import PlayerRole
from ..utils.errors import ProtocolError


def _as_dict(name: str, payload: Any) -> Dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ProtocolError(name, f"expected an object, got {type(payload).__name__}", payload)
    return payload


def _required_str(name: str, data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ProtocolError(name, f"missing '{key}'", data)
    return value


def _role(name: str, value: Any) -> PlayerRole:
    try:
        return PlayerRole(value)
    except ValueError:
        raise ProtocolError(name, f"unknown player role {value!r}") from None


def _feedback(name: str, value: Any) -> Tuple[FeedbackMark, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != WORD_LENGTH:
        raise ProtocolError(name, f"feedback must hold {WORD_LENGTH} marks")
    try:
        return tuple(FeedbackMark(str(mark).lower()) for mark in value)
    except ValueError:
        raise ProtocolError(name, f"unknown feedback mark in {value!r}") from None


def _decode_game_created(data: Dict[str, Any]) -> GameCreated:
    name = EventName.GAME_CREATED
    return GameCreated(
        game_id=_required_str(name, data, 'game_id'),
        role=_role(name, data.get('player_id')),
    )


def _decode_game_joined(data: Dict[str, Any]) -> GameJoined:
    return GameJoined(role=_role(EventName.GAME_JOINED, data.get('player_id')))


def _decode_guess_made(data: Dict[str, Any]) -> GuessMade:
    name = EventName.GUESS_MADE
    letters = _required_str(name, data, 'guess').lower()
    if len(letters) != WORD_LENGTH or not letters.isalpha():
        raise ProtocolError(name, f"guess must be {WORD_LENGTH} letters, got {letters!r}")
    return GuessMade(
        role=_role(name, data.get('player_id')),
        letters=letters,
        feedback=_feedback(name, data.get('result')),
    )


def _decode_game_over(data: Dict[str, Any]) -> GameOver:
    name = EventName.GAME_OVER
    winner = data.get('winner')
    return GameOver(
        winner=_role(name, winner) if winner else None,
        word=str(data.get('word') or ''),
    )


def _decode_error(data: Dict[str, Any]) -> ServerError:
    message = data.get('message') or data.get('error') or ''
    return ServerError(message=str(message))


_DECODERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    EventName.GAME_CREATED: _decode_game_created,
    EventName.GAME_JOINED: _decode_game_joined,
    EventName.GAME_START: lambda data: GameStart(),
    EventName.GUESS_MADE: _decode_guess_made,
    EventName.GAME_OVER: _decode_game_over,
    EventName.PLAYER_DISCONNECTED: lambda data: PlayerDisconnected(),
    EventName.ERROR: _decode_error,
}


def decode_event(name: str, payload: Any = None):
    """
    Decode one server event.

    Args:
        name: Socket.IO event name
        payload: Raw event payload (usually a dict)

    Returns:
        The typed event dataclass for ``name``

    Raises:
        ProtocolError: If the event is unknown or its payload is malformed
    """
    decoder = _DECODERS.get(name)
    if decoder is None:
        raise ProtocolError(name, "unknown event")
    return decoder(_as_dict(name, payload))


def encode_command(command) -> Tuple[str, Optional[Dict[str, Any]]]:
    """Return the (event name, payload) pair to emit for a command."""
    return command.name, command.to_payload()
