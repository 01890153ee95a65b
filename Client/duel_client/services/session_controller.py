"""
Session Controller

Owns the top-level session lifecycle:
uninitialized -> creating/joining -> waiting -> playing -> finished/disconnected.

The module-level functions are pure transitions over (session, request/event);
SessionController wires them to the connection manager.
"""

from dataclasses import replace
from typing import Callable, Dict, Optional
from urllib.parse import parse_qs, urlparse

from ..config.game_settings import GAME_ID_QUERY_PARAM, is_game_not_found
from ..models.game import MatchState
from ..models.messages import (
    ConnectionFailed,
    ConnectionLost,
    CreateGame,
    EventName,
    GameCreated,
    GameJoined,
    GameStart,
    JoinGame,
    Notice,
    NoticeKind,
    PlayerDisconnected,
    Reconnected,
    ServerError,
)
from ..models.session import PRE_PLAYING_STATES, LobbyRequest, Session, SessionState
from ..utils.decorators import requires_live_session
from ..utils.errors import GameIdRequiredError
from .session_store import SessionService, Transition


# Lobby requests

@requires_live_session
def request_create(session: Session) -> Transition:
    if session.state is not SessionState.UNINITIALIZED:
        return Transition.reject(session, 'create is only valid from the lobby')
    return Transition(
        session=replace(session,
                        state=SessionState.CREATING_OR_JOINING,
                        pending_request=LobbyRequest.CREATE),
        commands=(CreateGame(),)
    )


@requires_live_session
def request_join(session: Session, game_id: Optional[str]) -> Transition:
    """
    Ask the server to join an existing game.

    Raises:
        GameIdRequiredError: If ``game_id`` is empty; nothing is sent
    """
    game_id = (game_id or '').strip()
    if not game_id:
        raise GameIdRequiredError()
    if session.state is not SessionState.UNINITIALIZED:
        return Transition.reject(session, 'join is only valid from the lobby')
    return Transition(
        session=replace(session,
                        state=SessionState.CREATING_OR_JOINING,
                        pending_request=LobbyRequest.JOIN,
                        game_id=game_id),
        commands=(JoinGame(game_id=game_id),)
    )


def extract_game_id(entry: Optional[str]) -> Optional[str]:
    """Pull a game ID out of a shared link (``?gameId=...``) or a bare ID."""
    if not entry or not entry.strip():
        return None
    entry = entry.strip()
    parsed = urlparse(entry)
    values = parse_qs(parsed.query).get(GAME_ID_QUERY_PARAM)
    if values:
        return values[0].strip() or None
    if parsed.scheme or parsed.netloc or '?' in entry or '/' in entry:
        return None
    return entry


@requires_live_session
def resume_from_link(session: Session, entry: Optional[str]) -> Transition:
    """Auto-join the game named by the entry link, at most once per process."""
    game_id = extract_game_id(entry)
    if not game_id:
        return Transition(session)
    if session.auto_join_attempted:
        return Transition.reject(session, 'auto-join already attempted')
    if session.state is not SessionState.UNINITIALIZED or session.pending_request:
        return Transition.reject(session, 'a lobby request is already in flight')

    transition = request_join(session, game_id)
    return replace(transition, session=replace(transition.session, auto_join_attempted=True))


@requires_live_session
def return_to_lobby(session: Session) -> Transition:
    return Transition(session.reset())


# Server events

@requires_live_session
def on_game_created(session: Session, event: GameCreated) -> Transition:
    if session.state is not SessionState.CREATING_OR_JOINING or session.pending_request is not LobbyRequest.CREATE:
        return Transition.reject(session, 'no create request in flight')
    return Transition(
        session=replace(session,
                        state=SessionState.WAITING,
                        game_id=event.game_id,
                        role=event.role,
                        pending_request=None),
        notices=(Notice(NoticeKind.INFO, 'Game created successfully! Share the game ID with your friend.'),)
    )


@requires_live_session
def on_game_joined(session: Session, event: GameJoined) -> Transition:
    if session.state is not SessionState.CREATING_OR_JOINING or session.pending_request is not LobbyRequest.JOIN:
        return Transition.reject(session, 'no join request in flight')
    # Joining implies the opponent is already present
    return Transition(
        session=replace(session,
                        state=SessionState.PLAYING,
                        role=event.role,
                        pending_request=None,
                        match=MatchState()),
        notices=(Notice(NoticeKind.INFO, 'Successfully joined the game!'),)
    )


@requires_live_session
def on_game_start(session: Session, event: GameStart) -> Transition:
    if session.state is not SessionState.WAITING:
        return Transition.reject(session, 'game start is only valid while waiting')
    return Transition(replace(session, state=SessionState.PLAYING, match=MatchState()))


@requires_live_session
def on_server_error(session: Session, event: ServerError) -> Transition:
    # Errors during play are guess rejections, handled by the match engine
    if session.state is SessionState.PLAYING:
        return Transition(session)

    notice = Notice(NoticeKind.ERROR, event.message)
    if is_game_not_found(event.message) and session.state in PRE_PLAYING_STATES:
        return Transition(session.reset(), notices=(notice,))
    return Transition(session, notices=(notice,))


@requires_live_session
def on_player_disconnected(session: Session, event: PlayerDisconnected) -> Transition:
    if session.state is not SessionState.PLAYING:
        return Transition.reject(session, 'opponent disconnect is only valid while playing')
    match = session.match or MatchState()
    return Transition(
        session=replace(session,
                        state=SessionState.DISCONNECTED,
                        match=replace(match, pending_input='', awaiting_ack=False)),
        notices=(Notice(NoticeKind.INFO, 'Opponent disconnected. Game ended.'),)
    )


# Connectivity events

def on_connection_lost(session: Session, event: ConnectionLost) -> Transition:
    return Transition(session, notices=(Notice(NoticeKind.CONNECTION_LOST, 'Connection lost, reconnecting...'),))


def on_reconnected(session: Session, event: Reconnected) -> Transition:
    return Transition(session, notices=(Notice(NoticeKind.CONNECTION_RESTORED, 'Reconnected to the server.'),))


def on_connection_failed(session: Session, event: ConnectionFailed) -> Transition:
    if session.connection_failed:
        return Transition(session)
    return Transition(
        session=replace(session, connection_failed=True),
        notices=(Notice(NoticeKind.CONNECTION_FAILED,
                        'Could not reach the server. Restart the client to play again.'),)
    )


class SessionController(SessionService):
    """Lobby and lifecycle commands plus the server events that drive them."""

    def _subscriptions(self) -> Dict[str, Callable]:
        return {
            EventName.GAME_CREATED: self._on_game_created,
            EventName.GAME_JOINED: self._on_game_joined,
            EventName.GAME_START: self._on_game_start,
            EventName.ERROR: self._on_server_error,
            EventName.PLAYER_DISCONNECTED: self._on_player_disconnected,
            EventName.CONNECTION_LOST: self._on_connection_lost,
            EventName.RECONNECTED: self._on_reconnected,
            EventName.CONNECTION_FAILED: self._on_connection_failed,
        }

    def request_create(self) -> Session:
        return self._apply('request_create', request_create(self.session))

    def request_join(self, game_id: Optional[str]) -> Session:
        return self._apply('request_join', request_join(self.session, game_id))

    def resume_from_link(self, entry: Optional[str]) -> Session:
        return self._apply('resume_from_link', resume_from_link(self.session, entry))

    def return_to_lobby(self) -> Session:
        return self._apply('return_to_lobby', return_to_lobby(self.session))

    def _on_game_created(self, event):
        self._apply(event.name, on_game_created(self.session, event))

    def _on_game_joined(self, event):
        self._apply(event.name, on_game_joined(self.session, event))

    def _on_game_start(self, event):
        self._apply(event.name, on_game_start(self.session, event))

    def _on_server_error(self, event):
        self._apply(event.name, on_server_error(self.session, event))

    def _on_player_disconnected(self, event):
        self._apply(event.name, on_player_disconnected(self.session, event))

    def _on_connection_lost(self, event):
        self._apply(event.name, on_connection_lost(self.session, event))

    def _on_reconnected(self, event):
        self._apply(event.name, on_reconnected(self.session, event))

    def _on_connection_failed(self, event):
        self._apply(event.name, on_connection_failed(self.session, event))
