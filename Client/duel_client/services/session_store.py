"""
Session Store

Holds the one Session aggregate shared by the session controller and the match
engine, and applies the transitions they compute.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..models.messages import Notice
from ..models.session import Session
from ..utils.session_logger import session_logger


@dataclass(frozen=True)
class Transition:
    """Result of a pure state-transition function."""
    session: Session
    commands: Tuple = ()
    notices: Tuple[Notice, ...] = ()
    rejected: Optional[str] = None  # reason the trigger was ignored

    @classmethod
    def reject(cls, session: Session, reason: str) -> "Transition":
        return cls(session=session, rejected=reason)


SessionListener = Callable[[Session, Tuple[Notice, ...]], None]


class SessionStore:
    """Current Session plus the presentation listeners projecting it."""

    def __init__(self, session: Optional[Session] = None):
        self.session = session or Session()
        self._listeners: List[SessionListener] = []

    def add_listener(self, listener: SessionListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def commit(self, trigger: str, transition: Transition, connection) -> Session:
        """
        Store the new session, send its commands and notify listeners.

        Args:
            trigger: Name of the request or event that produced the transition
            transition: Output of a controller or engine transition function
            connection: Connection manager used to send the outbound commands

        Returns:
            Session: The session now current
        """
        old = self.session
        if transition.rejected:
            session_logger.log_rejected(trigger, old.state.value, transition.rejected)

        new = transition.session
        self.session = new
        if old.state is not new.state:
            session_logger.log_transition(
                trigger, old.state.value, new.state.value,
                game_id=new.game_id,
                role=new.role.value if new.role else None
            )

        for command in transition.commands:
            connection.send(command)

        if new is not old or transition.notices:
            for listener in list(self._listeners):
                listener(new, transition.notices)

        return new


class SessionService:
    """
    Base for the controllers driven by connection events.

    Subscriptions are taken in ``attach`` and released in ``detach``; the
    service can also be used as a context manager for the same scope.
    """

    def __init__(self, connection, store: SessionStore):
        self.connection = connection
        self.store = store
        self._attached = False

    @property
    def session(self) -> Session:
        return self.store.session

    def _subscriptions(self) -> Dict[str, Callable]:
        raise NotImplementedError

    def attach(self):
        if self._attached:
            return self
        for name, handler in self._subscriptions().items():
            self.connection.subscribe(name, handler)
        self._attached = True
        return self

    def detach(self):
        if not self._attached:
            return
        for name, handler in self._subscriptions().items():
            self.connection.unsubscribe(name, handler)
        self._attached = False

    def __enter__(self):
        return self.attach()

    def __exit__(self, exc_type, exc, tb):
        self.detach()
        return False

    def _apply(self, trigger: str, transition: Transition) -> Session:
        return self.store.commit(trigger, transition, self.connection)
