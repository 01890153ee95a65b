"""
Services Package

Contains the session controller, the match engine and the shared session store.
"""

from .session_store import SessionStore, SessionService, Transition
from .session_controller import SessionController
from .match_engine import MatchEngine

__all__ = [
    'SessionStore', 'SessionService', 'Transition',
    'SessionController',
    'MatchEngine'
]
