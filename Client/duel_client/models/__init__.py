"""
Data Models Package

Contains all data models used throughout the client.
"""

from .session import Session, SessionState, PlayerRole, LobbyRequest
from .game import FeedbackMark, Guess, Outcome, MatchState
from .messages import EventName, CommandName, Notice, NoticeKind

__all__ = [
    'Session', 'SessionState', 'PlayerRole', 'LobbyRequest',
    'FeedbackMark', 'Guess', 'Outcome', 'MatchState',
    'EventName', 'CommandName', 'Notice', 'NoticeKind'
]
