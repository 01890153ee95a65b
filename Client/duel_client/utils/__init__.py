"""
Utilities Package

Contains the structured session logger, transition decorators and the client
exception taxonomy.
"""

from .errors import (
    DuelClientError,
    ValidationError,
    GameIdRequiredError,
    ProtocolError,
    ConnectionClosedError,
)
from .decorators import requires_live_session
from .session_logger import session_logger

__all__ = [
    'DuelClientError', 'ValidationError', 'GameIdRequiredError',
    'ProtocolError', 'ConnectionClosedError',
    'requires_live_session', 'session_logger'
]
