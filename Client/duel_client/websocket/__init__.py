"""
WebSocket Package

Contains the Socket.IO connection manager and the wire codec.
"""

from .codec import decode_event, encode_command
from .connection import ConnectionManager, ConnectivityState

__all__ = ['ConnectionManager', 'ConnectivityState', 'decode_event', 'encode_command']
