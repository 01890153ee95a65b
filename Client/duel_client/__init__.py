"""
Wordle Duel Client Package

Client-side session layer for a real-time two-player Wordle duel: one
Socket.IO connection manager feeding a session controller and a match engine.
"""

from .config import Config
from .services.match_engine import MatchEngine
from .services.session_controller import SessionController
from .services.session_store import SessionStore
from .websocket.connection import ConnectionManager


def create_client(config_class=Config, **connection_options):
    """
    Application factory wiring one connection manager to both controllers.

    Args:
        config_class: Configuration class to use
        **connection_options: Extra ConnectionManager arguments (e.g. client, sleep)

    Returns:
        Tuple of (ConnectionManager, SessionController, MatchEngine), with both
        controllers already subscribed to the connection
    """
    connection = ConnectionManager(
        config_class.SERVER_URL,
        transports=config_class.SOCKETIO_TRANSPORTS,
        timeout=config_class.CONNECT_TIMEOUT_SECONDS,
        reconnect_attempts=config_class.RECONNECT_ATTEMPTS,
        reconnect_delay=config_class.RECONNECT_DELAY_SECONDS,
        **connection_options
    )

    # Both controllers share one session aggregate
    store = SessionStore()
    controller = SessionController(connection, store).attach()
    engine = MatchEngine(connection, store).attach()

    return connection, controller, engine
