"""
Connection Manager

Owns the single Socket.IO connection to the duel server. Exposes a typed
publish/subscribe surface to the session controller and the match engine and
runs a bounded, fixed-delay reconnect loop when the transport drops.
"""

import queue
import time
import threading
from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, List, Optional

import socketio
from socketio.exceptions import ConnectionError as TransportConnectionError, SocketIOError

from ..models.messages import ConnectionFailed, ConnectionLost, EventName, Reconnected
from ..utils.errors import ConnectionClosedError, ProtocolError
from ..utils.session_logger import session_logger
from .codec import decode_event, encode_command


class ConnectivityState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    FAILED = "failed"
    CLOSED = "closed"


class ConnectionManager:
    """
    Single long-lived duplex connection to the server.

    The Socket.IO client receives on its own thread; received events are only
    queued there and are delivered to subscribers by ``process_events`` on the
    thread that owns the session, so every state transition runs on one thread.

    The reconnect loop does run on a background thread. Connectivity state and
    the outbox are only read or changed while holding ``_lock``, and buffered
    commands are flushed under it so a concurrent send can neither overtake
    nor miss the flush.
    """

    def __init__(self,
                 url: str,
                 transports: Optional[List[str]] = None,
                 timeout: float = 20,
                 reconnect_attempts: int = 5,
                 reconnect_delay: float = 1.0,
                 client: Optional[socketio.Client] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.url = url
        self.transports = transports or ['websocket']
        self.timeout = timeout
        self.reconnect_attempts = max(1, reconnect_attempts)
        self.reconnect_delay = reconnect_delay
        self.state = ConnectivityState.IDLE

        # Library reconnection is off; the bounded loop below replaces it
        self.sio = client if client is not None else socketio.Client(
            reconnection=False, logger=False, engineio_logger=False
        )
        self._sleep = sleep
        self._subscribers: Dict[str, List[Callable]] = defaultdict(list)
        self._inbox: "queue.Queue" = queue.Queue()
        self._outbox: List[tuple] = []
        self._closing = False
        self._lock = threading.RLock()

        self._register_transport_handlers()

    def _register_transport_handlers(self):
        self.sio.on('disconnect', self._on_disconnect)
        for name in EventName.SERVER_EVENTS:
            self.sio.on(name, self._make_server_handler(name))

    def _make_server_handler(self, name: str):
        def handler(*args):
            self._on_server_event(name, args[0] if args else None)
        return handler

    # Lifecycle

    def connect(self) -> bool:
        """
        Open the transport, retrying a fixed number of times with a fixed delay.

        Returns:
            bool: True once connected. False after exhausting every attempt, in
            which case a connection_failed event is queued for subscribers.

        Raises:
            ConnectionClosedError: If the manager was closed
        """
        with self._lock:
            if self.state is ConnectivityState.CLOSED:
                raise ConnectionClosedError("Connection manager is closed")
            if self.state in (ConnectivityState.CONNECTING, ConnectivityState.CONNECTED,
                              ConnectivityState.RECONNECTING):
                return self.state is ConnectivityState.CONNECTED
            if self.state is ConnectivityState.FAILED:
                return False
            self.state = ConnectivityState.CONNECTING

        attempts = self._establish()
        if attempts:
            return self._mark_connected()

        self._mark_failed()
        return False

    def close(self):
        """Close the transport. The manager cannot be reopened afterwards."""
        with self._lock:
            if self.state is ConnectivityState.CLOSED:
                return
            self._closing = True
            self.state = ConnectivityState.CLOSED
            self._outbox.clear()
        # Outside the lock: disconnect may call back into _on_disconnect
        if self.sio.connected:
            self.sio.disconnect()
        session_logger.logger.info(f"Connection to {self.url} closed")

    def _establish(self) -> int:
        """Try to connect; return the successful attempt number or 0."""
        for attempt in range(1, self.reconnect_attempts + 1):
            if self._closing:
                return 0
            try:
                self.sio.connect(self.url, transports=self.transports, wait_timeout=self.timeout)
                session_logger.logger.info(f"Connected to {self.url} (attempt {attempt}/{self.reconnect_attempts})")
                return attempt
            except TransportConnectionError as e:
                session_logger.logger.warning(
                    f"Connection attempt {attempt}/{self.reconnect_attempts} to {self.url} failed: {e}"
                )
                if attempt < self.reconnect_attempts:
                    self._sleep(self.reconnect_delay)
        return 0

    def _mark_connected(self) -> bool:
        with self._lock:
            if self._closing:
                return False
            self.state = ConnectivityState.CONNECTED
            self._flush_outbox()
        return True

    def _mark_failed(self):
        with self._lock:
            if self._closing:
                return
            self.state = ConnectivityState.FAILED
            self._outbox.clear()
        session_logger.logger.error(
            f"Giving up on {self.url} after {self.reconnect_attempts} attempts"
        )
        self._inbox.put(ConnectionFailed(attempts=self.reconnect_attempts))

    def _on_disconnect(self, *args):
        with self._lock:
            if self._closing or self.state is not ConnectivityState.CONNECTED:
                return
            self.state = ConnectivityState.RECONNECTING
        reason = str(args[0]) if args else ""
        session_logger.logger.warning(f"Connection to {self.url} lost {reason}".rstrip())
        self._inbox.put(ConnectionLost(reason=reason))
        self.sio.start_background_task(self._reconnect)

    def _reconnect(self):
        attempts = self._establish()
        if self._closing:
            if self.sio.connected:
                self.sio.disconnect()
            return
        if attempts:
            if self._mark_connected():
                self._inbox.put(Reconnected(attempts=attempts))
        else:
            self._mark_failed()

    # Outbound

    def send(self, command) -> bool:
        """
        Send a command, buffering it while the transport is not connected.

        Returns:
            bool: True if the command was emitted or queued, False if the
            connection has permanently failed and the command was dropped.

        Raises:
            ConnectionClosedError: If the manager was closed
        """
        name, payload = encode_command(command)
        return self.send_raw(name, payload)

    def send_raw(self, name: str, payload=None) -> bool:
        with self._lock:
            if self.state is ConnectivityState.CLOSED:
                raise ConnectionClosedError(f"Cannot send '{name}' on a closed connection")
            if self.state is ConnectivityState.FAILED:
                session_logger.log_rejected(name, self.state.value, 'connection failed')
                return False

            if self.state is ConnectivityState.CONNECTED and not self._outbox:
                try:
                    self._emit(name, payload)
                    session_logger.log_command(name, payload)
                    return True
                except SocketIOError as e:
                    session_logger.log_error(e, f"send:{name}")

            self._outbox.append((name, payload))
            session_logger.log_command(name, payload, buffered=True)
            return True

    def _emit(self, name: str, payload):
        if payload is None:
            self.sio.emit(name)
        else:
            self.sio.emit(name, payload)

    def _flush_outbox(self):
        """Emit buffered commands in order. Caller holds ``_lock``."""
        pending, self._outbox = self._outbox, []
        for index, (name, payload) in enumerate(pending):
            try:
                self._emit(name, payload)
            except SocketIOError as e:
                # The failed command and everything after it wait for the next connect
                session_logger.log_error(e, f"flush:{name}")
                self._outbox = pending[index:] + self._outbox
                return
            session_logger.log_command(name, payload)

    # Inbound

    def subscribe(self, event_name: str, callback: Callable):
        """Register a callback for a server or connectivity event."""
        if event_name not in EventName.SERVER_EVENTS + EventName.CONNECTIVITY_EVENTS:
            raise ValueError(f"Unknown event '{event_name}'")
        self._subscribers[event_name].append(callback)

    def unsubscribe(self, event_name: str, callback: Callable):
        if callback in self._subscribers.get(event_name, []):
            self._subscribers[event_name].remove(callback)

    def subscriber_count(self, event_name: str) -> int:
        return len(self._subscribers.get(event_name, []))

    def _on_server_event(self, name: str, payload):
        try:
            event = decode_event(name, payload)
        except ProtocolError as e:
            session_logger.log_error(e, f"decode:{name}")
            return
        self._inbox.put(event)

    def process_events(self, timeout: float = 0.0) -> int:
        """
        Deliver queued events to subscribers in receipt order.

        Args:
            timeout: Seconds to wait for the first event; 0 drains without blocking

        Returns:
            int: Number of events delivered
        """
        delivered = 0
        block = timeout > 0
        while True:
            try:
                event = self._inbox.get(block=block, timeout=timeout if block else None)
            except queue.Empty:
                return delivered
            block = False
            self._deliver(event)
            delivered += 1

    def _deliver(self, event):
        session_logger.log_event(event.name, getattr(event, '__dict__', None))
        for callback in list(self._subscribers.get(event.name, [])):
            try:
                callback(event)
            except Exception as e:
                session_logger.log_error(e, f"deliver:{event.name}")
