import os
import sys
import tempfile
import threading

import pytest

# Ensure the client root (containing the `duel_client` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
CLIENT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if CLIENT_ROOT not in sys.path:
    sys.path.insert(0, CLIENT_ROOT)

# Keep test logs out of the working tree; must happen before duel_client is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='duel-client-logs-'))

from socketio.exceptions import BadNamespaceError, ConnectionError as TransportConnectionError

from duel_client import create_client
from duel_client.config import TestingConfig
from duel_client.websocket.connection import ConnectionManager


class FakeSocketIOClient:
    """Stands in for socketio.Client: records emits and plays server events."""

    def __init__(self, fail_connects=0):
        self.handlers = {}
        self.connected = False
        self.emitted = []
        self.connect_calls = 0
        self.fail_connects = fail_connects
        self.emit_budget = None  # emits allowed before the transport breaks
        self.connect_gate = None
        self.threaded = False
        self.tasks = []

    def on(self, event, handler=None):
        self.handlers[event] = handler

    def connect(self, url, transports=None, wait_timeout=None):
        self.connect_calls += 1
        if self.connect_gate is not None:
            self.connect_gate.wait(timeout=5)
        if self.fail_connects > 0:
            self.fail_connects -= 1
            raise TransportConnectionError('Connection refused by the server')
        self.connected = True

    def disconnect(self):
        self.connected = False

    def emit(self, event, data=None):
        if not self.connected:
            raise BadNamespaceError('/ is not a connected namespace.')
        if self.emit_budget is not None:
            if self.emit_budget == 0:
                raise BadNamespaceError('/ is not a connected namespace.')
            self.emit_budget -= 1
        self.emitted.append((event, data))

    def start_background_task(self, target, *args, **kwargs):
        if not self.threaded:
            target(*args, **kwargs)
            return None
        task = threading.Thread(target=target, args=args, kwargs=kwargs, daemon=True)
        self.tasks.append(task)
        task.start()
        return task

    # Test helpers

    def server_emit(self, event, data=None):
        handler = self.handlers[event]
        if data is None:
            handler()
        else:
            handler(data)

    def drop(self, reason='transport error'):
        self.connected = False
        self.handlers['disconnect'](reason)

    def emitted_names(self):
        return [name for name, _ in self.emitted]


class Duel:
    """A wired client plus helpers to play the server side."""

    def __init__(self, sio, connection, controller, engine):
        self.sio = sio
        self.connection = connection
        self.controller = controller
        self.engine = engine
        self.notices = []
        controller.store.add_listener(lambda session, notices: self.notices.extend(notices))

    @property
    def session(self):
        return self.controller.session

    @property
    def match(self):
        return self.controller.session.match

    def deliver(self, event, data=None):
        self.sio.server_emit(event, data)
        self.connection.process_events()

    def type_word(self, word):
        for letter in word:
            self.engine.append_letter(letter)

    def start_as_player_one(self, game_id='ABCDE'):
        self.controller.request_create()
        self.deliver('game_created', {'game_id': game_id, 'player_id': 'player1', 'status': 'waiting'})
        self.deliver('game_start', {})

    def start_as_player_two(self, game_id='ABCDE'):
        self.controller.request_join(game_id)
        self.deliver('game_joined', {'player_id': 'player2'})

    def acknowledge(self, word, feedback=None, player_id='player1'):
        self.deliver('guess_made', {
            'player_id': player_id,
            'guess': word,
            'result': feedback or ['absent'] * 5,
        })


@pytest.fixture()
def fake_sio():
    return FakeSocketIOClient()


@pytest.fixture()
def sleeps():
    return []


@pytest.fixture()
def connection(fake_sio, sleeps):
    manager = ConnectionManager(
        'http://duel.test',
        reconnect_attempts=3,
        reconnect_delay=0.5,
        client=fake_sio,
        sleep=sleeps.append,
    )
    yield manager
    manager.close()


@pytest.fixture()
def duel(fake_sio, sleeps):
    connection, controller, engine = create_client(TestingConfig, client=fake_sio, sleep=sleeps.append)
    connection.connect()
    yield Duel(fake_sio, connection, controller, engine)
    controller.detach()
    engine.detach()
    connection.close()
