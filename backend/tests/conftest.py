import os
import sys
import pytest

# Ensure the backend root (containing the `battleship` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from battleship import create_app, socketio
from battleship.rooms import ConnectionRegistry, RelayEngine, RoomLifecycleManager, RoomStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = 'http://localhost:3000'
    SOCKETIO_NAMESPACE = '/'
    SOCKETIO_ASYNC_HANDLERS = False
    ROOM_CAPACITY = 2
    ENFORCE_ROOM_CAPACITY = True
    PERMANENT_ROOMS = 'lobby:Main Lobby'
    LOG_LEVEL = 'DEBUG'


class RecordingEmitter:
    """Stands in for socketio.emit and remembers what was sent to whom.

    A broadcast (no ``to``) fans out to every registered connection except
    ``skip_sid``, the way the Socket.IO server fans out over a namespace.
    """

    def __init__(self, registry):
        self.registry = registry
        self.sent = []
        self.broadcasts = []

    def __call__(self, event, payload=None, to=None, skip_sid=None):
        if to is not None:
            self.sent.append((event, payload, to))
            return
        self.broadcasts.append((event, payload, skip_sid))
        for sid in self.registry.connections():
            if sid != skip_sid:
                self.sent.append((event, payload, sid))

    def to(self, sid):
        return [(event, payload) for event, payload, target in self.sent if target == sid]

    def events(self, name):
        return [(payload, target) for event, payload, target in self.sent if event == name]

    def clear(self):
        self.sent.clear()
        self.broadcasts.clear()


@pytest.fixture()
def store():
    return RoomStore(capacity=2)


@pytest.fixture()
def registry(store):
    return ConnectionRegistry(store)


@pytest.fixture()
def emitter(registry):
    return RecordingEmitter(registry)


@pytest.fixture()
def relay(store, registry, emitter):
    return RelayEngine(store, registry, emitter)


@pytest.fixture()
def manager(store, registry, relay):
    return RoomLifecycleManager(store, registry, relay)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def rooms(flask_app):
    return flask_app.extensions['rooms']


@pytest.fixture()
def sio_factory(flask_app):
    """Build connected Socket.IO test clients; all are disconnected at teardown."""
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/'
        )
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected('/'):
                test_client.disconnect(namespace='/')
        except Exception:
            pass
