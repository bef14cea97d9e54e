import os
import sys
import pytest

# Ensure the backend root (containing the `hexduel` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from hexduel import create_app, socketio
from hexduel.services.registry import SessionRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    BOARD_RADIUS = 4
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    DISCONNECT_FORFEITS = True
    PORT = 3000


class RecordingNotifier:
    """Captures what the registry would push over the wire."""

    def __init__(self):
        self.sent = []
        self.broadcasts = []

    def send(self, sid, event, data):
        self.sent.append((sid, event, data))

    def broadcast(self, event, data):
        self.broadcasts.append((event, data))

    def to(self, sid, event=None):
        return [data for target, name, data in self.sent if target == sid and (event is None or name == event)]

    def last_lobby(self):
        lobby = [data for event, data in self.broadcasts if event == 'lobbyUpdate']
        return lobby[-1] if lobby else None

    def clear(self):
        self.sent.clear()
        self.broadcasts.clear()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def registry(notifier):
    return SessionRegistry(notifier)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Create connected Socket.IO test clients; all are disconnected on teardown."""
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
