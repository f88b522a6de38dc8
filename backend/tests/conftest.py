import json
import os
import random
import sys

import pytest

# Ensure the backend root (containing the `foxgame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from foxgame.config import Config
from foxgame.game.registry import RoomRegistry
from foxgame.realtime.coordinator import GameCoordinator


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SOCKETIO_ASYNC_MODE = 'threading'
    TRUST_PROXY_HEADERS = False
    ROOM_CLEANUP_GRACE_SEC = 0.01


class RecordingTransport:
    """Collects every message sent to each sid, decoded."""

    def __init__(self):
        self.sent = {}

    def __call__(self, sid, text):
        self.sent.setdefault(sid, []).append(json.loads(text))

    def messages(self, sid, type_=None):
        msgs = self.sent.get(sid, [])
        if type_ is None:
            return list(msgs)
        return [m for m in msgs if m['type'] == type_]

    def last(self, sid, type_):
        msgs = self.messages(sid, type_)
        return msgs[-1] if msgs else None

    def clear(self):
        self.sent.clear()


class ManualScheduler:
    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


class Client:
    def __init__(self, coordinator, transport, sid):
        self.coordinator = coordinator
        self.transport = transport
        self.sid = sid
        self.player_id = None
        self.room_code = None

    def send(self, type_, **fields):
        self.coordinator.handle_message(self.sid, json.dumps({'type': type_, **fields}))

    def close(self):
        self.coordinator.handle_disconnect(self.sid)

    def messages(self, type_=None):
        return self.transport.messages(self.sid, type_)

    def last(self, type_):
        return self.transport.last(self.sid, type_)

    def create(self, name, **fields):
        self.send('CREATE_ROOM', playerName=name, **fields)
        created = self.last('ROOM_CREATED')
        self.player_id = created['playerId']
        self.room_code = created['roomCode']
        return created

    def join(self, code, name):
        self.send('JOIN_ROOM', roomCode=code, playerName=name)
        joined = self.last('ROOM_JOINED')
        if joined:
            self.player_id = joined['playerId']
            self.room_code = joined['roomCode']
        return joined


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def registry():
    return RoomRegistry(rng=random.Random(1234))


@pytest.fixture()
def coordinator(registry, transport, scheduler):
    return GameCoordinator(registry, transport, schedule=scheduler)


@pytest.fixture()
def connect(coordinator, transport):
    counter = iter(range(1, 1000))

    def _connect():
        return Client(coordinator, transport, f'sid-{next(counter)}')

    return _connect


@pytest.fixture()
def trio(connect):
    """Host plus two guests in one lobby, joined in that order."""
    host, bob, cara = connect(), connect(), connect()
    host.create('Alice')
    bob.join(host.room_code, 'Bob')
    cara.join(host.room_code, 'Cara')
    return host, bob, cara


@pytest.fixture()
def flask_app():
    from foxgame.server import create_app

    application, _ = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    socketio = flask_app.extensions['socketio']
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
