import random

import pytest

from stopgame.game.service import RoomRegistry
from stopgame.server import create_app


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    CORS_ORIGINS = "*"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    LOG_LEVEL = "WARNING"
    ROUND_DURATION_SEC = 60
    MIN_ROUND_SEC = 20
    MAX_ROUND_SEC = 180
    # Short enough for socket tests to watch a STOP run out.
    STOP_GRACE_SEC = 0.2
    MIN_PLAYERS = 2


class ManualTimer:
    """Stands in for RoundTimer; callbacks only run when a test fires them."""

    def __init__(self):
        self.armed = {}
        self.history = []

    def arm(self, key, delay_sec, callback, *args):
        self.armed[key] = (delay_sec, callback, args)
        self.history.append((key, delay_sec, callback, args))

    def cancel(self, key):
        return self.armed.pop(key, None) is not None

    def is_armed(self, key):
        return key in self.armed

    def shutdown(self):
        self.armed.clear()

    def fire(self, key):
        _, callback, args = self.armed.pop(key)
        callback(*args)


class FakeClock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += int(seconds * 1000)


@pytest.fixture()
def timer():
    return ManualTimer()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def outbox():
    return []


@pytest.fixture()
def registry(timer, clock, outbox):
    return RoomRegistry(
        emit=lambda event, payload, sid: outbox.append((event, payload, sid)),
        timer=timer,
        config={"ROUND_DURATION_SEC": 60, "STOP_GRACE_SEC": 5, "MIN_PLAYERS": 2},
        rng=random.Random(1234),
        clock=clock,
    )


@pytest.fixture()
def pushes(outbox):
    def _pushes(event, sid=None):
        return [p for (e, p, to) in outbox if e == event and (sid is None or to == sid)]

    return _pushes


@pytest.fixture()
def app_and_socketio():
    app, socketio = create_app(TestConfig)
    yield app, socketio
    app.extensions["stopgame"].shutdown()


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(app_and_socketio):
    app, socketio = app_and_socketio
    clients = []

    def _make():
        test_client = socketio.test_client(app, flask_test_client=app.test_client())
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
