import os
import sys
import pytest

# Ensure the repo root (containing the `standoff` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from standoff.app import create_app
from standoff.config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    RESOLVE_PAUSE_MS = 2000
    SCHEDULER_AUTOSTART = False
    DEFAULT_MODE = 'tactico'
    LOG_LEVEL = 'WARNING'
    LOG_FILE = None


@pytest.fixture()
def flask_app():
    return create_app(TestConfig)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def socketio(flask_app):
    return flask_app.extensions['socketio']


@pytest.fixture()
def duel_server(flask_app):
    return flask_app.extensions['standoff']


@pytest.fixture()
def sio_factory(flask_app, socketio):
    clients = []

    def make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
