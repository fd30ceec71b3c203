import os
import sys
import pytest

# Ensure the backend root (containing the `chainreaction` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from chainreaction import create_app, get_registry, socketio
from chainreaction.game import GameRoom
from chainreaction.protocol import NAMESPACE


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    MAX_ACTIVE_PLAYERS = 3


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    get_registry(application).close()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return get_registry(flask_app)


@pytest.fixture()
def make_sio_client(flask_app):
    """Factory for extra Socket.IO test clients; all are disconnected on teardown."""
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, namespace=NAMESPACE)
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected(NAMESPACE):
            test_client.disconnect(namespace=NAMESPACE)


@pytest.fixture()
def sio_client(make_sio_client):
    return make_sio_client()


def make_started_room(names=('P', 'Q'), rows=6, cols=10, spectators=()):
    """A room in ``playing`` state with the random opening tokens cleared."""
    room = GameRoom('TEST', rows=rows, cols=cols)
    for name in names:
        room.add_player(f'sid-{name}', name)
    for name in spectators:
        room.add_player(f'sid-{name}', name, is_spectator=True)
    room.start_game()
    room.board.reset()
    return room


def set_cell(room, row, col, player, count):
    cell = room.board.cells[row][col]
    cell.owner = player.id if player else None
    cell.token_count = count
    return cell
