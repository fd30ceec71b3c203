from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def get_registry(flask_app=None):
    """Return the RoomRegistry owned by ``flask_app`` (or the current app)."""
    if flask_app is None:
        from flask import current_app as flask_app
    return flask_app.extensions['room_registry']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config['CORS_ORIGINS']

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app, shared by the socket handlers and HTTP routes
    from chainreaction.game import RoomRegistry
    registry = RoomRegistry(
        rows=flask_app.config['BOARD_ROWS'],
        cols=flask_app.config['BOARD_COLS'],
        min_players=flask_app.config['MIN_PLAYERS'],
        seed_tokens=flask_app.config['SEED_TOKENS'],
        seed_attempts=flask_app.config['SEED_ATTEMPTS'],
    )
    flask_app.extensions['room_registry'] = registry

    from chainreaction.main import main
    flask_app.register_blueprint(main)

    from chainreaction.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from chainreaction.socketio_events import register_socketio_handlers
    register_socketio_handlers(registry, max_active_players=flask_app.config['MAX_ACTIVE_PLAYERS'])

    # The sweep never runs under TESTING; tests call sweep_empty() directly
    if not flask_app.config.get('TESTING'):
        from chainreaction.services.sweeper import RoomSweeper
        RoomSweeper(socketio, registry, flask_app.config['ROOM_SWEEP_INTERVAL_SEC']).start()

    return flask_app
