# standoff/app.py
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from . import init_standoff
from .config import Config
from .logging_config import setup_logging
from .server import DuelServer


def create_app(config_class=Config):
    setup_logging(level=config_class.LOG_LEVEL, log_file=config_class.LOG_FILE)

    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config['CORS_ORIGINS']
    CORS(flask_app, origins=origins)
    socketio = SocketIO(flask_app, cors_allowed_origins=origins, async_mode=None)

    server = DuelServer(
        socketio,
        resolve_pause_ms=flask_app.config['RESOLVE_PAUSE_MS'],
        autostart_timers=flask_app.config['SCHEDULER_AUTOSTART'],
        default_mode=flask_app.config['DEFAULT_MODE'],
    )
    server.registry.code_length = flask_app.config['ROOM_CODE_LENGTH']
    init_standoff(flask_app, socketio, server)
    return flask_app
