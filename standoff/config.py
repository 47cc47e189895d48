# standoff/config.py
import os


def _flag(name, default):
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    DEBUG = _flag('FLASK_DEBUG', '0')
    # Mode used when a client asks for one we don't know
    DEFAULT_MODE = os.environ.get('DEFAULT_MODE', 'tactico')
    # Pause after a resolved turn so clients can animate (ms)
    RESOLVE_PAUSE_MS = int(os.environ.get('RESOLVE_PAUSE_MS', '2000'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    # Off in tests: timers are recorded but fired by hand
    SCHEDULER_AUTOSTART = _flag('SCHEDULER_AUTOSTART', '1')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE') or None
