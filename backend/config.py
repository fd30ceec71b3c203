import os


def _origins(raw):
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = _origins(os.environ.get('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000'))
    # Board dimensions for newly created rooms
    BOARD_ROWS = int(os.environ.get('BOARD_ROWS', '6'))
    BOARD_COLS = int(os.environ.get('BOARD_COLS', '10'))
    # Player limits; the colour palette has 10 entries
    MAX_ACTIVE_PLAYERS = int(os.environ.get('MAX_ACTIVE_PLAYERS', '10'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    # Initial tokens per player and random placement attempts per token
    SEED_TOKENS = int(os.environ.get('SEED_TOKENS', '3'))
    SEED_ATTEMPTS = int(os.environ.get('SEED_ATTEMPTS', '100'))
    # Empty-room sweep interval (seconds)
    ROOM_SWEEP_INTERVAL_SEC = float(os.environ.get('ROOM_SWEEP_INTERVAL_SEC', '60'))
