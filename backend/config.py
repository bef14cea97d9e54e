import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Board radius; 4 gives the standard 61-cell board
    BOARD_RADIUS = int(os.environ.get('BOARD_RADIUS', '4'))
    # Comma-separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # When a participant drops mid-match, award the win to the opponent
    DISCONNECT_FORFEITS = _env_flag('DISCONNECT_FORFEITS', True)
    PORT = int(os.environ.get('PORT', '3000'))
