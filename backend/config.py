import os


def _flag(name, default):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list of origins allowed to open a socket
    CORS_ALLOWED_ORIGINS = os.environ.get(
        'CORS_ALLOWED_ORIGINS',
        'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
    )
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Handle each client's events in arrival order
    SOCKETIO_ASYNC_HANDLERS = _flag('SOCKETIO_ASYNC_HANDLERS', 'false')
    ROOM_CAPACITY = int(os.environ.get('ROOM_CAPACITY', '2'))
    # When false a third player may still join a full room (it is only hidden from listings)
    ENFORCE_ROOM_CAPACITY = _flag('ENFORCE_ROOM_CAPACITY', 'true')
    # Pre-seeded rooms that survive becoming empty, e.g. "lobby:Main Lobby,practice"
    PERMANENT_ROOMS = os.environ.get('PERMANENT_ROOMS', '')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
