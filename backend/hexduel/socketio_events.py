from flask import current_app, request
from flask_socketio import emit

from hexduel import socketio


class SocketIONotifier:
    """Outbound side of the registry, delivered through Flask-SocketIO."""

    def __init__(self, sio, namespace='/'):
        self.sio = sio
        self.namespace = namespace

    def send(self, sid, event, data):
        self.sio.emit(event, data, to=sid, namespace=self.namespace)

    def broadcast(self, event, data):
        self.sio.emit(event, data, namespace=self.namespace)


def _registry():
    return current_app.extensions['session_registry']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _require(data, key):
    value = (data or {}).get(key)
    if value is None or value == '':
        emit('error', {'message': f'{key} is required'})
        return None
    if not isinstance(value, str):
        emit('error', {'message': f'{key} must be a string'})
        return None
    return value


def _cell_id(data, key):
    value = (data or {}).get(key)
    # ids are compared exactly; floats and numeric strings are not coerced
    if isinstance(value, bool) or not isinstance(value, int):
        emit('error', {'message': f'{key} must be an integer'})
        return None
    return value


def handle_connect(auth=None):
    sid = _get_sid()
    _registry().connect(sid)
    emit('connected', {'id': sid})


def handle_disconnect(*args):
    _registry().disconnect(_get_sid())


def handle_join_lobby(data):
    username = _require(data, 'username')
    if username is None:
        return
    _registry().join_lobby(_get_sid(), username)


def handle_challenge_player(data):
    target_id = _require(data, 'targetId')
    if target_id is None:
        return
    _registry().challenge(_get_sid(), target_id)


def handle_accept_challenge(data):
    challenger_id = _require(data, 'challengerId')
    if challenger_id is None:
        return
    current_app.logger.info(f"[accept] sid={_get_sid()} challenger={challenger_id}")
    _registry().accept(_get_sid(), challenger_id)


def handle_decline_challenge(data):
    challenger_id = _require(data, 'challengerId')
    if challenger_id is None:
        return
    _registry().decline(_get_sid(), challenger_id)


def handle_make_move(data):
    from_id = _cell_id(data, 'fromCellId')
    if from_id is None:
        return
    target_id = _cell_id(data, 'targetCellId')
    if target_id is None:
        return
    _registry().make_move(_get_sid(), from_id, target_id, player=(data or {}).get('player'))


def handle_surrender(data=None):
    _registry().surrender(_get_sid())


def handle_leave_game(data=None):
    _registry().leave(_get_sid())


def handle_reset_game(data=None):
    _registry().reset(_get_sid())


EVENT_HANDLERS = (
    ('connect', handle_connect),
    ('disconnect', handle_disconnect),
    ('joinLobby', handle_join_lobby),
    ('challengePlayer', handle_challenge_player),
    ('acceptChallenge', handle_accept_challenge),
    ('declineChallenge', handle_decline_challenge),
    ('makeMove', handle_make_move),
    ('surrender', handle_surrender),
    ('leaveGame', handle_leave_game),
    ('resetGame', handle_reset_game),
)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the lobby and match event handlers on one namespace."""
    for event, handler in EVENT_HANDLERS:
        socketio.on_event(event, handler, namespace=namespace)
