from flask import current_app, request
from battleship import socketio
from battleship.rooms import RoomError, RoomService


def _rooms() -> RoomService:
    return current_app.extensions['rooms']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _drop(event: str, why: str) -> None:
    current_app.logger.warning(f"[drop] event={event} sid={_get_sid()} reason={why}")


# ---- Connection lifecycle ----

def handle_connect(auth=None):
    _rooms().lifecycle.connect(_get_sid())


def handle_disconnect(reason=None):
    # Safe for sockets that never joined a room
    _rooms().lifecycle.disconnect(_get_sid())


def handle_update_list():
    _rooms().relay.forward_to_all_except_sender('new-game-list')


# ---- Room listing and membership ----

def handle_get_game_list():
    return _rooms().lifecycle.list_joinable()


def handle_check_game_id(room_id=None):
    if not room_id:
        _drop('check-game-id', 'missing room id')
        return {'success': False, 'message': 'room id is required'}
    return {'success': _rooms().lifecycle.check_availability(room_id)}


def handle_player_joined(username=None, room_id=None):
    if not username or not room_id:
        _drop('player:joined', 'missing username or room id')
        return {'success': False, 'message': 'username and room id are required'}
    try:
        result = _rooms().lifecycle.join(_get_sid(), username, room_id)
    except RoomError as exc:
        return {'success': False, 'message': str(exc)}
    return result.to_dict()


def handle_player_left(username=None, room_id=None):
    if not room_id:
        _drop('player:left', 'missing room id')
        return
    _rooms().lifecycle.leave(_get_sid(), room_id)


# ---- Game relays ----

def handle_chat_message(data=None):
    if not isinstance(data, dict) or not data.get('room'):
        _drop('chat:message', 'payload without room')
        return
    sid = _get_sid()
    _rooms().relay.forward_to_room(data['room'], 'chat:message', data, exclude=sid, sender=sid)


def handle_ship_data(data=None):
    if not isinstance(data, dict) or not data.get('room_id'):
        _drop('ship-data', 'payload without room_id')
        return
    sid = _get_sid()
    _rooms().relay.forward_to_room(data['room_id'], 'get-ship-data', data, exclude=sid, sender=sid)


def handle_ships_remaining(room_id=None, count=None):
    if not room_id:
        _drop('ships-remaining', 'missing room id')
        return
    sid = _get_sid()
    _rooms().relay.forward_to_room(room_id, 'get-ships-remaining', count, exclude=sid, sender=sid)


def handle_attack(room_id=None, coordinate=None, next_turn=None):
    if not room_id:
        _drop('click-data-hit', 'missing room id')
        return
    sid = _get_sid()
    relay = _rooms().relay
    relay.forward_to_room(room_id, 'get-enemy-click', coordinate, exclude=sid, sender=sid)
    # Both players render whose turn it is, so the sender gets it too
    relay.forward_to_room(room_id, 'get-whose-turn', next_turn, sender=sid)


def handle_game_over(username=None, room_id=None):
    if not room_id:
        _drop('game-over', 'missing room id')
        return
    _rooms().relay.forward_to_room(room_id, 'winner', username, sender=_get_sid())


def handle_player_ready(room_id=None):
    if not room_id:
        _drop('player-ready', 'missing room id')
        return
    _rooms().relay.forward_to_room(room_id, 'start-game', sender=_get_sid())


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Event names match what the game client already emits.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('update-list', handle_update_list, namespace=namespace)
    socketio.on_event('get-game-list', handle_get_game_list, namespace=namespace)
    socketio.on_event('check-game-id', handle_check_game_id, namespace=namespace)
    socketio.on_event('player:joined', handle_player_joined, namespace=namespace)
    socketio.on_event('player:left', handle_player_left, namespace=namespace)
    socketio.on_event('chat:message', handle_chat_message, namespace=namespace)
    socketio.on_event('ship-data', handle_ship_data, namespace=namespace)
    socketio.on_event('ships-remaining', handle_ships_remaining, namespace=namespace)
    socketio.on_event('click-data-hit', handle_attack, namespace=namespace)
    socketio.on_event('game-over', handle_game_over, namespace=namespace)
    socketio.on_event('player-ready', handle_player_ready, namespace=namespace)
