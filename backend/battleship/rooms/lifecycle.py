import logging
import threading
from typing import Dict, Iterable, Optional, Tuple

from .errors import RoomFull, UnknownRoom
from .registry import ConnectionRegistry
from .relay import RelayEngine
from .store import RoomStore


LISTING_CHANGED = 'new-game-list'


class JoinResult:
    def __init__(self, room_id: str, room_name: str, players: Dict[str, str]):
        self.room_id = room_id
        self.room_name = room_name
        self.players = players

    def to_dict(self):
        return {
            'success': True,
            'room_id': self.room_id,
            'room_name': self.room_name,
            'players': self.players,
        }


class RoomLifecycleManager:
    """Creates, fills, drains and destroys rooms.

    A room moves Empty -> AwaitingOpponent (1 player) -> Full (2 players)
    and back down as players leave; a non-permanent room is destroyed the
    moment it empties. Every mutation and the notifications it triggers run
    under one lock, so no other handler can observe a half-finished
    transition.
    """

    def __init__(self, store: RoomStore, registry: ConnectionRegistry, relay: RelayEngine,
                 enforce_capacity: bool = True, lock=None, logger: Optional[logging.Logger] = None):
        self.store = store
        self.registry = registry
        self.relay = relay
        self.enforce_capacity = enforce_capacity
        self.logger = logger or logging.getLogger(__name__)
        self.lock = lock or threading.RLock()

    def seed_permanent(self, seeds: Iterable[Tuple[str, str]]) -> None:
        with self.lock:
            for room_id, display_name in seeds:
                self.store.create(room_id, display_name=display_name, permanent=True)

    def connect(self, connection_id: str) -> None:
        with self.lock:
            self.registry.register(connection_id)
        self.logger.debug(f"[connect] sid={connection_id}")

    def join(self, connection_id: str, display_name: str, room_id: str) -> JoinResult:
        with self.lock:
            # Reject before touching anything, including the room being switched away from
            target = self.store.find_by_id(room_id)
            if (target is not None and self.enforce_capacity
                    and not target.has_member(connection_id) and self.store.is_full(target)):
                self.logger.info(f"[join-reject] room={room_id} sid={connection_id} reason=full")
                raise RoomFull(room_id, self.store.capacity)

            current = self.store.find_by_connection(connection_id)
            if current is not None and current.id != room_id:
                # One room per connection: switching rooms leaves the old one first
                self._leave(current.id, connection_id, reason='left')

            room = self.store.find_by_id(room_id)
            if room is None:
                room = self.store.create(room_id)

            self.store.add_member(room, connection_id, display_name)
            players = room.players()
            self.logger.info(
                f"[join] room={room_id} sid={connection_id} name={display_name} players={len(players)}"
            )

            self.relay.forward_to_room(room.id, 'player:joined', display_name, exclude=connection_id)
            self.relay.forward_to_room(room.id, 'player:list', players)
            self.relay.forward_to_all_except_sender(LISTING_CHANGED)
            return JoinResult(room.id, room.display_name, players)

    def leave(self, connection_id: str, room_id: str, reason: str = 'left') -> Optional[str]:
        """Remove a connection from a room; returns its display name, or None if nothing changed."""
        with self.lock:
            return self._leave(room_id, connection_id, reason=reason)

    def disconnect(self, connection_id: str) -> Optional[str]:
        with self.lock:
            self.registry.unregister(connection_id)
            room = self.store.find_by_connection(connection_id)
            if room is None:
                self.logger.debug(f"[disconnect] sid={connection_id} room=None")
                return None
            return self._leave(room.id, connection_id, reason='disconnected')

    def check_availability(self, room_id: str) -> bool:
        with self.lock:
            return room_id not in self.store

    def list_joinable(self):
        with self.lock:
            return self.store.list_joinable()

    def _leave(self, room_id: str, connection_id: str, reason: str) -> Optional[str]:
        try:
            room = self.store.get(room_id)
        except UnknownRoom:
            self.logger.warning(f"[leave-drop] room={room_id} sid={connection_id} reason=unknown-room")
            return None
        if not room.has_member(connection_id):
            self.logger.warning(f"[leave-drop] room={room_id} sid={connection_id} reason=not-a-member")
            return None

        # Removal and the empty-room check happen in one step
        name = self.store.remove_member(room, connection_id)
        remaining = room.players()
        self.logger.info(
            f"[{reason}] room={room_id} sid={connection_id} name={name} players={len(remaining)}"
        )

        if remaining:
            event = 'player:disconnected' if reason == 'disconnected' else 'player:left'
            self.relay.forward_to_room(room.id, event, name)
            self.relay.forward_to_room(room.id, 'player:list', remaining)
        # A dropped socket cannot receive anything, so it is skipped
        sender = connection_id if reason == 'disconnected' else None
        self.relay.forward_to_all_except_sender(LISTING_CHANGED, sender=sender)
        return name
