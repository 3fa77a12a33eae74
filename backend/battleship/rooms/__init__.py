"""Room coordination: store, connection registry, lifecycle and relay.

Nothing in this package knows about Flask or Socket.IO; the socket
handlers hand in connection ids and an ``emit`` callable, keeping
transport concerns separated from room bookkeeping.
"""

import logging
import threading
from typing import Iterable, Optional, Tuple

from .errors import DuplicateRoomId, InvariantViolation, RoomError, RoomFull, UnknownRoom
from .lifecycle import JoinResult, RoomLifecycleManager
from .models import Room, parse_permanent_rooms
from .registry import ConnectionRegistry
from .relay import Emitter, RelayEngine
from .store import DEFAULT_CAPACITY, RoomStore


class RoomService:
    """One owned set of room components, created once per app."""

    def __init__(self, emit: Emitter, capacity: int = DEFAULT_CAPACITY, enforce_capacity: bool = True,
                 permanent_rooms: Iterable[Tuple[str, str]] = (),
                 logger: Optional[logging.Logger] = None):
        logger = logger or logging.getLogger(__name__)
        lock = threading.RLock()
        self.store = RoomStore(capacity=capacity, logger=logger)
        self.registry = ConnectionRegistry(self.store)
        self.relay = RelayEngine(self.store, self.registry, emit, lock=lock, logger=logger)
        self.lifecycle = RoomLifecycleManager(
            self.store, self.registry, self.relay,
            enforce_capacity=enforce_capacity, lock=lock, logger=logger,
        )
        self.lifecycle.seed_permanent(permanent_rooms)

    @classmethod
    def from_config(cls, config, emit: Emitter, logger: Optional[logging.Logger] = None) -> 'RoomService':
        return cls(
            emit,
            capacity=int(config.get('ROOM_CAPACITY', DEFAULT_CAPACITY)),
            enforce_capacity=bool(config.get('ENFORCE_ROOM_CAPACITY', True)),
            permanent_rooms=parse_permanent_rooms(config.get('PERMANENT_ROOMS', '')),
            logger=logger,
        )


__all__ = [
    'ConnectionRegistry',
    'DuplicateRoomId',
    'InvariantViolation',
    'JoinResult',
    'RelayEngine',
    'Room',
    'RoomError',
    'RoomFull',
    'RoomLifecycleManager',
    'RoomService',
    'RoomStore',
    'UnknownRoom',
    'parse_permanent_rooms',
]
