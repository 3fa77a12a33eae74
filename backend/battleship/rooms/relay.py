import logging
import threading
from typing import Any, Callable, Optional

from .errors import UnknownRoom
from .registry import ConnectionRegistry
from .store import RoomStore


# emit(event, payload, to=sid) for one connection, emit(event, payload, skip_sid=sid) for all;
# bound to socketio.emit in production
Emitter = Callable[..., Any]


class RelayEngine:
    """Forwards opaque payloads between connections without reading them.

    Room addressing comes from membership in the store; nothing here
    mutates a room. Each recipient receives events in the order the
    relay is called.
    """

    def __init__(self, store: RoomStore, registry: ConnectionRegistry, emit: Emitter, lock=None,
                 logger: Optional[logging.Logger] = None):
        self.store = store
        self.registry = registry
        self.emit = emit
        self.lock = lock or threading.RLock()
        self.logger = logger or logging.getLogger(__name__)

    def forward_to_room(self, room_id: str, event: str, payload: Any = None,
                        exclude: Optional[str] = None, sender: Optional[str] = None) -> int:
        """Send ``event`` to every member of ``room_id`` except ``exclude``.

        When ``sender`` is given it must be a member of the room, otherwise
        the event is dropped. Returns the number of recipients.
        """
        with self.lock:
            try:
                room = self.store.get(room_id)
            except UnknownRoom:
                self.logger.warning(f"[relay-drop] event={event} room={room_id} reason=unknown-room sid={sender}")
                return 0
            if sender is not None and not room.has_member(sender):
                self.logger.warning(f"[relay-drop] event={event} room={room_id} reason=not-a-member sid={sender}")
                return 0

            recipients = [sid for sid in room.members if sid != exclude]
            for sid in recipients:
                self.emit(event, payload, to=sid)
        self.logger.debug(f"[relay] event={event} room={room_id} recipients={len(recipients)}")
        return len(recipients)

    def forward_to_all_except_sender(self, event: str, payload: Any = None,
                                     sender: Optional[str] = None) -> int:
        """Broadcast to every connection in the namespace, skipping ``sender`` if given."""
        with self.lock:
            recipients = len([sid for sid in self.registry.connections() if sid != sender])
            self.emit(event, payload, skip_sid=sender)
        self.logger.debug(f"[broadcast] event={event} recipients={recipients} skip={sender}")
        return recipients
