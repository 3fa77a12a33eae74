import logging
from typing import Dict, Iterator, List, Optional

from .errors import DuplicateRoomId, InvariantViolation, UnknownRoom
from .models import Room


DEFAULT_CAPACITY = 2


class RoomStore:
    """In-memory set of rooms, kept in creation order.

    The store is the single owner of every ``Room``; the connection
    registry and relay only read membership through it.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, logger: Optional[logging.Logger] = None):
        self.capacity = capacity
        self.logger = logger or logging.getLogger(__name__)
        self._rooms: Dict[str, Room] = {}

    def __contains__(self, room_id) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def find_by_id(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def get(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise UnknownRoom(room_id)
        return room

    def find_by_connection(self, connection_id: str) -> Optional[Room]:
        found = [room for room in self._rooms.values() if connection_id in room.members]
        if not found:
            return None
        if len(found) > 1:
            self._report(InvariantViolation(
                f"connection {connection_id} is a member of {len(found)} rooms: "
                f"{[room.id for room in found]}"
            ))
            # First room in creation order wins; drop the stale memberships
            for stale in found[1:]:
                stale.members.pop(connection_id, None)
                self.destroy_if_empty(stale)
        return found[0]

    def create(self, room_id: str, display_name: Optional[str] = None, permanent: bool = False) -> Room:
        if room_id in self._rooms:
            raise DuplicateRoomId(room_id)
        room = Room(room_id, display_name=display_name, permanent=permanent)
        self._rooms[room_id] = room
        self.logger.info(f"[room-create] room={room_id} permanent={permanent}")
        return room

    def add_member(self, room: Room, connection_id: str, display_name: str) -> None:
        room.members[connection_id] = display_name

    def remove_member(self, room: Room, connection_id: str) -> Optional[str]:
        """Remove a member and drop the room if that left it empty.

        Returns the departing member's display name, or None if the
        connection was not a member.
        """
        name = room.members.pop(connection_id, None)
        self.destroy_if_empty(room)
        return name

    def is_full(self, room: Room) -> bool:
        return room.size >= self.capacity

    def list_joinable(self) -> List[dict]:
        return [room.to_dict() for room in self._rooms.values() if not self.is_full(room)]

    def destroy_if_empty(self, room: Room) -> bool:
        if room.permanent or not room.is_empty():
            return False
        # Only drop the exact instance we were handed
        if self._rooms.get(room.id) is room:
            del self._rooms[room.id]
            self.logger.info(f"[room-destroy] room={room.id}")
        return True

    def check_invariants(self) -> List[str]:
        """Sweep the store for broken invariants, repairing what it finds."""
        problems: List[str] = []
        for room in list(self._rooms.values()):
            if not room.permanent and room.is_empty():
                violation = InvariantViolation(f"empty non-permanent room {room.id} still stored")
                problems.append(str(violation))
                self._report(violation)
                self.destroy_if_empty(room)

        seen: Dict[str, str] = {}
        for room in list(self._rooms.values()):
            for connection_id in list(room.members):
                owner = seen.get(connection_id)
                if owner is None:
                    seen[connection_id] = room.id
                    continue
                violation = InvariantViolation(
                    f"connection {connection_id} in rooms {owner} and {room.id}"
                )
                problems.append(str(violation))
                self._report(violation)
                room.members.pop(connection_id, None)
                self.destroy_if_empty(room)
        return problems

    def _report(self, violation: InvariantViolation) -> None:
        self.logger.error(f"[invariant] {violation}")
