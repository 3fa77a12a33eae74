from typing import Dict, List, Optional

from .models import Room
from .store import RoomStore


class ConnectionRegistry:
    """Live connections, in connect order.

    Room membership is not stored here; it is derived from the room store
    so the two can never disagree.
    """

    def __init__(self, store: RoomStore):
        self.store = store
        self._live: Dict[str, None] = {}

    def register(self, connection_id: str) -> None:
        self._live[connection_id] = None

    def unregister(self, connection_id: str) -> bool:
        if connection_id not in self._live:
            return False
        del self._live[connection_id]
        return True

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._live

    def connections(self) -> List[str]:
        return list(self._live)

    def room_of(self, connection_id: str) -> Optional[Room]:
        return self.store.find_by_connection(connection_id)

    def __len__(self) -> int:
        return len(self._live)
