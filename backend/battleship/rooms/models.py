from typing import Dict, Optional


class Room:
    """A named group of connections playing one game together.

    ``members`` maps connection id -> player display name, in join order.
    """

    def __init__(self, room_id: str, display_name: Optional[str] = None, permanent: bool = False):
        self.id = room_id
        self.display_name = display_name or room_id
        self.permanent = permanent
        self.members: Dict[str, str] = {}

    @property
    def size(self) -> int:
        return len(self.members)

    def is_empty(self) -> bool:
        return not self.members

    def has_member(self, connection_id: str) -> bool:
        return connection_id in self.members

    def players(self) -> Dict[str, str]:
        return dict(self.members)

    def to_dict(self):
        return {
            'id': self.id,
            'display_name': self.display_name,
            'members': self.players(),
        }

    def __repr__(self):
        return f"<Room {self.id!r} members={self.size} permanent={self.permanent}>"


def parse_permanent_rooms(raw: str):
    """Parse ``"id[:Display Name],..."`` into a list of ``(id, display_name)``.

    A repeated id keeps its first entry.
    """
    seeds = {}
    for chunk in (raw or '').split(','):
        chunk = chunk.strip()
        if not chunk:
            continue
        room_id, _, name = chunk.partition(':')
        room_id = room_id.strip()
        if not room_id or room_id in seeds:
            continue
        seeds[room_id] = name.strip() or room_id
    return list(seeds.items())
