class RoomError(Exception):
    """Base class for room coordination errors."""


class UnknownRoom(RoomError):
    def __init__(self, room_id):
        super().__init__(f"Room '{room_id}' does not exist")
        self.room_id = room_id


class DuplicateRoomId(RoomError):
    def __init__(self, room_id):
        super().__init__(f"Room '{room_id}' already exists")
        self.room_id = room_id


class RoomFull(RoomError):
    def __init__(self, room_id, capacity):
        super().__init__(f"Room '{room_id}' is full ({capacity} players)")
        self.room_id = room_id
        self.capacity = capacity


class InvariantViolation(RoomError):
    """A room store state that should be impossible, e.g. a connection in two rooms."""
