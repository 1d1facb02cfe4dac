"""In-memory transport between the room and its remote participants."""

from .message_bus import (
    MessageBus,
    ParticipantExistsError,
    ParticipantNotFoundError,
    TransportError,
)
from .room_host import RoomHost

__all__ = [
    "MessageBus",
    "ParticipantExistsError",
    "ParticipantNotFoundError",
    "RoomHost",
    "TransportError",
]
