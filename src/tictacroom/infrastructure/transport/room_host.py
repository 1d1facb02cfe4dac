from __future__ import annotations

import threading
from typing import Any, Callable, Iterable

from tictacroom.domain.game import OutboundMessage, SessionManager
from tictacroom.infrastructure.transport.message_bus import MessageBus
from tictacroom.interface.telemetry.logging import get_logger

logger = get_logger("tictacroom.room")


class RoomHost:
    """Bridge the message bus and the session manager for the single room."""

    def __init__(
        self,
        bus: MessageBus,
        manager: SessionManager,
        on_room_empty: Callable[[], None] | None = None,
    ) -> None:
        self._bus = bus
        self._manager = manager
        self._on_room_empty = on_room_empty
        # Held across processing and delivery so outbound order matches arrival order.
        self._lock = threading.Lock()
        bus.add_listener(on_disconnected=self._participant_disconnected)

    @property
    def bus(self) -> MessageBus:
        return self._bus

    @property
    def manager(self) -> SessionManager:
        return self._manager

    def set_room_empty_hook(self, hook: Callable[[], None] | None) -> None:
        self._on_room_empty = hook

    def receive(self, sender_id: str, data: Any) -> int:
        """Process one inbound message and return how many messages went out."""
        with self._lock:
            outbound = self._manager.handle_message(sender_id, data)
            self._deliver(outbound)
        return len(outbound)

    def _participant_disconnected(self, participant_id: str) -> None:
        with self._lock:
            self._deliver(self._manager.participant_gone(participant_id))

        if not self._bus.participants():
            logger.info("room_empty")
            if self._on_room_empty is not None:
                self._on_room_empty()

    def _deliver(self, outbound: Iterable[OutboundMessage]) -> None:
        for message in outbound:
            if message.is_broadcast:
                self._bus.broadcast(message.payload)
            else:
                self._bus.send(message.recipient, message.payload)


__all__ = ["RoomHost"]
