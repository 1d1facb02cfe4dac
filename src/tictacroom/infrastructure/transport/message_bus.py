from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable

from tictacroom.interface.telemetry.logging import get_logger

logger = get_logger("tictacroom.transport")

ParticipantCallback = Callable[[str], None]


class TransportError(RuntimeError):
    """Base class for transport-level failures."""

    code: str = "transport_error"


class ParticipantExistsError(TransportError):
    code = "participant_exists"


class ParticipantNotFoundError(TransportError):
    code = "participant_not_found"


class MessageBus:
    """
    In-memory channel between the room and its remote participants.

    - Each connected participant owns a FIFO outbox, drained by polling.
    - ``send`` is unicast; ``broadcast`` fans out to every connected participant.
    - Listeners hear about connects and disconnects after the registry changes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outboxes: dict[str, deque[dict[str, Any]]] = {}
        self._on_connected: list[ParticipantCallback] = []
        self._on_disconnected: list[ParticipantCallback] = []

    def add_listener(
        self,
        *,
        on_connected: ParticipantCallback | None = None,
        on_disconnected: ParticipantCallback | None = None,
    ) -> None:
        if on_connected is not None:
            self._on_connected.append(on_connected)
        if on_disconnected is not None:
            self._on_disconnected.append(on_disconnected)

    def connect(self, participant_id: str) -> None:
        with self._lock:
            if participant_id in self._outboxes:
                raise ParticipantExistsError(f"Participant {participant_id} is already connected.")
            self._outboxes[participant_id] = deque()
            total = len(self._outboxes)
        logger.info("participant_connected", participant_id=participant_id, total=total)
        for callback in list(self._on_connected):
            callback(participant_id)

    def disconnect(self, participant_id: str) -> None:
        with self._lock:
            if self._outboxes.pop(participant_id, None) is None:
                raise ParticipantNotFoundError(f"Participant {participant_id} is not connected.")
            total = len(self._outboxes)
        logger.info("participant_disconnected", participant_id=participant_id, total=total)
        for callback in list(self._on_disconnected):
            callback(participant_id)

    def is_connected(self, participant_id: str) -> bool:
        with self._lock:
            return participant_id in self._outboxes

    def participants(self) -> list[str]:
        with self._lock:
            return list(self._outboxes)

    def send(self, recipient_id: str, message: dict[str, Any]) -> None:
        with self._lock:
            outbox = self._outboxes.get(recipient_id)
            if outbox is not None:
                outbox.append(message)
        if outbox is None:
            logger.warning(
                "send_to_unknown_participant",
                recipient_id=recipient_id,
                event_name=message.get("event"),
            )

    def broadcast(self, message: dict[str, Any]) -> None:
        with self._lock:
            for outbox in self._outboxes.values():
                outbox.append(message)

    def drain(self, participant_id: str) -> list[dict[str, Any]]:
        with self._lock:
            outbox = self._outboxes.get(participant_id)
            if outbox is None:
                raise ParticipantNotFoundError(f"Participant {participant_id} is not connected.")
            messages = list(outbox)
            outbox.clear()
        return messages


__all__ = [
    "MessageBus",
    "ParticipantExistsError",
    "ParticipantNotFoundError",
    "TransportError",
]
