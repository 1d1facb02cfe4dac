from __future__ import annotations

import pytest

from tictacroom.domain.game import SessionManager, SessionStatus
from tictacroom.infrastructure.transport import (
    MessageBus,
    ParticipantExistsError,
    ParticipantNotFoundError,
    RoomHost,
)


def test_send_is_unicast_and_broadcast_fans_out() -> None:
    bus = MessageBus()
    bus.connect("alice")
    bus.connect("bob")

    bus.send("alice", {"event": "error"})
    bus.broadcast({"event": "moved"})

    assert bus.drain("alice") == [{"event": "error"}, {"event": "moved"}]
    assert bus.drain("bob") == [{"event": "moved"}]
    assert bus.drain("alice") == []


def test_send_to_unknown_participant_is_dropped() -> None:
    bus = MessageBus()
    bus.send("ghost", {"event": "error"})
    assert bus.participants() == []


def test_connect_twice_and_unknown_disconnect_raise() -> None:
    bus = MessageBus()
    bus.connect("alice")
    with pytest.raises(ParticipantExistsError):
        bus.connect("alice")
    with pytest.raises(ParticipantNotFoundError):
        bus.disconnect("bob")
    with pytest.raises(ParticipantNotFoundError):
        bus.drain("bob")


def test_listeners_see_connect_and_disconnect() -> None:
    bus = MessageBus()
    seen: list[tuple[str, str, int]] = []
    bus.add_listener(
        on_connected=lambda pid: seen.append(("connected", pid, len(bus.participants()))),
        on_disconnected=lambda pid: seen.append(("disconnected", pid, len(bus.participants()))),
    )

    bus.connect("alice")
    bus.disconnect("alice")

    assert seen == [("connected", "alice", 1), ("disconnected", "alice", 0)]


def test_room_host_routes_outbound_messages(room_host: RoomHost) -> None:
    bus = room_host.bus
    for pid in ("alice", "bob", "carol"):
        bus.connect(pid)

    room_host.receive("alice", {"command": "join", "name": "Alice"})
    assert room_host.receive("bob", {"command": "join", "name": "Bob"}) == 2
    room_host.receive("carol", {"command": "join", "name": "Carol"})
    room_host.receive("alice", {"command": "move", "row": 0, "column": 0})

    assert [m["event"] for m in bus.drain("alice")] == ["joined", "moved"]
    assert [m["event"] for m in bus.drain("bob")] == ["joined", "moved"]
    assert [m["event"] for m in bus.drain("carol")] == ["error", "moved"]


def test_disconnect_of_seated_player_abandons_game(room_host: RoomHost) -> None:
    bus = room_host.bus
    bus.connect("alice")
    bus.connect("bob")
    room_host.receive("alice", {"command": "join", "name": "Alice"})
    room_host.receive("bob", {"command": "join", "name": "Bob"})
    bus.drain("alice")

    bus.disconnect("bob")

    assert bus.drain("alice") == [
        {"event": "endgame", "end_state": "abandoned", "winning_location": None, "winner": None},
    ]
    assert room_host.manager.session.status is SessionStatus.empty


def test_room_empty_hook_fires_on_last_disconnect(manager: SessionManager) -> None:
    fired: list[bool] = []
    host = RoomHost(MessageBus(), manager, on_room_empty=lambda: fired.append(True))
    host.bus.connect("alice")
    host.bus.connect("bob")

    host.bus.disconnect("alice")
    assert fired == []
    host.bus.disconnect("bob")
    assert fired == [True]
