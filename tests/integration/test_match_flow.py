from __future__ import annotations

ROOM = "/api/v1/room"


def _send(client, pid: str, message) -> None:
    response = client.post(f"{ROOM}/participants/{pid}/messages", json=message)
    assert response.status_code == 202


def _inbox(client, pid: str) -> list[dict]:
    return client.get(f"{ROOM}/participants/{pid}/messages").get_json()["messages"]


def test_full_match_then_rematch(client, connect):
    connect("alice")
    connect("bob")
    _send(client, "alice", {"command": "join", "name": "Alice"})
    _send(client, "bob", {"command": "join", "name": "Bob"})
    assert _inbox(client, "alice")[0]["player"] == "X"
    assert _inbox(client, "bob")[0]["player"] == "O"

    moves = [("alice", 0, 0), ("bob", 1, 0), ("alice", 1, 1), ("bob", 2, 0), ("alice", 2, 2)]
    for pid, row, column in moves:
        _send(client, pid, {"command": "move", "row": row, "column": column})

    events = _inbox(client, "bob")
    assert [event["event"] for event in events] == ["moved"] * 5 + ["endgame"]
    assert [event["game_over"] for event in events[:5]] == [False] * 4 + [True]
    assert events[-1] == {
        "event": "endgame",
        "end_state": "win",
        "winning_location": 6,
        "winner": "X",
    }
    assert _inbox(client, "alice") == events

    _send(client, "bob", {"command": "board_layout_request"})
    layout = _inbox(client, "bob")
    assert layout == [{"event": "board_layout_response", "board": [1, 0, 0, 2, 1, 0, 2, 0, 1]}]

    # Seats were released, so a late move is ignored and both can rejoin.
    _send(client, "bob", {"command": "move", "row": 0, "column": 2})
    assert _inbox(client, "bob") == []

    _send(client, "bob", {"command": "join", "name": "Bob"})
    _send(client, "alice", {"command": "join", "name": "Alice"})
    assert _inbox(client, "bob") == [{"event": "joined", "player": "X", "opponent": "Alice"}]
    assert _inbox(client, "alice") == [{"event": "joined", "player": "O", "opponent": "Bob"}]

    state = client.get(f"{ROOM}/state").get_json()
    assert state["board"] == [0] * 9
    assert state["currentTurn"] == "X"


def test_room_empty_hook_after_everyone_leaves(app, client, connect):
    fired: list[bool] = []
    app.extensions["room_host"].set_room_empty_hook(lambda: fired.append(True))
    connect("alice")
    connect("bob")

    client.delete(f"{ROOM}/participants/alice")
    assert fired == []
    client.delete(f"{ROOM}/participants/bob")
    assert fired == [True]
