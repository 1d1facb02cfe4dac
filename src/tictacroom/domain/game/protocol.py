from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from tictacroom.domain.game.board import Mark, WinningLine


@dataclass(frozen=True)
class JoinCommand:
    name: str


@dataclass(frozen=True)
class LeaveCommand:
    pass


@dataclass(frozen=True)
class MoveCommand:
    row: Any
    column: Any


@dataclass(frozen=True)
class BoardLayoutRequest:
    pass


@dataclass(frozen=True)
class UnknownCommand:
    command: Any


Command = Union[JoinCommand, LeaveCommand, MoveCommand, BoardLayoutRequest, UnknownCommand]


@dataclass(frozen=True)
class OutboundMessage:
    """An event payload addressed to one participant, or to all when recipient is None."""

    payload: dict[str, Any]
    recipient: str | None = None

    @property
    def is_broadcast(self) -> bool:
        return self.recipient is None


def parse_command(data: Any) -> Command:
    """Decode an inbound JSON object into a command value."""
    if not isinstance(data, dict):
        return UnknownCommand(command=None)

    command = data.get("command")
    if command == "join":
        name = data.get("name")
        return JoinCommand(name=name if isinstance(name, str) else "")
    if command == "leave":
        return LeaveCommand()
    if command == "move":
        # Coordinates are passed through untouched; the board decides legality.
        return MoveCommand(row=data.get("row"), column=data.get("column"))
    if command == "board_layout_request":
        return BoardLayoutRequest()
    return UnknownCommand(command=command)


def joined_event(mark: Mark, opponent: str) -> dict[str, Any]:
    return {"event": "joined", "player": mark.value, "opponent": opponent}


def moved_event(mark: Mark, row: int, column: int, game_over: bool) -> dict[str, Any]:
    return {
        "event": "moved",
        "player": mark.value,
        "row": row,
        "column": column,
        "game_over": game_over,
    }


def endgame_event(
    end_state: str,
    winning_location: WinningLine | None = None,
    winner: Mark | None = None,
) -> dict[str, Any]:
    return {
        "event": "endgame",
        "end_state": end_state,
        "winning_location": int(winning_location) if winning_location is not None else None,
        "winner": winner.value if winner is not None else None,
    }


def board_layout_event(cells: list[int]) -> dict[str, Any]:
    return {"event": "board_layout_response", "board": list(cells)}


def error_event(code: str, message: str) -> dict[str, Any]:
    return {"event": "error", "code": code, "message": message}


__all__ = [
    "BoardLayoutRequest",
    "Command",
    "JoinCommand",
    "LeaveCommand",
    "MoveCommand",
    "OutboundMessage",
    "UnknownCommand",
    "board_layout_event",
    "endgame_event",
    "error_event",
    "joined_event",
    "moved_event",
    "parse_command",
]
