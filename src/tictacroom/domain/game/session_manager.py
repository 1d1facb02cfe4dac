from __future__ import annotations

import random
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List, Protocol, Tuple

import structlog

from tictacroom.domain.game.board import (
    FIRST_MOVER,
    Board,
    GameResult,
    GridBoard,
    Mark,
    board_layout,
    winning_mark,
)
from tictacroom.domain.game.protocol import (
    BoardLayoutRequest,
    Command,
    JoinCommand,
    LeaveCommand,
    MoveCommand,
    OutboundMessage,
    UnknownCommand,
    board_layout_event,
    endgame_event,
    error_event,
    joined_event,
    moved_event,
    parse_command,
)

logger = structlog.get_logger("tictacroom.session")


class SessionStatus(str, Enum):
    empty = "empty"
    waiting_for_second = "waiting_for_second"
    active = "active"


@dataclass(frozen=True)
class Player:
    identity: str
    display_name: str
    mark: Mark | None = None


@dataclass(frozen=True)
class Session:
    """Seat and turn state of the single room."""

    slot_a: Player | None = None
    slot_b: Player | None = None
    current_turn: Mark | None = None

    @property
    def status(self) -> SessionStatus:
        seated = len(self.players)
        if seated == 2:
            return SessionStatus.active
        if seated == 1:
            return SessionStatus.waiting_for_second
        return SessionStatus.empty

    @property
    def players(self) -> tuple[Player, ...]:
        return tuple(player for player in (self.slot_a, self.slot_b) if player is not None)

    def seat_of(self, identity: str) -> Player | None:
        for player in self.players:
            if player.identity == identity:
                return player
        return None


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


class SessionError(RuntimeError):
    """Base class for protocol errors reported back to the sender."""

    code: str = "session_error"


class DuplicateJoinError(SessionError):
    code = "duplicate_join"


class RoomFullError(SessionError):
    code = "room_full"


class NotAPlayerError(SessionError):
    code = "not_a_player"


class OutOfTurnError(SessionError):
    code = "out_of_turn"


class IllegalMoveError(SessionError):
    code = "illegal_move"


Outcome = Tuple[Session, List[OutboundMessage]]


def handle(
    session: Session,
    board: Board,
    sender_id: str,
    command: Command,
    rng: RandomSource,
) -> Outcome:
    """Apply one inbound command and return the next session plus outbound messages.

    Domain errors never escape: they become a single private ``error`` event
    and the session is returned unchanged.
    """
    log = logger.bind(sender_id=sender_id, status=session.status.value)
    try:
        if isinstance(command, JoinCommand):
            return _join(session, board, sender_id, command, rng, log)
        if isinstance(command, LeaveCommand):
            return _leave(session, board, sender_id, log)
        if isinstance(command, MoveCommand):
            return _move(session, board, sender_id, command, log)
        if isinstance(command, BoardLayoutRequest):
            return session, [OutboundMessage(board_layout_event(board_layout(board)), recipient=sender_id)]
    except SessionError as exc:
        log.warning("command_rejected", code=exc.code, detail=str(exc))
        return session, [OutboundMessage(error_event(exc.code, str(exc)), recipient=sender_id)]

    unknown = command.command if isinstance(command, UnknownCommand) else command
    log.info("unknown_command_ignored", command=unknown)
    return session, []


def _join(
    session: Session,
    board: Board,
    sender_id: str,
    command: JoinCommand,
    rng: RandomSource,
    log: Any,
) -> Outcome:
    seated = session.seat_of(sender_id)
    if seated is not None:
        raise DuplicateJoinError(
            f"You have already joined as {seated.display_name!r}. "
            "You aren't allowed to play against yourself."
        )

    player = Player(identity=sender_id, display_name=command.name)
    if session.slot_a is None:
        session = replace(session, slot_a=player)
    elif session.slot_b is None:
        session = replace(session, slot_b=player)
    else:
        raise RoomFullError("Game is full.")

    log.info("player_joined", name=command.name, seated=len(session.players))
    if session.status is SessionStatus.active:
        return _start_game(session, board, rng, log)
    return session, []


def _start_game(session: Session, board: Board, rng: RandomSource, log: Any) -> Outcome:
    assert session.slot_a is not None and session.slot_b is not None
    board.reset()

    # Fair coin, independent of join order.
    mark_a = Mark.X if rng.randrange(2) == 0 else Mark.O
    slot_a = replace(session.slot_a, mark=mark_a)
    slot_b = replace(session.slot_b, mark=mark_a.other)
    session = Session(slot_a=slot_a, slot_b=slot_b, current_turn=FIRST_MOVER)

    log.info(
        "game_started",
        first=slot_a.display_name if slot_a.mark is FIRST_MOVER else slot_b.display_name,
        slot_a_mark=mark_a.value,
    )
    return session, [
        OutboundMessage(joined_event(mark_a, slot_b.display_name), recipient=slot_a.identity),
        OutboundMessage(joined_event(mark_a.other, slot_a.display_name), recipient=slot_b.identity),
    ]


def _leave(session: Session, board: Board, sender_id: str, log: Any) -> Outcome:
    player = session.seat_of(sender_id)
    if player is None:
        log.info("leave_from_unseated_sender")
        return session, []

    if session.status is not SessionStatus.active:
        log.info("player_left", name=player.display_name)
        return Session(), []

    outbound: list[OutboundMessage] = []
    if board.result() is GameResult.pending:
        board.set_abandoned()
        outbound.append(OutboundMessage(endgame_event(GameResult.abandoned.value)))
    log.info("game_abandoned", name=player.display_name)
    return Session(), outbound


def _move(
    session: Session,
    board: Board,
    sender_id: str,
    command: MoveCommand,
    log: Any,
) -> Outcome:
    if session.status is not SessionStatus.active:
        log.info("move_ignored_without_game")
        return session, []

    player = session.seat_of(sender_id)
    if player is None or player.mark is None:
        raise NotAPlayerError("You are not playing the game.")
    if player.mark is not session.current_turn:
        raise OutOfTurnError("It's not your turn.")
    if not board.place(player.mark, command.row, command.column):
        raise IllegalMoveError("Your last move was invalid.")

    game_over = board.is_game_over()
    outbound = [
        OutboundMessage(moved_event(player.mark, command.row, command.column, game_over)),
    ]
    log.info(
        "move_accepted",
        mark=player.mark.value,
        row=command.row,
        column=command.column,
        game_over=game_over,
    )

    if game_over:
        result = board.result()
        outbound.append(
            OutboundMessage(endgame_event(result.value, board.winning_line(), winning_mark(board)))
        )
        log.info("game_finished", result=result.value)
        return Session(), outbound

    return replace(session, current_turn=session.current_turn.other), outbound


class SessionManager:
    """Own the room's session and board, serialising every inbound message."""

    def __init__(self, board: Board | None = None, rng: RandomSource | None = None) -> None:
        self._board = board if board is not None else GridBoard()
        self._rng = rng if rng is not None else random.Random()
        self._session = Session()
        self._lock = threading.Lock()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def board(self) -> Board:
        return self._board

    def handle_message(self, sender_id: str, data: Any) -> list[OutboundMessage]:
        return self.dispatch(sender_id, parse_command(data))

    def dispatch(self, sender_id: str, command: Command) -> list[OutboundMessage]:
        with self._lock:
            self._session, outbound = handle(self._session, self._board, sender_id, command, self._rng)
        return outbound

    def participant_gone(self, sender_id: str) -> list[OutboundMessage]:
        """Treat a dropped connection as a leave."""
        return self.dispatch(sender_id, LeaveCommand())

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            session = self._session
            layout = board_layout(self._board)
            result = self._board.result()
        return {
            "status": session.status.value,
            "currentTurn": session.current_turn.value if session.current_turn else None,
            "players": [
                {"name": player.display_name, "mark": player.mark.value if player.mark else None}
                for player in session.players
            ],
            "board": layout,
            "result": result.value,
        }


__all__ = [
    "DuplicateJoinError",
    "IllegalMoveError",
    "NotAPlayerError",
    "OutOfTurnError",
    "Player",
    "RandomSource",
    "RoomFullError",
    "Session",
    "SessionError",
    "SessionManager",
    "SessionStatus",
    "handle",
]
