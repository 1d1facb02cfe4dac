from .board import (
    Board,
    CellCode,
    FIRST_MOVER,
    GameResult,
    GridBoard,
    Mark,
    WinningLine,
    board_layout,
)
from .protocol import OutboundMessage, parse_command
from .session_manager import (
    DuplicateJoinError,
    IllegalMoveError,
    NotAPlayerError,
    OutOfTurnError,
    Player,
    RoomFullError,
    Session,
    SessionError,
    SessionManager,
    SessionStatus,
    handle,
)

__all__ = [
    "Board",
    "CellCode",
    "DuplicateJoinError",
    "FIRST_MOVER",
    "GameResult",
    "GridBoard",
    "IllegalMoveError",
    "Mark",
    "NotAPlayerError",
    "OutOfTurnError",
    "OutboundMessage",
    "Player",
    "RoomFullError",
    "Session",
    "SessionError",
    "SessionManager",
    "SessionStatus",
    "WinningLine",
    "board_layout",
    "handle",
    "parse_command",
]
