from __future__ import annotations

from typing import Callable

import pytest

from tictacroom.domain.game import GridBoard, Mark, SessionManager
from tictacroom.infrastructure.config import AppConfig
from tictacroom.infrastructure.transport import MessageBus, RoomHost
from tictacroom.interface.http.app import create_app


class FixedCoin:
    """Random source whose coin always lands on the same face."""

    def __init__(self, face: int = 0) -> None:
        self.face = face
        self.calls = 0

    def randrange(self, stop: int) -> int:
        self.calls += 1
        return self.face % stop


class RecordingBoard(GridBoard):
    """GridBoard that remembers every placement attempt."""

    def __init__(self) -> None:
        self.placements: list[tuple[Mark, object, object]] = []
        self.resets = 0
        super().__init__()
        self.resets = 0

    def reset(self) -> None:
        self.resets += 1
        super().reset()

    def place(self, mark: Mark, row, column) -> bool:
        self.placements.append((mark, row, column))
        return super().place(mark, row, column)


@pytest.fixture(scope="session")
def app_config() -> AppConfig:
    """Provide a configuration tuned for isolated tests."""
    return AppConfig(
        flask_env="test",
        random_seed=7,
        exit_when_empty=False,
        additional={"STRUCTLOG_LEVEL": "WARNING"},
    )


@pytest.fixture
def coin() -> FixedCoin:
    # Face 0 seats the first joiner as X.
    return FixedCoin(0)


@pytest.fixture
def board() -> RecordingBoard:
    return RecordingBoard()


@pytest.fixture
def manager(board: RecordingBoard, coin: FixedCoin) -> SessionManager:
    return SessionManager(board, coin)


@pytest.fixture
def room_host(manager: SessionManager) -> RoomHost:
    return RoomHost(MessageBus(), manager)


@pytest.fixture
def app(app_config: AppConfig, room_host: RoomHost):
    flask_app = create_app(app_config, room_host=room_host)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def connect(client) -> Callable[[str], str]:
    def _connect(participant_id: str) -> str:
        response = client.post("/api/v1/room/participants", json={"participantId": participant_id})
        assert response.status_code == 201
        return participant_id

    return _connect
