from __future__ import annotations

import random

from flask import Flask

from tictacroom.domain.game import GridBoard, SessionManager
from tictacroom.infrastructure.config import AppConfig, load_config
from tictacroom.infrastructure.transport import MessageBus, RoomHost
from tictacroom.interface.http.room_routes import room_bp
from tictacroom.interface.telemetry.logging import get_logger, setup_logging


def create_app(config: AppConfig | None = None, room_host: RoomHost | None = None) -> Flask:
    """Instantiate the Flask application hosting a single room."""
    cfg = config or load_config()

    setup_logging(
        cfg.additional.get("STRUCTLOG_LEVEL", "INFO"),
        console=cfg.flask_env == "development",
    )
    logger = get_logger("tictacroom.app")

    app = Flask(__name__)
    app.config.update(
        ENV=cfg.flask_env,
        APP_CONFIG=cfg,
        ROOM_EXIT_WHEN_EMPTY=cfg.exit_when_empty,
    )

    if room_host is None:
        manager = SessionManager(GridBoard(), random.Random(cfg.random_seed))
        room_host = RoomHost(MessageBus(), manager)
    app.extensions["room_host"] = room_host

    app.register_blueprint(room_bp, url_prefix="/api/v1/room")

    @app.get("/healthz")
    def healthcheck():
        return {"status": "ok"}, 200

    logger.info(
        "flask_app_initialized",
        env=cfg.flask_env,
        seeded=cfg.random_seed is not None,
    )
    return app


__all__ = ["create_app"]
