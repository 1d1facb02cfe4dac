from __future__ import annotations

import random
import threading
from dataclasses import replace

import click
from werkzeug.serving import make_server

from tictacroom.domain.game import GridBoard, SessionManager
from tictacroom.infrastructure.config import load_config
from tictacroom.infrastructure.transport import MessageBus, RoomHost
from tictacroom.interface.http.app import create_app


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--host", type=str, default=None, help="Bind address (defaults to ROOM_HOST).")
@click.option("--port", type=int, default=None, help="Bind port (defaults to ROOM_PORT).")
@click.option("--seed", type=int, default=None, help="Seed for the mark-assignment coin.")
@click.option("--stay-up", is_flag=True, help="Keep serving after the last participant disconnects.")
@click.option("--log-level", type=str, default=None, help="Override STRUCTLOG_LEVEL.")
def main(
    host: str | None,
    port: int | None,
    seed: int | None,
    stay_up: bool,
    log_level: str | None,
) -> None:
    """Serve one tic-tac-toe room over HTTP until it empties."""
    config = load_config()
    additional = dict(config.additional)
    if log_level:
        additional["STRUCTLOG_LEVEL"] = log_level
    config = replace(
        config,
        host=host or config.host,
        port=port if port is not None else config.port,
        random_seed=seed if seed is not None else config.random_seed,
        exit_when_empty=config.exit_when_empty and not stay_up,
        additional=additional,
    )

    room_empty = threading.Event()
    room_host = RoomHost(
        MessageBus(),
        SessionManager(GridBoard(), random.Random(config.random_seed)),
        on_room_empty=room_empty.set if config.exit_when_empty else None,
    )
    app = create_app(config, room_host=room_host)
    server = make_server(config.host, config.port, app, threaded=True)

    worker = threading.Thread(target=server.serve_forever, daemon=True)
    worker.start()
    click.secho(f"Room listening on http://{config.host}:{config.port}", fg="green")

    try:
        # Wake periodically so Ctrl+C is honoured on every platform.
        while not room_empty.wait(timeout=0.5):
            pass
        click.echo("Last participant disconnected; shutting down.", err=True)
    except KeyboardInterrupt:
        click.echo("Interrupted; shutting down.", err=True)
    finally:
        server.shutdown()
        worker.join(timeout=5)


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["main"]
