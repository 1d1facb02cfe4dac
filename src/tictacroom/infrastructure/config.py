from __future__ import annotations

from dataclasses import dataclass, field
import os


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Centralized runtime configuration for the room server."""

    host: str = "127.0.0.1"
    port: int = 8008
    flask_env: str = "production"
    random_seed: int | None = None
    exit_when_empty: bool = True
    additional: dict[str, str] = field(default_factory=dict)


def load_config(prefix: str = "") -> AppConfig:
    """Load application configuration from environment variables."""

    def _get_env(key: str, default: str = "") -> str:
        env_key = f"{prefix}{key}"
        return os.getenv(env_key, default)

    def _parse_int(raw: str, fallback: int | None) -> int | None:
        try:
            return int(raw)
        except (TypeError, ValueError):
            return fallback

    def _parse_bool(raw: str, fallback: bool) -> bool:
        lowered = raw.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        return fallback

    port = _parse_int(_get_env("ROOM_PORT", "8008"), 8008)
    random_seed = _parse_int(_get_env("ROOM_RANDOM_SEED", ""), None)
    exit_when_empty = _parse_bool(_get_env("ROOM_EXIT_WHEN_EMPTY", "true"), True)

    additional_keys = ("STRUCTLOG_LEVEL",)
    additional: dict[str, str] = {}
    for key in additional_keys:
        value = _get_env(key, "")
        if value:
            additional[key] = value

    return AppConfig(
        host=_get_env("ROOM_HOST", "127.0.0.1"),
        port=port if port is not None else 8008,
        flask_env=_get_env("FLASK_ENV", "production"),
        random_seed=random_seed,
        exit_when_empty=exit_when_empty,
        additional=additional,
    )


__all__ = ["AppConfig", "load_config"]
