from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@dataclass(frozen=True)
class Settings:
    # Server
    host: str
    port: int

    # Store
    redis_url: str | None
    store_key: str
    scoreboard_file: Path | None

    # Static assets served at "/"
    static_dir: Path | None

    # Debug
    debug_log_requests: bool


def get_settings() -> Settings:
    host = os.getenv("HOST", "0.0.0.0")
    port = _env_int("PORT", 3000)

    # Without a Redis URL the document lives in a local JSON file instead.
    redis_url = _env_str("REDIS_URL")
    store_key = _env_str("SCOREBOARD_KEY") or "scoreboardData"

    raw_file = _env_str("SCOREBOARD_FILE")
    scoreboard_file = Path(raw_file) if raw_file else None

    raw_static = _env_str("STATIC_DIR")
    static_dir = Path(raw_static) if raw_static else None

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", True)

    return Settings(
        host=host,
        port=port,
        redis_url=redis_url,
        store_key=store_key,
        scoreboard_file=scoreboard_file,
        static_dir=static_dir,
        debug_log_requests=debug_log_requests,
    )
