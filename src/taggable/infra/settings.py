from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the tag aggregation engine."""

    mongodb_uri: str = "mongodb://localhost:27017"
    db_name: str = "taggable"
    appname: str = "taggable"
    op_timeout_ms: int = 5000
    server_selection_timeout_ms: int = 5000
    log_dir: Optional[str] = None
    log_format: str = "text"


def load_settings() -> Settings:
    """Construct Settings from environment variables."""
    log_format = _env_str("LOG_FORMAT", "text").lower()
    return Settings(
        mongodb_uri=_env_str("MONGODB_URI", Settings.mongodb_uri),
        db_name=_env_str("DB_NAME", Settings.db_name),
        appname=_env_str("MONGO_APPNAME", Settings.appname),
        op_timeout_ms=_env_int("MONGO_OP_TIMEOUT_MS", Settings.op_timeout_ms),
        server_selection_timeout_ms=_env_int(
            "MONGO_SERVER_SELECTION_TIMEOUT_MS", Settings.server_selection_timeout_ms
        ),
        log_dir=os.getenv("LOG_DIR") or None,
        log_format="json" if log_format == "json" else "text",
    )


__all__ = ["Settings", "load_settings"]
