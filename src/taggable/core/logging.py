from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from taggable.infra.settings import Settings, load_settings

_CONFIGURED = False


class JsonFormatter(logging.Formatter):
    """One JSON object per record, timestamped in UTC."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        data: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def configure_logging(settings: Optional[Settings] = None, *, level: int = logging.INFO) -> None:
    """Configure root logging handlers once per process."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = settings or load_settings()
    log_dir = Path(settings.log_dir) if settings.log_dir else Path.cwd() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    if settings.log_format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    file_handler = logging.FileHandler(log_dir / "taggable.log", mode="a", encoding="utf-8")
    stream_handler = logging.StreamHandler()
    file_handler.setFormatter(formatter)
    stream_handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[file_handler, stream_handler],
        force=True,
    )
    # driver heartbeat chatter
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    _CONFIGURED = True


__all__ = ["JsonFormatter", "configure_logging"]
