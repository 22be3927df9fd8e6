# taggable/infra/serialization.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

# ---------- Encoding (Python -> BSON-friendly) ----------


def to_bson(value: Any) -> Any:
    """Document fields and group values: aware datetimes become naive UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, dict):
        return {k: to_bson(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_bson(v) for v in value]
    return value


# ---------- Decoding (BSON -> Python) ----------


def from_bson_value(value: Any) -> Any:
    """Stored datetimes come back naive; hand them out as UTC-aware."""
    if isinstance(value, datetime):
        return (
            value.replace(tzinfo=timezone.utc)
            if value.tzinfo is None
            else value.astimezone(timezone.utc)
        )
    if isinstance(value, dict):
        return {k: from_bson_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_bson_value(v) for v in value]
    return value
