# taggable/infra/db.py
from __future__ import annotations

import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from taggable.infra.settings import Settings, load_settings

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient[Any]] = None
_settings: Optional[Settings] = None


def configure(settings: Settings) -> None:
    """Use ``settings`` for the next client; drops a client built from older ones."""
    global _client, _settings
    if _client is not None:
        _client.close()
        _client = None
    _settings = settings


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_client() -> AsyncIOMotorClient[Any]:
    """Return a cached AsyncIOMotorClient (lazy init)."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = AsyncIOMotorClient(
            settings.mongodb_uri,
            appname=settings.appname,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
            socketTimeoutMS=settings.op_timeout_ms,
            connectTimeoutMS=settings.op_timeout_ms,
            uuidRepresentation="standard",
        )
    return _client


def get_db(name: str | None = None) -> AsyncIOMotorDatabase[Any]:
    return get_client()[name or get_settings().db_name]


async def ping() -> bool:
    try:
        # admin DB per official examples
        await get_client().admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("Mongo ping failed: %s", e)
        return False


async def close_client() -> None:
    """Close the cached client (useful for app shutdown / tests)."""
    global _client
    if _client is not None:
        _client.close()
        _client = None
