import pytest

from taggable.infra import db as db_module
from taggable.infra.settings import Settings, load_settings


def test_defaults(monkeypatch):
    for name in (
        "MONGODB_URI",
        "DB_NAME",
        "MONGO_APPNAME",
        "MONGO_OP_TIMEOUT_MS",
        "MONGO_SERVER_SELECTION_TIMEOUT_MS",
        "LOG_DIR",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings == Settings()
    assert settings.mongodb_uri == "mongodb://localhost:27017"
    assert settings.db_name == "taggable"


def test_env_overrides_and_bad_ints_fall_back(monkeypatch):
    monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017")
    monkeypatch.setenv("DB_NAME", "tags_it")
    monkeypatch.setenv("MONGO_OP_TIMEOUT_MS", "abc")
    monkeypatch.setenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "-5")
    monkeypatch.setenv("LOG_FORMAT", "JSON")

    settings = load_settings()

    assert settings.mongodb_uri == "mongodb://db:27017"
    assert settings.db_name == "tags_it"
    assert settings.op_timeout_ms == 5000
    assert settings.server_selection_timeout_ms == 5000
    assert settings.log_format == "json"


@pytest.mark.asyncio
async def test_configure_swaps_database_name():
    db_module.configure(Settings(db_name="configured_db"))
    try:
        assert db_module.get_db().name == "configured_db"
        assert db_module.get_db("other").name == "other"
    finally:
        await db_module.close_client()
        db_module.configure(Settings())
