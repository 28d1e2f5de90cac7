"""
Tests for the MongoDB store: client options and index creation at startup.
"""
import mongomock

import database
from app import create_app
from config import Config, TestingConfig
from database import Store


class SkipIndexConfig(TestingConfig):
    MONGODB_ENSURE_INDEXES = False


def test_client_is_timezone_aware(monkeypatch):
    captured = {}

    def fake_client(uri, **kwargs):
        captured["uri"] = uri
        captured.update(kwargs)
        return mongomock.MongoClient()

    monkeypatch.setattr(database, "MongoClient", fake_client)
    config = {key: getattr(Config, key) for key in dir(Config) if key.isupper()}

    store = Store.from_config(config)

    assert captured["tz_aware"] is True
    assert captured["maxPoolSize"] == 10
    assert store.db.name == Config.DB_NAME


def test_create_app_builds_unique_indexes(store):
    berita_keys = [info["key"] for info in store.berita.index_information().values()]
    user_indexes = store.users.index_information().values()

    assert [("slug", 1)] in berita_keys
    assert any(info["key"] == [("username", 1)] and info.get("unique") for info in user_indexes)


def test_index_creation_can_be_switched_off():
    app = create_app(SkipIndexConfig, mongo_client=mongomock.MongoClient())
    indexes = app.extensions["store"].berita.index_information()
    assert all(info["key"] != [("slug", 1)] for info in indexes.values())
