# database.py
import logging

from flask import current_app
from pymongo import ASCENDING, DESCENDING, TEXT, MongoClient

logger = logging.getLogger(__name__)

EXTENSION_KEY = "store"


class Store:
    """Koneksi MongoDB milik satu aplikasi.

    Dibuat sekali di create_app lalu dipakai ulang oleh semua request;
    MongoClient sendiri sudah thread-safe dan punya connection pool.
    """

    def __init__(self, client, db_name):
        self.client = client
        self.db = client[db_name]

    @classmethod
    def from_config(cls, config):
        client = MongoClient(
            config["MONGODB_URI"],
            maxPoolSize=config["MONGODB_MAX_POOL_SIZE"],
            serverSelectionTimeoutMS=config["MONGODB_TIMEOUT_MS"],
            tz_aware=True,
        )
        logger.info("MongoDB client created for database %s", config["DB_NAME"])
        return cls(client, config["DB_NAME"])

    @property
    def users(self):
        return self.db.users

    @property
    def berita(self):
        return self.db.beritas

    @property
    def galeri(self):
        return self.db.galeris

    @property
    def laporan(self):
        return self.db.laporans

    def ensure_indexes(self, with_text=True):
        self.users.create_index([("username", ASCENDING)], unique=True)
        self.users.create_index([("email", ASCENDING)], unique=True, sparse=True)

        self.berita.create_index([("slug", ASCENDING)], unique=True)
        self.berita.create_index([("published", ASCENDING)])
        self.berita.create_index([("created_at", DESCENDING)])
        if with_text:
            self.berita.create_index([("title", TEXT), ("summary", TEXT), ("content", TEXT)])

        self.galeri.create_index([("published", ASCENDING)])
        self.galeri.create_index([("type", ASCENDING)])
        self.galeri.create_index([("created_at", DESCENDING)])
        if with_text:
            self.galeri.create_index([("title", TEXT), ("description", TEXT)])

        self.laporan.create_index([("status", ASCENDING)])
        self.laporan.create_index([("created_at", DESCENDING)])
        self.laporan.create_index([("email", ASCENDING)])

    def close(self):
        self.client.close()


def init_store(app, client=None):
    if client is None:
        store = Store.from_config(app.config)
    else:
        store = Store(client, app.config["DB_NAME"])
    app.extensions[EXTENSION_KEY] = store
    return store


def get_store():
    return current_app.extensions[EXTENSION_KEY]
