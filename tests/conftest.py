"""
Shared fixtures: a Flask app wired to a fresh mongomock client per test,
an admin account and helpers to seed berita/galeri/laporan documents.
"""
from datetime import datetime, timedelta, timezone

import mongomock
import pytest

from app import create_app
from config import TestingConfig
from repository import user_repo
from security import create_access_token

ADMIN_PASSWORD = "Rahasia123!"


@pytest.fixture
def app():
    # index dibuat oleh create_app, sama seperti saat produksi
    app = create_app(TestingConfig, mongo_client=mongomock.MongoClient())
    yield app
    app.extensions["store"].close()


@pytest.fixture
def store(app):
    return app.extensions["store"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_user(store):
    return user_repo(store).create("admin", ADMIN_PASSWORD, role="admin")


@pytest.fixture
def admin_token(app, admin_user):
    with app.app_context():
        return create_access_token(admin_user)


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


def _timestamps(offset_minutes):
    created = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=offset_minutes)
    return {"created_at": created, "updated_at": created}


@pytest.fixture
def make_berita(store):
    """Insert berita langsung ke koleksi; urutan created_at naik per panggilan."""
    counter = {"n": 0}

    def _make(title=None, **fields):
        counter["n"] += 1
        n = counter["n"]
        title = title or f"Berita Nomor {n}"
        doc = {
            "title": title,
            "slug": fields.pop("slug", title.lower().replace(" ", "-")),
            "summary": f"Ringkasan {n}",
            "content": f"<p>Isi berita {n}</p>",
            "image_url": f"https://example.com/{n}.jpg",
            "published": True,
            "views": 0,
        }
        doc.update(_timestamps(n))
        doc.update(fields)
        doc["_id"] = store.berita.insert_one(doc).inserted_id
        return doc

    return _make


@pytest.fixture
def make_galeri(store):
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        n = counter["n"]
        doc = {
            "title": f"Foto Kegiatan {n}",
            "description": f"Deskripsi {n}",
            "image_url": f"https://example.com/g{n}.jpg",
            "type": "photo",
            "published": True,
        }
        doc.update(_timestamps(n))
        doc.update(fields)
        doc["_id"] = store.galeri.insert_one(doc).inserted_id
        return doc

    return _make


@pytest.fixture
def make_laporan(store):
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        n = counter["n"]
        doc = {
            "nama": f"Warga {n}",
            "email": f"warga{n}@example.com",
            "phone": "081234567890",
            "address": "Jl. Provinsi No. 1",
            "message": f"Pengaduan ke-{n}",
            "status": "pending",
        }
        doc.update(_timestamps(n))
        doc.update(fields)
        doc["_id"] = store.laporan.insert_one(doc).inserted_id
        return doc

    return _make
