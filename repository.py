# repository.py
import logging

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from errors import ApiError
from models import (
    GALERI_TYPES,
    LAPORAN_STATUSES,
    ROLES,
    PartialUpdate,
    check_lengths,
    is_valid_email,
    make_slug,
    require_fields,
    utcnow,
)
from queries import BERITA_LIST, GALERI_LIST, LAPORAN_LIST, run_list
from sanitizer import sanitize_html
from security import hash_password

logger = logging.getLogger(__name__)

SLUG_CONFLICT_MESSAGE = "Berita dengan judul yang sama sudah ada"


def _strip(value):
    return value.strip()


class Repository:
    list_spec = None

    def __init__(self, collection):
        self.collection = collection

    def list(self, params):
        return run_list(self.collection, self.list_spec, params)

    def get(self, obj_id):
        return self.collection.find_one({"_id": obj_id})

    def delete(self, obj_id):
        return self.collection.find_one_and_delete({"_id": obj_id}) is not None

    def _apply(self, obj_id, changes):
        changes["updated_at"] = utcnow()
        return self.collection.find_one_and_update(
            {"_id": obj_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )

    def _insert(self, doc):
        now = utcnow()
        doc["created_at"] = now
        doc["updated_at"] = now
        inserted = self.collection.insert_one(doc)
        doc["_id"] = inserted.inserted_id
        return doc


# --------------------------------- #
# BERITA                            #
# --------------------------------- #
class BeritaRepository(Repository):
    list_spec = BERITA_LIST
    update_fields = ("title", "summary", "content", "image_url", "published")

    def stats(self):
        published = self.collection.count_documents({"published": True})
        unpublished = self.collection.count_documents({"published": False})
        return {
            "published": published,
            "unpublished": unpublished,
            "total": published + unpublished,
        }

    def latest_published(self, limit=3):
        return list(
            self.collection.find({"published": True})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )

    def get_published_by_slug(self, slug):
        return self.collection.find_one({"slug": slug, "published": True})

    def increment_views(self, obj_id):
        self.collection.update_one({"_id": obj_id}, {"$inc": {"views": 1}})

    def create(self, data):
        require_fields(data, ("title", "summary", "content", "image_url"))
        title = data["title"].strip()
        check_lengths("berita", {"title": title, "summary": data["summary"]})

        slug = make_slug(title)
        if not slug:
            raise ApiError(400, "Judul tidak dapat dijadikan slug")

        published = data.get("published", True)
        if not isinstance(published, bool):
            raise ApiError(400, "published must be a boolean")

        if self.collection.find_one({"slug": slug}, {"_id": 1}):
            raise ApiError(409, SLUG_CONFLICT_MESSAGE)

        doc = {
            "title": title,
            "slug": slug,
            "summary": sanitize_html(data["summary"]),
            "content": sanitize_html(data["content"]),
            "image_url": data["image_url"].strip(),
            "published": published,
            "views": 0,
        }
        try:
            return self._insert(doc)
        except DuplicateKeyError:
            # dua create bersamaan lolos find_one; unique index yang menolak
            logger.info("Duplicate berita slug rejected: %s", slug)
            raise ApiError(409, SLUG_CONFLICT_MESSAGE)

    def update(self, obj_id, data):
        # slug sengaja tidak ikut berubah saat judul diedit
        patch = PartialUpdate(self.update_fields, data)
        patch.require_bool("published")
        changes = patch.changes(
            transforms={
                "title": _strip,
                "summary": sanitize_html,
                "content": sanitize_html,
                "image_url": _strip,
            },
            flags=("published",),
        )
        check_lengths("berita", changes)
        return self._apply(obj_id, changes)


# --------------------------------- #
# GALERI                            #
# --------------------------------- #
class GaleriRepository(Repository):
    list_spec = GALERI_LIST
    update_fields = ("title", "description", "image_url", "type", "published")

    def stats(self):
        count = self.collection.count_documents
        published = count({"published": True})
        unpublished = count({"published": False})
        return {
            "photo": count({"type": "photo", "published": True}),
            "video": count({"type": "video", "published": True}),
            "published": published,
            "unpublished": unpublished,
            "total": published + unpublished,
        }

    def latest_published(self, limit=6):
        return list(
            self.collection.find({"published": True})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )

    def create(self, data):
        require_fields(data, ("title", "description", "image_url"))
        title = data["title"].strip()
        check_lengths("galeri", {"title": title, "description": data["description"]})

        item_type = data.get("type", "photo")
        if item_type not in GALERI_TYPES:
            raise ApiError(400, "Invalid type. Must be photo or video")

        published = data.get("published", True)
        if not isinstance(published, bool):
            raise ApiError(400, "published must be a boolean")

        return self._insert({
            "title": title,
            "description": sanitize_html(data["description"]),
            "image_url": data["image_url"].strip(),
            "type": item_type,
            "published": published,
        })

    def update(self, obj_id, data):
        patch = PartialUpdate(self.update_fields, data)
        patch.require_bool("published")
        item_type = patch.get("type")
        if item_type and item_type not in GALERI_TYPES:
            raise ApiError(400, "Invalid type. Must be photo or video")

        changes = patch.changes(
            transforms={
                "title": _strip,
                "description": sanitize_html,
                "image_url": _strip,
            },
            flags=("published",),
        )
        check_lengths("galeri", changes)
        return self._apply(obj_id, changes)


# --------------------------------- #
# LAPORAN                           #
# --------------------------------- #
class LaporanRepository(Repository):
    list_spec = LAPORAN_LIST

    def stats(self):
        status_stats = {status: 0 for status in LAPORAN_STATUSES}
        pipeline = [{"$group": {"_id": "$status", "count": {"$sum": 1}}}]
        for row in self.collection.aggregate(pipeline):
            if row["_id"] in status_stats:
                status_stats[row["_id"]] = row["count"]
        return status_stats

    def create(self, data):
        require_fields(
            data,
            ("nama", "email", "phone", "address", "message"),
            message="All fields are required",
        )
        email = data["email"].strip().lower()
        if not is_valid_email(email):
            raise ApiError(400, "Invalid email format")

        doc = {
            "nama": data["nama"].strip(),
            "email": email,
            "phone": data["phone"].strip(),
            "address": sanitize_html(data["address"]),
            "message": sanitize_html(data["message"]),
            # status dari body diabaikan
            "status": "pending",
        }
        check_lengths("laporan", doc)
        return self._insert(doc)

    def set_status(self, obj_id, status):
        if status not in LAPORAN_STATUSES:
            raise ApiError(400, "Invalid status. Must be one of: " + ", ".join(LAPORAN_STATUSES))
        return self._apply(obj_id, {"status": status})


# --------------------------------- #
# USERS                             #
# --------------------------------- #
class UserRepository(Repository):

    def find_by_username(self, username):
        return self.collection.find_one({"username": username})

    def create(self, username, password, role="admin", email=None):
        username = (username or "").strip()
        if not 3 <= len(username) <= 50:
            raise ApiError(400, "Username must be 3-50 characters")
        if not password:
            raise ApiError(400, "Password is required")
        if role not in ROLES:
            raise ApiError(400, "Invalid role. Must be one of: " + ", ".join(ROLES))

        doc = {
            "username": username,
            "password_hash": hash_password(password),
            "role": role,
        }
        if email:
            doc["email"] = email.strip().lower()
        try:
            return self._insert(doc)
        except DuplicateKeyError:
            raise ApiError(409, f"Username '{username}' sudah digunakan")

    def touch_login(self, obj_id):
        self.collection.update_one({"_id": obj_id}, {"$set": {"last_login": utcnow()}})


def berita_repo(store):
    return BeritaRepository(store.berita)


def galeri_repo(store):
    return GaleriRepository(store.galeri)


def laporan_repo(store):
    return LaporanRepository(store.laporan)


def user_repo(store):
    return UserRepository(store.users)
