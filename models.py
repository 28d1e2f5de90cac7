# models.py
import re
from datetime import datetime, timezone

from bson.objectid import ObjectId
from slugify import slugify

from errors import ApiError

ROLES = ("admin", "super_admin")
GALERI_TYPES = ("photo", "video")
LAPORAN_STATUSES = ("pending", "in_progress", "resolved", "closed")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_LENGTHS = {
    "berita": {"title": 200, "summary": 500},
    "galeri": {"title": 200, "description": 500},
    "laporan": {"nama": 100, "phone": 20, "address": 500, "message": 2000},
}


def utcnow():
    return datetime.now(timezone.utc)


def parse_object_id(value):
    if not ObjectId.is_valid(value):
        raise ApiError(400, "Invalid ID format")
    return ObjectId(value)


def make_slug(title):
    return slugify(title, lowercase=True)


def is_filled(value):
    return isinstance(value, str) and value.strip() != ""


def require_fields(data, fields, message="Missing required fields"):
    if not all(is_filled(data.get(field)) for field in fields):
        raise ApiError(400, message)


def check_lengths(resource, values):
    for field, limit in MAX_LENGTHS[resource].items():
        value = values.get(field)
        if isinstance(value, str) and len(value) > limit:
            raise ApiError(400, f"{field} cannot exceed {limit} characters")


def is_valid_email(email):
    return bool(EMAIL_RE.match(email or ""))


# ------------------------------------------ #
# Partial update: "tidak dikirim" != ""      #
# ------------------------------------------ #
class _Missing:
    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


class PartialUpdate:
    """Body PUT yang mencatat field mana yang benar-benar dikirim.

    Nilai yang tidak ada di body disimpan sebagai ``MISSING`` sehingga
    ``{"summary": ""}`` dan body tanpa ``summary`` tetap bisa dibedakan.
    """

    def __init__(self, fields, data):
        self.values = {field: data.get(field, MISSING) for field in fields}

    def provided(self, field):
        return self.values[field] is not MISSING

    def get(self, field):
        return self.values[field]

    def require_bool(self, field):
        if self.provided(field) and not isinstance(self.get(field), bool):
            raise ApiError(400, f"{field} must be a boolean")

    def changes(self, transforms=None, flags=()):
        """Susun dict $set dari field yang dikirim.

        String kosong dan null dilewati seperti perilaku form admin lama;
        field di ``flags`` hanya dipakai bila bernilai boolean.
        """
        transforms = transforms or {}
        update = {}
        for field, value in self.values.items():
            if value is MISSING:
                continue
            if field in flags:
                if isinstance(value, bool):
                    update[field] = value
                continue
            if not value:
                continue
            if not isinstance(value, str):
                raise ApiError(400, f"Invalid value for {field}")
            convert = transforms.get(field)
            update[field] = convert(value) if convert else value
        return update
