# queries.py
"""Kontrak list endpoint berita/galeri/laporan.

Semua list menerima ``page``, ``limit``, ``search`` dan satu filter
kesetaraan per resource. Filter, pencarian dan pagination dikerjakan oleh
MongoDB; modul ini hanya menyusun query dan amplop pagination.
"""
import re
from math import ceil

from pymongo import DESCENDING

from models import GALERI_TYPES, LAPORAN_STATUSES

DEFAULT_PAGE = 1
# batas int32 agar skip/limit selalu bisa di-encode driver
MAX_INT = 2 ** 31 - 1


def parse_positive_int(value, default):
    """int(value) bila >= 1 (maks. MAX_INT), selain itu default."""
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    return min(number, MAX_INT)


class ListParams:
    def __init__(self, page, limit, search, filters):
        self.page = page
        self.limit = limit
        self.search = search
        self.filters = filters

    @property
    def skip(self):
        return (self.page - 1) * self.limit


class ListSpec:
    """Deskripsi list satu koleksi: field pencarian dan filter yang sah.

    ``allowed_filters`` memetakan nama parameter ke nilai yang diterima;
    nilai lain diabaikan. ``coerce`` mengubah nilai query string menjadi
    nilai yang disimpan (mis. "true" -> True untuk ``published``).
    """

    def __init__(self, search_fields, allowed_filters=None, default_limit=10, coerce=None):
        self.search_fields = search_fields
        self.allowed_filters = allowed_filters or {}
        self.default_limit = default_limit
        self.coerce = coerce or {}

    def parse(self, args, max_limit=None, base_filters=None):
        page = parse_positive_int(args.get("page"), DEFAULT_PAGE)
        limit = parse_positive_int(args.get("limit"), self.default_limit)
        if max_limit:
            limit = min(limit, max_limit)

        search = (args.get("search") or "").strip()

        filters = {}
        for name, allowed in self.allowed_filters.items():
            value = args.get(name)
            if value is None or value not in allowed:
                continue
            convert = self.coerce.get(name)
            filters[name] = convert(value) if convert else value
        # filter paksa (mis. published=True di endpoint publik) menang
        filters.update(base_filters or {})

        return ListParams(page, limit, search, filters)

    def build_query(self, params):
        query = dict(params.filters)
        if params.search:
            pattern = re.escape(params.search)
            query["$or"] = [
                {field: {"$regex": pattern, "$options": "i"}}
                for field in self.search_fields
            ]
        return query


def build_pagination(page, limit, total):
    total_pages = ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def run_list(collection, spec, params):
    """Jalankan query list, kembalikan (dokumen, pagination)."""
    query = spec.build_query(params)
    docs = list(
        collection.find(query)
        .sort("created_at", DESCENDING)
        .skip(params.skip)
        .limit(params.limit)
    )
    total = collection.count_documents(query)
    return docs, build_pagination(params.page, params.limit, total)


def published_flag(value):
    return value == "true"


BERITA_LIST = ListSpec(
    search_fields=["title", "summary"],
    allowed_filters={"published": ("true", "false")},
    default_limit=10,
    coerce={"published": published_flag},
)

GALERI_LIST = ListSpec(
    search_fields=["title", "description"],
    allowed_filters={"type": GALERI_TYPES, "published": ("true", "false")},
    default_limit=12,
    coerce={"published": published_flag},
)

LAPORAN_LIST = ListSpec(
    search_fields=["nama", "email", "message"],
    allowed_filters={"status": LAPORAN_STATUSES},
    default_limit=10,
)
