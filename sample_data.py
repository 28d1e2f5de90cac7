# sample_data.py
from datetime import datetime, timezone

from sanitizer import sanitize_html

SAMPLE_BERITA = [
    {
        "title": "Peluncuran Sistem Pelayanan Online Terpadu",
        "slug": "peluncuran-sistem-pelayanan-online-terpadu",
        "summary": "DPMPTSP Kabupaten Penajam Paser Utara meluncurkan sistem pelayanan online untuk memudahkan masyarakat dalam mengurus perizinan.",
        "content": "<p>Dalam rangka meningkatkan kualitas pelayanan publik, DPMPTSP Kabupaten Penajam Paser Utara meluncurkan sistem pelayanan online terpadu. Masyarakat dapat mengajukan berbagai jenis perizinan secara online tanpa harus datang ke kantor.</p>",
        "image_url": "https://images.unsplash.com/photo-1560472354-b33ff0c44a43?w=800&h=400&fit=crop",
        "published": True,
        "views": 125,
        "created_at": datetime(2024, 1, 15, tzinfo=timezone.utc),
    },
    {
        "title": "Workshop Peningkatan Kapasitas UMKM",
        "slug": "workshop-peningkatan-kapasitas-umkm",
        "summary": "Kegiatan workshop untuk meningkatkan kapasitas dan daya saing UMKM di Kabupaten Penajam Paser Utara.",
        "content": "<p>Workshop peningkatan kapasitas UMKM diikuti oleh 50 pelaku usaha dan membahas pemasaran digital, manajemen keuangan serta akses program bantuan pemerintah.</p>",
        "image_url": "https://images.unsplash.com/photo-1552664730-d307ca884978?w=800&h=400&fit=crop",
        "published": True,
        "views": 89,
        "created_at": datetime(2024, 1, 10, tzinfo=timezone.utc),
    },
]

SAMPLE_GALERI = [
    {
        "title": "Kantor DPMPTSP Kabupaten Penajam Paser Utara",
        "description": "Gedung kantor DPMPTSP yang modern dan nyaman untuk melayani masyarakat.",
        "image_url": "https://images.unsplash.com/photo-1486406146926-c627a92ad1ab?w=800&h=600&fit=crop",
        "type": "photo",
        "published": True,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    },
    {
        "title": "Pelayanan Terpadu Satu Pintu",
        "description": "Suasana pelayanan di loket PTSP yang efisien dan ramah.",
        "image_url": "https://images.unsplash.com/photo-1497366216548-37526070297c?w=800&h=600&fit=crop",
        "type": "photo",
        "published": True,
        "created_at": datetime(2024, 1, 2, tzinfo=timezone.utc),
    },
]


def load_sample_data(store):
    """Upsert contoh berita (per slug) dan galeri (per judul)."""
    inserted = 0
    for item in SAMPLE_BERITA:
        doc = dict(item, content=sanitize_html(item["content"]), updated_at=item["created_at"])
        result = store.berita.update_one({"slug": doc["slug"]}, {"$setOnInsert": doc}, upsert=True)
        inserted += 1 if result.upserted_id else 0
    for item in SAMPLE_GALERI:
        doc = dict(item, updated_at=item["created_at"])
        result = store.galeri.update_one({"title": doc["title"]}, {"$setOnInsert": doc}, upsert=True)
        inserted += 1 if result.upserted_id else 0
    return inserted
