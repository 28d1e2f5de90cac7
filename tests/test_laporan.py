"""
Tests for laporan (public complaints):
- public submission, validation and forced pending status
- admin listing with status stats, status changes and deletion
"""
import pytest
from bson.objectid import ObjectId


@pytest.fixture
def laporan_payload():
    return {
        "nama": "Budi Santoso",
        "email": "Budi@Example.com",
        "phone": "081234567890",
        "address": "Jl. Provinsi No. 1, Penajam",
        "message": "Pengurusan izin usaha terlalu lama",
    }


# --- submission ---

def test_submit_laporan(client, laporan_payload, store):
    res = client.post("/api/laporan", json=laporan_payload)
    body = res.get_json()

    assert res.status_code == 201
    assert body["success"] is True
    assert body["message"] == "Laporan berhasil dikirim. Terima kasih atas partisipasi Anda."
    assert set(body["data"]) == {"_id", "nama", "status", "created_at"}
    assert body["data"]["status"] == "pending"

    saved = store.laporan.find_one({"_id": ObjectId(body["data"]["_id"])})
    assert saved["email"] == "budi@example.com"


def test_submitted_status_is_always_pending(client, laporan_payload, store):
    laporan_payload["status"] = "resolved"
    res = client.post("/api/laporan", json=laporan_payload)

    assert res.get_json()["data"]["status"] == "pending"
    assert store.laporan.find_one({})["status"] == "pending"


def test_invalid_email_is_rejected_without_write(client, laporan_payload, store):
    laporan_payload["email"] = "not-an-email"
    res = client.post("/api/laporan", json=laporan_payload)

    assert res.status_code == 400
    assert res.get_json() == {"success": False, "error": "Invalid email format"}
    assert store.laporan.count_documents({}) == 0


@pytest.mark.parametrize("field", ["nama", "email", "phone", "address", "message"])
def test_all_fields_required(client, laporan_payload, store, field):
    del laporan_payload[field]
    res = client.post("/api/laporan", json=laporan_payload)

    assert res.status_code == 400
    assert res.get_json()["error"] == "All fields are required"
    assert store.laporan.count_documents({}) == 0


def test_message_length_limit(client, laporan_payload, store):
    laporan_payload["message"] = "a" * 2001
    res = client.post("/api/laporan", json=laporan_payload)
    assert res.status_code == 400
    assert store.laporan.count_documents({}) == 0


def test_message_is_sanitized(client, laporan_payload, store):
    laporan_payload["message"] = "Tolong <script>steal()</script>diperbaiki"
    client.post("/api/laporan", json=laporan_payload)
    assert store.laporan.find_one({})["message"] == "Tolong diperbaiki"


def test_non_json_body_rejected(client):
    res = client.post("/api/laporan", data="nama=x", content_type="text/plain")
    assert res.status_code == 400


# --- admin ---

def test_admin_list_with_status_stats(client, admin_headers, make_laporan):
    make_laporan()
    make_laporan()
    make_laporan(status="in_progress")
    make_laporan(status="resolved")

    body = client.get("/api/laporan", headers=admin_headers).get_json()

    assert body["pagination"]["total"] == 4
    assert body["stats"] == {"pending": 2, "in_progress": 1, "resolved": 1, "closed": 0}


def test_admin_list_stats_zero_when_empty(client, admin_headers):
    body = client.get("/api/laporan", headers=admin_headers).get_json()
    assert body["data"] == []
    assert body["stats"] == {"pending": 0, "in_progress": 0, "resolved": 0, "closed": 0}


def test_admin_list_status_filter_and_search(client, admin_headers, make_laporan):
    make_laporan(nama="Siti", status="resolved")
    make_laporan(nama="Andi", status="resolved", message="Jalan rusak di desa")
    make_laporan(nama="Rudi", message="Jalan berlubang")

    body = client.get("/api/laporan?status=resolved&search=jalan", headers=admin_headers).get_json()
    assert [item["nama"] for item in body["data"]] == ["Andi"]


def test_admin_get_laporan(client, admin_headers, make_laporan):
    doc = make_laporan()
    res = client.get(f"/api/laporan/{doc['_id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["email"] == doc["email"]


def test_admin_get_missing_laporan(client, admin_headers):
    res = client.get(f"/api/laporan/{ObjectId()}", headers=admin_headers)
    assert res.status_code == 404
    assert res.get_json()["error"] == "Laporan not found"


def test_change_status(client, admin_headers, make_laporan, store):
    doc = make_laporan()

    res = client.put(f"/api/laporan/{doc['_id']}", json={"status": "in_progress"}, headers=admin_headers)
    body = res.get_json()

    assert res.status_code == 200
    assert body["message"] == "Status laporan berhasil diubah menjadi in_progress"
    assert body["data"]["status"] == "in_progress"
    saved = store.laporan.find_one({"_id": doc["_id"]})
    assert saved["updated_at"] > saved["created_at"]


@pytest.mark.parametrize("status", ["done", "", None])
def test_change_status_rejects_unknown_value(client, admin_headers, make_laporan, store, status):
    doc = make_laporan()
    res = client.put(f"/api/laporan/{doc['_id']}", json={"status": status}, headers=admin_headers)

    assert res.status_code == 400
    assert store.laporan.find_one({"_id": doc["_id"]})["status"] == "pending"


def test_change_status_of_missing_laporan(client, admin_headers):
    res = client.put(f"/api/laporan/{ObjectId()}", json={"status": "resolved"}, headers=admin_headers)
    assert res.status_code == 404


def test_delete_laporan(client, admin_headers, make_laporan, store):
    doc = make_laporan()
    res = client.delete(f"/api/laporan/{doc['_id']}", headers=admin_headers)

    assert res.status_code == 200
    assert res.get_json() == {"success": True, "message": "Laporan deleted successfully"}
    assert store.laporan.count_documents({}) == 0
