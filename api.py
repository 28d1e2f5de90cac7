# api.py
import logging

from flask import Blueprint, current_app, g, jsonify, request

from database import get_store
from errors import ApiError, api_handler
from extensions import LOGIN_LIMIT_MESSAGE, limiter, login_rate_limit
from models import parse_object_id
from repository import berita_repo, galeri_repo, laporan_repo, user_repo
from security import (
    clear_auth_cookie,
    create_access_token,
    set_auth_cookie,
    verify_password,
)

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ApiError(400, "Invalid JSON body")
    return data


def list_response(docs, pagination, stats=None):
    payload = {"success": True, "data": docs, "pagination": pagination}
    if stats is not None:
        payload["stats"] = stats
    return jsonify(payload)


def admin_params(spec, base_filters=None):
    return spec.parse(
        request.args,
        max_limit=current_app.config["ADMIN_MAX_LIMIT"],
        base_filters=base_filters,
    )


def public_params(spec, base_filters=None):
    return spec.parse(
        request.args,
        max_limit=current_app.config.get("PUBLIC_MAX_LIMIT"),
        base_filters=base_filters,
    )


# ------------------------------- #
# 1) BERITA (PUBLIK)              #
# ------------------------------- #
@api.route("/berita", methods=["GET"])
@api_handler("Failed to fetch berita")
def list_berita():
    repo = berita_repo(get_store())
    params = public_params(repo.list_spec, base_filters={"published": True})
    docs, pagination = repo.list(params)
    return list_response(docs, pagination)


@api.route("/berita/<slug>", methods=["GET"])
@api_handler("Failed to fetch berita")
def get_berita_by_slug(slug):
    repo = berita_repo(get_store())
    berita = repo.get_published_by_slug(slug)
    if not berita:
        raise ApiError(404, "Berita not found")

    # views bertambah setiap kali berita dibaca
    repo.increment_views(berita["_id"])
    return jsonify({"success": True, "data": berita})


# ------------------------------- #
# 2) BERITA (ADMIN)               #
# ------------------------------- #
@api.route("/admin/berita", methods=["GET"])
@api_handler("Failed to fetch berita")
def admin_list_berita():
    repo = berita_repo(get_store())
    docs, pagination = repo.list(admin_params(repo.list_spec))
    return list_response(docs, pagination, stats=repo.stats())


@api.route("/admin/berita", methods=["POST"])
@api_handler("Failed to create berita")
def admin_create_berita():
    berita = berita_repo(get_store()).create(json_body())
    logger.info("Berita created by %s: %s", g.admin["sub"], berita["slug"])
    return jsonify({
        "success": True,
        "data": berita,
        "message": "Berita berhasil dibuat",
    }), 201


@api.route("/admin/berita/<berita_id>", methods=["GET"])
@api_handler("Failed to fetch berita")
def admin_get_berita(berita_id):
    berita = berita_repo(get_store()).get(parse_object_id(berita_id))
    if not berita:
        raise ApiError(404, "Berita not found")
    return jsonify({"success": True, "data": berita})


@api.route("/admin/berita/<berita_id>", methods=["PUT"])
@api_handler("Failed to update berita")
def admin_update_berita(berita_id):
    obj_id = parse_object_id(berita_id)
    updated = berita_repo(get_store()).update(obj_id, json_body())
    if not updated:
        raise ApiError(404, "Berita not found")
    return jsonify({
        "success": True,
        "data": updated,
        "message": "Berita berhasil diperbarui",
    })


@api.route("/admin/berita/<berita_id>", methods=["DELETE"])
@api_handler("Failed to delete berita")
def admin_delete_berita(berita_id):
    obj_id = parse_object_id(berita_id)
    if not berita_repo(get_store()).delete(obj_id):
        raise ApiError(404, "Berita not found")
    logger.info("Berita %s deleted by %s", berita_id, g.admin["sub"])
    return jsonify({"success": True, "message": "Berita berhasil dihapus"})


# ------------------------------- #
# 3) GALERI                       #
# ------------------------------- #
@api.route("/galeri", methods=["GET"])
@api_handler("Failed to fetch galeri")
def list_galeri():
    repo = galeri_repo(get_store())
    params = public_params(repo.list_spec, base_filters={"published": True})
    docs, pagination = repo.list(params)
    return list_response(docs, pagination)


@api.route("/galeri", methods=["POST"])
@api.route("/admin/galeri", methods=["POST"])
@api_handler("Failed to create galeri item")
def create_galeri():
    galeri = galeri_repo(get_store()).create(json_body())
    return jsonify({
        "success": True,
        "data": galeri,
        "message": "Item galeri berhasil dibuat",
    }), 201


@api.route("/admin/galeri", methods=["GET"])
@api_handler("Failed to fetch galeri")
def admin_list_galeri():
    repo = galeri_repo(get_store())
    docs, pagination = repo.list(admin_params(repo.list_spec))
    return list_response(docs, pagination, stats=repo.stats())


@api.route("/admin/galeri/<galeri_id>", methods=["GET"])
@api_handler("Failed to fetch galeri item")
def admin_get_galeri(galeri_id):
    galeri = galeri_repo(get_store()).get(parse_object_id(galeri_id))
    if not galeri:
        raise ApiError(404, "Galeri item not found")
    return jsonify({"success": True, "data": galeri})


@api.route("/admin/galeri/<galeri_id>", methods=["PUT"])
@api_handler("Failed to update galeri item")
def admin_update_galeri(galeri_id):
    obj_id = parse_object_id(galeri_id)
    updated = galeri_repo(get_store()).update(obj_id, json_body())
    if not updated:
        raise ApiError(404, "Galeri item not found")
    return jsonify({
        "success": True,
        "data": updated,
        "message": "Item galeri berhasil diperbarui",
    })


@api.route("/admin/galeri/<galeri_id>", methods=["DELETE"])
@api_handler("Failed to delete galeri item")
def admin_delete_galeri(galeri_id):
    obj_id = parse_object_id(galeri_id)
    if not galeri_repo(get_store()).delete(obj_id):
        raise ApiError(404, "Galeri item not found")
    return jsonify({"success": True, "message": "Item galeri berhasil dihapus"})


# ------------------------------- #
# 4) LAPORAN                      #
# ------------------------------- #
@api.route("/laporan", methods=["POST"])
@api_handler("Failed to submit laporan")
def create_laporan():
    laporan = laporan_repo(get_store()).create(json_body())
    return jsonify({
        "success": True,
        "message": "Laporan berhasil dikirim. Terima kasih atas partisipasi Anda.",
        "data": {
            "_id": laporan["_id"],
            "nama": laporan["nama"],
            "status": laporan["status"],
            "created_at": laporan["created_at"],
        },
    }), 201


@api.route("/laporan", methods=["GET"])
@api_handler("Failed to fetch laporan")
def list_laporan():
    repo = laporan_repo(get_store())
    docs, pagination = repo.list(admin_params(repo.list_spec))
    return list_response(docs, pagination, stats=repo.stats())


@api.route("/laporan/<laporan_id>", methods=["GET"])
@api_handler("Failed to fetch laporan")
def get_laporan(laporan_id):
    laporan = laporan_repo(get_store()).get(parse_object_id(laporan_id))
    if not laporan:
        raise ApiError(404, "Laporan not found")
    return jsonify({"success": True, "data": laporan})


@api.route("/laporan/<laporan_id>", methods=["PUT"])
@api_handler("Failed to update laporan")
def update_laporan_status(laporan_id):
    obj_id = parse_object_id(laporan_id)
    status = json_body().get("status")
    updated = laporan_repo(get_store()).set_status(obj_id, status)
    if not updated:
        raise ApiError(404, "Laporan not found")
    logger.info("Laporan %s set to %s by %s", laporan_id, status, g.admin["sub"])
    return jsonify({
        "success": True,
        "data": updated,
        "message": f"Status laporan berhasil diubah menjadi {status}",
    })


@api.route("/laporan/<laporan_id>", methods=["DELETE"])
@api_handler("Failed to delete laporan")
def delete_laporan(laporan_id):
    obj_id = parse_object_id(laporan_id)
    if not laporan_repo(get_store()).delete(obj_id):
        raise ApiError(404, "Laporan not found")
    return jsonify({"success": True, "message": "Laporan deleted successfully"})


# ------------------------------- #
# 5) AUTH ADMIN                   #
# ------------------------------- #
@api.route("/admin/login", methods=["POST"])
@limiter.limit(login_rate_limit, methods=["POST"], error_message=LOGIN_LIMIT_MESSAGE)
@api_handler("Login gagal")
def admin_login():
    data = json_body()
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    if not username or not password:
        raise ApiError(400, "Username dan password wajib diisi")

    users = user_repo(get_store())
    user = users.find_by_username(username)
    if not user or not verify_password(password, user.get("password_hash")):
        logger.warning("Failed admin login for %r from %s", username, request.remote_addr)
        raise ApiError(401, "Username atau password salah")

    users.touch_login(user["_id"])
    token = create_access_token(user)
    response = jsonify({
        "success": True,
        "data": {"username": user["username"], "role": user.get("role", "admin")},
        "token": token,
        "message": "Login berhasil",
    })
    return set_auth_cookie(response, token)


@api.route("/admin/logout", methods=["POST"])
def admin_logout():
    response = jsonify({"success": True, "message": "Logout berhasil"})
    return clear_auth_cookie(response)


@api.route("/admin/me", methods=["GET"])
def admin_me():
    return jsonify({
        "success": True,
        "data": {"username": g.admin["sub"], "role": g.admin.get("role")},
    })
