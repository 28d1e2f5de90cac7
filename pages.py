# pages.py
import logging
from concurrent.futures import ThreadPoolExecutor

from flask import (
    Blueprint, abort, current_app, flash, g,
    redirect, render_template, request, url_for
)

from database import get_store
from errors import ApiError
from extensions import LOGIN_LIMIT_MESSAGE, limiter, login_rate_limit
from models import GALERI_TYPES
from repository import berita_repo, galeri_repo, laporan_repo, user_repo
from security import (
    InvalidToken,
    clear_auth_cookie,
    create_access_token,
    decode_access_token,
    set_auth_cookie,
    token_from_request,
    verify_password,
)

logger = logging.getLogger(__name__)

pages = Blueprint("pages", __name__)


def has_valid_token():
    token = token_from_request()
    if not token:
        return False
    try:
        decode_access_token(token)
    except InvalidToken:
        return False
    return True


def page_window(page, total_pages):
    """Nomor halaman yang ditampilkan di navigasi (maks. 5)."""
    if total_pages <= 5:
        return list(range(1, total_pages + 1))
    if page <= 3:
        return list(range(1, 6))
    if page >= total_pages - 2:
        return list(range(total_pages - 4, total_pages + 1))
    return list(range(page - 2, page + 3))


# ------------------------------- #
# 1) PUBLIC (FRONTEND) ROUTES     #
# ------------------------------- #
@pages.route("/")
def home():
    store = get_store()
    latest_berita = berita_repo(store).latest_published(3)
    latest_galeri = galeri_repo(store).latest_published(6)
    return render_template(
        "home.html",
        active_page="home",
        berita=latest_berita,
        galeri=latest_galeri,
    )


@pages.route("/berita")
def berita_list():
    repo = berita_repo(get_store())
    params = repo.list_spec.parse(
        request.args,
        max_limit=current_app.config.get("PUBLIC_MAX_LIMIT"),
        base_filters={"published": True},
    )
    articles, pagination = repo.list(params)
    return render_template(
        "berita_list.html",
        active_page="berita",
        articles=articles,
        pagination=pagination,
        pages=page_window(pagination["page"], pagination["totalPages"]),
        search=params.search,
    )


@pages.route("/berita/<slug>")
def berita_detail(slug):
    repo = berita_repo(get_store())
    article = repo.get_published_by_slug(slug)
    if not article:
        abort(404)

    repo.increment_views(article["_id"])
    latest_posts = [
        post for post in repo.latest_published(4) if post["_id"] != article["_id"]
    ][:3]
    return render_template(
        "berita_detail.html",
        active_page="berita",
        article=article,
        latest_posts=latest_posts,
    )


@pages.route("/galeri")
def galeri_list():
    repo = galeri_repo(get_store())
    params = repo.list_spec.parse(
        request.args,
        max_limit=current_app.config.get("PUBLIC_MAX_LIMIT"),
        base_filters={"published": True},
    )
    items, pagination = repo.list(params)
    return render_template(
        "galeri.html",
        active_page="galeri",
        items=items,
        pagination=pagination,
        pages=page_window(pagination["page"], pagination["totalPages"]),
        types=GALERI_TYPES,
        current_type=params.filters.get("type"),
    )


@pages.route("/laporan", methods=["GET", "POST"])
def laporan_form():
    if request.method == "POST":
        form = {
            field: request.form.get(field, "")
            for field in ("nama", "email", "phone", "address", "message")
        }
        try:
            laporan_repo(get_store()).create(form)
        except ApiError as exc:
            flash(exc.message, "danger")
            return render_template("laporan.html", active_page="laporan", form=form), exc.status

        flash("Laporan berhasil dikirim. Terima kasih atas partisipasi Anda.", "success")
        return redirect(url_for("pages.laporan_form"))

    return render_template("laporan.html", active_page="laporan", form={})


# ---------------------------------- #
# 2) ADMIN AUTHENTICATION & PAGES    #
# ---------------------------------- #
@pages.route("/admin", methods=["GET", "POST"])
@limiter.limit(login_rate_limit, methods=["POST"], error_message=LOGIN_LIMIT_MESSAGE)
def admin_login():
    if request.method == "POST":
        username = request.form.get("username", "").strip()
        password = request.form.get("password", "")

        user = user_repo(get_store()).find_by_username(username) if username else None
        if user and verify_password(password, user.get("password_hash")):
            user_repo(get_store()).touch_login(user["_id"])
            response = redirect(url_for("pages.admin_dashboard"))
            return set_auth_cookie(response, create_access_token(user))

        logger.warning("Failed admin login for %r from %s", username, request.remote_addr)
        flash("Username atau password salah.", "danger")
        return redirect(url_for("pages.admin_login"))

    # sudah login ➜ langsung ke dashboard
    if has_valid_token():
        return redirect(url_for("pages.admin_dashboard"))

    return render_template("admin/login.html", active_page="login")


@pages.route("/admin/logout")
def admin_logout():
    return clear_auth_cookie(redirect(url_for("pages.admin_login")))


@pages.route("/admin/dashboard")
def admin_dashboard():
    store = get_store()
    berita = berita_repo(store)
    galeri = galeri_repo(store)
    laporan = laporan_repo(store)
    latest_params = laporan.list_spec.parse({"limit": "5"})

    # tiga fetch independen, dijalankan paralel lalu digabung
    with ThreadPoolExecutor(max_workers=3) as pool:
        berita_future = pool.submit(berita.stats)
        galeri_future = pool.submit(galeri.stats)
        laporan_future = pool.submit(
            lambda: (laporan.list(latest_params), laporan.stats())
        )
        berita_stats = berita_future.result()
        galeri_stats = galeri_future.result()
        (latest_laporan, _), laporan_stats = laporan_future.result()

    return render_template(
        "admin/dashboard.html",
        active_page="dashboard",
        admin=g.admin,
        berita_stats=berita_stats,
        galeri_stats=galeri_stats,
        laporan_stats=laporan_stats,
        latest_laporan=latest_laporan,
    )
