# app.py
import logging
from datetime import date, datetime, timezone

import click
from bson.objectid import ObjectId
from flask import Flask, jsonify, render_template, request
from flask.json.provider import DefaultJSONProvider

from api import api
from config import Config
from database import get_store, init_store
from errors import ApiError
from extensions import limiter
from middleware import default_pipeline
from pages import pages
from repository import user_repo
from sample_data import load_sample_data


class MongoJSONProvider(DefaultJSONProvider):
    """ObjectId -> string hex, datetime -> ISO-8601 (UTC)."""

    @staticmethod
    def default(o):
        if isinstance(o, ObjectId):
            return str(o)
        if isinstance(o, datetime):
            # MongoDB menyimpan UTC; datetime naive dianggap UTC
            if o.tzinfo is None:
                o = o.replace(tzinfo=timezone.utc)
            return o.isoformat()
        if isinstance(o, date):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def configure_logging(app):
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])


def wants_json():
    return request.path.startswith("/api/")


def register_error_handlers(app):

    @app.errorhandler(404)
    def not_found(error):
        if wants_json():
            return jsonify({"success": False, "error": "Not found"}), 404
        return render_template("404.html"), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        if wants_json():
            return jsonify({"success": False, "error": "Method not allowed"}), 405
        return error.get_response()

    @app.errorhandler(429)
    def too_many_requests(error):
        message = getattr(error, "description", None) or "Terlalu banyak request"
        if wants_json():
            return jsonify({"success": False, "error": message}), 429
        return render_template("admin/login.html", error=message), 429


def register_commands(app):

    @app.cli.command("init-db")
    @click.option("--sample", is_flag=True, help="Isi contoh berita dan galeri.")
    def init_db(sample):
        """Buat index koleksi (dan data contoh bila diminta)."""
        store = get_store()
        store.ensure_indexes()
        click.echo("Indexes created.")
        if sample:
            inserted = load_sample_data(store)
            click.echo(f"Inserted {inserted} sample documents.")

    @app.cli.command("create-admin")
    @click.argument("username")
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    @click.option("--role", default="admin", type=click.Choice(["admin", "super_admin"]))
    @click.option("--email", default=None)
    def create_admin(username, password, role, email):
        """Tambah akun admin."""
        try:
            user = user_repo(get_store()).create(username, password, role=role, email=email)
        except ApiError as exc:
            raise click.ClickException(exc.message)
        click.echo(f"Admin '{user['username']}' created ({user['role']}).")


def create_app(config_object=Config, mongo_client=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json = MongoJSONProvider(app)

    configure_logging(app)

    # koneksi MongoDB dibuat sekali per aplikasi
    store = init_store(app, mongo_client)
    if app.config["MONGODB_ENSURE_INDEXES"]:
        # unique index slug/username harus ada sebelum request pertama
        store.ensure_indexes(with_text=app.config["MONGODB_TEXT_INDEXES"])

    limiter.init_app(app)
    default_pipeline().init_app(app)

    app.register_blueprint(api)
    app.register_blueprint(pages)

    register_error_handlers(app)
    register_commands(app)
    return app


if __name__ == "__main__":
    app = create_app()
    app.run("0.0.0.0", port=5000, debug=True)
