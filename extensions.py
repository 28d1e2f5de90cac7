# extensions.py
from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Storage & enabled dibaca dari config app (RATELIMIT_*) saat init_app.
limiter = Limiter(get_remote_address, default_limits=[])

LOGIN_LIMIT_MESSAGE = "Terlalu banyak percobaan login. Coba lagi nanti."


def login_rate_limit():
    return current_app.config["LOGIN_RATE_LIMIT"]
