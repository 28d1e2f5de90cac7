# config.py
import os
from os.path import join, dirname

from dotenv import load_dotenv

# ------------------------------ #
# 1) LOAD ENVIRONMENT VARIABLES  #
# ------------------------------ #
dotenv_path = join(dirname(__file__), ".env")
load_dotenv(dotenv_path)


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_int(name, default=None):
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dpmptsp-dev-secret")

    # MongoDB
    MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017")
    DB_NAME = os.environ.get("DB_NAME", "dpmptsp_db")
    MONGODB_MAX_POOL_SIZE = env_int("MONGODB_MAX_POOL_SIZE", 10)
    MONGODB_TIMEOUT_MS = env_int("MONGODB_TIMEOUT_MS", 5000)
    # index dibuat saat create_app; text index bisa dimatikan (mongomock)
    MONGODB_ENSURE_INDEXES = env_bool("MONGODB_ENSURE_INDEXES", True)
    MONGODB_TEXT_INDEXES = env_bool("MONGODB_TEXT_INDEXES", True)

    # Token admin
    JWT_SECRET = os.environ.get("JWT_SECRET", "CHANGE_ME_IN_PRODUCTION_ENV_FILE")
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_MINUTES = env_int("JWT_EXPIRES_MINUTES", 60 * 24)
    AUTH_COOKIE_NAME = os.environ.get("AUTH_COOKIE_NAME", "auth-token")
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)

    # Rate limit login (Flask-Limiter)
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    LOGIN_RATE_LIMIT = os.environ.get("LOGIN_RATE_LIMIT", "5 per 15 minutes")

    # Pagination; None = tanpa batas atas di endpoint publik
    PUBLIC_MAX_LIMIT = env_int("PUBLIC_MAX_LIMIT")
    ADMIN_MAX_LIMIT = env_int("ADMIN_MAX_LIMIT", 100)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    DB_NAME = "dpmptsp_test"
    JWT_SECRET = "test-jwt-secret"
    MONGODB_TEXT_INDEXES = False
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    PUBLIC_MAX_LIMIT = None
    LOG_LEVEL = "WARNING"
