# security.py
import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from flask import current_app, request
from jose import JWTError, jwt

logger = logging.getLogger(__name__)


class InvalidToken(Exception):
    pass


def hash_password(password):
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password, password_hash):
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # hash rusak / bukan bcrypt
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_access_token(user, expires_minutes=None):
    config = current_app.config
    if expires_minutes is None:
        expires_minutes = config["JWT_EXPIRES_MINUTES"]
    payload = {
        "sub": user["username"],
        "uid": str(user["_id"]),
        "role": user.get("role", "admin"),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, config["JWT_SECRET"], algorithm=config["JWT_ALGORITHM"])


def decode_access_token(token):
    config = current_app.config
    try:
        payload = jwt.decode(token, config["JWT_SECRET"], algorithms=[config["JWT_ALGORITHM"]])
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc
    if not payload.get("sub"):
        raise InvalidToken("token has no subject")
    return payload


def token_from_request():
    """Ambil token dari header Authorization, lalu dari cookie."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(current_app.config["AUTH_COOKIE_NAME"]) or None


def set_auth_cookie(response, token):
    config = current_app.config
    response.set_cookie(
        config["AUTH_COOKIE_NAME"],
        token,
        max_age=config["JWT_EXPIRES_MINUTES"] * 60,
        httponly=True,
        secure=config["AUTH_COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


def clear_auth_cookie(response):
    response.delete_cookie(current_app.config["AUTH_COOKIE_NAME"])
    return response
