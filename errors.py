# errors.py
import logging
from functools import wraps

from flask import jsonify

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Kegagalan yang sudah diketahui: validasi, tidak ditemukan, konflik."""

    def __init__(self, status, message):
        super().__init__(message)
        self.status = status
        self.message = message


def error_response(status, message):
    return jsonify({"success": False, "error": message}), status


def api_handler(failure_message):
    """Decorator: ApiError -> amplop error, exception lain -> 500 generik.

    Detail exception hanya masuk ke log server.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except ApiError as exc:
                return error_response(exc.status, exc.message)
            except Exception:
                logger.exception("%s (%s)", failure_message, fn.__name__)
                return error_response(500, failure_message)
        return wrapper
    return decorator
