# middleware.py
"""Pipeline interceptor request.

Setiap interceptor punya ``before(request)`` yang boleh mengembalikan
response untuk menghentikan request, dan ``after(request, response)``.
Pipeline menjalankan ``before`` sesuai urutan daftar dan ``after`` dalam
urutan terbalik.
"""
import logging
import re
import time

from flask import g, jsonify, redirect, request, url_for

from security import InvalidToken, decode_access_token, token_from_request

logger = logging.getLogger(__name__)


class Interceptor:
    def before(self, request):
        return None

    def after(self, request, response):
        return response


class RequestLogger(Interceptor):

    def before(self, request):
        g.request_started = time.perf_counter()
        return None

    def after(self, request, response):
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method, request.path, response.status_code, elapsed_ms,
        )
        return response


class ProtectedRoute:
    """Pola path yang butuh token admin.

    ``methods`` None berarti semua method. ``page`` True -> redirect ke
    halaman login, False -> 401 JSON.
    """

    def __init__(self, pattern, methods=None, page=False):
        self.pattern = re.compile(pattern)
        self.methods = set(methods) if methods else None
        self.page = page

    def matches(self, request):
        if self.methods is not None and request.method not in self.methods:
            return False
        return self.pattern.match(request.path) is not None


DEFAULT_PROTECTED_ROUTES = [
    ProtectedRoute(r"^/admin/.+", page=True),
    ProtectedRoute(r"^/api/admin/(?!(login|logout)/?$).+"),
    ProtectedRoute(r"^/api/laporan/?$", methods=["GET"]),
    ProtectedRoute(r"^/api/laporan/[^/]+/?$"),
    ProtectedRoute(r"^/api/galeri/?$", methods=["POST"]),
]


class AdminGuard(Interceptor):

    def __init__(self, routes=None, login_endpoint="pages.admin_login"):
        self.routes = routes if routes is not None else DEFAULT_PROTECTED_ROUTES
        self.login_endpoint = login_endpoint

    def before(self, request):
        if request.method == "OPTIONS":
            return None
        rule = next((r for r in self.routes if r.matches(request)), None)
        if rule is None:
            return None

        token = token_from_request()
        if not token:
            return self.reject(rule, "Unauthorized")
        try:
            g.admin = decode_access_token(token)
        except InvalidToken as exc:
            logger.warning("Rejected admin token for %s: %s", request.path, exc)
            return self.reject(rule, "Invalid token")
        return None

    def reject(self, rule, message):
        if rule.page:
            return redirect(url_for(self.login_endpoint))
        return jsonify({"success": False, "error": message}), 401


class InterceptorPipeline:

    def __init__(self, interceptors):
        self.interceptors = list(interceptors)

    def run_before(self, request):
        for interceptor in self.interceptors:
            response = interceptor.before(request)
            if response is not None:
                return response
        return None

    def run_after(self, request, response):
        for interceptor in reversed(self.interceptors):
            response = interceptor.after(request, response)
        return response

    def init_app(self, app):
        @app.before_request
        def _run_interceptors():
            return self.run_before(request)

        @app.after_request
        def _finish_interceptors(response):
            return self.run_after(request, response)

        app.extensions["interceptors"] = self
        return self


def default_pipeline():
    return InterceptorPipeline([RequestLogger(), AdminGuard()])
