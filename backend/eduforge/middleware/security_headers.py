"""Middleware to add common security headers to responses."""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach security headers; API responses are per-user and never cached."""

    def __init__(self, app: ASGIApp, api_prefix: str = "/api") -> None:
        super().__init__(app)
        self.api_prefix = api_prefix.rstrip("/") or "/api"

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        path = request.url.path
        if path.startswith(self.api_prefix) or path.startswith("/auth"):
            response.headers.setdefault("Cache-Control", "no-store")
        return response
