from __future__ import annotations

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from events_api.core.config import settings

# Token responses must never be cached (RFC 6749 section 5.1)
NO_STORE_PREFIXES = ("/oauth/",)

BASELINE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

HSTS_EXEMPT_ENVS = frozenset({"local", "test"})


def security_headers_for(path: str, env: str) -> dict[str, str]:
    headers = dict(BASELINE_HEADERS)
    if path.startswith(NO_STORE_PREFIXES):
        headers["Cache-Control"] = "no-store"
        headers["Pragma"] = "no-cache"
    if env not in HSTS_EXEMPT_ENVS:
        headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        if not settings.security_headers_enabled:
            return response

        for name, value in security_headers_for(request.url.path, settings.env).items():
            response.headers.setdefault(name, value)
        return response
