from __future__ import annotations

import time

import structlog
from fastapi import Request
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from events_api.core.config import settings
from events_api.redis_client import get_redis

logger = structlog.get_logger(__name__)

TOKEN_PATH = "/oauth/token"

_WINDOWS = {
    "sec": 1,
    "second": 1,
    "seconds": 1,
    "min": 60,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def parse_rate(rate: str) -> tuple[int, int]:
    """
    Parse "<limit>/<window>", e.g. "60/minute" or "10/second".
    Returns: (limit, window_seconds)
    """
    raw = rate.strip().lower()
    if "/" not in raw:
        raise ValueError(f"Invalid rate format: {rate}")

    limit_str, window_str = raw.split("/", 1)
    window = _WINDOWS.get(window_str.strip())
    if window is None:
        raise ValueError(f"Invalid rate window: {window_str}")
    return int(limit_str), window


def rate_for_path(path: str) -> str:
    # Password guessing goes through the token endpoint
    if path == TOKEN_PATH:
        return settings.rate_limit_token
    return settings.rate_limit_default


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        if not settings.rate_limit_enabled or request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        if path in set(settings.rate_limit_exempt_paths):
            return await call_next(request)

        try:
            limit, window_seconds = parse_rate(rate_for_path(path))
        except ValueError:
            logger.warning("rate_limit_misconfigured", path=path)
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = int(time.time())
        bucket = now // window_seconds
        key = f"rl:{client_ip}:{request.method}:{path}:{window_seconds}:{bucket}"

        try:
            r = get_redis()
            count = r.incr(key)
            if count == 1:
                r.expire(key, window_seconds)
        except RedisError:
            # Redis down: serve the request unthrottled
            return await call_next(request)

        reset = (bucket + 1) * window_seconds
        if count > limit:
            return JSONResponse(
                status_code=429,
                content={"detail": "rate limit exceeded"},
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(reset),
                    "Retry-After": str(max(0, reset - now)),
                },
            )

        response = await call_next(request)
        response.headers.setdefault("X-RateLimit-Limit", str(limit))
        response.headers.setdefault("X-RateLimit-Remaining", str(max(0, limit - int(count))))
        response.headers.setdefault("X-RateLimit-Reset", str(reset))
        return response
