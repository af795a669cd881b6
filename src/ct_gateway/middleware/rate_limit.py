"""Fixed-window rate limiting backed by Redis.

Rules (per 60s window):
  - Auth endpoints:   RATE_LIMIT_AUTH_PER_MINUTE per client IP  (anti brute-force)
  - Order placement:  RATE_LIMIT_ORDER_PER_MINUTE per user
  - Everything else:  RATE_LIMIT_DEFAULT_PER_MINUTE per user or IP

Key pattern: "ratelimit:{group}:{subject}:{window_start}". The first INCR in a
window sets the expiry. If Redis is unreachable the request is let through
and a warning is logged; balances never depend on Redis.
"""

import logging
import time

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from config.settings import settings
from src.ct_common.errors import AppError, RateLimitError
from src.ct_common.redis_client import get_redis
from src.ct_common.response import error_response_for
from src.ct_gateway.auth.jwt_handler import decode_token

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60


def classify_request(method: str, path: str) -> tuple[str, int]:
    """Return (group, limit) for a request."""
    if "/auth/" in path:
        return "auth", settings.RATE_LIMIT_AUTH_PER_MINUTE
    if method == "POST" and path.endswith("/orders/place"):
        return "order", settings.RATE_LIMIT_ORDER_PER_MINUTE
    return "default", settings.RATE_LIMIT_DEFAULT_PER_MINUTE


def client_ip(request: Request) -> str:
    """Real client IP, honouring the first X-Forwarded-For hop from a reverse proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def request_subject(request: Request, group: str) -> str:
    """User id from a valid Bearer token, else the client IP. Auth is always per IP."""
    if group != "auth":
        header = request.headers.get("authorization", "")
        if header.lower().startswith("bearer "):
            try:
                payload = decode_token(header[7:], expected_type="access")
            except AppError:
                payload = {}
            if payload.get("sub"):
                return f"user:{payload['sub']}"
    return f"ip:{client_ip(request)}"


async def register_hit(redis: object, key: str, limit: int) -> tuple[bool, int]:
    """Count one hit against *key*. Returns (allowed, retry_after_seconds)."""
    count = await redis.incr(key)  # type: ignore[attr-defined]
    if count == 1:
        await redis.expire(key, WINDOW_SECONDS)  # type: ignore[attr-defined]
    if count <= limit:
        return True, 0
    ttl = await redis.ttl(key)  # type: ignore[attr-defined]
    return False, max(int(ttl), 1)


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not settings.RATE_LIMIT_ENABLED:
            return await call_next(request)

        group, limit = classify_request(request.method, request.url.path)
        window_start = int(time.time()) // WINDOW_SECONDS * WINDOW_SECONDS
        key = f"ratelimit:{group}:{request_subject(request, group)}:{window_start}"

        try:
            redis = await get_redis()
            allowed, retry_after = await register_hit(redis, key, limit)
        except RedisError as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if not allowed:
            err = RateLimitError()
            body = error_response_for(err, getattr(request.state, "request_id", None))
            return JSONResponse(
                status_code=err.http_status,
                content=body.model_dump(),
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
