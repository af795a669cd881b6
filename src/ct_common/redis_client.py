"""Shared async Redis connection, used only by the rate limiter.

Balances, stock and order state never touch Redis, so a Redis outage
degrades rate limiting and nothing else.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Return the process-wide client, creating it on first use."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        )
    return _client


async def redis_available() -> bool:
    """PING Redis. False (with a warning) when it cannot be reached."""
    try:
        client = await get_redis()
        return bool(await client.ping())
    except RedisError as exc:
        logger.warning("Redis unreachable at %s: %s", settings.REDIS_URL, exc)
        return False


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
