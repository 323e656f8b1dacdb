"""
Redis client for the mail queue.

Reads, writes and connects time out after the configured
``redis_socket_timeout_seconds`` and ``redis_connect_timeout_seconds``.
"""

from __future__ import annotations

import redis.asyncio as redis

from projectservice.core.config import get_settings

settings = get_settings()

_redis_pool: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    """Shared client, created on first use."""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.redis_socket_timeout_seconds,
            socket_connect_timeout=settings.redis_connect_timeout_seconds,
        )
    return _redis_pool


async def close_redis() -> None:
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
