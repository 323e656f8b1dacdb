"""
Redis client lifecycle: timeouts on the shared client and shutdown.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from projectservice.core import redis as redis_core


@pytest.fixture
def from_url(monkeypatch):
    client = MagicMock()
    client.aclose = AsyncMock()
    factory = MagicMock(return_value=client)
    monkeypatch.setattr(redis_core.redis, "from_url", factory)
    monkeypatch.setattr(redis_core, "_redis_pool", None)
    return factory


@pytest.mark.asyncio
async def test_client_is_created_once_with_timeouts(from_url):
    first = await redis_core.get_redis()
    second = await redis_core.get_redis()

    assert first is second
    from_url.assert_called_once()
    kwargs = from_url.call_args.kwargs
    assert kwargs["socket_timeout"] == redis_core.settings.redis_socket_timeout_seconds
    assert kwargs["socket_connect_timeout"] == redis_core.settings.redis_connect_timeout_seconds
    assert kwargs["decode_responses"] is True


@pytest.mark.asyncio
async def test_close_resets_client(from_url):
    client = await redis_core.get_redis()

    await redis_core.close_redis()
    await redis_core.close_redis()

    client.aclose.assert_awaited_once()
    assert redis_core._redis_pool is None
