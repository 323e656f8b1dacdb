"""
Mail queue adapter tests.
"""

from __future__ import annotations

import json
import uuid
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from projectservice.services.mail import MailService


@pytest.mark.asyncio
async def test_invitation_message_is_queued():
    redis = AsyncMock()
    sender = uuid.uuid4()
    service = MailService(redis, "mail.project.org-invitation")

    await service.send_organization_invitation("bob@example.com", "Solar Coop", sender)

    redis.rpush.assert_awaited_once()
    queue, raw = redis.rpush.await_args.args
    assert queue == "mail.project.org-invitation"
    assert json.loads(raw) == {
        "emails": ["bob@example.com"],
        "organization_name": "Solar Coop",
        "sender": str(sender),
    }


@pytest.mark.asyncio
async def test_redis_failure_is_swallowed():
    redis = AsyncMock()
    redis.rpush.side_effect = RedisConnectionError("connection refused")
    service = MailService(redis, "mail.project.org-invitation")

    await service.send_organization_invitation("bob@example.com", "Solar Coop")

    redis.rpush.assert_awaited_once()


@pytest.mark.asyncio
async def test_unexpected_errors_propagate():
    redis = AsyncMock()
    redis.rpush.side_effect = RuntimeError("bug")
    service = MailService(redis, "q")

    with pytest.raises(RuntimeError):
        await service.send_organization_invitation("bob@example.com", "Solar Coop")
