"""
Mail notifications, published to the mail service's Redis queue.

Delivery is fire-and-forget: a failed publish is logged and never raised to
the caller.
"""

from __future__ import annotations

import json
import uuid
from typing import Optional

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from projectservice.core.config import get_settings
from projectservice.core.redis import get_redis

log = structlog.get_logger()
settings = get_settings()


class MailService:
    def __init__(self, redis: Redis, queue: str):
        self._redis = redis
        self._queue = queue

    async def send_organization_invitation(
        self,
        email: str,
        organization_name: str,
        invited_by: Optional[uuid.UUID] = None,
    ) -> None:
        message = {
            "emails": [email],
            "organization_name": organization_name,
            "sender": str(invited_by) if invited_by else None,
        }
        try:
            await self._redis.rpush(self._queue, json.dumps(message))
        except RedisError as exc:
            log.warning(
                "invitation.notify_failed",
                email=email,
                organization=organization_name,
                error=str(exc),
            )
            return
        log.info("invitation.notified", email=email, organization=organization_name)


async def get_mail_service() -> MailService:
    """FastAPI dependency: mail service bound to the shared Redis connection."""
    return MailService(await get_redis(), settings.mail_invitation_queue)
