"""
User service client: resolves user profiles by id or email over HTTP.
"""

from __future__ import annotations

import uuid
from typing import Iterable

import httpx
import structlog
from pydantic import ValidationError

from projectservice.core.config import get_settings
from projectservice.core.errors import UserServiceError
from projectservice_shared.schemas.users import (
    UserProfile,
    UsersByEmailRequest,
    UsersLookupRequest,
    UsersLookupResponse,
)

log = structlog.get_logger()
settings = get_settings()


class UserServiceClient:
    """
    Thin client for the peer user service.

    Ids or emails unknown to the user service are simply absent from the
    result. Transport and protocol failures raise UserServiceError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_users(self, ids: Iterable[uuid.UUID]) -> list[UserProfile]:
        request = UsersLookupRequest(ids=list(dict.fromkeys(ids)))
        if not request.ids:
            return []
        return await self._lookup("/users/batch", request.model_dump(mode="json"))

    async def get_users_by_email(self, emails: Iterable[str]) -> list[UserProfile]:
        request = UsersByEmailRequest(emails=list(dict.fromkeys(emails)))
        if not request.emails:
            return []
        return await self._lookup("/users/by-email", request.model_dump(mode="json"))

    async def _lookup(self, path: str, body: dict) -> list[UserProfile]:
        try:
            resp = await self._client.post(path, json=body)
            resp.raise_for_status()
            return UsersLookupResponse.model_validate(resp.json()).users
        except httpx.HTTPStatusError as exc:
            log.error(
                "user_service.error",
                path=path,
                status=exc.response.status_code,
            )
            raise UserServiceError(
                f"User service responded with {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            log.error("user_service.unreachable", path=path, error=str(exc))
            raise UserServiceError() from exc
        except (ValidationError, ValueError) as exc:
            log.error("user_service.bad_response", path=path, error=str(exc))
            raise UserServiceError("Invalid response from user service") from exc


_user_service: UserServiceClient | None = None


async def get_user_service() -> UserServiceClient:
    """Get or create the shared user service client."""
    global _user_service
    if _user_service is None:
        _user_service = UserServiceClient(
            settings.user_service_url,
            timeout=settings.user_service_timeout_seconds,
        )
    return _user_service


async def close_user_service() -> None:
    global _user_service
    if _user_service is not None:
        await _user_service.close()
        _user_service = None
