"""
Authentication for the project service.

Callers present a bearer JWT issued by the user service. The token carries
the user id in ``sub`` plus the ``email`` and ``name`` claims used by the
invitation endpoints.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from fastapi import Depends
from fastapi.security import APIKeyHeader

from projectservice.core.config import get_settings
from projectservice.core.errors import InvalidToken

log = structlog.get_logger()
settings = get_settings()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)


@dataclass(frozen=True)
class UserPrincipal:
    """The authenticated caller."""

    user_id: uuid.UUID
    email: str
    name: str = ""


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    user_id: uuid.UUID,
    email: str,
    name: str = "",
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for a user."""
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "iat": now,
        "exp": exp,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


# ---------------------------------------------------------------------------
# Authentication dependency
# ---------------------------------------------------------------------------

async def get_current_user(
    authorization: Optional[str] = Depends(api_key_header),
) -> UserPrincipal:
    if not authorization or not authorization.startswith("Bearer "):
        raise InvalidToken("Authentication required")

    token = authorization[7:].strip()
    try:
        payload = decode_jwt(token)
        user_id = uuid.UUID(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        log.info("auth.invalid_token")
        raise InvalidToken()

    email = payload.get("email")
    if not email:
        raise InvalidToken("Token is missing the email claim")

    return UserPrincipal(
        user_id=user_id,
        email=email.strip().lower(),
        name=payload.get("name") or "",
    )
