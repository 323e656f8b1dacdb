"""
Service error taxonomy.

Every error carries an ``ErrorCode`` made of a two-digit category and a
two-digit specific code, rendered to clients as
``{"error": {"code": "0604", "message": ..., "status": 409}}``.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Iterable, Optional

import structlog
from fastapi import HTTPException, Request
from starlette.responses import JSONResponse

from projectservice_shared.schemas.common import ErrorBody, ErrorResponse

log = structlog.get_logger()


class ErrorCode(Enum):
    # Users: 03
    USER_TOKEN_INVALID = ("03", "02", "Invalid or missing access token")

    # Organization: 06
    ORG_MISSING = ("06", "01", "Non existing organization")
    ORG_DUPLICATE_USER = ("06", "04", "User is already a member of this organization")
    ORG_DUPLICATE_INVITE = ("06", "05", "User is already invited")
    ORG_DUPLICATE_NAME = ("06", "06", "Organization with this name already exists")
    ORG_MEM_MISSING = ("06", "08", "Organization membership missing")
    ORG_PRIVILEGE = ("06", "13", "Missing organization privilege")

    # Internal: 08
    INT_USER_SERVICE = ("08", "04", "Failed call to user service")

    def __init__(self, category: str, specific: str, message: str):
        self.category = category
        self.specific = specific
        self.message = message

    @property
    def code(self) -> str:
        return f"{self.category}{self.specific}"


class ServiceError(HTTPException):
    """Base class for errors raised by services and mapped to responses."""

    status_code: int = 400
    error_code: ErrorCode

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.error_code.message,
        )
        self.details = details


class OrganizationNotFound(ServiceError):
    status_code = 404
    error_code = ErrorCode.ORG_MISSING

    def __init__(self, organization_id: uuid.UUID):
        super().__init__(f"Missing organization with id: {organization_id}")
        self.organization_id = organization_id


class MembershipNotFound(ServiceError):
    status_code = 404
    error_code = ErrorCode.ORG_MEM_MISSING

    def __init__(self, user_id: uuid.UUID, organization_id: uuid.UUID):
        super().__init__(
            f"User {user_id} is not a member of organization {organization_id}"
        )
        self.user_id = user_id
        self.organization_id = organization_id


class AlreadyMember(ServiceError):
    status_code = 409
    error_code = ErrorCode.ORG_DUPLICATE_USER

    @classmethod
    def for_user(cls, user_id: uuid.UUID, organization_id: uuid.UUID) -> "AlreadyMember":
        return cls(f"User {user_id} is already a member of organization {organization_id}")

    @classmethod
    def for_emails(cls, emails: Iterable[str]) -> "AlreadyMember":
        joined = ", ".join(emails)
        return cls(
            f"Some users are already a member of this organization: {joined}",
            details={"emails": joined},
        )


class DuplicateInvitation(ServiceError):
    status_code = 409
    error_code = ErrorCode.ORG_DUPLICATE_INVITE

    def __init__(self, emails: Iterable[str]):
        self.emails = list(emails)
        joined = ", ".join(self.emails)
        super().__init__(
            f"Some users are already invited: {joined}",
            details={"emails": joined},
        )


class OrganizationNameTaken(ServiceError):
    status_code = 409
    error_code = ErrorCode.ORG_DUPLICATE_NAME

    def __init__(self, name: str):
        super().__init__(f"Organization with name: {name} already exists")


class MissingPrivilege(ServiceError):
    status_code = 403
    error_code = ErrorCode.ORG_PRIVILEGE


class InvalidToken(ServiceError):
    status_code = 401
    error_code = ErrorCode.USER_TOKEN_INVALID


class UserServiceError(ServiceError):
    status_code = 502
    error_code = ErrorCode.INT_USER_SERVICE


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a ServiceError using the common error envelope."""
    log.info(
        "request.failed",
        code=exc.error_code.code,
        status=exc.status_code,
        message=exc.detail,
    )
    body = ErrorResponse(
        error=ErrorBody(
            code=exc.error_code.code,
            message=exc.detail,
            status=exc.status_code,
            details=exc.details or None,
        )
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=exc.headers,
    )
