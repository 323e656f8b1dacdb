from enum import Enum
from typing import Optional
from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "ORG_ADMIN"
    MEMBER = "ORG_MEMBER"


class Capability(str, Enum):
    # PR = permission read, PW = permission write
    READ_MEMBERS = "PR_USERS"
    WRITE_MEMBERS = "PW_USERS"
    WRITE_ORGANIZATION = "PW_ORG"
    WRITE_PROJECT = "PW_PROJECT"


class Pagination(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int


class ErrorBody(BaseModel):
    code: str
    message: str
    status: int
    details: Optional[dict] = None


class ErrorResponse(BaseModel):
    error: ErrorBody
