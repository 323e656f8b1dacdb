"""
Organization schemas shared between the service and its clients.

Covers: organization create/update requests, detail and list responses.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import Pagination, Role


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrganizationCreateRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(min_length=1, max_length=256)
    description: str = Field(default="", max_length=4096)
    legal_info: Optional[str] = Field(default=None, max_length=512)


class OrganizationUpdateRequest(BaseModel):
    description: Optional[str] = Field(default=None, max_length=4096)
    legal_info: Optional[str] = Field(default=None, max_length=512)
    active: Optional[bool] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrganizationResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    legal_info: Optional[str] = None
    created_by_user_id: uuid.UUID
    approved: bool
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrganizationListResponse(BaseModel):
    data: list[OrganizationResponse]
    pagination: Pagination


class PersonalOrganizationItem(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    approved: bool
    role: Role  # the requesting user's role in this organization
    member_since: datetime


class PersonalOrganizationListResponse(BaseModel):
    data: list[PersonalOrganizationItem]
