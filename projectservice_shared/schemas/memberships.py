"""Organization membership schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel

from .common import Role


class MemberRoleUpdateRequest(BaseModel):
    """Change the role of an existing member."""
    role: Role


class MemberResponse(BaseModel):
    """A member enriched with the profile fields from the user service."""
    id: uuid.UUID
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    role: Role
    member_since: datetime


class MemberListResponse(BaseModel):
    members: list[MemberResponse]


class MembershipResponse(BaseModel):
    organization_id: uuid.UUID
    user_id: uuid.UUID
    role: Role
    created_at: datetime

    model_config = {"from_attributes": True}
