"""Invitation and follower schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from .common import Role


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class InvitationCreateRequest(BaseModel):
    """Invite one or more email addresses to an organization."""
    emails: list[EmailStr] = Field(min_length=1, max_length=50)
    role: Role = Role.MEMBER


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class InvitationResponse(BaseModel):
    """An invitation as seen by the invitee."""
    organization_id: uuid.UUID
    organization_name: str
    role: Role


class InvitationListResponse(BaseModel):
    organization_invites: list[InvitationResponse]


class PendingInvitationResponse(BaseModel):
    """An invitation as seen by the inviting organization."""
    user_email: str
    role: Role
    invited_by_user_id: uuid.UUID
    created_at: datetime


class PendingInvitationListResponse(BaseModel):
    pending_invites: list[PendingInvitationResponse]


class FollowerResponse(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}
