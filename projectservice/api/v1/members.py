"""
Organization member endpoints.

GET    /api/v1/organizations/{organizationId}/members             List members (ReadMembers)
PATCH  /api/v1/organizations/{organizationId}/members/{memberId}  Change role (WriteMembers)
DELETE /api/v1/organizations/{organizationId}/members/{memberId}  Remove member (WriteMembers)
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from projectservice.core.database import get_session
from projectservice.core.permissions import require_capability
from projectservice.models.membership import Membership
from projectservice.services import memberships as membership_service
from projectservice.services.users import UserServiceClient, get_user_service
from projectservice_shared.schemas.common import Capability
from projectservice_shared.schemas.memberships import (
    MemberListResponse,
    MemberResponse,
    MemberRoleUpdateRequest,
    MembershipResponse,
)

router = APIRouter()


@router.get("/members", response_model=MemberListResponse)
async def list_members(
    organizationId: uuid.UUID,
    caller: Membership = Depends(require_capability(Capability.READ_MEMBERS)),
    session: AsyncSession = Depends(get_session),
    user_service: UserServiceClient = Depends(get_user_service),
):
    """Other members of the organization, with their user profiles."""
    members = [
        m
        for m in await membership_service.list_members(organizationId, session)
        if m.user_id != caller.user_id
    ]
    profiles = {
        p.id: p for p in await user_service.get_users(m.user_id for m in members)
    }

    items = []
    for m in members:
        profile = profiles.get(m.user_id)
        items.append(
            MemberResponse(
                id=m.user_id,
                first_name=profile.first_name if profile else "",
                last_name=profile.last_name if profile else "",
                email=profile.email if profile else "",
                role=m.role,
                member_since=m.created_at,
            )
        )
    return MemberListResponse(members=items)


@router.patch(
    "/members/{memberId}",
    response_model=MembershipResponse,
    dependencies=[Depends(require_capability(Capability.WRITE_MEMBERS))],
)
async def change_member_role(
    organizationId: uuid.UUID,
    memberId: uuid.UUID,
    body: MemberRoleUpdateRequest,
    session: AsyncSession = Depends(get_session),
):
    membership = await membership_service.change_role(
        organizationId, memberId, body.role, session
    )
    return MembershipResponse.model_validate(membership)


@router.delete(
    "/members/{memberId}",
    status_code=204,
    dependencies=[Depends(require_capability(Capability.WRITE_MEMBERS))],
)
async def remove_member(
    organizationId: uuid.UUID,
    memberId: uuid.UUID,
    session: AsyncSession = Depends(get_session),
):
    await membership_service.remove_member(memberId, organizationId, session)
