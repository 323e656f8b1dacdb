"""
Organization API endpoints.

POST   /api/v1/organizations                          Create an organization
GET    /api/v1/organizations                          List organizations (paged)
GET    /api/v1/organizations/personal                 Organizations the caller belongs to
GET    /api/v1/organizations/{organizationId}         Organization details
PATCH  /api/v1/organizations/{organizationId}         Update description/legal info/active
POST   /api/v1/organizations/{organizationId}/follow  Follow
DELETE /api/v1/organizations/{organizationId}/follow  Unfollow
"""

from __future__ import annotations

import math
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from projectservice.core.auth import UserPrincipal, get_current_user
from projectservice.core.database import get_session
from projectservice.core.permissions import require_capability
from projectservice.services import invitations as invitation_service
from projectservice.services import organizations as org_service
from projectservice_shared.schemas.common import Capability, Pagination
from projectservice_shared.schemas.invitations import FollowerResponse
from projectservice_shared.schemas.organizations import (
    OrganizationCreateRequest,
    OrganizationListResponse,
    OrganizationResponse,
    OrganizationUpdateRequest,
    PersonalOrganizationItem,
    PersonalOrganizationListResponse,
)

router = APIRouter()


@router.post("/organizations", response_model=OrganizationResponse, status_code=201)
async def create_organization(
    body: OrganizationCreateRequest,
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Create an organization. The creator becomes its admin."""
    org = await org_service.create_organization(body, user.user_id, session)
    return OrganizationResponse.model_validate(org)


@router.get("/organizations", response_model=OrganizationListResponse)
async def list_organizations(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    items, total = await org_service.list_organizations(page, per_page, session)
    return OrganizationListResponse(
        data=[OrganizationResponse.model_validate(o) for o in items],
        pagination=Pagination(
            page=page,
            per_page=per_page,
            total=total,
            total_pages=math.ceil(total / per_page) if total else 0,
        ),
    )


@router.get("/organizations/personal", response_model=PersonalOrganizationListResponse)
async def list_personal_organizations(
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Organizations the caller is a member of, with the caller's role."""
    items = await org_service.list_organizations_for_user(user.user_id, session)
    return PersonalOrganizationListResponse(
        data=[PersonalOrganizationItem(**item) for item in items]
    )


@router.get("/organizations/{organizationId}", response_model=OrganizationResponse)
async def get_organization(
    organizationId: uuid.UUID,
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.get_organization(organizationId, session)
    return OrganizationResponse.model_validate(org)


@router.patch(
    "/organizations/{organizationId}",
    response_model=OrganizationResponse,
    dependencies=[Depends(require_capability(Capability.WRITE_ORGANIZATION))],
)
async def update_organization(
    organizationId: uuid.UUID,
    body: OrganizationUpdateRequest,
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.get_organization(organizationId, session)
    org = await org_service.update_organization(org, body, session)
    return OrganizationResponse.model_validate(org)


# ---------------------------------------------------------------------------
# Followers
# ---------------------------------------------------------------------------

@router.post("/organizations/{organizationId}/follow", response_model=FollowerResponse)
async def follow_organization(
    organizationId: uuid.UUID,
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Follow an organization. Following twice returns the same follower."""
    await org_service.get_organization(organizationId, session)
    follower = await invitation_service.follow_organization(
        user.user_id, organizationId, session
    )
    return FollowerResponse.model_validate(follower)


@router.delete("/organizations/{organizationId}/follow", status_code=204)
async def unfollow_organization(
    organizationId: uuid.UUID,
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    await invitation_service.unfollow_organization(user.user_id, organizationId, session)
