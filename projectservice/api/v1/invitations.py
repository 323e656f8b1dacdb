"""
Invitation endpoints.

Organization scoped:
GET    /api/v1/organizations/{organizationId}/invites          Pending invitations (ReadMembers)
POST   /api/v1/organizations/{organizationId}/invites          Invite by email (WriteMembers)
DELETE /api/v1/organizations/{organizationId}/invites/{email}  Revoke (WriteMembers)

Caller scoped:
GET    /api/v1/invites/me                          Invitations addressed to the caller
POST   /api/v1/invites/me/{organizationId}/accept  Accept
POST   /api/v1/invites/me/{organizationId}/reject  Reject
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from projectservice.core.auth import UserPrincipal, get_current_user
from projectservice.core.database import get_session
from projectservice.core.permissions import require_capability
from projectservice.models.membership import Membership
from projectservice.services import invitations as invitation_service
from projectservice.services import organizations as org_service
from projectservice.services.mail import MailService, get_mail_service
from projectservice.services.users import UserServiceClient, get_user_service
from projectservice_shared.schemas.common import Capability
from projectservice_shared.schemas.invitations import (
    InvitationCreateRequest,
    InvitationListResponse,
    InvitationResponse,
    PendingInvitationListResponse,
    PendingInvitationResponse,
)

router_scoped = APIRouter()
router_me = APIRouter()


def _pending(invitations) -> PendingInvitationListResponse:
    return PendingInvitationListResponse(
        pending_invites=[
            PendingInvitationResponse(
                user_email=i.email,
                role=i.role,
                invited_by_user_id=i.invited_by_user_id,
                created_at=i.created_at,
            )
            for i in invitations
        ]
    )


@router_scoped.get(
    "/invites",
    response_model=PendingInvitationListResponse,
    dependencies=[Depends(require_capability(Capability.READ_MEMBERS))],
)
async def list_pending_invitations(
    organizationId: uuid.UUID,
    session: AsyncSession = Depends(get_session),
):
    invitations = await invitation_service.get_pending_invitations(organizationId, session)
    return _pending(invitations)


@router_scoped.post(
    "/invites", response_model=PendingInvitationListResponse, status_code=201
)
async def invite_users(
    organizationId: uuid.UUID,
    body: InvitationCreateRequest,
    caller: Membership = Depends(require_capability(Capability.WRITE_MEMBERS)),
    session: AsyncSession = Depends(get_session),
    mail_service: MailService = Depends(get_mail_service),
    user_service: UserServiceClient = Depends(get_user_service),
):
    """Invite one or more email addresses. Nothing is created if any is rejected."""
    invitations = await invitation_service.send_invitations(
        organizationId,
        body.emails,
        body.role,
        caller.user_id,
        session,
        mail_service,
        user_service,
    )
    return _pending(invitations)


@router_scoped.delete(
    "/invites/{email}",
    status_code=204,
    dependencies=[Depends(require_capability(Capability.WRITE_MEMBERS))],
)
async def revoke_invitation(
    organizationId: uuid.UUID,
    email: str,
    session: AsyncSession = Depends(get_session),
):
    await invitation_service.revoke_invitation(organizationId, email, session)


# ---------------------------------------------------------------------------
# Caller's own invitations
# ---------------------------------------------------------------------------

@router_me.get("/invites/me", response_model=InvitationListResponse)
async def list_my_invitations(
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    invitations = await invitation_service.get_all_invitations_for_user(user.email, session)
    names = await org_service.get_organization_names(
        (i.organization_id for i in invitations), session
    )
    return InvitationListResponse(
        organization_invites=[
            InvitationResponse(
                organization_id=i.organization_id,
                organization_name=names.get(i.organization_id, ""),
                role=i.role,
            )
            for i in invitations
        ]
    )


@router_me.post("/invites/me/{organizationId}/accept", status_code=204)
async def accept_invitation(
    organizationId: uuid.UUID,
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    await invitation_service.answer_invitation(
        user.user_id, user.email, True, organizationId, session
    )


@router_me.post("/invites/me/{organizationId}/reject", status_code=204)
async def reject_invitation(
    organizationId: uuid.UUID,
    user: UserPrincipal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    await invitation_service.answer_invitation(
        user.user_id, user.email, False, organizationId, session
    )
