"""
Invitation service: the invite, accept/reject and revoke lifecycle, plus
organization follow/unfollow.

Per (organization, email) an invitation moves through::

    [none] --send--> [pending] --accept--> [membership, invite deleted]
                     [pending] --reject/revoke--> [none]

Emails are compared and stored trimmed and lower-cased.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Iterable, Optional

import structlog
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from projectservice.core.errors import (
    AlreadyMember,
    DuplicateInvitation,
    OrganizationNotFound,
)
from projectservice.models.follower import Follower
from projectservice.models.invitation import Invitation
from projectservice.models.organization import Organization
from projectservice.services import memberships
from projectservice.services.organizations import find_organization, get_organization
from projectservice_shared.schemas.common import Role

if TYPE_CHECKING:
    from projectservice.services.mail import MailService
    from projectservice.services.users import UserServiceClient

log = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def _find_invitation(
    organization_id: uuid.UUID, email: str, session: AsyncSession
) -> Optional[Invitation]:
    result = await session.execute(
        select(Invitation).where(
            Invitation.organization_id == organization_id,
            Invitation.email == email,
        )
    )
    return result.scalar_one_or_none()


async def _already_invited(
    organization_id: uuid.UUID, emails: list[str], session: AsyncSession
) -> set[str]:
    result = await session.execute(
        select(Invitation.email).where(
            Invitation.organization_id == organization_id,
            Invitation.email.in_(emails),
        )
    )
    return set(result.scalars().all())


async def _insert_invitation(
    org: Organization,
    email: str,
    role: Role,
    invited_by_user_id: uuid.UUID,
    session: AsyncSession,
) -> Invitation:
    if await _find_invitation(org.id, email, session):
        raise DuplicateInvitation([email])

    invitation = Invitation(
        organization_id=org.id,
        email=email,
        role=Role(role).value,
        invited_by_user_id=invited_by_user_id,
    )
    try:
        async with session.begin_nested():
            session.add(invitation)
    except IntegrityError:
        if await find_organization(org.id, session) is None:
            raise OrganizationNotFound(org.id) from None
        log.info("invitation.insert_conflict", org_id=str(org.id), email=email)
        raise DuplicateInvitation([email]) from None

    log.info(
        "invitation.sent",
        org_id=str(org.id),
        email=email,
        role=invitation.role,
        invited_by=str(invited_by_user_id),
    )
    return invitation


async def _notify(
    org: Organization, invitations: list[Invitation], mail_service: MailService
) -> None:
    for invitation in invitations:
        await mail_service.send_organization_invitation(
            invitation.email, org.name, invitation.invited_by_user_id
        )


async def send_invitation(
    organization_id: uuid.UUID,
    email: str,
    role: Role,
    invited_by_user_id: uuid.UUID,
    session: AsyncSession,
    mail_service: MailService,
) -> Invitation:
    """Create a pending invitation and notify the invitee.

    Raises OrganizationNotFound or DuplicateInvitation. The inviter's
    privileges are checked by the caller.
    """
    org = await get_organization(organization_id, session)
    invitation = await _insert_invitation(
        org, normalize_email(email), role, invited_by_user_id, session
    )
    await _notify(org, [invitation], mail_service)
    return invitation


async def send_invitations(
    organization_id: uuid.UUID,
    emails: Iterable[str],
    role: Role,
    invited_by_user_id: uuid.UUID,
    session: AsyncSession,
    mail_service: MailService,
    user_service: Optional[UserServiceClient] = None,
) -> list[Invitation]:
    """Invite several addresses at once.

    All addresses are validated before anything is written: if any is
    already invited, or (when a user service is given) belongs to an
    existing member, nothing is created. Mails are queued only after every
    invitation in the batch has been written.
    """
    org = await get_organization(organization_id, session)
    normalized = list(dict.fromkeys(normalize_email(e) for e in emails))

    already_invited = await _already_invited(organization_id, normalized, session)
    if already_invited:
        raise DuplicateInvitation(e for e in normalized if e in already_invited)

    if user_service is not None:
        member_ids = {
            m.user_id for m in await memberships.list_members(organization_id, session)
        }
        profiles = await user_service.get_users_by_email(normalized)
        member_emails = {
            normalize_email(p.email) for p in profiles if p.id in member_ids
        }
        if member_emails:
            raise AlreadyMember.for_emails(e for e in normalized if e in member_emails)

    invitations = [
        await _insert_invitation(org, email, role, invited_by_user_id, session)
        for email in normalized
    ]
    await _notify(org, invitations, mail_service)
    return invitations


async def revoke_invitation(
    organization_id: uuid.UUID, email: str, session: AsyncSession
) -> None:
    """Delete a pending invitation. Revoking a missing invitation is a no-op."""
    email = normalize_email(email)
    result = await session.execute(
        delete(Invitation).where(
            Invitation.organization_id == organization_id,
            Invitation.email == email,
        )
    )
    if result.rowcount:
        log.info("invitation.revoked", org_id=str(organization_id), email=email)


async def get_all_invitations_for_user(
    email: str, session: AsyncSession
) -> list[Invitation]:
    result = await session.execute(
        select(Invitation)
        .where(Invitation.email == normalize_email(email))
        .order_by(Invitation.created_at, Invitation.id)
    )
    return list(result.scalars().all())


async def get_pending_invitations(
    organization_id: uuid.UUID, session: AsyncSession
) -> list[Invitation]:
    result = await session.execute(
        select(Invitation)
        .where(Invitation.organization_id == organization_id)
        .order_by(Invitation.created_at, Invitation.id)
    )
    return list(result.scalars().all())


async def answer_invitation(
    user_id: uuid.UUID,
    email: str,
    accept: bool,
    organization_id: uuid.UUID,
    session: AsyncSession,
) -> None:
    """Accept or reject the invitation addressed to ``email``.

    A missing invitation is a no-op. Accepting while already a member of the
    organization still consumes the invitation.
    """
    email = normalize_email(email)
    invitation = await _find_invitation(organization_id, email, session)
    if not invitation:
        log.info("invitation.answer_missing", org_id=str(organization_id), email=email)
        return

    invitation_id = invitation.id
    role = Role(invitation.role)

    if accept:
        try:
            await memberships.add_member(user_id, organization_id, role, session)
        except AlreadyMember:
            log.info(
                "invitation.accepted_existing_member",
                org_id=str(organization_id),
                user_id=str(user_id),
            )

    await session.execute(delete(Invitation).where(Invitation.id == invitation_id))
    log.info(
        "invitation.accepted" if accept else "invitation.rejected",
        org_id=str(organization_id),
        user_id=str(user_id),
        email=email,
    )


# ---------------------------------------------------------------------------
# Followers
# ---------------------------------------------------------------------------

async def _find_follower(
    user_id: uuid.UUID, organization_id: uuid.UUID, session: AsyncSession
) -> Optional[Follower]:
    result = await session.execute(
        select(Follower).where(
            Follower.organization_id == organization_id,
            Follower.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def follow_organization(
    user_id: uuid.UUID, organization_id: uuid.UUID, session: AsyncSession
) -> Follower:
    """Follow an organization, returning the existing row if already following."""
    existing = await _find_follower(user_id, organization_id, session)
    if existing:
        return existing

    follower = Follower(organization_id=organization_id, user_id=user_id)
    try:
        async with session.begin_nested():
            session.add(follower)
    except IntegrityError:
        winner = await _find_follower(user_id, organization_id, session)
        if winner is not None:
            return winner
        if await find_organization(organization_id, session) is None:
            raise OrganizationNotFound(organization_id) from None
        raise

    log.info("org.followed", org_id=str(organization_id), user_id=str(user_id))
    return follower


async def unfollow_organization(
    user_id: uuid.UUID, organization_id: uuid.UUID, session: AsyncSession
) -> None:
    result = await session.execute(
        delete(Follower).where(
            Follower.organization_id == organization_id,
            Follower.user_id == user_id,
        )
    )
    if result.rowcount:
        log.info("org.unfollowed", org_id=str(organization_id), user_id=str(user_id))
