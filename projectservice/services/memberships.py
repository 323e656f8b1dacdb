"""
Membership service: who belongs to an organization and with which role.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from projectservice.core.errors import (
    AlreadyMember,
    MembershipNotFound,
    OrganizationNotFound,
)
from projectservice.models.membership import Membership
from projectservice.models.organization import Organization
from projectservice_shared.schemas.common import Role

log = structlog.get_logger()


async def _organization_exists(
    organization_id: uuid.UUID, session: AsyncSession
) -> bool:
    result = await session.execute(
        select(Organization.id).where(Organization.id == organization_id)
    )
    return result.scalar_one_or_none() is not None


async def get_membership(
    user_id: uuid.UUID, organization_id: uuid.UUID, session: AsyncSession
) -> Optional[Membership]:
    """Return the user's membership in the organization, or None."""
    result = await session.execute(
        select(Membership).where(
            Membership.organization_id == organization_id,
            Membership.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def add_member(
    user_id: uuid.UUID,
    organization_id: uuid.UUID,
    role: Role,
    session: AsyncSession,
) -> Membership:
    """Admit a user into an organization.

    Raises AlreadyMember if the user already belongs to it, whether that is
    seen by the lookup or by the unique constraint on insert, and
    OrganizationNotFound if the organization does not exist.
    """
    if await get_membership(user_id, organization_id, session):
        raise AlreadyMember.for_user(user_id, organization_id)

    membership = Membership(
        organization_id=organization_id,
        user_id=user_id,
        role=Role(role).value,
    )
    try:
        async with session.begin_nested():
            session.add(membership)
    except IntegrityError:
        # Foreign key failure: the organization is gone, not a duplicate.
        if not await _organization_exists(organization_id, session):
            raise OrganizationNotFound(organization_id) from None
        log.info(
            "membership.insert_conflict",
            org_id=str(organization_id),
            user_id=str(user_id),
        )
        raise AlreadyMember.for_user(user_id, organization_id) from None

    log.info(
        "membership.added",
        org_id=str(organization_id),
        user_id=str(user_id),
        role=membership.role,
    )
    return membership


async def remove_member(
    user_id: uuid.UUID, organization_id: uuid.UUID, session: AsyncSession
) -> None:
    """Remove a user from an organization. Removing a non-member is a no-op."""
    result = await session.execute(
        delete(Membership).where(
            Membership.organization_id == organization_id,
            Membership.user_id == user_id,
        )
    )
    if result.rowcount:
        log.info("membership.removed", org_id=str(organization_id), user_id=str(user_id))


async def list_members(
    organization_id: uuid.UUID, session: AsyncSession
) -> list[Membership]:
    result = await session.execute(
        select(Membership)
        .where(Membership.organization_id == organization_id)
        .order_by(Membership.created_at, Membership.id)
    )
    return list(result.scalars().all())


async def list_memberships_for_user(
    user_id: uuid.UUID, session: AsyncSession
) -> list[Membership]:
    result = await session.execute(
        select(Membership)
        .where(Membership.user_id == user_id)
        .order_by(Membership.created_at, Membership.id)
    )
    return list(result.scalars().all())


async def change_role(
    organization_id: uuid.UUID,
    target_user_id: uuid.UUID,
    new_role: Role,
    session: AsyncSession,
) -> Membership:
    """Set the role of an existing member, keeping the original membership row."""
    membership = await get_membership(target_user_id, organization_id, session)
    if not membership:
        raise MembershipNotFound(target_user_id, organization_id)

    previous = membership.role
    membership.role = Role(new_role).value
    session.add(membership)
    await session.flush()

    log.info(
        "membership.role_changed",
        org_id=str(organization_id),
        user_id=str(target_user_id),
        previous=previous,
        role=membership.role,
    )
    return membership
