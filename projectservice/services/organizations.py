"""
Organization service: business logic for organization CRUD.
"""

from __future__ import annotations

import uuid
from typing import Iterable, Optional

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from projectservice.core.errors import OrganizationNameTaken, OrganizationNotFound
from projectservice.models.membership import Membership
from projectservice.models.organization import Organization
from projectservice.services import memberships
from projectservice_shared.schemas.common import Role
from projectservice_shared.schemas.organizations import (
    OrganizationCreateRequest,
    OrganizationUpdateRequest,
)

log = structlog.get_logger()


async def find_organization(
    organization_id: uuid.UUID, session: AsyncSession
) -> Optional[Organization]:
    result = await session.execute(
        select(Organization).where(Organization.id == organization_id)
    )
    return result.scalar_one_or_none()


async def get_organization(
    organization_id: uuid.UUID, session: AsyncSession
) -> Organization:
    """Get an organization by id; raises OrganizationNotFound if missing."""
    org = await find_organization(organization_id, session)
    if not org:
        raise OrganizationNotFound(organization_id)
    return org


async def create_organization(
    req: OrganizationCreateRequest,
    creator_id: uuid.UUID,
    session: AsyncSession,
) -> Organization:
    """Create an organization and admit the creator as its admin."""
    name = req.name
    existing = await session.execute(
        select(Organization).where(Organization.name == name)
    )
    if existing.scalar_one_or_none():
        raise OrganizationNameTaken(name)

    org = Organization(
        name=name,
        description=req.description,
        legal_info=req.legal_info,
        created_by_user_id=creator_id,
    )
    try:
        async with session.begin_nested():
            session.add(org)
    except IntegrityError:
        raise OrganizationNameTaken(name) from None

    await memberships.add_member(creator_id, org.id, Role.ADMIN, session)

    log.info("org.created", org_id=str(org.id), name=name, creator=str(creator_id))
    return org


async def list_organizations(
    page: int, per_page: int, session: AsyncSession
) -> tuple[list[Organization], int]:
    """One page of organizations ordered by name, plus the total count."""
    total = (
        await session.execute(select(func.count()).select_from(Organization))
    ).scalar_one()
    result = await session.execute(
        select(Organization)
        .order_by(Organization.name)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return list(result.scalars().all()), total


async def list_organizations_for_user(
    user_id: uuid.UUID, session: AsyncSession
) -> list[dict]:
    """List all organizations a user belongs to, with their role."""
    result = await session.execute(
        select(Organization, Membership.role, Membership.created_at)
        .join(Membership, Membership.organization_id == Organization.id)
        .where(Membership.user_id == user_id)
        .order_by(Membership.created_at)
    )
    return [
        {
            "id": org.id,
            "name": org.name,
            "description": org.description,
            "approved": org.approved,
            "role": role,
            "member_since": member_since,
        }
        for org, role, member_since in result.all()
    ]


async def update_organization(
    org: Organization,
    req: OrganizationUpdateRequest,
    session: AsyncSession,
) -> Organization:
    if req.description is not None:
        org.description = req.description
    if req.legal_info is not None:
        org.legal_info = req.legal_info
    if req.active is not None:
        org.active = req.active

    session.add(org)
    await session.flush()

    log.info("org.updated", org_id=str(org.id))
    return org


async def get_organization_names(
    organization_ids: Iterable[uuid.UUID], session: AsyncSession
) -> dict[uuid.UUID, str]:
    ids = set(organization_ids)
    if not ids:
        return {}
    result = await session.execute(
        select(Organization.id, Organization.name).where(Organization.id.in_(ids))
    )
    return {org_id: name for org_id, name in result.all()}
