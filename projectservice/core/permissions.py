"""
Authorization guard.

``has_capability`` decides whether a membership grants a capability;
``require_capability`` wraps it as a route dependency scoped to the
``organizationId`` path parameter.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from projectservice.core.auth import UserPrincipal, get_current_user
from projectservice.core.database import get_session
from projectservice.core.errors import MissingPrivilege
from projectservice.core.roles import RoleCatalog, get_role_catalog
from projectservice.models.membership import Membership
from projectservice.services.memberships import get_membership
from projectservice_shared.schemas.common import Capability

log = structlog.get_logger()


def has_capability(
    membership: Optional[Membership],
    capability: Capability,
    catalog: RoleCatalog,
) -> bool:
    # Non-members hold no capabilities.
    if membership is None:
        return False
    return capability in catalog.capabilities_of(membership.role)


def require_capability(capability: Capability):
    """Dependency factory: the caller's membership, if it grants ``capability``."""

    async def _check(
        organizationId: uuid.UUID,
        user: UserPrincipal = Depends(get_current_user),
        session: AsyncSession = Depends(get_session),
        catalog: RoleCatalog = Depends(get_role_catalog),
    ) -> Membership:
        membership = await get_membership(user.user_id, organizationId, session)
        if not has_capability(membership, capability, catalog):
            log.info(
                "auth.missing_privilege",
                org_id=str(organizationId),
                user_id=str(user.user_id),
                capability=capability.value,
            )
            raise MissingPrivilege(
                f"User does not have {capability.value} privilege in this organization"
            )
        return membership

    return _check
