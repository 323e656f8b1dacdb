"""Organization membership: one row per (organization, user)."""

import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Membership(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "organization_memberships"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "user_id", name="uq_organization_membership_org_user"
        ),
    )

    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    user_id: uuid.UUID = Field(nullable=False, index=True)
    role: str = Field(max_length=32, nullable=False)  # ORG_ADMIN | ORG_MEMBER
