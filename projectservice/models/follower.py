"""Organization follower."""

import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Follower(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "organization_followers"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "user_id", name="uq_organization_follower_org_user"
        ),
    )

    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    user_id: uuid.UUID = Field(nullable=False, index=True)
