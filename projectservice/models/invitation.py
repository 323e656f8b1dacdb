"""Pending organization invitation, keyed by normalized email."""

import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Invitation(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "organization_invitations"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "email", name="uq_organization_invitation_org_email"
        ),
    )

    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    email: str = Field(max_length=320, nullable=False, index=True)
    role: str = Field(max_length=32, nullable=False)
    invited_by_user_id: uuid.UUID = Field(nullable=False)
