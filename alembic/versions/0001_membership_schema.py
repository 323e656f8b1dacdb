"""Organizations, memberships, invitations and followers.

Revision ID: 0001_membership_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001_membership_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )


def _organization_fk() -> sa.Column:
    return sa.Column(
        "organization_id",
        sa.Uuid(),
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("legal_info", sa.String(512), nullable=True),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("name", name="uq_organizations_name"),
    )

    # One role per user per organization
    op.create_table(
        "organization_memberships",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _organization_fk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "organization_id", "user_id", name="uq_organization_membership_org_user"
        ),
    )
    op.create_index(
        "ix_organization_memberships_user_id", "organization_memberships", ["user_id"]
    )

    # One pending invitation per email per organization
    op.create_table(
        "organization_invitations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _organization_fk(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("invited_by_user_id", sa.Uuid(), nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "organization_id", "email", name="uq_organization_invitation_org_email"
        ),
    )
    op.create_index(
        "ix_organization_invitations_email", "organization_invitations", ["email"]
    )

    op.create_table(
        "organization_followers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _organization_fk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "organization_id", "user_id", name="uq_organization_follower_org_user"
        ),
    )
    op.create_index(
        "ix_organization_followers_user_id", "organization_followers", ["user_id"]
    )


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    op.drop_index("ix_organization_followers_user_id", table_name="organization_followers")
    op.drop_table("organization_followers")
    op.drop_index("ix_organization_invitations_email", table_name="organization_invitations")
    op.drop_table("organization_invitations")
    op.drop_index("ix_organization_memberships_user_id", table_name="organization_memberships")
    op.drop_table("organization_memberships")
    op.drop_table("organizations")
