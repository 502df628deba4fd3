"""Create links table.

Revision ID: 003
Revises: 002
Create Date: 2026-10-17

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the links table."""
    op.create_table(
        "links",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column(
            "url",
            sa.Text(),
            nullable=False,
            comment="Absolute URL the link points to",
        ),
        sa.Column(
            "icon",
            sa.String(50),
            nullable=True,
            comment="Optional icon identifier (e.g. 'github')",
        ),
        sa.Column(
            "position",
            sa.Integer(),
            nullable=False,
            comment="Zero-based rank; contiguous 0..n-1 per owner",
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
            comment="Whether the link is shown on the public profile page",
        ),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column(
            "version",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("1"),
            comment="Optimistic concurrency stamp, bumped on every update",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_links")),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["api.profiles.id"],
            name=op.f("fk_links_user_id_profiles"),
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            "position >= 0",
            name=op.f("ck_links_position_non_negative"),
        ),
        schema="api",
    )
    op.create_index(
        op.f("ix_links_user_id"),
        "links",
        ["user_id"],
        schema="api",
    )
    op.create_index(
        "ix_links_user_id_position",
        "links",
        ["user_id", "position"],
        schema="api",
    )


def downgrade() -> None:
    """Drop the links table."""
    op.drop_index("ix_links_user_id_position", table_name="links", schema="api")
    op.drop_index(op.f("ix_links_user_id"), table_name="links", schema="api")
    op.drop_table("links", schema="api")
