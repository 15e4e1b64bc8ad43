"""Create CMS tables

Revision ID: 001
Revises: None
Create Date: 2025-03-14 00:00:00.000000+00:00

What:  users, posts, media and options, plus the user_role and post_status enums.
How:   UUID keys default to gen_random_uuid() (PostgreSQL 13+).

Rollback: downgrade() drops every table and both enum types.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLES = ("super_admin", "editor", "author")
POST_STATUSES = ("published", "draft", "private")


def upgrade() -> None:
    user_role = postgresql.ENUM(*USER_ROLES, name="user_role")
    post_status = postgresql.ENUM(*POST_STATUSES, name="post_status")

    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "google_id",
            sa.String(255),
            nullable=True,
            comment="Filled in on first Google login",
        ),
        sa.Column(
            "role",
            user_role,
            nullable=False,
            server_default=sa.text("'author'"),
        ),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("avatar_url", sa.String(512), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "posts",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column(
            "content",
            postgresql.JSONB(),
            nullable=True,
            comment="Editor blocks, stored as sent by the admin SPA",
        ),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column(
            "status",
            post_status,
            nullable=False,
            server_default=sa.text("'draft'"),
        ),
        sa.Column("featured_image", sa.String(512), nullable=True),
        sa.Column(
            "allow_comments",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
    )

    # Admin list and public "latest published" both filter on status and
    # order by updated_at DESC
    op.create_index(
        "idx_posts_status_updated_at",
        "posts",
        ["status", sa.text("updated_at DESC")],
    )

    op.create_table(
        "media",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("url", sa.String(512), nullable=False),
        sa.Column("type", sa.String(100), nullable=True, comment="MIME type"),
        sa.Column("alt_text", sa.String(255), nullable=True),
        sa.Column(
            "uploaded_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "options",
        sa.Column("key", sa.String(255), nullable=False),
        sa.Column("value", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    """Drop every CMS table. Destructive: all content is lost."""
    op.drop_table("options")
    op.drop_table("media")
    op.drop_index("idx_posts_status_updated_at", table_name="posts")
    op.drop_table("posts")
    op.drop_table("users")
    postgresql.ENUM(name="post_status").drop(op.get_bind(), checkfirst=True)
    postgresql.ENUM(name="user_role").drop(op.get_bind(), checkfirst=True)
