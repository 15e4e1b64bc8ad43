"""
WPVite Backend — Post SQLAlchemy Model
========================================

What:  ORM model for the `posts` table.
Who:   Written by PostService (admin API), read by SiteService (public
       pages, sitemap).

Table Design:
    - slug: unique, URL segment used by the public route /p/{slug}
    - content: JSONB list of editor blocks, stored as-is; the theme
      renderer understands paragraph, heading and image blocks
    - status: 'published' posts appear on the home page and sitemap
    - updated_at: bumped on every update; drives list ordering and sitemap lastmod

    Index on (status, updated_at DESC):
        Serves both the admin list and the public "latest published" query.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Boolean, Enum, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from wpvite.database import Base

POST_STATUSES = ("published", "draft", "private")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """
    A blog post authored in the admin SPA.

    Lifecycle:
        1. Created as 'draft' unless the editor publishes immediately
        2. Updated in place (title, content, slug, status, ...)
        3. Deleted permanently; there is no trash
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[Any] = mapped_column(JSONB, nullable=True)

    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        Enum(*POST_STATUSES, name="post_status"),
        nullable=False,
        default="draft",
        server_default=text("'draft'"),
    )

    featured_image: Mapped[str | None] = mapped_column(String(512), nullable=True)

    allow_comments: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    author_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, slug='{self.slug}', status='{self.status}')>"


Index("idx_posts_status_updated_at", Post.status, Post.updated_at.desc())
