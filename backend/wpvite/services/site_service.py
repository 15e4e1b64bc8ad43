"""
WPVite Backend — Public Site Data Access
==========================================

What:  Read-only queries behind the server-rendered pages and the sitemap.
Who:   routes/public.py, after classify() has decided what kind of page it is.

    fetch_site_options()     → {key: value}
    fetch_latest_posts(n)    → published posts, newest first, author joined
    fetch_post_by_slug(slug) → post with author, or None
    fetch_sitemap_entries()  → (slug, updated_at) for every published post

fetch_post_by_slug does not filter on status: a draft is reachable by its
exact URL, which editors use as a preview link.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wpvite.exceptions import DatabaseError
from wpvite.models.option import Option
from wpvite.models.post import Post
from wpvite.models.user import User
from wpvite.schemas.post import PublicPost, PublicPostSummary

logger = logging.getLogger(__name__)

_SUMMARY_COLUMNS = (
    Post.id,
    Post.title,
    Post.slug,
    Post.excerpt,
    Post.featured_image,
    Post.updated_at,
    User.name.label("author_name"),
    User.avatar_url.label("author_avatar"),
)


class SiteService:

    async def fetch_site_options(self, db: AsyncSession) -> Dict[str, Optional[str]]:
        try:
            result = await db.execute(select(Option.key, Option.value))
            return {key: value for key, value in result.all()}
        except SQLAlchemyError as e:
            logger.error("Database error reading site options: %s", str(e))
            raise DatabaseError(context={"query": "site_options"})

    async def fetch_latest_posts(self, db: AsyncSession, limit: int = 10) -> List[PublicPostSummary]:
        try:
            result = await db.execute(
                select(*_SUMMARY_COLUMNS)
                .outerjoin(User, Post.author_id == User.id)
                .where(Post.status == "published")
                .order_by(desc(Post.updated_at))
                .limit(limit)
            )
            rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error("Database error reading latest posts: %s", str(e))
            raise DatabaseError(context={"query": "latest_posts"})
        return [PublicPostSummary.model_validate(dict(row)) for row in rows]

    async def fetch_post_by_slug(self, db: AsyncSession, slug: str) -> Optional[PublicPost]:
        try:
            result = await db.execute(
                select(*_SUMMARY_COLUMNS, Post.content)
                .outerjoin(User, Post.author_id == User.id)
                .where(Post.slug == slug)
                .limit(1)
            )
            row = result.mappings().first()
        except SQLAlchemyError as e:
            logger.error("Database error reading post %r: %s", slug, str(e))
            raise DatabaseError(context={"query": "post_by_slug", "slug": slug})
        if row is None:
            return None
        return PublicPost.model_validate(dict(row))

    async def fetch_sitemap_entries(self, db: AsyncSession) -> List[Tuple[str, datetime]]:
        try:
            result = await db.execute(
                select(Post.slug, Post.updated_at)
                .where(Post.status == "published")
                .order_by(desc(Post.updated_at))
            )
            return [(slug, updated_at) for slug, updated_at in result.all()]
        except SQLAlchemyError as e:
            logger.error("Database error reading sitemap entries: %s", str(e))
            raise DatabaseError(context={"query": "sitemap"})


# ── Singleton Instance ────────────────────────────────────────────────────
site_service = SiteService()
