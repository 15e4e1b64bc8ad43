"""
WPVite Backend — Post Service (Business Logic)
================================================

What:  CRUD for blog posts behind /api/posts.
How:   Plain SQLAlchemy selects on the request's AsyncSession; flushes only,
       the commit happens in get_db_session once the handler returns.
Who:   Called by the handlers in routes/posts.py.

Slug Rules:
    - Derived from the title with python-slugify ("Hello, World!" → "hello-world")
    - A title with no sluggable characters falls back to "post"
    - On collision a 5-character base36 suffix is appended ("hello-world-k3x9a")
    - An explicit slug in an update is slugified the same way; it is not
      checked for collisions (the unique index rejects a duplicate)

Listing:
    Newest `updated_at` first, offset pagination, author name/avatar joined.
    status="all" (or no status) lists every post; the total counts only the
    posts matching the same filter.
"""

import logging
import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import Optional

from slugify import slugify
from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wpvite.exceptions import DatabaseError, NotFoundError, ValidationError
from wpvite.models.post import POST_STATUSES, Post
from wpvite.models.user import User
from wpvite.schemas.common import Pagination
from wpvite.schemas.post import (
    PostCreate,
    PostListItem,
    PostListResponse,
    PostResponse,
    PostUpdate,
)

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_NON_NULLABLE_FIELDS = ("title", "status", "allow_comments")


def make_slug(text: str) -> str:
    return slugify(text) or "post"


def random_suffix(length: int = 5) -> str:
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(length))


class PostService:
    """
    Business logic layer for post operations.

    Error Handling Strategy:
        NotFoundError/ValidationError propagate as-is; SQLAlchemy failures
        are logged with detail and re-raised as a generic DatabaseError.
    """

    async def list_posts(
        self,
        db: AsyncSession,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> PostListResponse:
        """
        Paginated post list for the admin table.

        Query plan:
            SELECT posts.*, users.name, users.avatar_url
            FROM posts LEFT OUTER JOIN users ON posts.author_id = users.id
            [WHERE posts.status = :status]
            ORDER BY posts.updated_at DESC LIMIT :limit OFFSET :offset

        Raises:
            ValidationError: status is not one of published/draft/private/all
        """
        if status and status != "all" and status not in POST_STATUSES:
            raise ValidationError(
                message=f"Unknown status '{status}'",
                field="status",
                context={"allowed": [*POST_STATUSES, "all"]},
            )
        filtered = bool(status) and status != "all"

        query = (
            select(
                Post.id,
                Post.title,
                Post.slug,
                Post.status,
                Post.updated_at,
                User.name.label("author_name"),
                User.avatar_url.label("author_avatar"),
            )
            .outerjoin(User, Post.author_id == User.id)
            .order_by(desc(Post.updated_at))
            .limit(limit)
            .offset((page - 1) * limit)
        )
        count_query = select(func.count(Post.id))
        if filtered:
            query = query.where(Post.status == status)
            count_query = count_query.where(Post.status == status)

        try:
            result = await db.execute(query)
            rows = result.mappings().all()

            count_result = await db.execute(count_query)
            total = count_result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch posts",
                context={"error_type": type(e).__name__},
            )

        return PostListResponse(
            data=[PostListItem.model_validate(dict(row)) for row in rows],
            pagination=Pagination.build(page, limit, total),
        )

    async def _slug_exists(self, db: AsyncSession, slug: str) -> bool:
        result = await db.execute(select(Post.id).where(Post.slug == slug).limit(1))
        return result.scalar_one_or_none() is not None

    async def create_post(self, db: AsyncSession, data: PostCreate, author_id: str) -> PostResponse:
        """
        Create a post owned by `author_id`.

        Defaults: content [], status draft, excerpt "", allow_comments true.

        Raises:
            ValidationError: Missing or blank title (→ 400)
        """
        if not data.title or not data.title.strip():
            raise ValidationError(message="Title is required", field="title")

        try:
            slug = make_slug(data.title)
            if await self._slug_exists(db, slug):
                slug = f"{slug}-{random_suffix()}"

            now = datetime.now(timezone.utc)
            post = Post(
                id=uuid.uuid4(),
                title=data.title,
                slug=slug,
                content=data.content if data.content is not None else [],
                status=data.status or "draft",
                excerpt=data.excerpt or "",
                featured_image=data.featured_image or None,
                allow_comments=True if data.allow_comments is None else data.allow_comments,
                author_id=uuid.UUID(author_id),
                created_at=now,
                updated_at=now,
            )
            db.add(post)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create post",
                context={"error_type": type(e).__name__},
            )

        logger.info("Post %s created (slug=%s, status=%s)", post.id, post.slug, post.status)
        return PostResponse.model_validate(post)

    async def _load(self, db: AsyncSession, post_id: uuid.UUID) -> Post:
        result = await db.execute(select(Post).where(Post.id == post_id))
        post = result.scalar_one_or_none()
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        return post

    async def get_post(self, db: AsyncSession, post_id: uuid.UUID) -> PostResponse:
        """
        Raises:
            NotFoundError: Post with given ID does not exist (→ 404)
        """
        try:
            post = await self._load(db, post_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e))
            raise DatabaseError(message="Failed to fetch post", context={"post_id": str(post_id)})
        return PostResponse.model_validate(post)

    async def update_post(self, db: AsyncSession, post_id: uuid.UUID, data: PostUpdate) -> PostResponse:
        """
        Apply the fields present in the request body; absent fields keep their value.

        Raises:
            NotFoundError:   Post does not exist (→ 404)
            ValidationError: null title/status/allowComments, or a blank title
        """
        changes = data.model_dump(exclude_unset=True)
        for name in _NON_NULLABLE_FIELDS:
            if name in changes and changes[name] is None:
                raise ValidationError(message=f"'{name}' cannot be null", field=name)
        if "title" in changes and not changes["title"].strip():
            raise ValidationError(message="Title is required", field="title")

        slug = changes.pop("slug", None)
        if slug:
            changes["slug"] = make_slug(slug)

        try:
            post = await self._load(db, post_id)
            for name, value in changes.items():
                setattr(post, name, value)
            post.updated_at = datetime.now(timezone.utc)
            await db.flush()
        except IntegrityError as e:
            logger.warning("Update of post %s violated a constraint: %s", post_id, str(e))
            raise ValidationError(
                message="A post with this slug already exists",
                field="slug",
                context={"post_id": str(post_id)},
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating post %s: %s", post_id, str(e))
            raise DatabaseError(message="Failed to update post", context={"post_id": str(post_id)})

        logger.info("Post %s updated (%s)", post_id, ", ".join(sorted(changes)) or "touch")
        return PostResponse.model_validate(post)

    async def delete_post(self, db: AsyncSession, post_id: uuid.UUID) -> None:
        """
        Raises:
            NotFoundError: Post does not exist (→ 404)
        """
        try:
            result = await db.execute(
                delete(Post).where(Post.id == post_id).returning(Post.id)
            )
            deleted = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error deleting post %s: %s", post_id, str(e))
            raise DatabaseError(message="Failed to delete post", context={"post_id": str(post_id)})

        if deleted is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        logger.info("Post %s deleted", post_id)


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
