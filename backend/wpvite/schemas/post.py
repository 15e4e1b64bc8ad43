"""
WPVite Backend — Post Schemas
===============================

What:  Request bodies and response shapes for /api/posts and the public
       renderer's post data.
How:   All models extend CamelModel, so `featuredImage` and
       `featured_image` are both accepted and responses are camelCase.

Wire examples:
    POST /api/posts     {"title": "Hello", "content": [...], "status": "draft"}
    GET  /api/posts     {"data": [PostListItem...], "pagination": {...}}
    GET  /api/posts/:id {"data": PostResponse}
"""

import uuid
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import Field

from wpvite.schemas.common import CamelModel, Pagination

PostStatus = Literal["published", "draft", "private"]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(CamelModel):
    """
    Body of POST /api/posts.

    `title` is optional at the schema level so the service can answer a
    missing title with the same "Title is required" error as an empty one.
    """
    title: Optional[str] = None
    content: Any = None
    status: Optional[PostStatus] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    allow_comments: Optional[bool] = None


class PostUpdate(CamelModel):
    """
    Body of PUT /api/posts/{id}. Only fields present in the body change;
    use model_dump(exclude_unset=True) to tell "absent" from "null".
    """
    title: Optional[str] = None
    content: Any = None
    status: Optional[PostStatus] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    allow_comments: Optional[bool] = None
    slug: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(CamelModel):
    """Full post record returned by create/get/update."""
    id: uuid.UUID
    slug: str
    title: str
    content: Any = None
    excerpt: Optional[str] = None
    status: PostStatus
    featured_image: Optional[str] = None
    allow_comments: bool = True
    author_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class PostListItem(CamelModel):
    """Compact row for the admin post table, with the author joined in."""
    id: uuid.UUID
    title: str
    slug: str
    status: PostStatus
    updated_at: datetime
    author_name: Optional[str] = None
    author_avatar: Optional[str] = None


class PostListResponse(CamelModel):
    data: List[PostListItem] = Field(default_factory=list)
    pagination: Pagination


# ══════════════════════════════════════════════════════════════════════════
# Public Site Models
# ══════════════════════════════════════════════════════════════════════════


class PublicPostSummary(CamelModel):
    """Card on the public home page."""
    id: uuid.UUID
    title: str
    slug: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    updated_at: datetime
    author_name: Optional[str] = None
    author_avatar: Optional[str] = None


class PublicPost(PublicPostSummary):
    """Single post page; adds the block content."""
    content: Any = None
