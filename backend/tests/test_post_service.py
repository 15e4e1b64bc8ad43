"""
WPVite Backend — Post Service Unit Tests
==========================================

What:  Tests for PostService business logic (list, create, get, update, delete).
How:   Uses mock DB sessions; queries are not executed, only their results mocked.

What we test:
    ✅ Slug generation and collision suffix
    ✅ Create defaults and the "Title is required" rule
    ✅ Partial update semantics, null rejection, slug conflicts
    ✅ Missing posts raise NotFoundError
    ✅ List pagination metadata and status validation
"""

import re
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from wpvite.exceptions import DatabaseError, NotFoundError, ValidationError
from wpvite.models.post import Post
from wpvite.schemas.post import PostCreate, PostUpdate
from wpvite.services.post_service import PostService, make_slug, random_suffix


def _existing_post(**overrides):
    now = datetime(2025, 3, 14, tzinfo=timezone.utc)
    fields = dict(
        id=uuid4(),
        title="Original",
        slug="original",
        content=[],
        excerpt="",
        status="draft",
        featured_image=None,
        allow_comments=True,
        author_id=uuid4(),
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return Post(**fields)


def _result(scalar=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    return result


class TestSlugs:

    def test_make_slug(self):
        assert make_slug("Hello, World!") == "hello-world"

    def test_make_slug_fallback(self):
        assert make_slug("!!!") == "post"

    def test_random_suffix(self):
        assert re.fullmatch(r"[a-z0-9]{5}", random_suffix())


class TestPostServiceCreate:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_create_post_defaults(self, mock_db_session):
        mock_db_session.execute.return_value = _result(None)
        author_id = str(uuid4())

        result = await self.service.create_post(
            mock_db_session, PostCreate(title="Hello World"), author_id=author_id
        )

        assert result.slug == "hello-world"
        assert result.status == "draft"
        assert result.content == []
        assert result.excerpt == ""
        assert result.allow_comments is True
        assert str(result.author_id) == author_id
        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_post_slug_collision_gets_suffix(self, mock_db_session):
        mock_db_session.execute.return_value = _result(uuid4())

        result = await self.service.create_post(
            mock_db_session, PostCreate(title="Hello World"), author_id=str(uuid4())
        )

        assert re.fullmatch(r"hello-world-[a-z0-9]{5}", result.slug)

    @pytest.mark.asyncio
    async def test_create_post_keeps_given_fields(self, mock_db_session):
        mock_db_session.execute.return_value = _result(None)
        data = PostCreate.model_validate({
            "title": "Launch",
            "status": "published",
            "featuredImage": "/uploads/a.png",
            "allowComments": False,
            "content": [{"type": "paragraph", "content": "hi"}],
        })

        result = await self.service.create_post(mock_db_session, data, author_id=str(uuid4()))

        assert result.status == "published"
        assert result.featured_image == "/uploads/a.png"
        assert result.allow_comments is False
        assert result.content == [{"type": "paragraph", "content": "hi"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", [None, "", "   "])
    async def test_create_post_requires_title(self, mock_db_session, title):
        with pytest.raises(ValidationError, match="Title is required"):
            await self.service.create_post(
                mock_db_session, PostCreate(title=title), author_id=str(uuid4())
            )
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_post_database_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.create_post(
                mock_db_session, PostCreate(title="Hi"), author_id=str(uuid4())
            )


class TestPostServiceGetUpdateDelete:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_get_post_found(self, mock_db_session):
        post = _existing_post()
        mock_db_session.execute.return_value = _result(post)

        result = await self.service.get_post(mock_db_session, post.id)

        assert result.id == post.id
        assert result.to_json()["allowComments"] is True

    @pytest.mark.asyncio
    async def test_get_post_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _result(None)

        with pytest.raises(NotFoundError):
            await self.service.get_post(mock_db_session, uuid4())

    @pytest.mark.asyncio
    async def test_update_post_changes_only_given_fields(self, mock_db_session):
        post = _existing_post(excerpt="keep me")
        before = post.updated_at
        mock_db_session.execute.return_value = _result(post)

        result = await self.service.update_post(
            mock_db_session, post.id, PostUpdate.model_validate({"title": "Renamed", "status": "published"})
        )

        assert result.title == "Renamed"
        assert result.status == "published"
        assert result.excerpt == "keep me"
        assert result.slug == "original"
        assert result.updated_at > before

    @pytest.mark.asyncio
    async def test_update_post_slugifies_slug(self, mock_db_session):
        post = _existing_post()
        mock_db_session.execute.return_value = _result(post)

        result = await self.service.update_post(
            mock_db_session, post.id, PostUpdate(slug="My New Slug")
        )

        assert result.slug == "my-new-slug"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["title", "status", "allowComments"])
    async def test_update_post_rejects_null(self, mock_db_session, field):
        with pytest.raises(ValidationError, match="cannot be null"):
            await self.service.update_post(
                mock_db_session, uuid4(), PostUpdate.model_validate({field: None})
            )

    @pytest.mark.asyncio
    async def test_update_post_slug_conflict(self, mock_db_session):
        post = _existing_post()
        mock_db_session.execute.return_value = _result(post)
        mock_db_session.flush = AsyncMock(
            side_effect=IntegrityError("UPDATE posts", {}, Exception("duplicate key"))
        )

        with pytest.raises(ValidationError, match="slug already exists"):
            await self.service.update_post(mock_db_session, post.id, PostUpdate(slug="taken"))

    @pytest.mark.asyncio
    async def test_update_post_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _result(None)

        with pytest.raises(NotFoundError):
            await self.service.update_post(mock_db_session, uuid4(), PostUpdate(title="x"))

    @pytest.mark.asyncio
    async def test_delete_post(self, mock_db_session):
        post_id = uuid4()
        mock_db_session.execute.return_value = _result(post_id)

        await self.service.delete_post(mock_db_session, post_id)

        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_post_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _result(None)

        with pytest.raises(NotFoundError):
            await self.service.delete_post(mock_db_session, uuid4())


class TestPostServiceList:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_list_posts_with_pagination(self, mock_db_session, sample_post_row):
        rows_result = MagicMock()
        rows_result.mappings.return_value.all.return_value = [sample_post_row]
        count_result = MagicMock()
        count_result.scalar.return_value = 21
        mock_db_session.execute.side_effect = [rows_result, count_result]

        result = await self.service.list_posts(mock_db_session, status="all", page=2, limit=10)

        body = result.to_json()
        assert body["pagination"] == {"page": 2, "limit": 10, "total": 21, "totalPages": 3}
        assert body["data"][0]["slug"] == "hello-world"
        assert body["data"][0]["authorName"] == "Owner"

    @pytest.mark.asyncio
    async def test_list_posts_empty(self, mock_db_session):
        rows_result = MagicMock()
        rows_result.mappings.return_value.all.return_value = []
        count_result = MagicMock()
        count_result.scalar.return_value = 0
        mock_db_session.execute.side_effect = [rows_result, count_result]

        result = await self.service.list_posts(mock_db_session)

        assert result.data == []
        assert result.pagination.total_pages == 0

    @pytest.mark.asyncio
    async def test_list_posts_unknown_status(self, mock_db_session):
        with pytest.raises(ValidationError, match="Unknown status"):
            await self.service.list_posts(mock_db_session, status="archived")
        mock_db_session.execute.assert_not_awaited()
