"""
WPVite Backend — Media Service Unit Tests
===========================================

What we test:
    ✅ Upload stores the file and records a media row
    ✅ A failed insert removes the stored file
    ✅ Delete removes both the file and the row; unknown ids are 404
    ✅ Listing with pagination
"""

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from wpvite.exceptions import DatabaseError, NotFoundError
from wpvite.models.media import Media
from wpvite.services.media_service import MediaService


class TestMediaUpload:

    def setup_method(self):
        self.service = MediaService()

    @pytest.mark.asyncio
    async def test_upload_success(self, mock_db_session):
        with patch('wpvite.services.media_service.file_service') as mock_file:
            mock_file.validate_and_store = AsyncMock(
                return_value=("/abs/2025/03/14/u.png", "2025/03/14/u.png", "image/png")
            )
            mock_file.url_for.return_value = "/uploads/2025/03/14/u.png"

            result = await self.service.upload_media(mock_db_session, "cat.png", b"png")

            assert result.url == "/uploads/2025/03/14/u.png"
            assert result.type == "image/png"
            assert result.to_json()["altText"] == ""
            mock_db_session.add.assert_called_once()
            mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_upload_db_failure_removes_file(self, mock_db_session):
        with patch('wpvite.services.media_service.file_service') as mock_file:
            mock_file.validate_and_store = AsyncMock(
                return_value=("/abs/2025/03/14/u.png", "2025/03/14/u.png", "image/png")
            )
            mock_file.url_for.return_value = "/uploads/2025/03/14/u.png"
            mock_file.cleanup_file = AsyncMock(return_value=True)
            mock_db_session.flush = AsyncMock(
                side_effect=OperationalError("INSERT", {}, Exception("down"))
            )

            with pytest.raises(DatabaseError):
                await self.service.upload_media(mock_db_session, "cat.png", b"png")

            mock_file.cleanup_file.assert_awaited_once_with("/abs/2025/03/14/u.png")


class TestMediaDelete:

    def setup_method(self):
        self.service = MediaService()

    @pytest.mark.asyncio
    async def test_delete_removes_file_and_row(self, mock_db_session):
        media = Media(id=uuid4(), url="/uploads/2025/03/14/u.png", type="image/png")
        lookup = MagicMock()
        lookup.scalar_one_or_none.return_value = media
        mock_db_session.execute.side_effect = [lookup, MagicMock()]

        with patch('wpvite.services.media_service.file_service') as mock_file:
            mock_file.path_for_url.return_value = Path("/abs/2025/03/14/u.png")
            mock_file.cleanup_file = AsyncMock(return_value=True)

            await self.service.delete_media(mock_db_session, media.id)

            mock_file.cleanup_file.assert_awaited_once_with(str(Path("/abs/2025/03/14/u.png")))
        assert mock_db_session.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_delete_external_url_skips_file(self, mock_db_session):
        media = Media(id=uuid4(), url="https://cdn.example.com/u.png")
        lookup = MagicMock()
        lookup.scalar_one_or_none.return_value = media
        mock_db_session.execute.side_effect = [lookup, MagicMock()]

        with patch('wpvite.services.media_service.file_service') as mock_file:
            mock_file.path_for_url.return_value = None
            mock_file.cleanup_file = AsyncMock()

            await self.service.delete_media(mock_db_session, media.id)

            mock_file.cleanup_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_unknown_media(self, mock_db_session):
        lookup = MagicMock()
        lookup.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = lookup

        with pytest.raises(NotFoundError):
            await self.service.delete_media(mock_db_session, uuid4())


class TestMediaList:

    @pytest.mark.asyncio
    async def test_list_media(self, mock_db_session):
        items = MagicMock()
        items.scalars.return_value.all.return_value = [
            Media(
                id=uuid4(),
                url="/uploads/a.png",
                type="image/png",
                alt_text="",
                uploaded_at=datetime(2025, 3, 14, tzinfo=timezone.utc),
            ),
        ]
        count = MagicMock()
        count.scalar.return_value = 1
        mock_db_session.execute.side_effect = [items, count]

        result = await MediaService().list_media(mock_db_session, page=1, limit=20)

        body = result.to_json()
        assert body["pagination"]["totalPages"] == 1
        assert body["data"][0]["uploadedAt"].startswith("2025-03-14")
