"""
WPVite Backend — Media Library Service
========================================

What:  List, upload and delete media library entries.
How:   FileService owns the bytes; this service owns the `media` rows and
       keeps the two in step (a failed insert removes the stored file).
Who:   Called by the /api/media handlers.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wpvite.exceptions import DatabaseError, NotFoundError
from wpvite.models.media import Media
from wpvite.schemas.common import Pagination
from wpvite.schemas.media import MediaListResponse, MediaResponse
from wpvite.services.file_service import file_service

logger = logging.getLogger(__name__)


class MediaService:

    async def list_media(self, db: AsyncSession, page: int = 1, limit: int = 20) -> MediaListResponse:
        """Newest uploads first, offset pagination."""
        try:
            result = await db.execute(
                select(Media)
                .order_by(desc(Media.uploaded_at))
                .limit(limit)
                .offset((page - 1) * limit)
            )
            items = list(result.scalars().all())

            count_result = await db.execute(select(func.count(Media.id)))
            total = count_result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing media: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve media. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return MediaListResponse(
            data=[MediaResponse.model_validate(item) for item in items],
            pagination=Pagination.build(page, limit, total),
        )

    async def upload_media(self, db: AsyncSession, filename: str, content: bytes) -> MediaResponse:
        """
        Store an uploaded file and record it in the media library.

        Raises:
            ValidationError:  Unsupported type, empty or oversized body
            FileStorageError: The write failed
            DatabaseError:    The insert failed (the stored file is removed)
        """
        absolute_path, relative_path, content_type = await file_service.validate_and_store(
            filename=filename,
            content=content,
        )

        media = Media(
            id=uuid.uuid4(),
            url=file_service.url_for(relative_path),
            type=content_type,
            alt_text="",
            uploaded_at=datetime.now(timezone.utc),
        )
        try:
            db.add(media)
            await db.flush()
        except SQLAlchemyError as e:
            await file_service.cleanup_file(absolute_path)
            logger.error("Database error recording upload %s: %s", relative_path, str(e))
            raise DatabaseError(
                message="Failed to upload file",
                context={"path": relative_path},
            )

        logger.info("Media %s uploaded: %s (%s)", media.id, media.url, content_type)
        return MediaResponse.model_validate(media)

    async def delete_media(self, db: AsyncSession, media_id: uuid.UUID) -> None:
        """
        Raises:
            NotFoundError:  No media row with this id (→ 404)
        """
        try:
            result = await db.execute(select(Media).where(Media.id == media_id))
            media = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching media %s: %s", media_id, str(e))
            raise DatabaseError(message="Failed to delete media", context={"media_id": str(media_id)})

        if media is None:
            raise NotFoundError(resource="media", resource_id=str(media_id))

        path = file_service.path_for_url(media.url)
        if path is not None:
            await file_service.cleanup_file(str(path))

        try:
            await db.execute(delete(Media).where(Media.id == media_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting media %s: %s", media_id, str(e))
            raise DatabaseError(message="Failed to delete media", context={"media_id": str(media_id)})

        logger.info("Media %s deleted", media_id)


# ── Singleton Instance ────────────────────────────────────────────────────
media_service = MediaService()
