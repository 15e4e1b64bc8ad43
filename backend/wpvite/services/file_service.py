"""
WPVite Backend — Media File Storage Service
=============================================

What:  Validates, stores, serves and deletes media library files.
How:   Extension whitelist, size limit, magic-byte content check, UUID
       filenames in date-organized directories under STORAGE_ROOT, written
       with aiofiles.
Who:   MediaService (upload/delete) and the public /uploads route (serve).

Security Model:
    1. Extension check:   only common web image formats are accepted
    2. Size check:        body length against MAX_UPLOAD_SIZE
    3. Content check:     libmagic must see the same image type in the bytes
    4. UUID filename:     no user input ends up in the stored path
    5. Serve-time check:  resolved paths must stay inside STORAGE_ROOT

Directory Structure:
    storage/
    └── 2025/
        └── 03/
            └── 14/
                ├── 0b7f9c2e-....png
                └── 5d21a3aa-....jpg

    Public URL of a stored file: {MEDIA_URL_PREFIX}/2025/03/14/0b7f9c2e-....png
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
import magic

from wpvite.config import settings
from wpvite.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
# Extension → MIME type served and recorded in the media table
EXTENSION_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}
ALLOWED_EXTENSIONS = set(EXTENSION_MIME_TYPES)

# Types libmagic may report for content matching each canonical type
_DETECTED_ALIASES = {
    "image/svg+xml": {"image/svg+xml", "image/svg"},
}

# libmagic only needs the file header
_SNIFF_BYTES = 2048


class FileService:
    """
    Manages the lifecycle of files in the media library.

    Lifecycle of an upload:
        1. validate_extension() → normalized extension
        2. validate_size()
        3. validate_content() → MIME type confirmed from the bytes
        4. store_file() writes YYYY/MM/DD/<uuid><ext>
        5. caller records url_for() in the media table
        6. delete: path_for_url() → cleanup_file()
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()

    # ── Validation ────────────────────────────────────────────────────────

    def validate_extension(self, filename: str) -> str:
        """
        Returns:
            Normalized extension (lowercase with dot).

        Raises:
            ValidationError if the extension is not an allowed image type.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="filename",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, size: int) -> None:
        if size == 0:
            raise ValidationError(message="Uploaded file is empty", field="file")
        if size > settings.max_upload_size:
            max_mb = settings.max_upload_size / (1024 * 1024)
            raise ValidationError(
                message=f"File size ({size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size": settings.max_upload_size, "actual_size": size},
            )

    def validate_content(self, content: bytes, extension: str) -> str:
        """
        Check the real type of the uploaded bytes with libmagic.

        A renamed HTML or script file keeps its text signature, so
        `evil.png` containing markup is rejected here.

        Returns:
            The MIME type recorded for the file.

        Raises:
            ValidationError if the bytes are not the image type the
            extension claims.
            FileStorageError if libmagic cannot inspect the buffer.
        """
        expected = EXTENSION_MIME_TYPES[extension]
        try:
            detected = magic.from_buffer(content[:_SNIFF_BYTES], mime=True)
        except magic.MagicException as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise FileStorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        if detected not in _DETECTED_ALIASES.get(expected, {expected}):
            logger.warning("Upload content %s does not match extension %s", detected, extension)
            raise ValidationError(
                message=f"File content type '{detected}' does not match '{extension}'.",
                field="file",
                context={"detected": detected, "expected": expected},
            )
        return expected

    def content_type_for(self, filename: str) -> str:
        return EXTENSION_MIME_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")

    # ── Paths ─────────────────────────────────────────────────────────────

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        """Returns (absolute_path, relative_path) for a new YYYY/MM/DD/<uuid><ext> file."""
        date_dir = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        relative_path = f"{date_dir}/{uuid.uuid4()}{extension}"
        return self.storage_root / relative_path, relative_path

    def url_for(self, relative_path: str) -> str:
        return f"{settings.media_url_prefix.rstrip('/')}/{relative_path}"

    def path_for_url(self, url: str) -> Optional[Path]:
        """
        Map a stored media URL back to its file, or None if the URL is not
        one of ours (e.g. an external image added by hand).
        """
        prefix = settings.media_url_prefix.rstrip("/") + "/"
        if not url.startswith(prefix):
            return None
        return self.resolve_public_path(url[len(prefix):])

    def resolve_public_path(self, relative_path: str) -> Optional[Path]:
        """
        Resolve a path requested under /uploads.

        Returns:
            Absolute path inside storage_root, or None when the path escapes
            the storage root (../ traversal, absolute paths).
        """
        candidate = (self.storage_root / relative_path).resolve()
        if candidate != self.storage_root and self.storage_root not in candidate.parents:
            logger.warning("Rejected media path outside storage root: %s", relative_path)
            return None
        return candidate

    # ── Storage ───────────────────────────────────────────────────────────

    async def store_file(self, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write validated content to disk.

        Returns:
            Tuple of (absolute_path, relative_path).

        Raises:
            FileStorageError if directory creation or the write fails.
        """
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.info("File stored: %s (%d bytes)", relative_path, len(content))
            return str(absolute_path), relative_path

        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

    async def cleanup_file(self, file_path: str) -> bool:
        """
        Remove a stored file.

        Returns:
            True if a file was removed, False if it was already gone.

        Raises:
            FileStorageError when the file exists but cannot be removed.
        """
        path = Path(file_path)
        try:
            if not path.exists():
                logger.debug("Cleanup: file already gone: %s", path.name)
                return False
            os.remove(path)
            logger.info("Removed file: %s", path.name)
            return True
        except OSError as e:
            logger.error("Failed to remove file %s: %s", file_path, str(e))
            raise FileStorageError(
                message="Failed to delete the stored file.",
                context={"path": file_path, "os_error": str(e)},
            )

    async def validate_and_store(self, filename: str, content: bytes) -> Tuple[str, str, str]:
        """
        Complete validation and storage pipeline.

        Returns:
            Tuple of (absolute_path, relative_path, content_type).
        """
        ext = self.validate_extension(filename)
        self.validate_size(len(content))
        content_type = self.validate_content(content, ext)
        absolute_path, relative_path = await self.store_file(content, ext)
        return absolute_path, relative_path, content_type


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
