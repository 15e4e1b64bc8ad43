"""
WPVite Backend — File Service Unit Tests
==========================================

What:  Tests for FileService validation, storage and path safety.
How:   Real writes into pytest's tmp_path and real libmagic detection on
       minimal image headers; no mocks needed.

Test Strategy:
    ✅ Allowed / rejected extensions (case-insensitive)
    ✅ Empty and oversized uploads
    ✅ Content must match the extension (renamed markup is refused)
    ✅ Date-organized UUID storage paths and public URLs
    ✅ Path traversal outside STORAGE_ROOT is refused
    ✅ Cleanup of present and missing files
"""

import re
import struct
import zlib
from pathlib import Path

import pytest

from wpvite.config import settings
from wpvite.exceptions import ValidationError
from wpvite.services.file_service import FileService


def _png_bytes() -> bytes:
    """A valid 1x1 grayscale PNG."""
    def chunk(kind: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 0, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(b"\x00\x00"))
        + chunk(b"IEND", b"")
    )


PNG = _png_bytes()
GIF = b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"
JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


class TestFileValidation:

    def setup_method(self):
        self.service = FileService()

    @pytest.mark.parametrize("filename", ["a.png", "a.jpg", "a.JPEG", "a.gif", "a.webp", "a.svg"])
    def test_allowed_extensions(self, filename):
        assert self.service.validate_extension(filename) == Path(filename).suffix.lower()

    @pytest.mark.parametrize("filename", ["doc.pdf", "malware.exe", "noextension", "page.html"])
    def test_rejected_extensions(self, filename):
        with pytest.raises(ValidationError, match="not supported"):
            self.service.validate_extension(filename)

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            self.service.validate_size(0)

    def test_size_at_limit_accepted(self):
        self.service.validate_size(settings.max_upload_size)

    def test_oversized_file_rejected(self):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            self.service.validate_size(settings.max_upload_size + 1)

    @pytest.mark.parametrize("filename, expected", [
        ("a.png", "image/png"),
        ("a.JPG", "image/jpeg"),
        ("a.gif", "image/gif"),
        ("a.webp", "image/webp"),
        ("a.svg", "image/svg+xml"),
    ])
    def test_content_type(self, filename, expected):
        assert self.service.content_type_for(filename) == expected

    @pytest.mark.parametrize("content, extension, expected", [
        (PNG, ".png", "image/png"),
        (GIF, ".gif", "image/gif"),
        (JPEG, ".jpg", "image/jpeg"),
        (JPEG, ".jpeg", "image/jpeg"),
    ])
    def test_content_matching_extension_accepted(self, content, extension, expected):
        assert self.service.validate_content(content, extension) == expected

    def test_markup_renamed_as_image_rejected(self):
        with pytest.raises(ValidationError, match="does not match"):
            self.service.validate_content(b"<html><script>alert(document.cookie)</script></html>", ".png")

    def test_other_image_type_under_wrong_extension_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_content(GIF, ".png")
        assert exc_info.value.context["detected"] == "image/gif"
        assert exc_info.value.context["field"] == "file"


class TestFileStorage:

    @pytest.mark.asyncio
    async def test_validate_and_store(self, temp_storage):
        service = FileService(storage_root=temp_storage)

        absolute, relative, content_type = await service.validate_and_store("Photo.PNG", PNG)

        assert re.fullmatch(r"\d{4}/\d{2}/\d{2}/[0-9a-f-]{36}\.png", relative)
        assert Path(absolute).read_bytes() == PNG
        assert content_type == "image/png"

    @pytest.mark.asyncio
    async def test_rejected_upload_writes_nothing(self, temp_storage):
        service = FileService(storage_root=temp_storage)

        with pytest.raises(ValidationError):
            await service.validate_and_store("script.php", b"<?php")

        assert list(Path(temp_storage).iterdir()) == []

    @pytest.mark.asyncio
    async def test_disguised_markup_is_not_stored(self, temp_storage):
        service = FileService(storage_root=temp_storage)

        with pytest.raises(ValidationError):
            await service.validate_and_store("evil.png", b"<html><script>alert(document.cookie)</script></html>")

        assert list(Path(temp_storage).iterdir()) == []

    def test_url_round_trip(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        url = service.url_for("2025/03/14/x.png")

        assert url == "/uploads/2025/03/14/x.png"
        assert service.path_for_url(url) == Path(temp_storage).resolve() / "2025/03/14/x.png"

    def test_external_url_has_no_path(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        assert service.path_for_url("https://cdn.example.com/x.png") is None

    @pytest.mark.parametrize("relative", ["../secret.txt", "2025/../../etc/passwd", "/etc/passwd"])
    def test_traversal_refused(self, temp_storage, relative):
        service = FileService(storage_root=temp_storage)
        assert service.resolve_public_path(relative) is None

    @pytest.mark.asyncio
    async def test_cleanup(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        absolute, _ = await service.store_file(b"x", ".png")

        assert await service.cleanup_file(absolute) is True
        assert await service.cleanup_file(absolute) is False
        assert not Path(absolute).exists()
