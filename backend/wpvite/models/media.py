"""
WPVite Backend — Media SQLAlchemy Model
=========================================

What:  One row per uploaded file in the media library.
How:   `url` is the public URL the editor embeds in posts; the bytes live
       under STORAGE_ROOT and are served from /uploads.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from wpvite.database import Base


class Media(Base):
    __tablename__ = "media"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    url: Mapped[str] = mapped_column(String(512), nullable=False)

    # MIME type
    type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    alt_text: Mapped[str | None] = mapped_column(String(255), nullable=True)

    uploaded_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Media(id={self.id}, url='{self.url}')>"
