"""
WPVite Backend — Option SQLAlchemy Model
==========================================

What:  Key/value site settings (site_title, tagline, site_logo, ...).
How:   Values are always stored as text; callers stringify before writing.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wpvite.database import Base


class Option(Base):
    __tablename__ = "options"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Option(key='{self.key}')>"
