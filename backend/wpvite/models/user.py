"""
WPVite Backend — User SQLAlchemy Model
========================================

What:  ORM model for the `users` table (admin accounts).
How:   Accounts are created by the Google OAuth callback (first user only)
       or by a super admin through POST /api/users. No passwords are stored;
       identity always comes from Google.

Roles:
    super_admin  Can manage users and run first-time setup
    editor       Reserved for future editorial permissions
    author       Default role for invited accounts
"""

import uuid

from sqlalchemy import Enum, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from wpvite.database import Base

USER_ROLES = ("super_admin", "editor", "author")


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    # Login identity; matched against Google's verified email on callback
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    google_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    role: Mapped[str] = mapped_column(
        Enum(*USER_ROLES, name="user_role"),
        nullable=False,
        default="author",
        server_default=text("'author'"),
    )

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
