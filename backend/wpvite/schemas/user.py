"""
WPVite Backend — User Schemas
===============================
"""

import uuid
from typing import Literal, Optional

from wpvite.schemas.common import CamelModel

UserRole = Literal["super_admin", "editor", "author"]


class UserCreate(CamelModel):
    """Body of POST /api/users. Email presence is checked by the service."""
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None


class UserResponse(CamelModel):
    id: uuid.UUID
    email: str
    google_id: Optional[str] = None
    role: UserRole
    name: Optional[str] = None
    avatar_url: Optional[str] = None
