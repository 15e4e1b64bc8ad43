"""
WPVite Backend — Media Schemas
================================

What:  Response shapes for the media library endpoints.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from wpvite.schemas.common import CamelModel, Pagination


class MediaResponse(CamelModel):
    id: uuid.UUID
    url: str
    type: Optional[str] = None
    alt_text: Optional[str] = None
    uploaded_at: datetime


class MediaListResponse(CamelModel):
    data: List[MediaResponse] = Field(default_factory=list)
    pagination: Pagination
