"""
WPVite Backend — Shared Pydantic Schemas
==========================================

What:  Base model and envelope types reused by every resource schema.
How:   The admin SPA speaks camelCase JSON (`featuredImage`, `totalPages`),
       while Python code uses snake_case attributes. CamelModel bridges
       the two: it accepts either spelling on input and, when dumped with
       by_alias=True, emits camelCase.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> dict:
        """JSON-ready dict in wire format (camelCase, ISO datetimes, UUID strings)."""
        return self.model_dump(mode="json", by_alias=True)


class Pagination(CamelModel):
    """
    Offset pagination metadata returned next to every list.

    Example:
        {"page": 2, "limit": 10, "total": 37, "totalPages": 4}
    """
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        # Ceiling division without floats
        return cls(page=page, limit=limit, total=total, total_pages=-(-total // limit))


class ErrorResponse(BaseModel):
    """
    Standardized error body produced by the global exception handlers.

    Example:
        {
            "error": "validation_error",
            "message": "Title is required",
            "details": {"field": "title"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
