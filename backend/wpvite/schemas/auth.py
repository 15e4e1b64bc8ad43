"""
WPVite Backend — Authentication Schemas
=========================================

What:  The identity carried inside the JWT, and Google's userinfo payload.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Verified identity attached to a RequestContext by require_auth.

    The same four fields are the JWT claims; registered claims such as
    `iat` and `exp` are ignored when a decoded token is validated.
    """
    model_config = ConfigDict(extra="ignore", from_attributes=True, frozen=True)

    id: str
    email: str
    name: str = ""
    role: str

    @classmethod
    def from_user(cls, user) -> "AuthUser":
        """Build the token identity from a User ORM row."""
        return cls(id=str(user.id), email=user.email, name=user.name or "", role=user.role)


class GoogleUserInfo(BaseModel):
    """Subset of https://www.googleapis.com/oauth2/v2/userinfo we rely on."""
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    verified_email: bool = False
    name: str = ""
    picture: Optional[str] = Field(default=None)
