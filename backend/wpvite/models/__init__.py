"""
WPVite Backend — ORM Models
=============================

Importing this package registers every table with Base.metadata, which is
what Alembic's env.py relies on for autogenerate.
"""

from wpvite.models.media import Media
from wpvite.models.option import Option
from wpvite.models.post import POST_STATUSES, Post
from wpvite.models.user import USER_ROLES, User

__all__ = ["Media", "Option", "Post", "POST_STATUSES", "User", "USER_ROLES"]
