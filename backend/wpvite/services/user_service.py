"""
WPVite Backend — User Service
===============================

What:  Admin account management and the login decision for OAuth callbacks.
Who:   /api/users handlers (super admins only) and /api/auth/callback.

Login Policy (resolve_login):
    ┌───────────────────────┬──────────────────────────────────────────┐
    │ users table empty     │ create the Google user as super_admin    │
    │ email already present │ log in (fill in google_id/avatar if new) │
    │ otherwise             │ PermissionDeniedError → Access Denied    │
    └───────────────────────┴──────────────────────────────────────────┘
"""

import logging
import uuid
from typing import List, Tuple

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wpvite.exceptions import DatabaseError, PermissionDeniedError, ValidationError
from wpvite.models.user import User
from wpvite.schemas.auth import GoogleUserInfo
from wpvite.schemas.user import UserCreate, UserResponse

logger = logging.getLogger(__name__)


class UserService:

    async def count_users(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count(User.id)))
        return result.scalar() or 0

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        try:
            result = await db.execute(select(User).order_by(desc(User.id)))
            users = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e))
            raise DatabaseError(message="Failed to fetch users")
        return [UserResponse.model_validate(user) for user in users]

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """
        Invite an account. The person logs in later through Google with the
        same email; until then google_id and avatar are empty.

        Raises:
            ValidationError: Missing email, or the email is already registered
        """
        if not data.email or not data.email.strip():
            raise ValidationError(message="Email is required", field="email")

        user = User(
            id=uuid.uuid4(),
            email=data.email.strip(),
            name=data.name or "",
            role=data.role or "author",
        )
        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            raise ValidationError(
                message="A user with this email already exists",
                field="email",
            )
        except SQLAlchemyError as e:
            logger.error("Database error adding user: %s", str(e))
            raise DatabaseError(message="Failed to add user")

        logger.info("User %s invited with role %s", user.id, user.role)
        return UserResponse.model_validate(user)

    async def delete_user(self, db: AsyncSession, user_id: uuid.UUID, current_user_id: str) -> None:
        """
        Raises:
            ValidationError: Attempt to delete the calling account
        """
        if str(user_id) == current_user_id:
            raise ValidationError(message="Cannot delete yourself", field="id")
        try:
            await db.execute(delete(User).where(User.id == user_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting user %s: %s", user_id, str(e))
            raise DatabaseError(message="Failed to delete user")
        logger.info("User %s deleted", user_id)

    async def resolve_login(self, db: AsyncSession, info: GoogleUserInfo) -> Tuple[User, bool]:
        """
        Decide who a verified Google identity logs in as.

        Returns:
            (user, is_first_user)

        Raises:
            PermissionDeniedError: The email was never invited
        """
        try:
            is_first_user = await self.count_users(db) == 0

            result = await db.execute(select(User).where(User.email == info.email).limit(1))
            user = result.scalar_one_or_none()

            if user is None:
                if not is_first_user:
                    logger.warning("Login refused for uninvited email %s", info.email)
                    raise PermissionDeniedError(
                        message=f"Your email ({info.email}) is not authorized to access this site.",
                        context={"email": info.email},
                    )
                user = User(
                    id=uuid.uuid4(),
                    email=info.email,
                    google_id=info.id,
                    name=info.name,
                    avatar_url=info.picture,
                    role="super_admin",
                )
                db.add(user)
                logger.info("First login: %s becomes super_admin", info.email)
            elif not user.google_id:
                user.google_id = info.id
                user.avatar_url = user.avatar_url or info.picture
                user.name = user.name or info.name

            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error during login for %s: %s", info.email, str(e))
            raise DatabaseError(message="Authentication failed")

        return user, is_first_user


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
