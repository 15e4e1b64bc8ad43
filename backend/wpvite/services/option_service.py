"""
WPVite Backend — Site Option Service
======================================

What:  Key/value site settings and the one-time setup wizard.
How:   Updates are Postgres upserts (INSERT ... ON CONFLICT DO UPDATE);
       every value is stored as its string form.

Setup Preconditions (checked in this order):
    1. Exactly one user exists (the owner who just logged in)   → else 403
    2. No `site_title` option exists yet                        → else 403
    3. The request carries a site title                         → else 400
"""

import logging
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wpvite.exceptions import DatabaseError, PermissionDeniedError, ValidationError
from wpvite.models.option import Option
from wpvite.schemas.option import SetupRequest
from wpvite.services.user_service import user_service

logger = logging.getLogger(__name__)


def _stringify(value: Any) -> str:
    # JSON spelling for booleans: "true"/"false"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


class OptionService:

    async def get_options(self, db: AsyncSession) -> Dict[str, Optional[str]]:
        try:
            result = await db.execute(select(Option))
            return {option.key: option.value for option in result.scalars().all()}
        except SQLAlchemyError as e:
            logger.error("Database error reading options: %s", str(e))
            raise DatabaseError(message="Failed to fetch options")

    async def update_options(self, db: AsyncSession, updates: Mapping[str, Any]) -> None:
        """Upsert every key in `updates`; keys not mentioned are left alone."""
        try:
            for key, value in updates.items():
                stored = _stringify(value)
                stmt = insert(Option).values(key=key, value=stored)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[Option.key],
                    set_={"value": stored},
                )
                await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Database error updating options: %s", str(e))
            raise DatabaseError(message="Failed to update options")
        logger.info("Options updated: %s", ", ".join(sorted(updates)))

    async def run_setup(self, db: AsyncSession, data: SetupRequest) -> None:
        """
        First-run wizard: writes site_title, tagline and an empty site_logo.

        Raises:
            PermissionDeniedError: Not exactly one user, or setup already done
            ValidationError:       Missing site title
        """
        try:
            user_count = await user_service.count_users(db)
            if user_count != 1:
                raise PermissionDeniedError(
                    message="Setup can only be run when there is exactly one user (the owner).",
                    context={"user_count": user_count},
                )

            result = await db.execute(select(Option).where(Option.key == "site_title").limit(1))
            if result.scalar_one_or_none() is not None:
                raise PermissionDeniedError(message="Setup has already been completed.")

            if not data.site_title:
                raise ValidationError(message="Site title is required", field="siteTitle")

            db.add_all([
                Option(key="site_title", value=data.site_title),
                Option(key="tagline", value=data.tagline or ""),
                Option(key="site_logo", value=""),
            ])
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error during setup: %s", str(e))
            raise DatabaseError(message="Internal server error during setup")

        logger.info("Site setup completed: %r", data.site_title)


# ── Singleton Instance ────────────────────────────────────────────────────
option_service = OptionService()
