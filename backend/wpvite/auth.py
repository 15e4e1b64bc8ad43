"""
WPVite Backend — Authentication Helpers
=========================================

What:  JWT issue/verify, the auth cookie, and the handler guards.
How:   A signed HS256 token (PyJWT) carrying {id, email, name, role} lives in
       an HttpOnly cookie. `require_auth` wraps an API handler: it verifies the
       cookie and calls the handler with `ctx.with_user(user)`.
Who:   Used by routes/api.py when building the router, and by the OAuth
       callback and logout handlers to set and clear the cookie.

Cookie Attributes:
    auth_token=<jwt>; HttpOnly; SameSite=Lax; Path=/; Max-Age=604800
    Secure is only added in production so local http:// logins work.
"""

import functools
import inspect
import logging
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

import jwt
from pydantic import ValidationError as PydanticValidationError
from starlette.responses import Response

from wpvite.config import settings
from wpvite.exceptions import AuthenticationError, PermissionDeniedError
from wpvite.routing.context import RequestContext
from wpvite.schemas.auth import AuthUser

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Tokens
# ══════════════════════════════════════════════════════════════════════════


def generate_token(user: AuthUser, now: Optional[datetime] = None) -> str:
    """
    Sign a token for `user` valid for JWT_EXPIRY_DAYS.

    Args:
        user: Identity to embed as claims
        now:  Issue time override (tests use it to mint expired tokens)
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        **user.model_dump(),
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Optional[AuthUser]:
    """
    Decode and validate a token.

    Returns:
        The embedded AuthUser, or None when the token is expired, tampered
        with, signed with another secret, or missing required claims.
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return AuthUser.model_validate(claims)
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired auth token")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning("Rejected invalid auth token: %s", type(e).__name__)
        return None
    except PydanticValidationError:
        logger.warning("Rejected auth token with incomplete claims")
        return None


# ══════════════════════════════════════════════════════════════════════════
# Cookie
# ══════════════════════════════════════════════════════════════════════════


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.auth_cookie_max_age,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_auth_cookie(response: Response) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=True,
        samesite="lax",
    )


def get_auth_token(cookies: Mapping[str, str]) -> Optional[str]:
    return cookies.get(settings.auth_cookie_name) or None


# ══════════════════════════════════════════════════════════════════════════
# Guards
# ══════════════════════════════════════════════════════════════════════════


def require_auth(handler):
    """
    Wrap an API handler so it only runs for a verified user.

    The wrapped handler receives a new context with `user` set; the
    caller's context is left untouched.

    Raises:
        AuthenticationError: No cookie, or the token failed verification (→ 401)
    """

    @functools.wraps(handler)
    async def wrapper(ctx: RequestContext):
        token = get_auth_token(ctx.cookies)
        if not token:
            raise AuthenticationError(message="Unauthorized - No token provided")

        user = verify_token(token)
        if user is None:
            raise AuthenticationError(message="Unauthorized - Invalid token")

        result = handler(ctx.with_user(user))
        if inspect.isawaitable(result):
            result = await result
        return result

    return wrapper


def require_role(ctx: RequestContext, role: str) -> AuthUser:
    """
    Assert the authenticated user has `role`.

    Returns:
        The context user, for convenience.

    Raises:
        AuthenticationError:    No user on the context (handler not wrapped)
        PermissionDeniedError:  The user's role differs (→ 403)
    """
    if ctx.user is None:
        raise AuthenticationError()
    if ctx.user.role != role:
        raise PermissionDeniedError(
            message="Forbidden",
            context={"required_role": role, "user_role": ctx.user.role},
        )
    return ctx.user
