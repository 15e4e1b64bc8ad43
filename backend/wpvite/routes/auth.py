"""
WPVite Backend — Auth Handlers
================================

What:  Google login, callback, current user and logout.

    GET  /api/auth/google     → 302 to Google's consent screen
    GET  /api/auth/callback   → set cookie, 302 to /admin/setup or /admin
    GET  /api/auth/me         → {"data": AuthUser}        (require_auth)
    POST /api/auth/logout     → clear cookie, {"success": true}
"""

import logging

from starlette.responses import HTMLResponse, JSONResponse, RedirectResponse

from wpvite.auth import clear_auth_cookie, generate_token, set_auth_cookie
from wpvite.exceptions import PermissionDeniedError, ValidationError
from wpvite.rendering.renderer import render_access_denied
from wpvite.routing.context import RequestContext
from wpvite.schemas.auth import AuthUser
from wpvite.services.google_oauth import google_oauth
from wpvite.services.user_service import user_service

logger = logging.getLogger(__name__)


async def google_login(ctx: RequestContext):
    return RedirectResponse(google_oauth.authorization_url(), status_code=302)


async def google_callback(ctx: RequestContext):
    """
    Finish the OAuth flow.

    An uninvited email gets an HTML "Access Denied" page (403) rather than
    JSON, since the browser lands here directly from Google.
    """
    code = ctx.query.get("code")
    if not code:
        raise ValidationError(message="Missing authorization code", field="code")

    info = await google_oauth.authenticate(code)

    try:
        user, is_first_user = await user_service.resolve_login(ctx.db, info)
    except PermissionDeniedError:
        return HTMLResponse(render_access_denied(info.email), status_code=403)

    token = generate_token(AuthUser.from_user(user))
    response = RedirectResponse("/admin/setup" if is_first_user else "/admin", status_code=302)
    set_auth_cookie(response, token)
    logger.info("User %s logged in (first_user=%s)", user.id, is_first_user)
    return response


async def me(ctx: RequestContext):
    return JSONResponse({"data": ctx.user.model_dump()})


async def logout(ctx: RequestContext):
    response = JSONResponse({"success": True})
    clear_auth_cookie(response)
    return response
