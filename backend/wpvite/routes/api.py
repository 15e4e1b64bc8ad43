"""
WPVite Backend — /api Entry Point and Route Table
===================================================

What:  Builds the API route table and exposes the single FastAPI route that
       feeds every /api request into it.
How:   build_api_router() is called once by the app factory; the result is
       stored on app.state.api_router. The catch-all FastAPI route snapshots
       the request into a RequestContext and calls Router.dispatch.

Registration Order (first match wins):
    GET    /api/auth/google
    GET    /api/auth/callback
    GET    /api/auth/me              auth
    POST   /api/auth/logout
    GET    /api/media                auth
    POST   /api/media/upload         auth
    DELETE /api/media/{id}           auth
    GET    /api/posts                auth
    POST   /api/posts                auth
    GET    /api/posts/{id}           auth
    PUT    /api/posts/{id}           auth
    DELETE /api/posts/{id}           auth
    GET    /api/users                auth, super_admin
    POST   /api/users                auth, super_admin
    DELETE /api/users                auth, super_admin
    GET    /api/options              auth
    PUT    /api/options              auth
    POST   /api/setup                auth
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wpvite.auth import require_auth
from wpvite.database import get_db_session
from wpvite.routes import auth, media, options, posts, users
from wpvite.routing.context import RequestContext
from wpvite.routing.router import Router

logger = logging.getLogger(__name__)


def build_api_router() -> Router:
    """Create the API route table. Raises ConfigurationError on a bad registration."""
    api = Router()

    # ── Auth ──────────────────────────────────────────────────────────────
    api.get("/api/auth/google", auth.google_login)
    api.get("/api/auth/callback", auth.google_callback)
    api.get("/api/auth/me", require_auth(auth.me))
    api.post("/api/auth/logout", auth.logout)

    # ── Media ─────────────────────────────────────────────────────────────
    api.get("/api/media", require_auth(media.list_media))
    api.post("/api/media/upload", require_auth(media.upload_media))
    api.delete("/api/media/{id}", require_auth(media.delete_media))

    # ── Posts ─────────────────────────────────────────────────────────────
    api.get("/api/posts", require_auth(posts.list_posts))
    api.post("/api/posts", require_auth(posts.create_post))
    api.get("/api/posts/{id}", require_auth(posts.get_post))
    api.put("/api/posts/{id}", require_auth(posts.update_post))
    api.delete("/api/posts/{id}", require_auth(posts.delete_post))

    # ── Users ─────────────────────────────────────────────────────────────
    api.get("/api/users", require_auth(users.list_users))
    api.post("/api/users", require_auth(users.create_user))
    api.delete("/api/users", require_auth(users.delete_user))

    # ── Options & Setup ───────────────────────────────────────────────────
    api.get("/api/options", require_auth(options.get_options))
    api.put("/api/options", require_auth(options.update_options))
    api.post("/api/setup", require_auth(options.run_setup))

    logger.info("API router built with %d routes", len(api))
    return api


# ── FastAPI Entry Point ───────────────────────────────────────────────────
router = APIRouter(tags=["API"])


@router.api_route("/api", methods=["GET", "POST", "PUT", "DELETE", "PATCH"], include_in_schema=False)
@router.api_route(
    "/api/{api_path:path}",
    methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    include_in_schema=False,
)
async def api_entry(request: Request, db: AsyncSession = Depends(get_db_session)):
    """Hand the request to the route table stored on the application."""
    ctx = await RequestContext.from_request(request, db)
    return await request.app.state.api_router.dispatch(ctx.method, ctx.path, ctx)
