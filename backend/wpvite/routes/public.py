"""
WPVite Backend — Public Site Routes (SSR)
===========================================

What:  Server-rendered blog pages, the sitemap and uploaded media files.
How:   classify() decides the page type from the path alone; only then is
       the database queried for that type's data.
Who:   Browsers and crawlers. Registered last in the app so /api, /health
       and /uploads win over the catch-all.

    GET /uploads/{path}   stored media file (404 outside STORAGE_ROOT)
    GET /sitemap.xml      home + published posts
    GET /{path}           home, /p/{slug}, or the 404 page

Status codes:
    200  rendered page, Cache-Control: s-maxage=1, stale-while-revalidate
    404  not-found route, or a post slug with no record (themed 404 page)
    500  data layer failure: plain "Internal Server Error" page, details logged
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, HTMLResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from wpvite.config import settings
from wpvite.database import get_db_session
from wpvite.exceptions import DatabaseError
from wpvite.rendering.renderer import render_error_page, render_page, render_sitemap
from wpvite.routing.patterns import path_from_raw
from wpvite.routing.resolver import RouteType, classify
from wpvite.services.file_service import file_service
from wpvite.services.site_service import site_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Public"])

PAGE_CACHE_CONTROL = "s-maxage=1, stale-while-revalidate"
SITEMAP_CACHE_CONTROL = "s-maxage=3600, stale-while-revalidate"

# Uploads share the admin origin: an SVG opened directly must not run script
UPLOAD_HEADERS = {
    "Cache-Control": "public, max-age=31536000, immutable",
    "Content-Security-Policy": "default-src 'none'; style-src 'unsafe-inline'; sandbox",
    "X-Content-Type-Options": "nosniff",
}


def _server_error() -> HTMLResponse:
    return HTMLResponse(render_error_page(500, "Internal Server Error"), status_code=500)


@router.get(
    settings.media_url_prefix.rstrip("/") + "/{file_path:path}",
    include_in_schema=False,
)
async def serve_upload(file_path: str):
    """Serve a stored media file; traversal outside STORAGE_ROOT is a 404."""
    path = file_service.resolve_public_path(file_path)
    if path is None or not path.is_file():
        return HTMLResponse(render_error_page(404, "Not Found"), status_code=404)
    return FileResponse(
        path,
        media_type=file_service.content_type_for(path.name),
        headers=UPLOAD_HEADERS,
    )


@router.get("/sitemap.xml", include_in_schema=False)
async def sitemap(request: Request, db: AsyncSession = Depends(get_db_session)):
    try:
        entries = await site_service.fetch_sitemap_entries(db)
    except DatabaseError:
        logger.error("Sitemap generation failed", exc_info=True)
        return Response("Internal Server Error", status_code=500, media_type="text/plain")

    base_url = str(request.base_url).rstrip("/")
    return Response(
        render_sitemap(base_url, entries),
        media_type="application/xml",
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )


@router.get("/{full_path:path}", include_in_schema=False)
async def render_public_page(
    full_path: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Server-side render a public page.

    Flow:
        1. classify(path) → home | post | not-found
        2. not-found → 404 page, no database access
        3. load site options and the route's data
        4. missing post → 404 page
        5. render with the theme templates
    """
    raw_path = request.scope.get("raw_path")
    path = path_from_raw(raw_path) if raw_path else request.url.path
    match = classify(path)

    if match.type is RouteType.NOT_FOUND:
        return HTMLResponse(render_page(path, RouteType.NOT_FOUND, {}, {}), status_code=404)

    try:
        site_options = await site_service.fetch_site_options(db)

        if match.type is RouteType.HOME:
            posts = await site_service.fetch_latest_posts(db, limit=settings.home_post_limit)
            data = {"posts": [post.to_json() for post in posts]}
        else:
            post = await site_service.fetch_post_by_slug(db, match.params["slug"])
            if post is None:
                logger.info("No post for slug %r", match.params["slug"])
                return HTMLResponse(
                    render_page(path, RouteType.NOT_FOUND, {}, site_options),
                    status_code=404,
                )
            data = {"post": post.to_json()}

    except DatabaseError:
        logger.error("SSR data load failed for %s", path, exc_info=True)
        return _server_error()

    html = render_page(path, match.type, data, site_options)
    return HTMLResponse(html, headers={"Cache-Control": PAGE_CACHE_CONTROL})
