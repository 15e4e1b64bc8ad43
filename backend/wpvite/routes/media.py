"""
WPVite Backend — Media Handlers
=================================

    GET    /api/media                      ?page=1&limit=20
    POST   /api/media/upload?filename=x    raw file bytes as the body → 201
    DELETE /api/media/{id}
"""

from starlette.responses import JSONResponse

from wpvite.routing.context import RequestContext
from wpvite.services.media_service import media_service


async def list_media(ctx: RequestContext):
    result = await media_service.list_media(
        ctx.db,
        page=ctx.query_int("page", 1, minimum=1),
        limit=ctx.query_int("limit", 20, minimum=1, maximum=100),
    )
    return JSONResponse(result.to_json())


async def upload_media(ctx: RequestContext):
    filename = ctx.query.get("filename") or "uploaded-file"
    media = await media_service.upload_media(ctx.db, filename=filename, content=ctx.body)
    return JSONResponse({"data": media.to_json()}, status_code=201)


async def delete_media(ctx: RequestContext):
    media_id = ctx.query_uuid("id", "Media")
    await media_service.delete_media(ctx.db, media_id)
    return JSONResponse({"success": True})
