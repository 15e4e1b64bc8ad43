"""
WPVite Backend — Post Handlers
================================

    GET    /api/posts         ?status=all|published|draft|private&page=1&limit=10
    POST   /api/posts         PostCreate body → 201
    GET    /api/posts/{id}
    PUT    /api/posts/{id}    PostUpdate body (partial)
    DELETE /api/posts/{id}    → {"success": true, "id": id}

All wrapped with require_auth in routes/api.py.
"""

from starlette.responses import JSONResponse

from wpvite.routing.context import RequestContext
from wpvite.schemas.post import PostCreate, PostUpdate
from wpvite.services.post_service import post_service


async def list_posts(ctx: RequestContext):
    result = await post_service.list_posts(
        ctx.db,
        status=ctx.query.get("status"),
        page=ctx.query_int("page", 1, minimum=1),
        limit=ctx.query_int("limit", 10, minimum=1, maximum=100),
    )
    return JSONResponse(result.to_json())


async def create_post(ctx: RequestContext):
    data = ctx.parse_body(PostCreate)
    post = await post_service.create_post(ctx.db, data, author_id=ctx.user.id)
    return JSONResponse({"data": post.to_json()}, status_code=201)


async def get_post(ctx: RequestContext):
    post_id = ctx.query_uuid("id", "Post")
    post = await post_service.get_post(ctx.db, post_id)
    return JSONResponse({"data": post.to_json()})


async def update_post(ctx: RequestContext):
    post_id = ctx.query_uuid("id", "Post")
    data = ctx.parse_body(PostUpdate)
    post = await post_service.update_post(ctx.db, post_id, data)
    return JSONResponse({"data": post.to_json()})


async def delete_post(ctx: RequestContext):
    post_id = ctx.query_uuid("id", "Post")
    await post_service.delete_post(ctx.db, post_id)
    return JSONResponse({"success": True, "id": str(post_id)})
