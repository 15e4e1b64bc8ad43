"""
WPVite Backend — User Handlers (super_admin only)
===================================================

    GET    /api/users
    POST   /api/users            {"email", "name"?, "role"?} → 201
    DELETE /api/users?id=<uuid>
"""

from starlette.responses import JSONResponse

from wpvite.auth import require_role
from wpvite.routing.context import RequestContext
from wpvite.schemas.user import UserCreate
from wpvite.services.user_service import user_service

SUPER_ADMIN = "super_admin"


async def list_users(ctx: RequestContext):
    require_role(ctx, SUPER_ADMIN)
    users = await user_service.list_users(ctx.db)
    return JSONResponse({"data": [user.to_json() for user in users]})


async def create_user(ctx: RequestContext):
    require_role(ctx, SUPER_ADMIN)
    data = ctx.parse_body(UserCreate)
    user = await user_service.create_user(ctx.db, data)
    return JSONResponse({"data": user.to_json()}, status_code=201)


async def delete_user(ctx: RequestContext):
    current = require_role(ctx, SUPER_ADMIN)
    user_id = ctx.query_uuid("id", "User")
    await user_service.delete_user(ctx.db, user_id, current_user_id=current.id)
    return JSONResponse({"success": True})
