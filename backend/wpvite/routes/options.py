"""
WPVite Backend — Option and Setup Handlers
============================================

    GET  /api/options    → {"data": {key: value}}
    PUT  /api/options    {key: value, ...} → {"success": true}
    POST /api/setup      {"siteTitle", "tagline"?} → {"success": true}
"""

from starlette.responses import JSONResponse

from wpvite.routing.context import RequestContext
from wpvite.schemas.option import SetupRequest
from wpvite.services.option_service import option_service


async def get_options(ctx: RequestContext):
    options = await option_service.get_options(ctx.db)
    return JSONResponse({"data": options})


async def update_options(ctx: RequestContext):
    await option_service.update_options(ctx.db, ctx.json())
    return JSONResponse({"success": True})


async def run_setup(ctx: RequestContext):
    data = ctx.parse_body(SetupRequest)
    await option_service.run_setup(ctx.db, data)
    return JSONResponse({"success": True})
