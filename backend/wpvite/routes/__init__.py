# Routes package init
"""
WPVite Backend — HTTP Entry Points and API Handlers
=====================================================

Entry points (FastAPI):
    - api.py:     /api/{path}     → Router.dispatch
    - public.py:  /uploads/{path}, /sitemap.xml, /{path} (SSR catch-all)
    - health.py:  /health

API handlers (take a RequestContext, return a Response):
    - auth.py, posts.py, media.py, users.py, options.py (incl. setup)

Design Principle:
    Handlers stay thin: read the context, call one service, wrap the result
    as {"data": ...}. Errors are raised, never formatted here.
"""
