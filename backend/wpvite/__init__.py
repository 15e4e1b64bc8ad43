"""
WPVite Backend — Application Package
======================================

What: A small blog CMS: admin JSON API, public server-rendered pages.

Architecture Note:

    ┌─────────────────────────────────────┐
    │   Entry points (FastAPI)            │  ← /api/* catch-all, SSR catch-all
    ├─────────────────────────────────────┤
    │   Routing (Router, classify)        │  ← path → handler / page type
    ├─────────────────────────────────────┤
    │   Handlers (routes/*)               │  ← RequestContext → Response
    ├─────────────────────────────────────┤
    │   Services (business rules)         │  ← posts, users, media, options
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (async sessions)         │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
