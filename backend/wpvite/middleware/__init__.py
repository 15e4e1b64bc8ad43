# Middleware package init
"""
WPVite Backend — Middleware Package
=====================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route
    Response ← [Request ID] ← [Access Log] ← [GZip] ← [CORS] ← Route

    The request ID is set before the access log line is written, so every
    access log entry carries it.
"""
