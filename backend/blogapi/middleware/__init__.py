# Middleware package init
"""
Blog API — Middleware Package
==============================

Starlette middleware (every request):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route
    - request_id.py: correlation ID in a ContextVar + X-Request-ID header
    - logging.py:    access log line with status and duration

Pipeline stage (opt-in per route, see blogapi/pipeline.py):
    - auth.py:       AuthorizationStage, bearer-token check → 401 on failure
"""
