"""Presentation layer - API endpoints and HTTP concerns.

This layer contains FastAPI routers and endpoint definitions. It is thin:
it looks up connection workflows, triggers their transitions and
translates snapshots and errors to HTTP responses.

Structure:
- routers/system.py: Non-versioned system endpoints
- routers/api/middleware/: Request tracing
- routers/api/v1/: API version 1 endpoints and RFC 7807 errors

The presentation layer depends on the application layer but contains NO
business logic.
"""
