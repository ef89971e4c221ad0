"""Request trace IDs.

Every request gets a trace ID: the caller's ``X-Trace-Id`` when it sends a
usable one, a fresh UUIDv7 otherwise. The ID is returned in the response
header, copied into Problem Details bodies and bound into structlog
contextvars so every log line of the request (including workflow and
backend-client logs) carries it.
"""

from contextvars import ContextVar
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from uuid_extensions import uuid7

TRACE_ID_HEADER = "X-Trace-Id"
TRACE_ID_MAX_LENGTH = 128

trace_id_context: ContextVar[str | None] = ContextVar("trace_id", default=None)


def get_trace_id() -> str | None:
    """Trace ID of the request being handled, or None outside a request."""
    return trace_id_context.get()


def _incoming_trace_id(request: Request) -> str | None:
    value = request.headers.get(TRACE_ID_HEADER, "").strip()
    if not value or len(value) > TRACE_ID_MAX_LENGTH or not value.isprintable():
        return None
    return value


class TraceMiddleware(BaseHTTPMiddleware):
    """Assigns and propagates the request trace ID."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        trace_id = _incoming_trace_id(request) or str(uuid7())
        request.state.trace_id = trace_id
        token = trace_id_context.set(trace_id)
        structlog.contextvars.bind_contextvars(trace_id=trace_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("trace_id")
            trace_id_context.reset(token)
        response.headers[TRACE_ID_HEADER] = trace_id
        return response
