"""App-wide exception handlers.

Workflow failures are returned by the route handlers themselves; these
handlers only cover what escapes them: routing errors (unknown path, wrong
method), request validation by FastAPI, and unexpected exceptions.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.config import settings
from src.core.container import get_logger
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

_HTTP_PROBLEMS: dict[int, tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("bad-request", "Bad Request"),
    status.HTTP_404_NOT_FOUND: ("not-found", "Not Found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("method-not-allowed", "Method Not Allowed"),
    status.HTTP_409_CONFLICT: ("conflict", "Conflict"),
    status.HTTP_500_INTERNAL_SERVER_ERROR: ("internal-server-error", "Internal Server Error"),
    status.HTTP_503_SERVICE_UNAVAILABLE: ("service-unavailable", "Service Unavailable"),
}


def _problem_response(
    request: Request,
    *,
    status_code: int,
    slug: str,
    title: str,
    detail: str,
    errors: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    problem = ProblemDetails(
        type=f"{settings.api_base_url}/errors/{slug}",
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """HTTPException (including Starlette's routing 404/405) → Problem Details."""
    assert isinstance(exc, StarletteHTTPException)

    slug, title = _HTTP_PROBLEMS.get(exc.status_code, ("error", "Error"))
    return _problem_response(
        request,
        status_code=exc.status_code,
        slug=slug,
        title=title,
        detail=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Malformed body or path parameter → 422 with one entry per field."""
    assert isinstance(exc, RequestValidationError)

    field_errors = [
        ErrorDetail(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "unknown",
            code=error.get("type", "validation_error"),
            message=error.get("msg", "Invalid value"),
        )
        for error in exc.errors()
    ]
    return _problem_response(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        slug="validation-failed",
        title="Validation Failed",
        detail="Request validation failed. Check 'errors' for details.",
        errors=field_errors or None,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else → 500 without internals; the exception is logged."""
    get_logger().error(
        "unhandled_exception",
        error=exc,
        trace_id=getattr(request.state, "trace_id", None),
        request_path=request.url.path,
        request_method=request.method,
    )
    return _problem_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        slug="internal-server-error",
        title="Internal Server Error",
        detail="An unexpected error occurred. Please contact support with the trace ID.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on the application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
