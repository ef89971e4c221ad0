"""Problem Details responses for workflow failures.

Each ApplicationErrorCode maps to one HTTP status and one title. Validation
failures from the connection form also list the offending field so a UI can
highlight it.
"""

from typing import NamedTuple

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.application.errors import ApplicationError, ApplicationErrorCode
from src.core.config import settings
from src.core.errors import ValidationError
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)


class _ProblemKind(NamedTuple):
    status: int
    title: str


_UNEXPECTED = _ProblemKind(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

_PROBLEM_KINDS: dict[ApplicationErrorCode, _ProblemKind] = {
    ApplicationErrorCode.COMMAND_VALIDATION_FAILED: _ProblemKind(
        status.HTTP_400_BAD_REQUEST, "Invalid Connection Details"
    ),
    ApplicationErrorCode.NOT_FOUND: _ProblemKind(
        status.HTTP_404_NOT_FOUND, "Workflow Not Found"
    ),
    ApplicationErrorCode.CONFLICT: _ProblemKind(
        status.HTTP_409_CONFLICT, "Invalid Workflow Transition"
    ),
    ApplicationErrorCode.EXTERNAL_SERVICE_ERROR: _ProblemKind(
        status.HTTP_502_BAD_GATEWAY, "Cost Backend Error"
    ),
    ApplicationErrorCode.SERVICE_MISCONFIGURED: _ProblemKind(
        status.HTTP_503_SERVICE_UNAVAILABLE, "Automated Connection Unavailable"
    ),
    ApplicationErrorCode.COMMAND_EXECUTION_FAILED: _UNEXPECTED,
}


class ErrorResponseBuilder:
    """Turns an ApplicationError into a JSONResponse."""

    @staticmethod
    def from_application_error(
        error: ApplicationError,
        request: Request,
        trace_id: str,
    ) -> JSONResponse:
        """Build the Problem Details response for a failed workflow call.

        The ``type`` URI ends in the application error code, e.g.
        ``.../errors/conflict`` for a transition the workflow refused.
        """
        kind = _PROBLEM_KINDS.get(error.code, _UNEXPECTED)

        field_errors: list[ErrorDetail] | None = None
        if isinstance(error.domain_error, ValidationError):
            field_errors = [
                ErrorDetail(
                    field=error.domain_error.field or "unknown",
                    code=error.domain_error.code.value,
                    message=error.domain_error.message,
                )
            ]

        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/{error.code.value}",
            title=kind.title,
            status=kind.status,
            detail=error.message,
            instance=request.url.path,
            errors=field_errors,
            trace_id=trace_id or None,
        )
        return JSONResponse(
            status_code=kind.status,
            content=problem.model_dump(exclude_none=True),
        )
