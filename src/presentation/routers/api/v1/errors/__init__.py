"""Problem Details error responses for the workflow API.

Every failed request (workflow not found, invalid transition, bad form
input, unexpected exception) leaves the API as an RFC 7807 body carrying
the request's trace id.

Exports:
    ErrorDetail: One field-level validation problem
    ProblemDetails: Response body model
    ErrorResponseBuilder: ApplicationError → JSONResponse
    register_exception_handlers: Install the app-wide handlers
"""

from src.presentation.routers.api.v1.errors.error_response_builder import (
    ErrorResponseBuilder,
)
from src.presentation.routers.api.v1.errors.exception_handlers import (
    register_exception_handlers,
)
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponseBuilder",
    "ProblemDetails",
    "register_exception_handlers",
]
