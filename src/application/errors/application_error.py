"""Application layer error types.

Application-level errors wrap domain errors with the context the
presentation layer needs to pick an HTTP status.

Exports:
    ApplicationErrorCode: Application-level error code enum
    ApplicationError: Application layer error dataclass
    to_application_error: Map a workflow DomainError to an ApplicationError
"""

from dataclasses import dataclass
from enum import Enum

from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.core.errors.domain_error import DomainError
from src.domain.errors import (
    CloudConnectionError,
    ConfigurationError,
    InitiationError,
    VerificationPendingError,
)


class ApplicationErrorCode(Enum):
    """Application-level error codes."""

    COMMAND_VALIDATION_FAILED = "command_validation_failed"
    COMMAND_EXECUTION_FAILED = "command_execution_failed"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    SERVICE_MISCONFIGURED = "service_misconfigured"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


@dataclass(frozen=True, slots=True, kw_only=True)
class ApplicationError:
    """Application layer error.

    Attributes:
        code: Application error code.
        message: Human-readable error message.
        domain_error: Original domain error, if any.
        details: Additional context as key-value pairs.
    """

    code: ApplicationErrorCode
    message: str
    domain_error: DomainError | None = None
    details: dict[str, str] | None = None


def to_application_error(error: DomainError) -> ApplicationError:
    """Map a domain error to the application error the API reports.

    Args:
        error: Failure value returned by a workflow operation.

    Returns:
        ApplicationError wrapping the original error.
    """
    match error:
        case ValidationError():
            code = ApplicationErrorCode.COMMAND_VALIDATION_FAILED
        case NotFoundError():
            code = ApplicationErrorCode.NOT_FOUND
        case ConflictError():
            code = ApplicationErrorCode.CONFLICT
        case ConfigurationError():
            code = ApplicationErrorCode.SERVICE_MISCONFIGURED
        case InitiationError() | VerificationPendingError() | CloudConnectionError():
            code = ApplicationErrorCode.EXTERNAL_SERVICE_ERROR
        case _:
            code = ApplicationErrorCode.COMMAND_EXECUTION_FAILED
    return ApplicationError(code=code, message=error.message, domain_error=error)
