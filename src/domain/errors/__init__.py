"""Domain errors package.

Usage:
    from src.domain.errors import ConfigurationError, VerificationPendingError
    from src.domain.errors import BackendError, BackendUnavailableError
"""

from src.domain.errors.backend_error import (
    BackendAuthenticationError,
    BackendError,
    BackendInvalidResponseError,
    BackendRateLimitError,
    BackendRejectedError,
    BackendUnavailableError,
)
from src.domain.errors.connection_workflow_error import (
    CloudConnectionError,
    ConfigurationError,
    InitiationError,
    VerificationPendingError,
)

__all__ = [
    # Workflow errors
    "CloudConnectionError",
    "ConfigurationError",
    "InitiationError",
    "VerificationPendingError",
    # Backend API errors
    "BackendError",
    "BackendAuthenticationError",
    "BackendInvalidResponseError",
    "BackendRateLimitError",
    "BackendRejectedError",
    "BackendUnavailableError",
]
