"""Backend error types for the cloud-connection backend port.

These errors are part of the CloudConnectionBackendProtocol contract: they
define the failure cases a backend adapter can return.

Architecture:
- Domain layer errors (part of protocol contract)
- Inherit from DomainError (core layer)
- Used in Result types (railway-oriented programming)
- The httpx adapter in src/infrastructure/backend returns these errors

Usage:
    from src.domain.errors import BackendError, BackendUnavailableError

    async def check_connection_status(
        self, correlation_token: str
    ) -> Result[dict[str, Any], BackendError]:
        ...
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class BackendError(DomainError):
    """Base cost-dashboard backend API error.

    Attributes:
        operation: Backend operation that failed (initiate, status, ...).
        details: Additional context (status code, response body).
    """

    operation: str
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class BackendAuthenticationError(BackendError):
    """Backend rejected our credentials (401/403).

    Recovery: operator must fix the API token. Not retried.
    """


@dataclass(frozen=True, slots=True, kw_only=True)
class BackendUnavailableError(BackendError):
    """Backend could not be reached or returned 5xx.

    Raised when:
    - Backend returns 5xx errors
    - Connection timeout occurs
    - Connection is refused or DNS resolution fails

    Attributes:
        is_transient: Whether the error is likely transient (True = retry).
    """

    is_transient: bool = True


@dataclass(frozen=True, slots=True, kw_only=True)
class BackendRateLimitError(BackendError):
    """Backend returned 429 Too Many Requests.

    Attributes:
        retry_after: Seconds to wait before retrying (from Retry-After header).
    """

    retry_after: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class BackendRejectedError(BackendError):
    """Backend answered with a 4xx and an explanatory message.

    The message is the backend's own ``error`` text, e.g. the stack has not
    finished creating yet or the provisioning template is not configured.

    Attributes:
        status_code: HTTP status returned by the backend.
    """

    status_code: int


@dataclass(frozen=True, slots=True, kw_only=True)
class BackendInvalidResponseError(BackendError):
    """Backend returned a payload we cannot interpret.

    Attributes:
        response_body: Truncated raw body for debugging.
    """

    response_body: str | None = None
